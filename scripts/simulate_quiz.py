#!/usr/bin/env python3
"""Simulate quizzes against the YAML question bank, without a database.

Drives ``QuizSession`` directly with the bank as question source and tier
lookup and an in-memory response store, printing every question, the
chosen answer, phase changes, and the final result.

Answers are random by default so each run explores a different path
through the branch rules and candidate queue.

Usage::

    # One random run
    python scripts/simulate_quiz.py

    # Ten reproducible runs with a summary table
    python scripts/simulate_quiz.py -n 10 --seed 42

    # Answer every boolean "No" (healthy path)
    python scripts/simulate_quiz.py --mode negative

    # Answer every boolean "Yes" and pick the riskiest option everywhere
    python scripts/simulate_quiz.py --mode positive -v
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from rich.console import Console  # noqa: E402
from rich.table import Table  # noqa: E402

from riskquiz_engine import QuestionBank, QuizCallbacks, QuizSession  # noqa: E402
from riskquiz_engine.constants import NEGATIVE_ANSWER, POSITIVE_ANSWER  # noqa: E402
from riskquiz_engine.interfaces import IdentityProvider, ResponseStore  # noqa: E402
from riskquiz_engine.models import (  # noqa: E402
    BooleanQuestion,
    Question,
    QuizResult,
    RangeQuestion,
    SelectQuestion,
)

USER_ID = "sim_user"


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------

class MemoryResponseStore(ResponseStore):
    def __init__(self) -> None:
        self.rows: list[tuple[str, int, str]] = []

    async def record_response(self, user_id: str, question_id: int, response: str) -> None:
        self.rows.append((user_id, question_id, response))


class FixedIdentity(IdentityProvider):
    async def current_user_id(self) -> Optional[str]:
        return USER_ID


class ConsoleCallbacks(QuizCallbacks):
    """Prints engine notifications as they happen."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def on_candidate_started(self, candidate: str, remaining: list[str]) -> None:
        queued = ", ".join(remaining) or "none"
        self.console.rule(f"[bold cyan]{candidate.capitalize()} follow-up[/] (queued: {queued})")

    def on_error(self, kind: str, message: str) -> None:
        self.console.print(f"  [red]! {kind}[/]: {message}")


# ---------------------------------------------------------------------------
# Answer generation
# ---------------------------------------------------------------------------

def choose_answer(question: Question, mode: str, rng: random.Random) -> Any:
    """Pick an answer for ``question`` according to ``mode``."""
    if isinstance(question, BooleanQuestion):
        if mode == "positive":
            return POSITIVE_ANSWER
        if mode == "negative":
            return NEGATIVE_ANSWER
        return rng.choice([POSITIVE_ANSWER, NEGATIVE_ANSWER])

    if isinstance(question, RangeQuestion):
        opts = question.options
        if mode == "positive":
            return opts.max
        if mode == "negative":
            return opts.min
        steps = int((opts.max - opts.min) / opts.step)
        return opts.min + rng.randint(0, steps) * opts.step

    if isinstance(question, SelectQuestion):
        if mode == "positive":
            return question.choices[-1]
        if mode == "negative":
            return question.choices[0]
        return rng.choice(question.choices)

    raise ValueError(f"Unsupported question type: {question.type}")


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

@dataclass
class RunSummary:
    index: int
    asked: int = 0
    saved: int = 0
    result: QuizResult | None = None
    path: list[int] = field(default_factory=list)


async def run_once(
    bank: QuestionBank,
    index: int,
    mode: str,
    rng: random.Random,
    console: Console,
    verbose: bool,
) -> RunSummary:
    store = MemoryResponseStore()
    quiz = QuizSession(
        questions=bank,
        responses=store,
        tiers=bank,
        identity=FixedIdentity(),
        callbacks=ConsoleCallbacks(console),
    )
    summary = RunSummary(index=index)

    console.rule(f"[bold]Run {index}")
    state = await quiz.start()
    while not state.completed:
        question = state.current_question
        answer = choose_answer(question, mode, rng)
        if verbose:
            console.print(f"  [dim]Q{question.id}[/] {question.text} [{question.type}]")
            console.print(f"  [dim]A:[/] {answer}")
        summary.path.append(question.id)
        summary.asked += 1
        state = await quiz.submit_answer(question.id, answer)

    summary.saved = len(store.rows)
    summary.result = quiz.build_result(state)
    _print_result(console, summary.result)
    return summary


def _print_result(console: Console, result: QuizResult) -> None:
    console.print(f"  → Outcome: [bold]{result.outcome.value}[/]")
    if result.detected_candidates:
        console.print(f"    Candidates: {', '.join(result.detected_candidates)}")
    if result.score is not None:
        console.print(f"    Score: {result.score}/{result.max_score} ({result.percentage}%)")
    if result.tier is not None:
        console.print(f"    Tier: {result.tier.risk_level} — {result.tier.advice}")


def print_summary(console: Console, runs: list[RunSummary]) -> None:
    table = Table(title="Simulation Summary", show_lines=True)
    table.add_column("#", style="dim", width=4)
    table.add_column("Outcome", min_width=12)
    table.add_column("Candidates", min_width=20)
    table.add_column("Asked", width=6)
    table.add_column("Saved", width=6)
    table.add_column("Score", width=10)
    table.add_column("Tier", width=10)

    for run in runs:
        result = run.result
        score = "-" if result.score is None else f"{result.score}/{result.max_score}"
        table.add_row(
            str(run.index),
            result.outcome.value,
            ", ".join(result.detected_candidates) or "-",
            str(run.asked),
            str(run.saved),
            score,
            result.tier.risk_level if result.tier else "-",
        )
    console.print(table)


async def run_simulation(args: argparse.Namespace) -> int:
    console = Console()
    bank = QuestionBank(args.bank_dir)
    bank.load()
    rng = random.Random(args.seed)

    runs = []
    for i in range(1, args.runs + 1):
        runs.append(await run_once(bank, i, args.mode, rng, console, args.verbose))

    if len(runs) > 1:
        print_summary(console, runs)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Simulate quizzes against the YAML question bank.",
    )
    parser.add_argument("-n", "--runs", type=int, default=1, help="Number of quizzes (default: 1)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument(
        "--mode",
        choices=["random", "positive", "negative"],
        default="random",
        help="Answer strategy (default: random)",
    )
    parser.add_argument("--bank-dir", default=None, help="Question bank directory (default: v1/)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print every question and answer")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Engine log level (default: WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    sys.exit(asyncio.run(run_simulation(args)))


if __name__ == "__main__":
    main()
