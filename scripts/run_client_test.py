#!/usr/bin/env python3
"""API client integration test for the risk quiz server.

Acts as a pure HTTP client against a live server (unlike
``simulate_quiz.py``, which drives the engine directly).  Runs N quizzes
with random answers, checks every response has the expected shape, and
prints a summary table.

Usage::

    # Install deps (first time only)
    uv pip install httpx rich

    # Quick smoke test
    uv run python scripts/run_client_test.py -n 1 -v

    # Twenty quizzes, reproducible
    uv run python scripts/run_client_test.py -n 20 --seed 42

    # Full JSON payloads
    uv run python scripts/run_client_test.py -n 1 -vv
"""

from __future__ import annotations

import argparse
import asyncio
import json
import random
import sys
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx
from rich.console import Console
from rich.table import Table

POSITIVE_ANSWER = "Yes"
NEGATIVE_ANSWER = "No"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class QuizRunResult:
    run_index: int
    status: str = "success"  # success | failed | incomplete
    outcome: str | None = None
    candidates: list[str] = field(default_factory=list)
    score: int | None = None
    risk_level: str | None = None
    notifications: list[str] = field(default_factory=list)
    error: str | None = None
    steps_taken: int = 0


# ---------------------------------------------------------------------------
# APIClient: thin async wrapper over the quiz endpoints
# ---------------------------------------------------------------------------

class APIClient:
    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> APIClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self._client.aclose()

    async def health_check(self) -> bool:
        try:
            resp = await self._client.get("/health")
        except httpx.HTTPError:
            return False
        return resp.status_code == 200 and resp.json().get("status") == "ok"

    async def start(self, user_id: str, session_id: str) -> dict:
        resp = await self._client.post(
            "/api/v1/quiz/sessions",
            json={"session_id": session_id},
            headers={"X-User-ID": user_id},
        )
        resp.raise_for_status()
        return resp.json()

    async def answer(self, user_id: str, session_id: str, question_id: int, value: Any) -> dict:
        resp = await self._client.post(
            f"/api/v1/quiz/sessions/{session_id}/answers",
            json={"question_id": question_id, "value": value},
            headers={"X-User-ID": user_id},
        )
        resp.raise_for_status()
        return resp.json()

    async def discard(self, session_id: str) -> None:
        resp = await self._client.delete(f"/api/v1/quiz/sessions/{session_id}")
        if resp.status_code not in (204, 404):
            resp.raise_for_status()


# ---------------------------------------------------------------------------
# Answer generation
# ---------------------------------------------------------------------------

def random_answer(question: dict, rng: random.Random) -> Any:
    """Pick a valid answer for a flattened question payload."""
    qtype = question["type"]
    if qtype == "boolean":
        return rng.choice([POSITIVE_ANSWER, NEGATIVE_ANSWER])
    if qtype == "select":
        return rng.choice(question["choices"])
    if qtype == "range":
        c = question["constraints"]
        steps = int((c["max"] - c["min"]) / c["step"])
        return c["min"] + rng.randint(0, steps) * c["step"]
    raise ValueError(f"Unexpected question type: {qtype}")


# ---------------------------------------------------------------------------
# RichPrinter: verbosity-aware console output
# ---------------------------------------------------------------------------

class RichPrinter:
    def __init__(self, verbosity: int = 0) -> None:
        self.console = Console()
        self.verbosity = verbosity

    def run_header(self, index: int, total: int) -> None:
        self.console.print(f"\n[bold cyan][{index}/{total}][/] quiz run")

    def question_answer(self, step: dict, answer: Any) -> None:
        if self.verbosity < 1:
            return
        q = step["question"]
        self.console.print(
            f"    [dim]{step['phase_name']} {step['position']}/{step['total']}:[/] "
            f"{q['text']} [{q['type']}]"
        )
        self.console.print(f"    [dim]A:[/] {answer}")

    def notification(self, note: dict) -> None:
        self.console.print(f"  [yellow]•[/] {note['title']}: {note['message']}")

    def json_payload(self, label: str, data: Any) -> None:
        if self.verbosity < 2:
            return
        self.console.print(f"    [dim]{label}:[/]")
        self.console.print(f"    {json.dumps(data, indent=2)}")

    def result_line(self, result: QuizRunResult) -> None:
        if result.status == "success":
            status_str = "[green]OK[/]"
        elif result.status == "failed":
            status_str = f"[red]FAILED[/]: {result.error}"
        else:
            status_str = f"[yellow]{result.status.upper()}[/]: {result.error}"
        score = "-" if result.score is None else str(result.score)
        self.console.print(
            f"  → {result.outcome or '?'} (score {score}, tier {result.risk_level or '-'}) — {status_str}"
        )


# ---------------------------------------------------------------------------
# QuizRunner: drives one quiz start-to-finish
# ---------------------------------------------------------------------------

class QuizRunner:
    def __init__(
        self,
        client: APIClient,
        rng: random.Random,
        printer: RichPrinter,
        max_steps: int = 100,
    ) -> None:
        self._client = client
        self._rng = rng
        self._printer = printer
        self._max_steps = max_steps

    async def run(self, run_index: int) -> QuizRunResult:
        result = QuizRunResult(run_index=run_index)
        user_id = f"test_user_{uuid.uuid4().hex[:8]}"
        session_id = f"test_quiz_{uuid.uuid4().hex[:12]}"

        try:
            body = await self._client.start(user_id, session_id)
            self._printer.json_payload("Initial step", body)

            while result.steps_taken < self._max_steps:
                self._collect_notifications(body, result)
                step = body["step"]

                if step["type"] == "completed":
                    self._extract_result(step["result"], result)
                    return result

                if step["type"] != "question":
                    result.status = "incomplete"
                    result.error = f"Unexpected step type: {step['type']}"
                    return result

                answer = random_answer(step["question"], self._rng)
                self._printer.question_answer(step, answer)
                body = await self._client.answer(
                    user_id, session_id, step["question"]["id"], answer,
                )
                self._printer.json_payload("Response", body)
                result.steps_taken += 1

            result.status = "incomplete"
            result.error = f"Exceeded {self._max_steps} steps"
            return result

        except httpx.HTTPStatusError as exc:
            result.status = "failed"
            result.error = f"HTTP {exc.response.status_code}: {exc.response.text}"
            return result

        except httpx.TimeoutException:
            result.status = "failed"
            result.error = "Request timed out"
            return result

        finally:
            await self._client.discard(session_id)

    def _collect_notifications(self, body: dict, result: QuizRunResult) -> None:
        for note in body.get("notifications", []):
            self._printer.notification(note)
            result.notifications.append(note["kind"])
            if note["kind"] not in ("candidate_started", "quiz_complete"):
                result.status = "failed"
                result.error = f"{note['kind']}: {note['message']}"

    @staticmethod
    def _extract_result(payload: dict, result: QuizRunResult) -> None:
        result.outcome = payload["outcome"]
        result.candidates = payload.get("detected_candidates", [])
        result.score = payload.get("score")
        tier = payload.get("tier")
        result.risk_level = tier["risk_level"] if tier else None
        if result.outcome == "assessed" and tier is None and result.status == "success":
            result.status = "failed"
            result.error = "Assessed quiz has no risk tier"


def print_summary(console: Console, results: list[QuizRunResult]) -> None:
    console.print("\n")
    console.rule("[bold]Quiz Summary")
    failed = [r for r in results if r.status == "failed"]
    console.print(f"  Total:   {len(results)}")
    console.print(f"  [green]Passed:[/]  {sum(1 for r in results if r.status == 'success')}")
    console.print(f"  [red]Failed:[/]  {len(failed)}")

    table = Table(title="Results", show_lines=True)
    table.add_column("#", style="dim", width=4)
    table.add_column("Status", width=8)
    table.add_column("Outcome", min_width=12)
    table.add_column("Candidates", min_width=20)
    table.add_column("Steps", width=6)
    table.add_column("Score", width=6)
    table.add_column("Tier", width=10)
    for r in results:
        table.add_row(
            str(r.run_index),
            {"success": "[green]OK[/]", "failed": "[red]FAIL[/]"}.get(r.status, "[yellow]INC[/]"),
            r.outcome or "-",
            ", ".join(r.candidates) or "-",
            str(r.steps_taken),
            "-" if r.score is None else str(r.score),
            r.risk_level or "-",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# CLI + async main
# ---------------------------------------------------------------------------

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="API client integration test for the risk quiz server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8080",
        help="Server base URL (default: http://localhost:8080)",
    )
    parser.add_argument("-n", "--runs", type=int, default=5, help="Number of quizzes (default: 5)")
    parser.add_argument(
        "-v", "--verbose",
        action="count", default=0,
        help="Increase verbosity (-v for Q&A pairs, -vv for full JSON)",
    )
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: current timestamp)")
    parser.add_argument("--max-steps", type=int, default=100, help="Max answers per quiz (default: 100)")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout in seconds (default: 30)")
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    printer = RichPrinter(verbosity=args.verbose)
    console = printer.console

    seed = args.seed if args.seed is not None else int(time.time())
    rng = random.Random(seed)
    console.print(f"[dim]RNG seed: {seed}[/]")

    results: list[QuizRunResult] = []
    async with APIClient(args.base_url, timeout=args.timeout) as client:
        if not await client.health_check():
            console.print(f"[red]Server at {args.base_url} is not reachable. Is the server running?[/]")
            sys.exit(1)
        console.print(f"[green]Server health check passed[/] ({args.base_url})")

        runner = QuizRunner(client, rng, printer, max_steps=args.max_steps)
        for i in range(1, args.runs + 1):
            printer.run_header(i, args.runs)
            result = await runner.run(i)
            printer.result_line(result)
            results.append(result)

    print_summary(console, results)
    if any(r.status == "failed" for r in results):
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
