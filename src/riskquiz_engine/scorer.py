"""Scorer — weighted risk score over heterogeneous answer types.

Per answered question, by type:

  - boolean: full ``weight`` iff the answer is the positive sentinel
  - range:   ``round(weight * (x - min) / (max - min))``, fraction clamped to [0, 1]
  - select:  ``round(weight * index / (len(choices) - 1))``

Unanswered questions contribute nothing.  Malformed configuration never
aborts scoring: a degenerate range (or single-choice select) contributes 0,
and an answer outside the choice list is skipped entirely.

Rounding is half-up, per contribution and on the final sum.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from riskquiz_engine.constants import POSITIVE_ANSWER
from riskquiz_engine.errors import DegenerateRange, UnknownOption
from riskquiz_engine.models.question import (
    BooleanQuestion,
    Question,
    RangeQuestion,
    SelectQuestion,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ScoreResult:
    """Final score plus the maximum reachable over the scored questions."""

    score: int
    max_score: int

    @property
    def percentage(self) -> Optional[int]:
        if self.max_score <= 0:
            return None
        return round_half_up(100 * self.score / self.max_score)


class Scorer:
    """Computes the normalized weighted score."""

    def score(self, answers: Mapping[int, Any], questions: Sequence[Question]) -> int:
        """Return the rounded score for ``answers`` over ``questions``."""
        return self.evaluate(answers, questions).score

    def evaluate(
        self, answers: Mapping[int, Any], questions: Sequence[Question]
    ) -> ScoreResult:
        """Score every answered question and track the max-possible total.

        ``max_score`` sums the weights of questions that contributed (a
        degenerate question counts, a skipped unknown option does not).
        """
        total = 0
        max_total = 0.0

        for question in questions:
            if question.id not in answers:
                continue
            value = answers[question.id]

            try:
                contribution = self._contribution(question, value)
            except UnknownOption as exc:
                logger.warning("Question %d skipped: %s", question.id, exc)
                continue
            except DegenerateRange as exc:
                logger.warning("Question %d contributes 0: %s", question.id, exc)
                contribution = 0

            total += contribution
            max_total += question.weight

        return ScoreResult(score=round_half_up(total), max_score=round_half_up(max_total))

    # ------------------------------------------------------------------
    # Type-specific contributions
    # ------------------------------------------------------------------

    def _contribution(self, question: Question, value: Any) -> float:
        if isinstance(question, BooleanQuestion):
            return question.weight if str(value) == POSITIVE_ANSWER else 0
        if isinstance(question, RangeQuestion):
            return self._range_contribution(question, value)
        if isinstance(question, SelectQuestion):
            return self._select_contribution(question, value)
        logger.warning("Cannot score question type: %s", question.type)
        return 0

    @staticmethod
    def _range_contribution(question: RangeQuestion, value: Any) -> int:
        lo, hi = question.options.min, question.options.max
        if hi == lo:
            raise DegenerateRange(f"range min and max are both {lo}")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise UnknownOption(f"range answer {value!r} is not numeric")

        fraction = min(max((number - lo) / (hi - lo), 0.0), 1.0)
        return round_half_up(question.weight * fraction)

    @staticmethod
    def _select_contribution(question: SelectQuestion, value: Any) -> int:
        choices = question.choices
        answer = str(value)
        if answer not in choices:
            raise UnknownOption(f"answer {answer!r} is not one of {list(choices)}")
        if len(choices) < 2:
            raise DegenerateRange("select question has a single choice")
        return round_half_up(question.weight * choices.index(answer) / (len(choices) - 1))
