"""CandidateDetector — derives candidate conditions from general answers.

Each general question may carry ``condition_hints`` (label → weight).  A
positive answer (anything other than empty or the negative sentinel) adds
every hint weight to that label's accumulator.  Labels with a positive total
become candidates, strongest first.

Ties keep discovery order: the order labels first appear when walking the
general questions by id and each question's hint mapping in source order.
This ordering depends on how the bank was authored, so keep hint mappings
ordered deliberately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from riskquiz_engine.constants import GENERAL_CATEGORY, NEGATIVE_ANSWER
from riskquiz_engine.models.question import Question

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionResult:
    """Output of :meth:`CandidateDetector.detect`.

    ``no_specific_condition`` is set when no hint weight accumulated; the
    candidate list is then the single ``"general"`` sentinel.
    """

    candidates: list[str] = field(default_factory=list)
    any_positive: bool = False
    no_specific_condition: bool = False
    scores: dict[str, float] = field(default_factory=dict)


def is_positive_answer(value: Any) -> bool:
    """True for a present, non-empty answer that is not the negative sentinel."""
    if value is None:
        return False
    text = str(value).strip()
    return text != "" and text != NEGATIVE_ANSWER


class CandidateDetector:
    """Scores candidate labels from general-phase answers."""

    def detect(
        self,
        answers: Mapping[int, Any],
        general_questions: Sequence[Question],
    ) -> DetectionResult:
        """Accumulate hint weights and return ordered candidates.

        Args:
            answers: every answer recorded so far, keyed by question id
            general_questions: the general question set, ordered by id
        """
        # Seed every known label at zero, in discovery order
        scores: dict[str, float] = {}
        for question in general_questions:
            for label in question.condition_hints:
                scores.setdefault(label, 0.0)

        any_positive = False
        for question in general_questions:
            if not is_positive_answer(answers.get(question.id)):
                continue
            any_positive = True
            for label, weight in question.condition_hints.items():
                scores[label] += weight

        if not scores or max(scores.values()) == 0:
            logger.debug("No condition hints matched (any_positive=%s)", any_positive)
            return DetectionResult(
                candidates=[GENERAL_CATEGORY],
                any_positive=any_positive,
                no_specific_condition=True,
                scores=scores,
            )

        # sorted() is stable, so equal scores keep discovery order
        positive = [label for label in scores if scores[label] > 0]
        ordered = sorted(positive, key=lambda label: -scores[label])
        specific = [label for label in ordered if label != GENERAL_CATEGORY]
        candidates = specific if specific else ordered

        logger.debug("Detected candidates %s from scores %s", candidates, scores)
        return DetectionResult(
            candidates=candidates,
            any_positive=any_positive,
            scores=scores,
        )
