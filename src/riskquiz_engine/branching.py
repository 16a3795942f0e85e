"""BranchingResolver — computes the next question index within a question set.

Resolution order for the question just answered:

  1. a literal branch rule whose key equals the answer (string comparison)
  2. the rule set's ``default`` target
  3. sequential advance (``current_index + 1``)

Rule targets are question ids and are resolved to positions inside the
active set.  A target missing from the set is a configuration error: it is
logged and resolution falls through to sequential advance.

Returns ``None`` (end-of-set) when the resolved index is outside the set.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from riskquiz_engine.errors import BranchTargetNotFound
from riskquiz_engine.models.question import Question
from riskquiz_engine.models.session import AnswerValue

logger = logging.getLogger(__name__)


class BranchingResolver:
    """Resolves branch rules against the active question set."""

    def resolve_next(
        self,
        question: Question,
        answer: AnswerValue,
        active_set: Sequence[Question],
        current_index: int,
    ) -> Optional[int]:
        """Return the index of the next question, or None at end-of-set.

        Args:
            question: the question that was just answered
            answer: the submitted answer value
            active_set: the ordered question set currently being traversed
            current_index: position of ``question`` within ``active_set``
        """
        next_index = current_index + 1
        rules = question.branch_rules

        if rules is not None:
            target = rules.target_for(answer)
            if target is None:
                target = rules.default
            if target is not None:
                try:
                    next_index = self._index_of(target, active_set)
                except BranchTargetNotFound as exc:
                    logger.warning(
                        "Question %d: %s; advancing sequentially", question.id, exc,
                    )

        if next_index < 0 or next_index >= len(active_set):
            return None
        return next_index

    @staticmethod
    def _index_of(question_id: int, active_set: Sequence[Question]) -> int:
        for index, candidate in enumerate(active_set):
            if candidate.id == question_id:
                return index
        raise BranchTargetNotFound(
            f"branch target {question_id} is not in the active question set"
        )
