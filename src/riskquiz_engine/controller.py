"""PhaseController — traversal order across phases and the candidate queue.

State machine over :class:`QuizPhase`::

    general ──► specialized ──► specialized ... ──► done
       │                                             ▲
       └──────── (healthy / no specific condition) ──┘

The controller is pure: every method takes a frozen ``SessionState`` and
returns a new one.  It never persists, scores, or talks to the UI; the
orchestrator does that when a returned state has ``phase == done``.
"""

from __future__ import annotations

import logging
from typing import Sequence

from riskquiz_engine.detector import DetectionResult
from riskquiz_engine.models.question import Question
from riskquiz_engine.models.session import QuizOutcome, QuizPhase, SessionState

logger = logging.getLogger(__name__)


class PhaseController:
    """Owns phase transitions and the FIFO of pending candidates."""

    def initial_state(self, general_questions: Sequence[Question]) -> SessionState:
        """Fresh state at the first general question."""
        return SessionState(
            phase=QuizPhase.GENERAL,
            active_question_set=tuple(general_questions),
            current_index=0,
        )

    def move_to(self, state: SessionState, index: int) -> SessionState:
        """Stay in the current set and point at ``index``."""
        return state.model_copy(update={"current_index": index})

    # ------------------------------------------------------------------
    # End-of-set transitions
    # ------------------------------------------------------------------

    def finish_general(
        self,
        state: SessionState,
        detection: DetectionResult,
        specialized_questions: Sequence[Question],
    ) -> SessionState:
        """Leave the general phase.

        No positive answer → done/healthy.  Positive answers without any
        matched hint → done/no_specific_condition.  Otherwise the detected
        candidates are queued and the first one with questions is entered.
        """
        if not detection.any_positive:
            return state.model_copy(update={
                "phase": QuizPhase.DONE,
                "any_positive_general_answer": False,
                "outcome": QuizOutcome.HEALTHY,
            })

        candidates = tuple(detection.candidates)
        if detection.no_specific_condition:
            return state.model_copy(update={
                "phase": QuizPhase.DONE,
                "any_positive_general_answer": True,
                "detected_candidates": candidates,
                "outcome": QuizOutcome.NO_SPECIFIC_CONDITION,
            })

        state = state.model_copy(update={
            "any_positive_general_answer": True,
            "detected_candidates": candidates,
            "candidate_queue": candidates,
        })
        return self._advance_queue(state, specialized_questions)

    def finish_specialized(
        self,
        state: SessionState,
        specialized_questions: Sequence[Question],
    ) -> SessionState:
        """Move to the next queued candidate, or to done when drained."""
        return self._advance_queue(state, specialized_questions)

    def _advance_queue(
        self,
        state: SessionState,
        specialized_questions: Sequence[Question],
    ) -> SessionState:
        """Pop candidates until one has questions; skip empty ones silently."""
        queue = list(state.candidate_queue)
        while queue:
            candidate = queue.pop(0)
            subset = self.questions_for(candidate, specialized_questions)
            if subset:
                return state.model_copy(update={
                    "phase": QuizPhase.SPECIALIZED,
                    "active_candidate": candidate,
                    "candidate_queue": tuple(queue),
                    "active_question_set": subset,
                    "current_index": 0,
                })
            logger.info("No specialized questions for %r, skipping", candidate)
            state = state.model_copy(update={
                "active_candidate": candidate,
                "candidate_queue": tuple(queue),
            })

        return state.model_copy(update={
            "phase": QuizPhase.DONE,
            "candidate_queue": (),
            "outcome": QuizOutcome.ASSESSED,
        })

    # ------------------------------------------------------------------
    # Question set helpers
    # ------------------------------------------------------------------

    @staticmethod
    def questions_for(
        candidate: str, specialized_questions: Sequence[Question]
    ) -> tuple[Question, ...]:
        """Specialized questions whose category is ``candidate``, in order."""
        return tuple(q for q in specialized_questions if q.category == candidate)

    @staticmethod
    def scoring_questions(
        state: SessionState,
        general_questions: Sequence[Question],
        specialized_questions: Sequence[Question],
    ) -> list[Question]:
        """General questions plus specialized ones for every detected candidate."""
        detected = set(state.detected_candidates)
        return [
            *general_questions,
            *(q for q in specialized_questions if q.category in detected),
        ]
