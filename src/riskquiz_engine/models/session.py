"""Session and step models — the contract between the engine and its callers.

``SessionState`` is the engine's complete state.  It is frozen: every
orchestrator call returns a fresh copy built with ``model_copy(update=...)``
and nothing mutates a state in place.

Step types rendered for UIs:
  - QuestionStep: present the current question
  - CompletionStep: the quiz ended with a result

The ``StepResult`` union covers both cases so callers can dispatch on ``type``.
"""

from __future__ import annotations

import enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from riskquiz_engine.models.question import Question
from riskquiz_engine.models.tier import RiskTier

# Answers arrive as strings (boolean/select) or numbers (range).
AnswerValue = Union[str, int, float]


class QuizPhase(str, enum.Enum):
    """Controller states.

    Transitions:
        general -> specialized  (candidates detected, first non-empty set)
        general -> done         (healthy, no specific condition, or all sets empty)
        specialized -> specialized (next candidate popped from the queue)
        specialized -> done     (queue drained)
    """

    GENERAL = "general"
    SPECIALIZED = "specialized"
    DONE = "done"


class QuizOutcome(str, enum.Enum):
    """How a completed quiz ended.

    ``healthy`` and ``no_specific_condition`` are terminal without a score
    or tier; ``assessed`` carries both (the tier may be missing on a
    lookup miss).
    """

    HEALTHY = "healthy"
    NO_SPECIFIC_CONDITION = "no_specific_condition"
    ASSESSED = "assessed"


class SessionState(BaseModel):
    """Full engine state for one quiz attempt."""

    model_config = ConfigDict(frozen=True)

    phase: QuizPhase = QuizPhase.GENERAL
    active_question_set: tuple[Question, ...] = ()
    current_index: int = 0
    answers: dict[int, AnswerValue] = Field(default_factory=dict)
    # FIFO of candidates still to visit; never contains active_candidate
    candidate_queue: tuple[str, ...] = ()
    active_candidate: Optional[str] = None
    detected_candidates: tuple[str, ...] = ()
    completed: bool = False
    any_positive_general_answer: bool = False
    score: Optional[int] = None
    max_score: Optional[int] = None
    result_tier: Optional[RiskTier] = None
    outcome: Optional[QuizOutcome] = None

    @property
    def current_question(self) -> Optional[Question]:
        """The question awaiting an answer, or None once completed."""
        if self.completed or not self.active_question_set:
            return None
        return self.active_question_set[self.current_index]


class QuizResult(BaseModel):
    """Completion payload handed to ``on_quiz_complete`` and the API."""

    outcome: QuizOutcome
    score: Optional[int] = None
    max_score: Optional[int] = None
    # round(100 * score / max_score); None when nothing was scored
    percentage: Optional[int] = None
    tier: Optional[RiskTier] = None
    detected_candidates: list[str] = Field(default_factory=list)
    primary_candidate: Optional[str] = None


class QuestionPayload(BaseModel):
    """Flattened question for API consumers.

    Strips branching rules and hint weights and presents only what the UI
    needs to render the control.
    """

    id: int
    text: str
    type: str
    category: str
    # Ordered choices for select questions
    choices: list[str] | None = None
    # {min, max, step} for range questions
    constraints: dict | None = None


class QuestionStep(BaseModel):
    """Engine step: present the current question and wait for an answer."""

    type: Literal["question"] = "question"
    phase: QuizPhase
    phase_name: str
    candidate: str | None = None
    # 1-based position within the active question set
    position: int
    total: int
    question: QuestionPayload


class CompletionStep(BaseModel):
    """Engine step: quiz finished."""

    type: Literal["completed"] = "completed"
    result: QuizResult


# Callers can match on step.type to dispatch rendering logic.
StepResult = QuestionStep | CompletionStep
