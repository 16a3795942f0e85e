"""Abstract interfaces for the collaborators the quiz engine calls into.

These ABCs define the contract that external implementations must fulfil.
``riskquiz_db`` ships the SQLAlchemy-backed implementations; tests use
in-memory fakes.

Typical integration flow::

    quiz = QuizSession(
        questions=SqlQuestionRepository(factory),
        responses=SqlResponseStore(factory),
        tiers=SqlRiskTierLookup(factory),
        identity=my_identity_provider,
        callbacks=my_callbacks,
    )
    state = await quiz.start()
    state = await quiz.submit_answer(state.current_question.id, "Yes")
    # ... until state.completed ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from riskquiz_engine.models.question import Question
from riskquiz_engine.models.session import QuizResult
from riskquiz_engine.models.tier import RiskTier


class QuestionRepository(ABC):
    """Read surface over the question bank."""

    @abstractmethod
    async def fetch_general_questions(self) -> list[Question]:
        """Return every ``general`` question, ordered by id."""
        ...

    @abstractmethod
    async def fetch_specialized_questions(self) -> list[Question]:
        """Return every non-``general`` question, ordered by id."""
        ...


class ResponseStore(ABC):
    """Durable per-user, per-question answer log."""

    @abstractmethod
    async def record_response(self, user_id: str, question_id: int, response: str) -> None:
        """Insert one answer row.  Each call is an independent write."""
        ...


class RiskTierLookup(ABC):
    """Maps a score (optionally scoped to a condition) to a risk tier."""

    @abstractmethod
    async def find_tier(self, score: int, condition: Optional[str] = None) -> Optional[RiskTier]:
        """Return the tier whose inclusive bounds contain ``score``.

        Parameters
        ----------
        score:
            The final integer score.
        condition:
            Candidate label to narrow the lookup (unscoped tiers are the
            fallback), or ``None`` to consider every tier.

        Returns
        -------
        RiskTier | None
            ``None`` when no configured tier covers the score.
        """
        ...

    @abstractmethod
    async def list_tiers(self) -> list[RiskTier]:
        """Return every configured tier, ordered by id."""
        ...


class IdentityProvider(ABC):
    """Supplies the currently authenticated user id."""

    @abstractmethod
    async def current_user_id(self) -> Optional[str]:
        """Return the user id, or ``None`` if nobody is signed in."""
        ...


class QuizCallbacks:
    """Presentation hooks.  Every method is a no-op by default.

    Subclass and override the hooks the UI cares about; the engine calls
    them synchronously and never awaits them.
    """

    def on_answer_submitted(self, question_id: int, value) -> None:
        pass

    def on_candidate_started(self, candidate: str, remaining: list[str]) -> None:
        pass

    def on_quiz_complete(self, result: QuizResult) -> None:
        pass

    def on_error(self, kind: str, message: str) -> None:
        pass
