"""In-memory implementations of every engine collaborator.

Each fake records its calls so tests can assert on what the engine did
(e.g. that the repository was not re-queried on reset, or which condition
the tier lookup was scoped to).
"""

from typing import Any, Optional

from riskquiz_engine.interfaces import (
    IdentityProvider,
    QuestionRepository,
    QuizCallbacks,
    ResponseStore,
    RiskTierLookup,
)
from riskquiz_engine.models.tier import RiskTier, match_tier


class FakeQuestionRepository(QuestionRepository):
    """Serves fixed question lists; optionally fails every fetch."""

    def __init__(self, general=None, specialized=None, *, error: Exception | None = None):
        self.general = list(general or [])
        self.specialized = list(specialized or [])
        self.error = error
        self.fetch_calls = 0

    async def fetch_general_questions(self):
        self.fetch_calls += 1
        if self.error is not None:
            raise self.error
        return list(self.general)

    async def fetch_specialized_questions(self):
        self.fetch_calls += 1
        if self.error is not None:
            raise self.error
        return list(self.specialized)


class FakeResponseStore(ResponseStore):
    """Appends rows to a list; raises on ``fail_on`` question id."""

    def __init__(self, *, fail_on: int | None = None):
        self.rows: list[tuple[str, int, str]] = []
        self.fail_on = fail_on

    async def record_response(self, user_id: str, question_id: int, response: str) -> None:
        if question_id == self.fail_on:
            raise RuntimeError(f"insert failed for question {question_id}")
        self.rows.append((user_id, question_id, response))


class FakeTierLookup(RiskTierLookup):
    """Matches against a fixed tier list and records each lookup."""

    def __init__(self, tiers: list[RiskTier] | None = None, *, error: Exception | None = None):
        self.tiers = list(tiers or [])
        self.error = error
        self.calls: list[tuple[int, Optional[str]]] = []

    async def find_tier(self, score: int, condition: Optional[str] = None) -> Optional[RiskTier]:
        self.calls.append((score, condition))
        if self.error is not None:
            raise self.error
        return match_tier(self.tiers, score, condition)

    async def list_tiers(self) -> list[RiskTier]:
        return list(self.tiers)


class FakeIdentity(IdentityProvider):
    def __init__(self, user_id: str | None = "user1"):
        self.user_id = user_id

    async def current_user_id(self) -> Optional[str]:
        return self.user_id


class RecordingCallbacks(QuizCallbacks):
    """Records every callback as ``(name, *args)``."""

    def __init__(self):
        self.events: list[tuple[Any, ...]] = []

    def on_answer_submitted(self, question_id, value):
        self.events.append(("answer", question_id, value))

    def on_candidate_started(self, candidate, remaining):
        self.events.append(("candidate", candidate, list(remaining)))

    def on_quiz_complete(self, result):
        self.events.append(("complete", result))

    def on_error(self, kind, message):
        self.events.append(("error", kind, message))

    def named(self, name: str) -> list[tuple[Any, ...]]:
        return [e for e in self.events if e[0] == name]
