"""In-memory registry of live quizzes.

The engine keeps its state in memory, so the server holds one
``QuizSession`` per client-chosen session id.  Entries idle for longer
than the configured TTL are pruned lazily on each registry access.
Nothing here is persisted: a restart discards every in-progress quiz,
matching the engine's "abandon without a partial record" behaviour.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel

from riskquiz_engine.engine import QuizSession
from riskquiz_engine.interfaces import (
    IdentityProvider,
    QuestionRepository,
    QuizCallbacks,
    ResponseStore,
    RiskTierLookup,
)
from riskquiz_engine.models.session import QuizResult

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Per-request identity and notifications
# ------------------------------------------------------------------

class HeaderIdentity(IdentityProvider):
    """Identity taken from the most recent request's ``X-User-ID`` header."""

    def __init__(self, user_id: str | None = None) -> None:
        self.user_id = user_id

    async def current_user_id(self) -> Optional[str]:
        return self.user_id


class Notification(BaseModel):
    """Non-blocking message the client shows as a toast."""

    kind: str
    title: str
    message: str


class CollectingCallbacks(QuizCallbacks):
    """Buffers engine callbacks as notifications until the route drains them."""

    def __init__(self) -> None:
        self._pending: list[Notification] = []
        self._candidates_started = 0

    def on_candidate_started(self, candidate: str, remaining: list[str]) -> None:
        label = candidate.capitalize()
        if self._candidates_started == 0:
            note = Notification(
                kind="candidate_started",
                title="Phase Complete",
                message=f"General screening complete. We'll now ask about {label} cancer.",
            )
        else:
            note = Notification(
                kind="candidate_started",
                title="Moving to Next Section",
                message=f"Now let's focus on {label} cancer.",
            )
        self._candidates_started += 1
        self._pending.append(note)

    def on_quiz_complete(self, result: QuizResult) -> None:
        self._pending.append(Notification(
            kind="quiz_complete",
            title="Quiz Complete",
            message="Your responses have been recorded.",
        ))

    def on_error(self, kind: str, message: str) -> None:
        self._pending.append(Notification(kind=kind, title="Error", message=message))

    def drain(self) -> list[Notification]:
        """Return and clear the buffered notifications."""
        pending, self._pending = self._pending, []
        return pending

    def reset(self) -> None:
        self._pending = []
        self._candidates_started = 0


# ------------------------------------------------------------------
# Registry
# ------------------------------------------------------------------

@dataclass
class QuizBackends:
    """The collaborator implementations every new quiz is wired to."""

    questions: QuestionRepository
    responses: ResponseStore
    tiers: RiskTierLookup


@dataclass
class QuizEntry:
    """One live quiz plus the adapters the server swaps per request."""

    quiz: QuizSession
    identity: HeaderIdentity
    callbacks: CollectingCallbacks
    last_seen: float = field(default_factory=time.monotonic)

    def touch(self) -> None:
        self.last_seen = time.monotonic()


class QuizRegistry:
    """Maps session ids to live quizzes with idle-TTL expiry."""

    def __init__(self, backends: QuizBackends, ttl_seconds: int = 0) -> None:
        self._backends = backends
        self._ttl = ttl_seconds
        self._entries: dict[str, QuizEntry] = {}

    @property
    def backends(self) -> QuizBackends:
        return self._backends

    def __len__(self) -> int:
        return len(self._entries)

    def create(self, session_id: str) -> QuizEntry:
        """Register a new, not-yet-started quiz.

        Raises ``ValueError`` if the session id is already live.
        """
        self.prune_expired()
        if session_id in self._entries:
            raise ValueError(f"Quiz session already exists: session_id={session_id}")

        identity = HeaderIdentity()
        callbacks = CollectingCallbacks()
        quiz = QuizSession(
            questions=self._backends.questions,
            responses=self._backends.responses,
            tiers=self._backends.tiers,
            identity=identity,
            callbacks=callbacks,
        )
        entry = QuizEntry(quiz=quiz, identity=identity, callbacks=callbacks)
        self._entries[session_id] = entry
        return entry

    def get(self, session_id: str) -> QuizEntry:
        """Return a live entry.  Raises ``ValueError`` if unknown or expired."""
        self.prune_expired()
        entry = self._entries.get(session_id)
        if entry is None:
            raise ValueError(f"Quiz session not found: session_id={session_id}")
        entry.touch()
        return entry

    def remove(self, session_id: str) -> None:
        """Discard a quiz.  Raises ``ValueError`` if unknown."""
        if self._entries.pop(session_id, None) is None:
            raise ValueError(f"Quiz session not found: session_id={session_id}")

    def prune_expired(self) -> int:
        """Drop entries idle longer than the TTL.  Returns the number dropped."""
        if self._ttl <= 0:
            return 0
        cutoff = time.monotonic() - self._ttl
        expired = [sid for sid, e in self._entries.items() if e.last_seen < cutoff]
        for sid in expired:
            del self._entries[sid]
        if expired:
            logger.info("Pruned %d idle quiz sessions", len(expired))
        return len(expired)
