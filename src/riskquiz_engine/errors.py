"""Error taxonomy for the quiz engine.

Two groups:

  Surfaced (reach the user as a non-blocking notification):
    - FetchFailure: question/tier reads failed or returned malformed rows
    - AuthenticationRequired: persistence attempted without an identity
    - PersistenceFailure: one or more answer writes failed
    - NoTierMatch: the score fell outside every configured tier

  Configuration (logged, never raised to callers of the engine):
    - BranchTargetNotFound: a branch rule points at a missing question
    - DegenerateRange: a range/select question cannot be normalized
    - UnknownOption: a select answer is not one of the choices

Every class carries a stable ``kind`` string used in ``on_error`` callbacks
and HTTP error bodies.
"""

from __future__ import annotations


class QuizError(Exception):
    """Base class for all quiz engine errors."""

    kind = "quiz_error"


class FetchFailure(QuizError):
    kind = "fetch_failure"


class AuthenticationRequired(QuizError):
    kind = "authentication_required"


class PersistenceFailure(QuizError):
    """Aggregate failure of the sequential answer writes.

    ``written`` lists the question ids stored before the first failure;
    they are not rolled back.
    """

    kind = "persistence_failure"

    def __init__(
        self,
        message: str,
        *,
        written: list[int] | None = None,
        failed_question_id: int | None = None,
    ) -> None:
        super().__init__(message)
        self.written = written or []
        self.failed_question_id = failed_question_id


class NoTierMatch(QuizError):
    kind = "no_tier_match"


class BranchTargetNotFound(QuizError):
    kind = "branch_target_not_found"


class DegenerateRange(QuizError):
    kind = "degenerate_range"


class UnknownOption(QuizError):
    kind = "unknown_option"
