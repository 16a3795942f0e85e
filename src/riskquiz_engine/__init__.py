"""riskquiz_engine — Adaptive cancer-risk screening quiz SDK.

Public API:
    QuizSession       — orchestrator for the general → specialized → done flow
    QuestionBank      — loads the YAML question bank and risk tiers
    SessionState      — immutable engine state returned by every call
    StepResult        — union of QuestionStep / CompletionStep for UIs
    QuizResult        — completion payload (outcome, score, tier, candidates)

Collaborator interfaces:
    QuestionRepository — source of general and specialized questions
    ResponseStore      — durable per-user answer log
    RiskTierLookup     — score → risk tier
    IdentityProvider   — current authenticated user id
    QuizCallbacks      — optional presentation hooks

Errors:
    QuizError and its subclasses (see ``riskquiz_engine.errors``)
"""

from riskquiz_engine.bank import QuestionBank
from riskquiz_engine.engine import QuizSession
from riskquiz_engine.errors import (
    AuthenticationRequired,
    BranchTargetNotFound,
    DegenerateRange,
    FetchFailure,
    NoTierMatch,
    PersistenceFailure,
    QuizError,
    UnknownOption,
)
from riskquiz_engine.interfaces import (
    IdentityProvider,
    QuestionRepository,
    QuizCallbacks,
    ResponseStore,
    RiskTierLookup,
)
from riskquiz_engine.models.session import (
    CompletionStep,
    QuestionPayload,
    QuestionStep,
    QuizOutcome,
    QuizPhase,
    QuizResult,
    SessionState,
    StepResult,
)

__all__ = [
    # Engine & bank
    "QuizSession",
    "QuestionBank",
    # Session / step
    "CompletionStep",
    "QuestionPayload",
    "QuestionStep",
    "QuizOutcome",
    "QuizPhase",
    "QuizResult",
    "SessionState",
    "StepResult",
    # Interfaces
    "IdentityProvider",
    "QuestionRepository",
    "QuizCallbacks",
    "ResponseStore",
    "RiskTierLookup",
    # Errors
    "AuthenticationRequired",
    "BranchTargetNotFound",
    "DegenerateRange",
    "FetchFailure",
    "NoTierMatch",
    "PersistenceFailure",
    "QuizError",
    "UnknownOption",
]
