"""Public model re-exports for riskquiz_engine.

Consumers should import from ``riskquiz_engine.models`` rather than
reaching into sub-modules directly.
"""

# --- Questions ---
from riskquiz_engine.models.question import (
    BaseQuestion,
    BooleanQuestion,
    BranchRules,
    Question,
    RangeOptions,
    RangeQuestion,
    SelectOptions,
    SelectQuestion,
    format_response,
    parse_question,
    question_mapper,
)

# --- Risk tiers ---
from riskquiz_engine.models.tier import RiskTier, match_tier

# --- Session / step ---
from riskquiz_engine.models.session import (
    AnswerValue,
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
    # Questions
    "BaseQuestion",
    "BooleanQuestion",
    "BranchRules",
    "Question",
    "RangeOptions",
    "RangeQuestion",
    "SelectOptions",
    "SelectQuestion",
    "format_response",
    "parse_question",
    "question_mapper",
    # Tiers
    "RiskTier",
    "match_tier",
    # Session
    "AnswerValue",
    "CompletionStep",
    "QuestionPayload",
    "QuestionStep",
    "QuizOutcome",
    "QuizPhase",
    "QuizResult",
    "SessionState",
    "StepResult",
]
