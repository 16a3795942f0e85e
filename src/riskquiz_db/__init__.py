"""riskquiz_db — PostgreSQL persistence layer for the screening quiz.

This package provides the ORM models, async engine factory, and the
SQLAlchemy-backed implementations of the engine's question, response and
risk-tier interfaces.  It is consumed by the FastAPI server and the seed CLI.
"""

from riskquiz_db.engine import dispose_engine, get_engine, get_session_factory
from riskquiz_db.models.question import QuestionRow
from riskquiz_db.models.response import UserResponse
from riskquiz_db.models.tier import RiskAssessment
from riskquiz_db.repository import (
    SqlQuestionRepository,
    SqlResponseStore,
    SqlRiskTierLookup,
)

__all__ = [
    "QuestionRow",
    "RiskAssessment",
    "UserResponse",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
    "SqlQuestionRepository",
    "SqlResponseStore",
    "SqlRiskTierLookup",
]
