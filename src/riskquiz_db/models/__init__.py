"""ORM models for riskquiz_db."""

from riskquiz_db.models.base import Base
from riskquiz_db.models.enums import QuestionType
from riskquiz_db.models.question import QuestionRow
from riskquiz_db.models.response import UserResponse
from riskquiz_db.models.tier import RiskAssessment

__all__ = ["Base", "QuestionType", "QuestionRow", "RiskAssessment", "UserResponse"]
