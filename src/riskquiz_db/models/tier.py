"""RiskAssessment ORM model — score bands with advice.

``cancer_type`` scopes a band to one detected condition; null rows are the
fallback for conditions without their own bands.
"""

from sqlalchemy import CheckConstraint, Index, Integer, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from riskquiz_db.models.base import Base


class RiskAssessment(Base):
    """One inclusive ``[min_score, max_score]`` band."""

    __tablename__ = "risk_assessments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    min_score: Mapped[int] = mapped_column(Integer, nullable=False)
    max_score: Mapped[int] = mapped_column(Integer, nullable=False)
    risk_level: Mapped[str] = mapped_column(Text, nullable=False)
    advice: Mapped[str] = mapped_column(Text, nullable=False)
    foods_to_eat: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    foods_to_avoid: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    cancer_type: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("max_score >= min_score", name="ck_score_band"),
        Index("ix_risk_assessments_scope", "cancer_type", "min_score"),
    )

    def __repr__(self) -> str:
        return (
            f"<RiskAssessment(id={self.id}, scope={self.cancer_type!r}, "
            f"band={self.min_score}-{self.max_score}, level={self.risk_level!r})>"
        )
