"""QuestionRow ORM model — one row per quiz question.

``options``, ``next_question_logic`` and ``condition_hints`` are JSONB whose
shape depends on ``question_type``; the repository validates them into the
engine's typed question models at load time.
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Float, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from riskquiz_db.models.base import Base
from riskquiz_db.models.enums import QuestionType


class QuestionRow(Base):
    """One quiz question; ``category`` is ``general`` or a condition label."""

    __tablename__ = "questions"

    # Stable, author-assigned ids; branch rules point at them
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    question: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(String(20), nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # {min, max, step} for range, {choices: [...]} for select, null for boolean
    options: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    # {"<answer>": <question id>, ..., "default": <question id>}
    next_question_logic: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    # General questions only: {"<condition>": <weight>, ...}
    condition_hints: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint(
            "question_type IN ({})".format(", ".join(f"'{t.value}'" for t in QuestionType)),
            name="ck_question_type",
        ),
        CheckConstraint("weight >= 0", name="ck_question_weight"),
        # Partition lookups: general vs. specialized, ordered by id
        Index("ix_questions_category", "category", "id"),
    )

    def __repr__(self) -> str:
        return (
            f"<QuestionRow(id={self.id}, type={self.question_type!r}, "
            f"category={self.category!r})>"
        )
