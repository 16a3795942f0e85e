"""UserResponse ORM model — append-only answer log.

One row per answered question per completed quiz.  Rows are never updated;
a retaken quiz appends a fresh set.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from riskquiz_db.models.base import Base


class UserResponse(Base):
    """A single stored answer, coerced to text."""

    __tablename__ = "user_responses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    # External user ID from the identity provider
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
    )
    response: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("ix_user_responses_user", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<UserResponse(user={self.user_id!r}, question={self.question_id}, "
            f"response={self.response!r})>"
        )
