"""Create questions, risk_assessments and user_responses.

Revision ID: 20261018_initial
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261018_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- questions ---
    op.create_table(
        "questions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("question", sa.Text, nullable=False),
        sa.Column("question_type", sa.String(20), nullable=False),
        sa.Column("category", sa.Text, nullable=False),
        sa.Column("weight", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("options", JSONB, nullable=True),
        sa.Column("next_question_logic", JSONB, nullable=True),
        sa.Column("condition_hints", JSONB, nullable=True),
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(
            "question_type IN ('boolean', 'range', 'select')",
            name="ck_question_type",
        ),
        sa.CheckConstraint("weight >= 0", name="ck_question_weight"),
    )
    op.create_index("ix_questions_category", "questions", ["category", "id"])

    # --- risk_assessments ---
    op.create_table(
        "risk_assessments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("min_score", sa.Integer, nullable=False),
        sa.Column("max_score", sa.Integer, nullable=False),
        sa.Column("risk_level", sa.Text, nullable=False),
        sa.Column("advice", sa.Text, nullable=False),
        sa.Column("foods_to_eat", ARRAY(sa.Text), nullable=True),
        sa.Column("foods_to_avoid", ARRAY(sa.Text), nullable=True),
        sa.Column("cancer_type", sa.Text, nullable=True),
        sa.CheckConstraint("max_score >= min_score", name="ck_score_band"),
    )
    op.create_index(
        "ix_risk_assessments_scope", "risk_assessments", ["cancer_type", "min_score"],
    )

    # --- user_responses ---
    op.create_table(
        "user_responses",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column(
            "question_id",
            sa.Integer,
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("response", sa.Text, nullable=False),
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_user_responses_user", "user_responses", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_user_responses_user", table_name="user_responses")
    op.drop_table("user_responses")
    op.drop_index("ix_risk_assessments_scope", table_name="risk_assessments")
    op.drop_table("risk_assessments")
    op.drop_index("ix_questions_category", table_name="questions")
    op.drop_table("questions")
