"""SQLAlchemy implementations of the engine's collaborator interfaces.

The three port adapters each open their own short-lived ``AsyncSession``
from an ``async_sessionmaker`` so every call is an independent transaction.
That matters for the response store: each answer commits on its own and a
failed write does not roll back the ones before it.

``ReferenceDataRepository`` follows the accept-an-``AsyncSession`` style
instead; the seed CLI composes its writes into one transaction and commits.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from riskquiz_db.models.question import QuestionRow
from riskquiz_db.models.response import UserResponse
from riskquiz_db.models.tier import RiskAssessment
from riskquiz_engine.constants import GENERAL_CATEGORY
from riskquiz_engine.errors import FetchFailure
from riskquiz_engine.interfaces import QuestionRepository, ResponseStore, RiskTierLookup
from riskquiz_engine.models.question import Question, RangeQuestion, SelectQuestion, parse_question
from riskquiz_engine.models.tier import RiskTier, match_tier

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Row <-> model conversion
# ---------------------------------------------------------------------------

def row_to_question(row: QuestionRow) -> Question:
    """Validate a ``questions`` row into its typed engine model.

    Raises ``pydantic.ValidationError`` on malformed JSON columns.
    """
    return parse_question({
        "id": row.id,
        "text": row.question,
        "type": row.question_type,
        "category": row.category,
        "weight": row.weight,
        "options": row.options,
        "next_question_logic": row.next_question_logic,
        "condition_hints": row.condition_hints,
    })


def question_to_values(question: Question) -> dict:
    """Column values for inserting ``question`` into ``questions``."""
    options = None
    if isinstance(question, RangeQuestion):
        options = question.options.model_dump()
    elif isinstance(question, SelectQuestion):
        options = {"choices": list(question.choices)}

    logic = None
    if question.branch_rules is not None:
        logic = dict(question.branch_rules.targets)
        if question.branch_rules.default is not None:
            logic["default"] = question.branch_rules.default

    return {
        "id": question.id,
        "question": question.text,
        "question_type": question.type,
        "category": question.category,
        "weight": question.weight,
        "options": options,
        "next_question_logic": logic,
        "condition_hints": dict(question.condition_hints) or None,
    }


def row_to_tier(row: RiskAssessment) -> RiskTier:
    """Convert a ``risk_assessments`` row into a :class:`RiskTier`."""
    return RiskTier(
        min_score=row.min_score,
        max_score=row.max_score,
        risk_level=row.risk_level,
        advice=row.advice,
        foods_to_eat=row.foods_to_eat,
        foods_to_avoid=row.foods_to_avoid,
        condition_scope=row.cancer_type,
    )


def tier_to_row(tier: RiskTier) -> RiskAssessment:
    """Build an unsaved ``risk_assessments`` row from a :class:`RiskTier`."""
    return RiskAssessment(
        min_score=tier.min_score,
        max_score=tier.max_score,
        risk_level=tier.risk_level,
        advice=tier.advice,
        foods_to_eat=list(tier.foods_to_eat),
        foods_to_avoid=list(tier.foods_to_avoid),
        cancer_type=tier.condition_scope,
    )


# ---------------------------------------------------------------------------
# Port adapters
# ---------------------------------------------------------------------------

class SqlQuestionRepository(QuestionRepository):
    """Reads the ``questions`` table, partitioned on ``category``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_general_questions(self) -> list[Question]:
        stmt = (
            select(QuestionRow)
            .where(QuestionRow.category == GENERAL_CATEGORY)
            .order_by(QuestionRow.id)
        )
        return await self._fetch(stmt)

    async def fetch_specialized_questions(self) -> list[Question]:
        stmt = (
            select(QuestionRow)
            .where(QuestionRow.category != GENERAL_CATEGORY)
            .order_by(QuestionRow.id)
        )
        return await self._fetch(stmt)

    async def _fetch(self, stmt) -> list[Question]:
        async with self._session_factory() as db:
            result = await db.execute(stmt)
            rows = list(result.scalars().all())

        questions: list[Question] = []
        for row in rows:
            try:
                questions.append(row_to_question(row))
            except ValidationError as exc:
                raise FetchFailure(f"Malformed question row {row.id}: {exc}") from exc
        return questions


class SqlResponseStore(ResponseStore):
    """Appends to ``user_responses``; one committed transaction per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def record_response(self, user_id: str, question_id: int, response: str) -> None:
        async with self._session_factory() as db:
            db.add(UserResponse(
                user_id=user_id,
                question_id=question_id,
                response=response,
            ))
            await db.commit()


class SqlRiskTierLookup(RiskTierLookup):
    """Finds the ``risk_assessments`` band covering a score."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_tier(self, score: int, condition: Optional[str] = None) -> Optional[RiskTier]:
        stmt = (
            select(RiskAssessment)
            .where(
                RiskAssessment.min_score <= score,
                RiskAssessment.max_score >= score,
            )
            .order_by(RiskAssessment.id)
        )
        async with self._session_factory() as db:
            result = await db.execute(stmt)
            rows = list(result.scalars().all())
        return match_tier([row_to_tier(row) for row in rows], score, condition)

    async def list_tiers(self) -> list[RiskTier]:
        """Every tier ordered by id, for the reference endpoint."""
        async with self._session_factory() as db:
            result = await db.execute(select(RiskAssessment).order_by(RiskAssessment.id))
            return [row_to_tier(row) for row in result.scalars().all()]


# ---------------------------------------------------------------------------
# Reference data writes (seed CLI)
# ---------------------------------------------------------------------------

class ReferenceDataRepository:
    """Bulk writes for ``questions`` and ``risk_assessments``.

    Methods accept an ``AsyncSession``; the caller commits.
    """

    async def upsert_questions(self, db: AsyncSession, questions: Iterable[Question]) -> int:
        """Insert or update questions by id.  Returns the number written."""
        count = 0
        for question in questions:
            values = question_to_values(question)
            stmt = insert(QuestionRow).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=[QuestionRow.id],
                set_={k: v for k, v in values.items() if k != "id"},
            )
            await db.execute(stmt)
            count += 1
        await db.flush()
        logger.info("Upserted %d questions", count)
        return count

    async def replace_tiers(self, db: AsyncSession, tiers: Iterable[RiskTier]) -> int:
        """Replace every risk tier.  Bands have no natural key to upsert on."""
        await db.execute(delete(RiskAssessment))
        rows = [tier_to_row(tier) for tier in tiers]
        db.add_all(rows)
        await db.flush()
        logger.info("Replaced risk tiers with %d rows", len(rows))
        return len(rows)
