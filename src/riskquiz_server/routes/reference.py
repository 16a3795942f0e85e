"""Reference data endpoints — the question bank and risk tiers.

Read-only and unauthenticated: the data is public reference information.
"""

from fastapi import APIRouter, Depends

from riskquiz_server.dependencies import get_backends
from riskquiz_server.registry import QuizBackends

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/questions")
async def list_questions(
    backends: QuizBackends = Depends(get_backends),
) -> dict:
    """Return general and specialized questions, each ordered by id."""
    general = await backends.questions.fetch_general_questions()
    specialized = await backends.questions.fetch_specialized_questions()
    return {
        "general": [q.model_dump(mode="json") for q in general],
        "specialized": [q.model_dump(mode="json") for q in specialized],
    }


@router.get("/risk-tiers")
async def list_risk_tiers(
    backends: QuizBackends = Depends(get_backends),
) -> list[dict]:
    """Return every risk tier."""
    tiers = await backends.tiers.list_tiers()
    return [tier.model_dump(mode="json") for tier in tiers]
