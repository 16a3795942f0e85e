"""Shorthand builders for question and tier fixtures.

Build through ``parse_question`` so every fixture goes through the same
validation path as rows loaded from the bank or the database.
"""

from typing import Any

from riskquiz_engine.models.question import parse_question
from riskquiz_engine.models.tier import RiskTier


def boolean_q(
    qid: int,
    *,
    weight: float = 10,
    category: str = "general",
    hints: dict[str, float] | None = None,
    logic: dict[str, Any] | None = None,
):
    return parse_question({
        "id": qid,
        "text": f"Boolean question {qid}?",
        "type": "boolean",
        "weight": weight,
        "category": category,
        "condition_hints": hints,
        "next_question_logic": logic,
    })


def range_q(
    qid: int,
    *,
    lo: float = 0,
    hi: float = 10,
    weight: float = 10,
    category: str = "general",
    hints: dict[str, float] | None = None,
    logic: dict[str, Any] | None = None,
):
    return parse_question({
        "id": qid,
        "text": f"Range question {qid}?",
        "type": "range",
        "options": {"min": lo, "max": hi, "step": 1},
        "weight": weight,
        "category": category,
        "condition_hints": hints,
        "next_question_logic": logic,
    })


def select_q(
    qid: int,
    choices: list[str],
    *,
    weight: float = 10,
    category: str = "general",
    hints: dict[str, float] | None = None,
    logic: dict[str, Any] | None = None,
):
    return parse_question({
        "id": qid,
        "text": f"Select question {qid}?",
        "type": "select",
        "options": {"choices": choices},
        "weight": weight,
        "category": category,
        "condition_hints": hints,
        "next_question_logic": logic,
    })


def tier(lo: int, hi: int, level: str, scope: str | None = None) -> RiskTier:
    return RiskTier(
        min_score=lo,
        max_score=hi,
        risk_level=level,
        advice=f"{level} advice",
        condition_scope=scope,
    )
