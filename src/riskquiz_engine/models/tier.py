"""Risk tier model — one row of the score → advice lookup table."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class RiskTier(BaseModel):
    """Score band with advice and dietary recommendations.

    Bounds are inclusive.  ``condition_scope`` of ``None`` means the tier
    applies regardless of the detected candidate condition.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    min_score: int
    max_score: int
    risk_level: str
    advice: str
    foods_to_eat: tuple[str, ...] = ()
    foods_to_avoid: tuple[str, ...] = ()
    condition_scope: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("condition_scope", "condition_label", "cancer_type"),
    )

    @field_validator("foods_to_eat", "foods_to_avoid", mode="before")
    @classmethod
    def _null_foods(cls, value: Any) -> Any:
        return () if value is None else value

    @model_validator(mode="after")
    def _chk(self):
        if self.max_score < self.min_score:
            raise ValueError("max_score must be >= min_score")
        return self

    def covers(self, score: int) -> bool:
        """True if ``score`` falls within this tier's inclusive bounds."""
        return self.min_score <= score <= self.max_score


def match_tier(
    tiers: Sequence[RiskTier], score: int, condition: Optional[str] = None
) -> Optional[RiskTier]:
    """Pick the tier covering ``score`` from ``tiers`` (ordered by id).

    With a ``condition``, tiers scoped to it win; unscoped tiers are the
    fallback.  Without one, every covering tier is eligible.  More than one
    eligible tier is a data problem: it is logged and the first one wins.
    """
    covering = [tier for tier in tiers if tier.covers(score)]
    if condition is not None:
        eligible = [t for t in covering if t.condition_scope == condition]
        if not eligible:
            eligible = [t for t in covering if t.condition_scope is None]
    else:
        eligible = covering

    if not eligible:
        return None
    if len(eligible) > 1:
        logger.warning(
            "%d risk tiers cover score %d (condition=%s); using the first",
            len(eligible), score, condition,
        )
    return eligible[0]
