"""Question and tier model validation.

Rows are validated once at load: the ``type`` discriminator selects the
variant, ``options`` and ``next_question_logic`` are parsed into typed
models, and malformed shapes raise ``ValidationError``.
"""

import pytest
from pydantic import ValidationError

from riskquiz_engine.models import (
    BooleanQuestion,
    RangeQuestion,
    RiskTier,
    SelectQuestion,
    SessionState,
    match_tier,
    parse_question,
    question_mapper,
)


def _row(**overrides):
    base = {"id": 1, "text": "Q?", "type": "boolean", "category": "general", "weight": 5}
    base.update(overrides)
    return base


# =====================================================================
# Discriminated union
# =====================================================================


class TestQuestionVariants:
    """``type`` picks the concrete question class."""

    def test_boolean_row(self):
        q = parse_question(_row())
        assert isinstance(q, BooleanQuestion), f"Expected BooleanQuestion, got {type(q)}"
        assert q.branch_rules is None, "No logic column means no branch rules"
        assert q.condition_hints == {}, "Null hints should become an empty dict"

    def test_range_row(self):
        q = parse_question(_row(type="range", options={"min": 0, "max": 40, "step": 1}))
        assert isinstance(q, RangeQuestion)
        assert (q.options.min, q.options.max) == (0, 40)

    def test_select_row(self):
        q = parse_question(_row(type="select", options={"choices": ["a", "b", "c"]}))
        assert isinstance(q, SelectQuestion)
        assert q.choices == ("a", "b", "c"), "Choice order must be preserved"

    def test_select_accepts_bare_choice_list(self):
        q = parse_question(_row(type="select", options=["low", "high"]))
        assert q.choices == ("low", "high")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_question(_row(type="free_text"))

    def test_question_mapper_covers_every_type(self):
        assert set(question_mapper) == {"boolean", "range", "select"}


# =====================================================================
# Options and hints validation
# =====================================================================


class TestOptionValidation:
    """Shape errors are rejected at load; degenerate ranges are allowed."""

    def test_range_without_options_rejected(self):
        with pytest.raises(ValidationError):
            parse_question(_row(type="range"))

    def test_range_max_below_min_rejected(self):
        with pytest.raises(ValidationError):
            parse_question(_row(type="range", options={"min": 10, "max": 0}))

    def test_range_equal_bounds_loads(self):
        q = parse_question(_row(type="range", options={"min": 3, "max": 3}))
        assert q.options.min == q.options.max == 3, "Degenerate range is a scoring concern"

    def test_select_with_no_choices_rejected(self):
        with pytest.raises(ValidationError):
            parse_question(_row(type="select", options={"choices": []}))

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            parse_question(_row(weight=-1))

    def test_negative_hint_rejected(self):
        with pytest.raises(ValidationError):
            parse_question(_row(condition_hints={"skin": -2}))


# =====================================================================
# Branch rules
# =====================================================================


class TestBranchRules:
    """The flat ``next_question_logic`` mapping splits into targets + default."""

    def test_default_key_is_split_out(self):
        q = parse_question(_row(next_question_logic={"No": 7, "default": 6}))
        assert q.branch_rules.targets == {"No": 7}
        assert q.branch_rules.default == 6

    def test_target_lookup_uses_string_form(self):
        q = parse_question(_row(next_question_logic={"5": 9}))
        assert q.branch_rules.target_for(5) == 9, "Numeric answer should match '5'"
        assert q.branch_rules.target_for("6") is None

    def test_whole_float_answer_and_key_normalized(self):
        q = parse_question(_row(next_question_logic={5.0: 9, "default": 2}))
        assert q.branch_rules.targets == {"5": 9}
        assert q.branch_rules.target_for(5.0) == 9
        assert q.branch_rules.target_for(5) == 9

    def test_branch_rules_field_name_also_accepted(self):
        q = parse_question(_row(branch_rules={"targets": {"Yes": 3}, "default": None}))
        assert q.branch_rules.target_for("Yes") == 3


# =====================================================================
# Risk tiers and session state
# =====================================================================


class TestRiskTier:
    def test_bounds_are_inclusive(self):
        t = RiskTier(min_score=10, max_score=20, risk_level="Mid", advice="a")
        assert t.covers(10) and t.covers(20), "Both bounds should be covered"
        assert not t.covers(21)

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ValidationError):
            RiskTier(min_score=20, max_score=10, risk_level="x", advice="a")

    def test_cancer_type_alias_sets_scope(self):
        t = RiskTier.model_validate({
            "min_score": 0, "max_score": 5, "risk_level": "Low", "advice": "a",
            "cancer_type": "lung", "foods_to_eat": None,
        })
        assert t.condition_scope == "lung"
        assert t.foods_to_eat == (), "Null food list should become empty"


class TestMatchTier:
    TIERS = [
        RiskTier(min_score=0, max_score=29, risk_level="Low", advice="a"),
        RiskTier(min_score=30, max_score=59, risk_level="Moderate", advice="a"),
        RiskTier(min_score=30, max_score=59, risk_level="Moderate", advice="b", condition_scope="skin"),
    ]

    def test_scoped_tier_preferred(self):
        assert match_tier(self.TIERS, 40, "skin").advice == "b"

    def test_unscoped_fallback_for_other_condition(self):
        assert match_tier(self.TIERS, 40, "lung").advice == "a"

    def test_no_condition_takes_first_and_warns(self, caplog):
        with caplog.at_level("WARNING"):
            assert match_tier(self.TIERS, 40).advice == "a"
        assert "2 risk tiers cover score 40" in caplog.text

    def test_out_of_range(self):
        assert match_tier(self.TIERS, 60, "skin") is None


class TestSessionState:
    def test_state_is_frozen(self):
        state = SessionState()
        with pytest.raises(ValidationError):
            state.current_index = 3

    def test_model_copy_leaves_original_untouched(self):
        state = SessionState()
        updated = state.model_copy(update={"answers": {1: "Yes"}})
        assert state.answers == {}, "Original state must not change"
        assert updated.answers == {1: "Yes"}

    def test_no_current_question_once_completed(self):
        q = parse_question(_row())
        state = SessionState(active_question_set=(q,), completed=True)
        assert state.current_question is None
