"""CandidateDetector unit tests.

Covers hint accumulation, descending-score ordering with discovery-order
ties, the ``general`` sentinel, and the any-positive flag.
"""

import pytest

from helpers.builders import boolean_q, range_q, select_q
from riskquiz_engine.detector import CandidateDetector, is_positive_answer


@pytest.fixture
def detector():
    return CandidateDetector()


class TestPositiveAnswer:
    @pytest.mark.parametrize("value", ["Yes", "Sometimes", 0, 3.5])
    def test_positive_values(self, value):
        assert is_positive_answer(value), f"{value!r} should count as positive"

    @pytest.mark.parametrize("value", ["No", "", "   ", None])
    def test_negative_values(self, value):
        assert not is_positive_answer(value), f"{value!r} should not count as positive"


class TestDetection:
    def test_single_candidate(self, detector):
        qs = [boolean_q(1, hints={"skin": 5}), boolean_q(2)]
        result = detector.detect({1: "Yes", 2: "No"}, qs)
        assert result.any_positive, "One 'Yes' makes any_positive true"
        assert result.candidates == ["skin"]
        assert not result.no_specific_condition

    def test_ordered_by_descending_score(self, detector):
        qs = [
            boolean_q(1, hints={"skin": 1, "lung": 3}),
            boolean_q(2, hints={"breast": 2}),
        ]
        result = detector.detect({1: "Yes", 2: "Yes"}, qs)
        assert result.candidates == ["lung", "breast", "skin"], (
            f"Expected lung > breast > skin, got {result.candidates}"
        )

    def test_ties_keep_discovery_order(self, detector):
        qs = [
            boolean_q(1, hints={"colorectal": 2}),
            boolean_q(2, hints={"breast": 2}),
        ]
        result = detector.detect({1: "Yes", 2: "Yes"}, qs)
        assert result.candidates == ["colorectal", "breast"], (
            "Equal scores should keep the order labels first appeared in"
        )

    def test_unanswered_and_negative_do_not_count(self, detector):
        qs = [
            boolean_q(1, hints={"skin": 4}),
            boolean_q(2, hints={"lung": 4}),
            boolean_q(3, hints={"breast": 1}),
        ]
        result = detector.detect({1: "No", 3: "Yes"}, qs)
        assert result.candidates == ["breast"]
        assert result.scores == {"skin": 0.0, "lung": 0.0, "breast": 1.0}

    def test_non_boolean_answers_are_positive(self, detector):
        qs = [
            range_q(1, hints={"lung": 1}),
            select_q(2, ["No", "One", "Two"], hints={"breast": 1}),
        ]
        result = detector.detect({1: 0, 2: "No"}, qs)
        assert result.candidates == ["lung"], "Range answer 0 is still an answer"

    def test_general_label_dropped_when_others_present(self, detector):
        qs = [boolean_q(1, hints={"general": 5, "skin": 1})]
        result = detector.detect({1: "Yes"}, qs)
        assert result.candidates == ["skin"], "'general' should be dropped"


class TestNoSpecificCondition:
    def test_positive_answers_without_hints(self, detector):
        qs = [boolean_q(1), boolean_q(2, hints={"skin": 3})]
        result = detector.detect({1: "Yes", 2: "No"}, qs)
        assert result.any_positive, "A 'Yes' without hints is still positive"
        assert result.no_specific_condition
        assert result.candidates == ["general"]

    def test_all_negative(self, detector):
        qs = [boolean_q(1, hints={"skin": 3}), boolean_q(2)]
        result = detector.detect({1: "No", 2: "No"}, qs)
        assert not result.any_positive
        assert result.candidates == ["general"]

    def test_no_hints_anywhere(self, detector):
        result = detector.detect({}, [boolean_q(1)])
        assert not result.any_positive
        assert result.no_specific_condition

    def test_deterministic(self, detector):
        qs = [boolean_q(i, hints={"a": 1, "b": 1}) for i in range(1, 5)]
        answers = {i: "Yes" for i in range(1, 5)}
        first = detector.detect(answers, qs)
        assert all(detector.detect(answers, qs) == first for _ in range(5))
