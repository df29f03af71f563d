"""
Tests for the ratio engine: net weights, ratio, control-limit classification.

Run with: python -m pytest epoxymix/tests/test_ratio_engine.py -v
"""
from decimal import Decimal

import pytest

from epoxymix.quality.ratio_engine import (
    CENTER_LINE,
    LOWER_LIMIT,
    UPPER_LIMIT,
    RatioStatus,
    classify,
    control_limits,
    evaluate_mix,
    format_ratio,
    net_weight,
    ratio,
)


class TestNetWeight:

    def test_gross_minus_tare(self):
        assert net_weight("24.36", "0.5") == Decimal("23.86")

    def test_accepts_numbers(self):
        assert net_weight(10, 2.5) == Decimal("7.5")

    @pytest.mark.parametrize("gross, tare", [
        (None, "1.0"),
        ("10", None),
        ("", "1.0"),
        ("abc", "1.0"),
        ("10", "x"),
        ("nan", "1"),
        ("inf", "1"),
    ])
    def test_not_computable(self, gross, tare):
        assert net_weight(gross, tare) is None


class TestRatio:

    def test_simple_ratio(self):
        assert ratio("24.36", "2.0") == Decimal("12.18")

    @pytest.mark.parametrize("b", [0, "0", "0.0", 0.0, Decimal("0")])
    def test_zero_denominator_is_none(self, b):
        assert ratio("12", b) is None

    def test_missing_input_is_none(self):
        assert ratio(None, "2") is None
        assert ratio("2", None) is None
        assert ratio("two", "2") is None


class TestClassify:

    def test_limits_are_exact_decimals(self):
        assert LOWER_LIMIT == Decimal("11.878")
        assert UPPER_LIMIT == Decimal("12.362")
        assert CENTER_LINE == Decimal("12.12")

    def test_bounds_are_inclusive(self):
        assert classify(11.878) == RatioStatus.IN_RANGE
        assert classify(12.362) == RatioStatus.IN_RANGE
        assert classify("11.878") == RatioStatus.IN_RANGE

    def test_just_outside_bounds(self):
        assert classify(11.877999) == RatioStatus.OUT_OF_RANGE
        assert classify(12.362001) == RatioStatus.OUT_OF_RANGE

    def test_center_is_in_range(self):
        assert classify(CENTER_LINE) == RatioStatus.IN_RANGE

    def test_non_numeric_raises(self):
        with pytest.raises(ValueError):
            classify("n/a")

    def test_classifies_before_rounding(self):
        # 12.3624 rounds to 12.362 (in range) but the raw value is above UCL
        value = Decimal("12.3624")
        assert format_ratio(value) == "12.362"
        assert classify(value) == RatioStatus.OUT_OF_RANGE


class TestEvaluateMix:

    def test_end_to_end_in_range(self):
        result = evaluate_mix("24.36", "2.0", cup_a="0.0", cup_b="0.0")
        assert result.net_a == Decimal("24.36")
        assert result.net_b == Decimal("2.0")
        assert result.ratio_text == "12.180"
        assert result.status == RatioStatus.IN_RANGE

    def test_missing_cups_use_gross(self):
        result = evaluate_mix("30", "2.5")
        assert result.ratio == Decimal("12")
        assert result.ratio_text == "12.000"

    def test_cup_weights_are_subtracted(self):
        result = evaluate_mix("25.36", "3.0", cup_a="1.0", cup_b="1.0")
        assert result.ratio_text == "12.180"

    def test_invalid_cup_weight_is_not_computable(self):
        result = evaluate_mix("24.36", "2.0", cup_a="heavy")
        assert result.net_a is None
        assert result.ratio is None
        assert result.status is None

    def test_out_of_range(self):
        result = evaluate_mix("20", "2")
        assert result.status == RatioStatus.OUT_OF_RANGE
        assert result.to_dict()["status"] == "out-of-range"

    def test_rounding_half_up(self):
        assert format_ratio(Decimal("12.1805")) == "12.181"

    def test_control_limits_payload(self):
        assert control_limits() == {"lcl": 11.878, "cl": 12.12, "ucl": 12.362}

    def test_huge_ratio_still_formats(self):
        result = evaluate_mix("24", "0.0000000000000000000000001")
        assert result.ratio_text == "24" + "0" * 25 + ".000"
        assert result.status == RatioStatus.OUT_OF_RANGE
        assert result.to_dict()["ratio"] == result.ratio_text
