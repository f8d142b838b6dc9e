"""Property-based tests for the position size calculator.

**Feature: tradeflow**
"""

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from tradeflow.calculator import (
    EqualPricesError,
    InvalidInputError,
    ZeroPipDistanceError,
    calculate_position_size,
    calculate_rr_ratio,
    is_high_risk,
    is_rr_below_target,
)
from tradeflow.models import ForexPair, round_half_up
from tradeflow.pairs import FOREX_PAIRS, get_pair


EURUSD = get_pair("EURUSD")
USDJPY = get_pair("USDJPY")


class TestPositionSizeExamples:
    """
    **Feature: tradeflow, Property 1: Lot Size From Fixed Risk**
    **Validates: Requirements 4.1**

    Known inputs give the documented results.
    """

    def test_eurusd_long(self):
        result = calculate_position_size(10000, 1, 1.0850, 1.0800, EURUSD)

        assert result is not None
        assert result.risk_amount == pytest.approx(100)
        assert result.pip_count == 50.0
        assert result.lot_size == 0.20
        assert result.direction == "LONG"
        assert result.small_pip_warning is False
        assert result.pair_label == "EUR/USD"

    def test_short_when_stop_above_entry(self):
        result = calculate_position_size(10000, 1, 1.0800, 1.0850, EURUSD)

        assert result.direction == "SHORT"
        assert result.lot_size == 0.20

    def test_jpy_pair_uses_wider_pip(self):
        result = calculate_position_size(10000, 1, 155.20, 154.70, USDJPY)

        assert result.pip_count == 50.0
        # 100 / (50 * 6.67)
        assert result.lot_size == 0.30
        assert result.pip_step == 0.01

    def test_string_inputs_are_parsed(self):
        result = calculate_position_size("10000", "1", "1.0850", "1.0800", EURUSD)

        assert result is not None
        assert result.lot_size == 0.20

    def test_small_pip_warning(self):
        result = calculate_position_size(10000, 1, 1.08503, 1.08502, EURUSD)

        assert result is not None
        assert result.pip_count == 0.1
        assert result.small_pip_warning is True
        assert result.lot_size > 0

    def test_exact_half_lot_rounds_up(self):
        # 125 risk over 1000 pips at 1 per pip is exactly 0.125 lots
        result = calculate_position_size(10000, 1.25, 2010, 2000, get_pair("XAUUSD"))

        assert result.pip_count == 1000.0
        assert result.lot_size == 0.13


class TestPositionSizeErrors:
    """
    **Feature: tradeflow, Property 2: Position Size Error Priority**
    **Validates: Requirements 4.1**

    Incomplete input gives no result; invalid input raises, checked in order.
    """

    @pytest.mark.parametrize(
        "args",
        [
            ("", 1, 1.0850, 1.0800),
            (10000, "abc", 1.0850, 1.0800),
            (10000, 1, None, 1.0800),
            (10000, 1, 1.0850, "   "),
        ],
    )
    def test_incomplete_input_returns_none(self, args):
        assert calculate_position_size(*args, EURUSD) is None

    @pytest.mark.parametrize(
        "args",
        [
            (0, 1, 1.0850, 1.0800),
            (10000, -1, 1.0850, 1.0800),
            (10000, 101, 1.0850, 1.0800),
            (10000, 1, 0, 1.0800),
            (10000, 1, 1.0850, -1),
        ],
    )
    def test_invalid_values_raise(self, args):
        with pytest.raises(InvalidInputError):
            calculate_position_size(*args, EURUSD)

    def test_equal_prices_raise(self):
        with pytest.raises(EqualPricesError):
            calculate_position_size(10000, 1, 1.0850, 1.0850, EURUSD)

    def test_invalid_checked_before_equal(self):
        with pytest.raises(InvalidInputError):
            calculate_position_size(10000, 150, 1.0850, 1.0850, EURUSD)

    def test_zero_pip_distance_error(self):
        # Adjacent floats on a pair whose pip is so wide the distance underflows
        wide = ForexPair(
            symbol="WIDE", label="WIDE", journal_key="WD", pip_step=1e308, pip_value_per_lot=1
        )
        with pytest.raises(ZeroPipDistanceError):
            calculate_position_size(10000, 1, 1.0, 1.0000000000000002, wide)

    def test_risk_of_exactly_100_is_allowed(self):
        result = calculate_position_size(1000, 100, 1.0850, 1.0800, EURUSD)

        assert result.risk_amount == pytest.approx(1000)


class TestLotSizeFormula:
    """
    **Feature: tradeflow, Property 3: Lot Size Formula**
    **Validates: Requirements 4.1**

    *For any* valid inputs, the lot size equals the risk amount divided by
    pip distance times pip value, rounded half up to 2 decimals.
    """

    @given(
        balance=st.floats(min_value=100, max_value=1_000_000),
        risk=st.floats(min_value=0.1, max_value=100),
        entry=st.floats(min_value=0.5, max_value=200),
        offset=st.floats(min_value=0.001, max_value=0.4),
        pair=st.sampled_from(FOREX_PAIRS),
        long=st.booleans(),
    )
    @settings(max_examples=100)
    def test_lot_size_formula(self, balance, risk, entry, offset, pair, long):
        stop = entry - offset if long else entry + offset
        assume(stop > 0)

        result = calculate_position_size(balance, risk, entry, stop, pair)

        pip_count = abs(entry - stop) / pair.pip_step
        expected = balance * (risk / 100) / (pip_count * pair.pip_value_per_lot)
        assert result.lot_size == round_half_up(expected, 2)
        assert result.direction == ("LONG" if entry > stop else "SHORT")
        assert result.small_pip_warning == (pip_count < 1)


class TestRiskReward:
    """
    **Feature: tradeflow, Property 4: Risk/Reward Ratio**
    **Validates: Requirements 4.3**
    """

    def test_rr_ratio(self):
        assert calculate_rr_ratio("1.0850", "1.0800", "1.1100") == 5.0

    def test_rr_ratio_exact_half_rounds_up(self):
        assert calculate_rr_ratio(2, 1, 2.125) == 0.13

    def test_rr_ratio_missing_price(self):
        assert calculate_rr_ratio("1.0850", "", "1.1100") is None

    def test_rr_ratio_entry_equals_stop(self):
        assert calculate_rr_ratio(1.0850, 1.0850, 1.1100) is None

    def test_rr_below_target(self):
        assert is_rr_below_target(3.2) is True
        assert is_rr_below_target(5.0) is False
        assert is_rr_below_target(None) is False

    def test_high_risk(self):
        assert is_high_risk(2.5) is True
        assert is_high_risk("2") is False
        assert is_high_risk("") is False
