"""Property-based tests for performance metrics.

**Feature: tradeflow**
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradeflow.analytics import (
    compute_summary,
    confirmation_breakdown,
    emotion_distribution,
    equity_curve,
    mistake_frequencies,
    outcome_distribution,
    pair_performance,
    top_mistake,
    trade_type_performance,
)
from tradeflow.analytics.metrics import win_rate
from tradeflow.models import PLACEHOLDER, Trade, TriState


def make_trade(trade_id: str = "1", **kwargs) -> Trade:
    return Trade(id=trade_id, **kwargs)


trades_strategy = st.lists(
    st.builds(
        Trade,
        id=st.text(alphabet="0123456789", min_size=1, max_size=5),
        outcome=st.sampled_from(["Win", "Loss", "BE", PLACEHOLDER]),
        profit_loss=st.integers(min_value=-500, max_value=500).map(str),
        followed_rules=st.sampled_from(list(TriState)),
        rr_ratio=st.floats(min_value=0, max_value=10),
    ),
    max_size=30,
)


class TestEmptyMetrics:
    """
    **Feature: tradeflow, Property 14: Empty Input Gives Zeros**
    **Validates: Requirements 4.4**
    """

    def test_empty_summary(self):
        summary = compute_summary([])

        assert summary.total == 0
        assert summary.win_rate == 0
        assert summary.avg_rr == 0
        assert summary.total_pnl == 0
        assert summary.rule_adherence == 0

    def test_empty_collections(self):
        assert equity_curve([]) == []
        assert pair_performance([]) == []
        assert top_mistake([]) is None
        assert emotion_distribution([]) == {}
        assert [bucket.trades for bucket in confirmation_breakdown([])] == [0, 0]


class TestSummary:
    """
    **Feature: tradeflow, Property 15: Headline Metrics**
    **Validates: Requirements 4.4**
    """

    def test_win_rate_two_of_three(self):
        trades = [
            make_trade("1", outcome="Win"),
            make_trade("2", outcome="Loss"),
            make_trade("3", outcome="Win"),
        ]

        summary = compute_summary(trades)

        assert summary.win_rate == pytest.approx(66.6667, abs=1e-3)
        assert f"{summary.win_rate:.1f}" == "66.7"
        assert (summary.wins, summary.losses, summary.break_evens) == (2, 1, 0)

    def test_avg_rr_includes_unset_ratios(self):
        trades = [make_trade("1", rr_ratio=6.0), make_trade("2")]

        assert compute_summary(trades).avg_rr == 3.0

    def test_total_pnl_parses_text(self):
        trades = [
            make_trade("1", profit_loss="250"),
            make_trade("2", profit_loss="-100.5"),
            make_trade("3", profit_loss="n/a"),
        ]

        assert compute_summary(trades).total_pnl == pytest.approx(149.5)

    def test_rule_adherence_ignores_unanswered(self):
        trades = [
            make_trade("1", followed_rules=True, outcome="Win"),
            make_trade("2", followed_rules=True, outcome="Loss"),
            make_trade("3", followed_rules=False, outcome="Loss"),
            make_trade("4", followed_rules=None, outcome="Win"),
        ]

        summary = compute_summary(trades)

        assert summary.rules_followed == 2
        assert summary.rules_broken == 1
        assert summary.rule_adherence == pytest.approx(200 / 3)
        assert summary.rule_break_pct == pytest.approx(100 / 3)
        assert summary.followed_win_rate == 50.0
        assert summary.broken_win_rate == 0.0

    @given(trades=trades_strategy)
    @settings(max_examples=100)
    def test_summary_bounds(self, trades):
        summary = compute_summary(trades)

        assert summary.total == len(trades)
        assert summary.wins + summary.losses + summary.break_evens <= summary.total
        assert 0 <= summary.win_rate <= 100
        answered = summary.rules_followed + summary.rules_broken
        if answered:
            assert summary.rule_adherence + summary.rule_break_pct == pytest.approx(100)

    @given(trades=trades_strategy)
    @settings(max_examples=50)
    def test_outcome_distribution_matches_summary(self, trades):
        summary = compute_summary(trades)

        assert outcome_distribution(trades) == {
            "Win": summary.wins,
            "Loss": summary.losses,
            "BE": summary.break_evens,
        }


class TestConfirmation:
    """
    **Feature: tradeflow, Property 16: Confirmation Buckets**
    **Validates: Requirements 4.4**
    """

    def test_full_and_partial(self):
        trades = [
            make_trade("1", poi_tapped=True, choch_confirmed=True, outcome="Win"),
            make_trade("2", poi_tapped=True, choch_confirmed=False, outcome="Win"),
            make_trade("3", poi_tapped=None, choch_confirmed=False, outcome="Loss"),
            make_trade("4", outcome="Win"),
        ]

        full, partial = confirmation_breakdown(trades)
        summary = compute_summary(trades)

        assert (full.trades, full.win_rate) == (1, 100.0)
        assert (partial.trades, partial.win_rate) == (2, 50.0)
        assert summary.full_confirmations == 1
        assert summary.partial_confirmations == 2


class TestEquityCurve:
    """
    **Feature: tradeflow, Property 17: Equity Curve**
    **Validates: Requirements 4.4**

    *For any* trades, the last equity point is the total P&L.
    """

    def test_running_total(self):
        trades = [
            make_trade("1", date="2024-06-01", profit_loss="100"),
            make_trade("2", date="2024-06-02", profit_loss="-40.25"),
            make_trade("3", date="2024-06-03", profit_loss="10"),
        ]

        curve = equity_curve(trades)

        assert [p.date for p in curve] == ["2024-06-01", "2024-06-02", "2024-06-03"]
        assert [p.equity for p in curve] == [100.0, 59.75, 69.75]

    def test_half_cent_rounds_away_from_zero(self):
        trades = [
            make_trade("1", date="2024-06-01", profit_loss="0.125"),
            make_trade("2", date="2024-06-02", profit_loss="-0.25"),
        ]

        assert [p.equity for p in equity_curve(trades)] == [0.13, -0.13]

    @given(trades=trades_strategy)
    @settings(max_examples=50)
    def test_last_point_is_total(self, trades):
        curve = equity_curve(trades)

        assert len(curve) == len(trades)
        if trades:
            assert curve[-1].equity == pytest.approx(compute_summary(trades).total_pnl, abs=0.01)


class TestGroupPerformance:
    """
    **Feature: tradeflow, Property 18: Grouped Performance**
    **Validates: Requirements 4.4**
    """

    def test_pair_performance_sorted_by_pnl(self):
        trades = [
            make_trade("1", pair="EU", outcome="Win", profit_loss="100"),
            make_trade("2", pair="GU", outcome="Win", profit_loss="300"),
            make_trade("3", pair="EU", outcome="Loss", profit_loss="-50"),
            make_trade("4", outcome="Win", profit_loss="999"),
        ]

        groups = pair_performance(trades)

        assert [g.name for g in groups] == ["GU", "EU"]
        assert groups[1].trades == 2
        assert groups[1].win_rate == 50.0
        assert groups[1].pnl == 50.0

    def test_trade_type_performance(self):
        trades = [
            make_trade("1", trade_type="CT", profit_loss="-10"),
            make_trade("2", trade_type="15min PT", profit_loss="20"),
        ]

        assert [g.name for g in trade_type_performance(trades)] == ["15min PT", "CT"]


class TestMistakesAndEmotions:
    """
    **Feature: tradeflow, Property 19: Mistake And Emotion Tallies**
    **Validates: Requirements 4.4**
    """

    def test_mistake_phrases(self):
        trades = [
            make_trade("1", mistakes="Moved stop loss. Entered early; FOMO"),
            make_trade("2", mistakes="moved stop loss\nno plan"),
        ]

        counts = mistake_frequencies(trades)

        assert counts == {"moved stop loss": 2, "entered early": 1, "no plan": 1}
        assert top_mistake(trades).text == "moved stop loss"
        assert top_mistake(trades).count == 2

    def test_top_mistake_tie_goes_to_first_seen(self):
        trades = [make_trade("1", mistakes="entered early, moved stop")]

        assert top_mistake(trades).text == "entered early"

    def test_emotions_skip_placeholder(self):
        trades = [
            make_trade("1", emotion="Calm"),
            make_trade("2", emotion="FOMO"),
            make_trade("3", emotion="Calm"),
            make_trade("4"),
        ]

        assert emotion_distribution(trades) == {"Calm": 2, "FOMO": 1}

    def test_win_rate_helper(self):
        assert win_rate([make_trade("1", outcome="BE")]) == 0.0
