"""Trade analytics for TradeFlow."""

from tradeflow.analytics.metrics import (
    PerformanceSummary,
    compute_summary,
    mistake_frequencies,
    confirmation_breakdown,
    emotion_distribution,
    equity_curve,
    outcome_distribution,
    pair_performance,
    top_mistake,
    trade_type_performance,
)

__all__ = [
    "PerformanceSummary",
    "compute_summary",
    "mistake_frequencies",
    "confirmation_breakdown",
    "emotion_distribution",
    "equity_curve",
    "outcome_distribution",
    "pair_performance",
    "top_mistake",
    "trade_type_performance",
]
