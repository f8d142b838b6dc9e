"""Performance metrics over canonical trades.

Every function here is a pure aggregation. Ratios with an empty
denominator are 0 rather than an error. Values are kept at full precision;
rounding is left to presentation, except where a function says otherwise.
"""

import math
import re
from typing import Callable, Optional

from pydantic import BaseModel, Field

from tradeflow.models import PLACEHOLDER, Outcome, Trade, TriState, round_half_up

MIN_MISTAKE_LENGTH = 6

_MISTAKE_SEPARATORS = re.compile(r"[,.;\n]+")


def _percent(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def win_rate(trades: list[Trade]) -> float:
    """Share of trades marked as a win, in percent."""
    return _percent(sum(1 for trade in trades if trade.is_win), len(trades))


class PerformanceSummary(BaseModel):
    """Headline statistics for a set of trades."""

    total: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    break_evens: int = Field(default=0, ge=0)
    win_rate: float = Field(default=0.0, ge=0, le=100)
    avg_rr: float = Field(default=0.0, description="Mean RR including unset (0) ratios")
    total_pnl: float = Field(default=0.0)
    rules_followed: int = Field(default=0, ge=0)
    rules_broken: int = Field(default=0, ge=0)
    rule_adherence: float = Field(default=0.0, ge=0, le=100)
    rule_break_pct: float = Field(default=0.0, ge=0, le=100)
    followed_win_rate: float = Field(default=0.0, ge=0, le=100)
    broken_win_rate: float = Field(default=0.0, ge=0, le=100)
    full_confirmations: int = Field(default=0, ge=0)
    partial_confirmations: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class ConfirmationBucket(BaseModel):
    name: str
    trades: int = Field(default=0, ge=0)
    win_rate: float = Field(default=0.0, ge=0, le=100)

    model_config = {"frozen": True}


class EquityPoint(BaseModel):
    date: str
    equity: float

    model_config = {"frozen": True}


class GroupPerformance(BaseModel):
    """Aggregate results for one pair or trade type."""

    name: str
    trades: int = Field(default=0, ge=0)
    win_rate: float = Field(default=0.0, ge=0, le=100)
    pnl: float = Field(default=0.0)

    model_config = {"frozen": True}


class MistakeFrequency(BaseModel):
    text: str
    count: int = Field(..., ge=1)

    model_config = {"frozen": True}


def is_full_confirmation(trade: Trade) -> bool:
    return trade.poi_tapped is TriState.YES and trade.choch_confirmed is TriState.YES


def is_partial_confirmation(trade: Trade) -> bool:
    """At least one confirmation was answered, but not both with yes."""
    answered = (
        trade.poi_tapped is not TriState.UNANSWERED
        or trade.choch_confirmed is not TriState.UNANSWERED
    )
    return answered and not is_full_confirmation(trade)


def compute_summary(trades: list[Trade]) -> PerformanceSummary:
    """Calculate headline metrics from a list of trades.

    Args:
        trades: Canonical trades.

    Returns:
        PerformanceSummary. An empty list gives all zeros.
    """
    if not trades:
        return PerformanceSummary()

    total = len(trades)
    outcomes = [trade.outcome_kind for trade in trades]
    followed = [t for t in trades if t.followed_rules is TriState.YES]
    broken = [t for t in trades if t.followed_rules is TriState.NO]
    answered = len(followed) + len(broken)

    return PerformanceSummary(
        total=total,
        wins=outcomes.count(Outcome.WIN),
        losses=outcomes.count(Outcome.LOSS),
        break_evens=outcomes.count(Outcome.BREAK_EVEN),
        win_rate=win_rate(trades),
        # Unset ratios are stored as 0 and pull the mean down
        avg_rr=sum(trade.rr_ratio for trade in trades) / total,
        total_pnl=sum(trade.pnl_value for trade in trades),
        rules_followed=len(followed),
        rules_broken=len(broken),
        rule_adherence=_percent(len(followed), answered),
        rule_break_pct=_percent(len(broken), answered),
        followed_win_rate=win_rate(followed),
        broken_win_rate=win_rate(broken),
        full_confirmations=sum(1 for t in trades if is_full_confirmation(t)),
        partial_confirmations=sum(1 for t in trades if is_partial_confirmation(t)),
    )


def confirmation_breakdown(trades: list[Trade]) -> list[ConfirmationBucket]:
    """Win rate of fully confirmed entries against partially confirmed ones."""
    full = [t for t in trades if is_full_confirmation(t)]
    partial = [t for t in trades if is_partial_confirmation(t)]
    return [
        ConfirmationBucket(name="Full Confirmation", trades=len(full), win_rate=win_rate(full)),
        ConfirmationBucket(
            name="Partial Confirmation", trades=len(partial), win_rate=win_rate(partial)
        ),
    ]


def _to_cents(value: float) -> float:
    return math.copysign(round_half_up(abs(value), 2), value)


def equity_curve(trades: list[Trade]) -> list[EquityPoint]:
    """Running P&L total, one point per trade, in the order given.

    Each point is rounded to cents, halves away from zero; the running
    sum itself is not.
    """
    points = []
    cumulative = 0.0
    for trade in trades:
        cumulative += trade.pnl_value
        points.append(EquityPoint(date=trade.date, equity=_to_cents(cumulative)))
    return points


def performance_by(trades: list[Trade], key: Callable[[Trade], str]) -> list[GroupPerformance]:
    """Group trades and aggregate count, win rate and P&L per group.

    Trades whose key is the placeholder are left out.

    Args:
        trades: Canonical trades.
        key: Returns the group name of a trade.

    Returns:
        One entry per group, highest summed P&L first.
    """
    groups: dict[str, list[Trade]] = {}
    for trade in trades:
        name = key(trade)
        if not name or name == PLACEHOLDER:
            continue
        groups.setdefault(name, []).append(trade)

    results = [
        GroupPerformance(
            name=name,
            trades=len(members),
            win_rate=win_rate(members),
            pnl=sum(trade.pnl_value for trade in members),
        )
        for name, members in groups.items()
    ]
    return sorted(results, key=lambda group: group.pnl, reverse=True)


def pair_performance(trades: list[Trade]) -> list[GroupPerformance]:
    return performance_by(trades, lambda trade: trade.pair)


def trade_type_performance(trades: list[Trade]) -> list[GroupPerformance]:
    return performance_by(trades, lambda trade: trade.trade_type)


def mistake_frequencies(trades: list[Trade]) -> dict[str, int]:
    """Tally mistake phrases across all trades, in first-seen order.

    Notes are lowercased and split on commas, periods, semicolons and
    newlines. Phrases shorter than six characters are ignored.
    """
    counts: dict[str, int] = {}
    for trade in trades:
        if not trade.mistakes:
            continue
        for fragment in _MISTAKE_SEPARATORS.split(trade.mistakes.lower()):
            phrase = fragment.strip()
            if len(phrase) >= MIN_MISTAKE_LENGTH:
                counts[phrase] = counts.get(phrase, 0) + 1
    return counts


def top_mistake(trades: list[Trade]) -> Optional[MistakeFrequency]:
    """The most frequent mistake phrase, ties going to the first seen."""
    counts = mistake_frequencies(trades)
    if not counts:
        return None
    text, count = max(counts.items(), key=lambda item: item[1])
    return MistakeFrequency(text=text, count=count)


def emotion_distribution(trades: list[Trade]) -> dict[str, int]:
    emotions: dict[str, int] = {}
    for trade in trades:
        if trade.emotion and trade.emotion != PLACEHOLDER:
            emotions[trade.emotion] = emotions.get(trade.emotion, 0) + 1
    return emotions


def outcome_distribution(trades: list[Trade]) -> dict[str, int]:
    """Win / Loss / BE counts."""
    summary = compute_summary(trades)
    return {
        Outcome.WIN.value: summary.wins,
        Outcome.LOSS.value: summary.losses,
        Outcome.BREAK_EVEN.value: summary.break_evens,
    }
