"""Position size and risk/reward calculator.

Converts an account balance, a risk tolerance and a pair of price levels
into a tradable lot size.
"""

from typing import Any, Optional

from tradeflow.models import ForexPair, PositionSizeResult, parse_number, round_half_up

# SOP thresholds
RR_TARGET = 5.0
HIGH_RISK_PERCENT = 2.0


class PositionSizeError(ValueError):
    """Inputs are present but cannot produce a position size."""


class InvalidInputError(PositionSizeError):
    def __init__(self) -> None:
        super().__init__("All values must be positive. Risk must be ≤ 100%.")


class EqualPricesError(PositionSizeError):
    def __init__(self) -> None:
        super().__init__("Entry and Stop Loss cannot be the same price.")


class ZeroPipDistanceError(PositionSizeError):
    def __init__(self) -> None:
        super().__init__("Pip distance is zero. Adjust your entry or stop loss.")


def calculate_position_size(
    account_balance: Any,
    risk_percent: Any,
    entry_price: Any,
    stop_loss: Any,
    pair: ForexPair,
) -> Optional[PositionSizeResult]:
    """Calculate the lot size that risks a fixed share of the account.

    Inputs may be numbers or the raw text a user typed.

    Args:
        account_balance: Account balance in account currency.
        risk_percent: Percent of the balance to risk (e.g., 1 for 1%).
        entry_price: Planned entry price.
        stop_loss: Stop-loss price.
        pair: Pip conventions of the traded pair.

    Returns:
        PositionSizeResult, or None if any input is missing or not numeric.

    Raises:
        InvalidInputError: A value is not positive, or risk exceeds 100%.
        EqualPricesError: Entry and stop loss are the same price.
        ZeroPipDistanceError: The stop distance rounds to zero pips.
    """
    balance = parse_number(account_balance)
    risk = parse_number(risk_percent)
    entry = parse_number(entry_price)
    stop = parse_number(stop_loss)

    if balance is None or risk is None or entry is None or stop is None:
        return None

    if balance <= 0 or risk <= 0 or risk > 100 or entry <= 0 or stop <= 0:
        raise InvalidInputError()

    if entry == stop:
        raise EqualPricesError()

    risk_amount = balance * (risk / 100)
    price_difference = abs(entry - stop)
    pip_count = price_difference / pair.pip_step

    if pip_count == 0:
        raise ZeroPipDistanceError()

    # Lot size is computed from the unrounded pip count
    lot_size = risk_amount / (pip_count * pair.pip_value_per_lot)

    return PositionSizeResult(
        risk_amount=risk_amount,
        price_difference=price_difference,
        pip_count=round_half_up(pip_count, 1),
        lot_size=round_half_up(lot_size, 2),
        direction="LONG" if entry > stop else "SHORT",
        small_pip_warning=pip_count < 1,
        pip_step=pair.pip_step,
        pip_value_per_lot=pair.pip_value_per_lot,
        pair_label=pair.label,
    )


def calculate_rr_ratio(entry_price: Any, stop_loss: Any, take_profit: Any) -> Optional[float]:
    """Reward distance divided by risk distance, rounded to 2 decimals.

    Returns:
        The ratio, or None if a price is missing or entry equals stop.
    """
    entry = parse_number(entry_price)
    stop = parse_number(stop_loss)
    target = parse_number(take_profit)
    if entry is None or stop is None or target is None or entry == stop:
        return None
    risk = abs(entry - stop)
    reward = abs(target - entry)
    return round_half_up(reward / risk, 2)


def is_rr_below_target(rr_ratio: Optional[float], target: float = RR_TARGET) -> bool:
    """Check a ratio against the SOP minimum; unknown ratios are not flagged."""
    return rr_ratio is not None and rr_ratio < target


def is_high_risk(risk_percent: Any) -> bool:
    risk = parse_number(risk_percent)
    return risk is not None and risk > HIGH_RISK_PERCENT
