"""Forex pair reference table.

Pip conventions per pair: most majors move in steps of 0.0001 and pay
$10 per pip per standard lot; yen-quoted pairs move in 0.01 steps, and gold
is quoted to the cent.
"""

from typing import Optional

from tradeflow.models import ForexPair

DEFAULT_PAIR_SYMBOL = "EURUSD"

FOREX_PAIRS: tuple[ForexPair, ...] = (
    ForexPair(symbol="EURUSD", label="EUR/USD", journal_key="EU", pip_step=0.0001, pip_value_per_lot=10),
    ForexPair(symbol="GBPUSD", label="GBP/USD", journal_key="GU", pip_step=0.0001, pip_value_per_lot=10),
    ForexPair(symbol="AUDUSD", label="AUD/USD", journal_key="AU", pip_step=0.0001, pip_value_per_lot=10),
    ForexPair(symbol="NZDUSD", label="NZD/USD", journal_key="NU", pip_step=0.0001, pip_value_per_lot=10),
    ForexPair(symbol="USDCAD", label="USD/CAD", journal_key="UCAD", pip_step=0.0001, pip_value_per_lot=10),
    ForexPair(symbol="USDCHF", label="USD/CHF", journal_key="UF", pip_step=0.0001, pip_value_per_lot=10),
    ForexPair(symbol="EURGBP", label="EUR/GBP", journal_key="EG", pip_step=0.0001, pip_value_per_lot=10),
    ForexPair(symbol="EURAUD", label="EUR/AUD", journal_key="EA", pip_step=0.0001, pip_value_per_lot=10),
    ForexPair(symbol="USDJPY", label="USD/JPY", journal_key="UJ", pip_step=0.01, pip_value_per_lot=6.67, is_jpy=True),
    ForexPair(symbol="EURJPY", label="EUR/JPY", journal_key="EJ", pip_step=0.01, pip_value_per_lot=6.67, is_jpy=True),
    ForexPair(symbol="GBPJPY", label="GBP/JPY", journal_key="GJ", pip_step=0.01, pip_value_per_lot=6.67, is_jpy=True),
    ForexPair(symbol="AUDJPY", label="AUD/JPY", journal_key="AJ", pip_step=0.01, pip_value_per_lot=6.67, is_jpy=True),
    ForexPair(symbol="XAUUSD", label="XAU/USD", journal_key="XAUUSD", pip_step=0.01, pip_value_per_lot=1),
)

_BY_NAME: dict[str, ForexPair] = {}
for _pair in FOREX_PAIRS:
    for _name in (_pair.symbol, _pair.label, _pair.journal_key):
        _BY_NAME.setdefault(_name.upper(), _pair)


def get_pair(name: Optional[str], default: bool = False) -> Optional[ForexPair]:
    """Look up a pair by symbol, label, or journal key.

    Args:
        name: "EURUSD", "EUR/USD" or "EU" (case-insensitive).
        default: Return the default pair instead of None when unknown.

    Returns:
        The matching ForexPair, the default pair, or None.
    """
    pair = _BY_NAME.get((name or "").strip().upper())
    if pair is None and default:
        return _BY_NAME[DEFAULT_PAIR_SYMBOL]
    return pair


def list_symbols() -> list[str]:
    return [pair.symbol for pair in FOREX_PAIRS]


def journal_keys() -> list[str]:
    return [pair.journal_key for pair in FOREX_PAIRS]
