"""Normalization of stored trade records.

Two record shapes live in the store: journal entries written by the
journal form, and legacy trade records (``symbol``/``status``/``pnl``/
``notes``). Both are reconciled into one canonical ``Trade`` through the
alias table below. Nothing downstream of this module looks at raw records.
"""

import logging
import math
from typing import Any, Callable, Mapping, NamedTuple, Union

from tradeflow.models import PLACEHOLDER, Trade, TriState, parse_number

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    """Render a stored value as text, the way it would appear in the form."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _ratio(value: Any) -> float:
    number = parse_number(value)
    if number is None or math.isinf(number):
        return 0.0
    return number


def _flag(value: Any) -> TriState:
    return TriState.from_value(value)


def _screenshots(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


class FieldAlias(NamedTuple):
    """Where a canonical field is read from, and what it falls back to."""

    sources: tuple[str, ...]
    default: Any
    convert: Callable[[Any], Any] = _text
    # Flags keep an explicit false; everything else treats falsy as absent
    keep_falsy: bool = False


FIELD_ALIASES: dict[str, FieldAlias] = {
    "pair": FieldAlias(("pair", "symbol"), PLACEHOLDER),
    "trade_type": FieldAlias(("tradeType",), PLACEHOLDER),
    "date": FieldAlias(("date",), PLACEHOLDER),
    "time": FieldAlias(("time",), ""),
    "bias": FieldAlias(("bias1H",), PLACEHOLDER),
    "range_type": FieldAlias(("rangeType",), PLACEHOLDER),
    "poi_type": FieldAlias(("poiType",), PLACEHOLDER),
    "entry_type": FieldAlias(("entryType",), PLACEHOLDER),
    "entry_price": FieldAlias(("entryPrice", "entry"), PLACEHOLDER),
    "stop_loss": FieldAlias(("stopLoss",), PLACEHOLDER),
    "take_profit": FieldAlias(("takeProfit", "exit"), PLACEHOLDER),
    "rr_ratio": FieldAlias(("rrRatio",), 0.0, _ratio),
    "lot_size": FieldAlias(("lotSize",), ""),
    "poi_tapped": FieldAlias(("poiTapped",), TriState.UNANSWERED, _flag, keep_falsy=True),
    "choch_confirmed": FieldAlias(("chochConfirmed",), TriState.UNANSWERED, _flag, keep_falsy=True),
    "outcome": FieldAlias(("outcome", "status"), PLACEHOLDER),
    "profit_loss": FieldAlias(("profitLoss", "pnl"), "0"),
    "emotion": FieldAlias(("emotion",), PLACEHOLDER),
    "followed_rules": FieldAlias(("followedRules",), TriState.UNANSWERED, _flag, keep_falsy=True),
    "mistakes": FieldAlias(("mistakes", "notes"), ""),
    "screenshots": FieldAlias(("screenshots",), [], _screenshots),
}

# Canonical field name -> key used when writing a journal entry
RECORD_KEYS: dict[str, str] = {
    field: alias.sources[0] for field, alias in FIELD_ALIASES.items()
}


def _is_absent(value: Any, keep_falsy: bool) -> bool:
    if value is None:
        return True
    if keep_falsy:
        return False
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value


def resolve_field(record: Mapping[str, Any], field: str) -> Any:
    """Resolve one canonical field from a raw record.

    Args:
        record: Raw stored record, either shape.
        field: Canonical field name (a key of FIELD_ALIASES).

    Returns:
        The converted value of the first non-empty source, or the default.
    """
    alias = FIELD_ALIASES[field]
    for key in alias.sources:
        value = record.get(key)
        if not _is_absent(value, alias.keep_falsy):
            return alias.convert(value)
    return alias.convert(alias.default)


def trade_to_record(trade: Trade) -> dict:
    """Serialize a canonical trade into the journal-entry shape."""
    record: dict[str, Any] = {"id": trade.id}
    for field, key in RECORD_KEYS.items():
        value = getattr(trade, field)
        if isinstance(value, TriState):
            value = value.to_value()
        elif isinstance(value, list):
            value = list(value)
        record[key] = value
    return record


def normalize_record(record: Union[Mapping[str, Any], Trade]) -> Trade:
    """Produce the canonical view of a stored record.

    The input is never modified. Normalizing a ``Trade`` (or the record
    produced by ``trade_to_record``) gives back an equal ``Trade``.

    Args:
        record: Raw record of either shape, or an already-canonical Trade.

    Returns:
        A new canonical Trade.
    """
    if isinstance(record, Trade):
        record = trade_to_record(record)

    record_id = record.get("id")
    values = {field: resolve_field(record, field) for field in FIELD_ALIASES}
    if record_id is None or record_id == "":
        logger.warning("Stored trade record has no id")
        record_id = ""
    return Trade(id=_text(record_id), **values)


def normalize_records(records: list[Any]) -> list[Trade]:
    """Normalize every record, skipping entries that are not records at all."""
    trades = []
    for record in records:
        if isinstance(record, (Mapping, Trade)):
            trades.append(normalize_record(record))
        else:
            logger.warning("Skipping stored trade that is not an object: %r", record)
    return trades
