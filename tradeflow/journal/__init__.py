"""Trade journal: record normalization and the trade repository."""

from tradeflow.journal.normalize import normalize_record, normalize_records, trade_to_record
from tradeflow.journal.repository import (
    IncompleteEntryError,
    TradeRepository,
    apply_pending_checklist,
    filter_trades,
    merge_records,
    merge_trades,
    sort_trades,
)

__all__ = [
    "IncompleteEntryError",
    "TradeRepository",
    "apply_pending_checklist",
    "filter_trades",
    "merge_records",
    "merge_trades",
    "normalize_record",
    "normalize_records",
    "sort_trades",
    "trade_to_record",
]
