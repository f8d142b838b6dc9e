"""Trade repository.

All reads and writes of trade records go through here. The repository
merges the journal-entry collection with the legacy trade collection,
normalizes the result, and implements the journal-entry workflow that
writes new records.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from tradeflow.calculator import calculate_rr_ratio
from tradeflow.db.store import JOURNAL_ENTRIES, LEGACY_TRADES, PENDING_CHECKLIST, BaseStore
from tradeflow.journal.normalize import RECORD_KEYS, normalize_record, normalize_records
from tradeflow.models import JournalEntryForm, PendingChecklist, Trade, TriState, parse_number

logger = logging.getLogger(__name__)


class IncompleteEntryError(ValueError):
    """A journal entry is missing required fields."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required fields: {', '.join(missing)}")


_UNMATCHED = object()


def _record_id(record: Any) -> Any:
    """Id used to match records across collections, or a never-matching marker."""
    if not isinstance(record, Mapping):
        return _UNMATCHED
    record_id = record.get("id")
    try:
        hash(record_id)
    except TypeError:
        logger.warning("Record id %r cannot be matched across collections", record_id)
        return _UNMATCHED
    return record_id


def merge_records(journal: list[Any], legacy: list[Any]) -> list[Any]:
    """Combine the two raw collections.

    Journal entries come first in stored order, followed by the legacy
    records whose id is not already taken by a journal entry. Records
    with an unusable id (a list or object) never match each other.

    Args:
        journal: Raw journal-entry records.
        legacy: Raw legacy trade records.

    Returns:
        The merged raw records.
    """
    journal_ids = {_record_id(record) for record in journal} - {_UNMATCHED}
    survivors = [record for record in legacy if _record_id(record) not in journal_ids]
    return [*journal, *survivors]


def sort_trades(trades: list[Trade], descending: bool = False) -> list[Trade]:
    """Sort trades by their raw date string.

    Placeholder dates are compared as plain strings like any other date.
    The sort is stable, so trades sharing a date keep their merged order.
    """
    return sorted(trades, key=lambda trade: trade.date, reverse=descending)


def merge_trades(journal: list[Any], legacy: list[Any], descending: bool = False) -> list[Trade]:
    """Merge, normalize and sort the two raw collections."""
    return sort_trades(normalize_records(merge_records(journal, legacy)), descending)


def filter_trades(
    trades: list[Trade],
    pair: Optional[str] = None,
    trade_type: Optional[str] = None,
    outcome: Optional[str] = None,
) -> list[Trade]:
    """Keep the trades matching every filter that is set."""
    return [
        trade
        for trade in trades
        if (not pair or trade.pair == pair)
        and (not trade_type or trade.trade_type == trade_type)
        and (not outcome or trade.outcome == outcome)
    ]


def apply_pending_checklist(
    form: JournalEntryForm, pending: Optional[PendingChecklist]
) -> JournalEntryForm:
    """Seed a journal form with a failed checklist verdict.

    A rule break marks the trade as not following the rules and lists the
    failed conditions as mistakes, unless the form already answers those.
    """
    if pending is None or not pending.is_rule_break:
        return form
    update: dict[str, Any] = {}
    if form.followed_rules is TriState.UNANSWERED:
        update["followed_rules"] = TriState.NO
    if pending.failed_items and not form.mistakes:
        update["mistakes"] = f"Rule violations: {'; '.join(pending.failed_items)}"
    return form.model_copy(update=update)


def build_legacy_record(record: dict, form: JournalEntryForm, rr_ratio: Optional[float]) -> dict:
    """Mirror a journal entry into the legacy trade shape."""
    pnl_value = parse_number(form.profit_loss) or 0.0
    return {
        "id": record["id"],
        "date": form.date,
        "symbol": form.pair,
        "side": "Long" if form.bias == "Bullish" else "Short",
        "entry": parse_number(form.entry_price) or 0,
        "exit": parse_number(form.take_profit) or 0,
        "pnl": -abs(pnl_value) if form.outcome == "Loss" else abs(pnl_value),
        "status": "Win" if form.outcome == "BE" else form.outcome,
        "notes": (
            f"{form.trade_type} | {form.range_type} | {form.poi_type} | "
            f"RR: {rr_ratio if rr_ratio is not None else 'N/A'}"
        ),
    }


class TradeRepository:
    """Trade access on top of a record store."""

    def __init__(self, store: BaseStore):
        """Initialize the repository.

        Args:
            store: Store holding the journal and legacy collections.
        """
        self.store = store

    def load_trades(self, descending: bool = False) -> list[Trade]:
        """Load every trade in canonical form.

        Args:
            descending: Newest first (trade log) instead of oldest first
                (equity curve).

        Returns:
            Canonical trades sorted by date.
        """
        return merge_trades(
            self.store.load(JOURNAL_ENTRIES),
            self.store.load(LEGACY_TRADES),
            descending=descending,
        )

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        for trade in self.load_trades():
            if trade.id == trade_id:
                return trade
        return None

    def take_pending_checklist(self) -> Optional[PendingChecklist]:
        """Read and clear the checklist verdict waiting for the next entry."""
        record = self.store.load_object(PENDING_CHECKLIST)
        self.store.delete(PENDING_CHECKLIST)
        pending = PendingChecklist.from_record(record)
        if record is not None and pending is None:
            logger.warning("Discarding malformed pending checklist")
        return pending

    def _next_id(self, now: datetime, taken: set) -> str:
        # Millisecond timestamps keep ids creation-ordered
        candidate = int(now.timestamp() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def add_entry(self, form: JournalEntryForm, now: Optional[datetime] = None) -> Trade:
        """Journal a new trade.

        The entry is prepended to the journal collection, and a mirror in
        the legacy trade shape is prepended to the legacy collection.

        Args:
            form: Completed journal form.
            now: Creation time, defaults to the current time.

        Returns:
            The stored trade in canonical form.

        Raises:
            IncompleteEntryError: If required fields are empty.
        """
        missing = form.missing_fields()
        if missing:
            raise IncompleteEntryError(missing)

        journal = self.store.load(JOURNAL_ENTRIES)
        legacy = self.store.load(LEGACY_TRADES)
        taken = {
            str(record.get("id"))
            for record in [*journal, *legacy]
            if isinstance(record, Mapping)
        }

        rr_ratio = calculate_rr_ratio(form.entry_price, form.stop_loss, form.take_profit)
        record: dict[str, Any] = {"id": self._next_id(now or datetime.now(), taken)}
        for field, key in RECORD_KEYS.items():
            value = (rr_ratio or 0) if field == "rr_ratio" else getattr(form, field)
            if isinstance(value, TriState):
                value = value.to_value()
            record[key] = value

        journal.insert(0, record)
        legacy.insert(0, build_legacy_record(record, form, rr_ratio))
        self.store.save(JOURNAL_ENTRIES, journal)
        self.store.save(LEGACY_TRADES, legacy)

        logger.info("Journaled trade %s (%s %s)", record["id"], form.pair, form.outcome)
        return normalize_record(record)
