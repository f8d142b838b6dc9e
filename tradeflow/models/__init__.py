"""Data models for TradeFlow."""

from tradeflow.models.calendar import EconomicEvent
from tradeflow.models.checklist import (
    ChecklistItem,
    ChecklistLog,
    ChecklistSection,
    PendingChecklist,
)
from tradeflow.models.journal import JournalEntryForm
from tradeflow.models.pair import ForexPair
from tradeflow.models.position import PositionSizeResult
from tradeflow.models.trade import (
    PLACEHOLDER,
    Outcome,
    Trade,
    TriState,
    parse_number,
    round_half_up,
)

__all__ = [
    "ChecklistItem",
    "ChecklistLog",
    "ChecklistSection",
    "EconomicEvent",
    "ForexPair",
    "JournalEntryForm",
    "Outcome",
    "PendingChecklist",
    "PositionSizeResult",
    "PLACEHOLDER",
    "Trade",
    "TriState",
    "parse_number",
    "round_half_up",
]
