"""SOP pre-trade checklist.

Every condition of the standard operating procedure must be answered
before a trade is taken. A trade is valid only when every answer is yes;
a single no makes it a rule break, whatever else is still unanswered.
"""

import logging
from datetime import datetime
from typing import Any, Optional, Union

from tradeflow.db.store import CHECKLIST_LOGS, CHECKLIST_STATE, PENDING_CHECKLIST, BaseStore
from tradeflow.models import (
    ChecklistItem,
    ChecklistLog,
    ChecklistSection,
    PendingChecklist,
    TriState,
)

logger = logging.getLogger(__name__)

SOP_VERSION = "1"

SOP_SECTIONS: tuple[tuple[str, str, tuple[tuple[str, str], ...]], ...] = (
    ("trading-conditions", "Trading Conditions", (
        ("tc-1", "Is today a valid trading day (no bank holiday)?"),
        ("tc-2", "Is current time within trading session (5:30 PM – 10:30 PM)?"),
        ("tc-3", "Is there NO high-impact news near entry?"),
    )),
    ("market-context", "Market Context", (
        ("mc-1", "1H market structure (mBOS) identified"),
        ("mc-2", "Valid trading range identified (LSL / MIT / IDM / mChoCH)"),
    )),
    ("trade-type", "Trade Type Identification", (
        ("tt-1", "Trade type selected (15min PT / CT / ECT)"),
        ("tt-2", "Is trade aligned with 15min BOS?"),
    )),
    ("poi-validation", "POI Validation", (
        ("pv-1", "Valid 15min POI identified"),
        ("pv-2", "POI has imbalance OR refined to valid LTF POI"),
        ("pv-3", "POI has broken structure"),
    )),
    ("poi-tap", "POI Tap Confirmation", (
        ("pt-1", "POI tapped properly"),
        ("pt-2", "Not just internal liquidity tap"),
    )),
    ("entry-confirmation", "Entry Confirmation", (
        ("ec-1", "3min ChoCH confirmed"),
        ("ec-2", "Entry model valid"),
        ("ec-3", "Clean structure (no messy confirmation)"),
    )),
    ("risk-validation", "Risk Validation", (
        ("rv-1", "RR ≥ 5R"),
        ("rv-2", "Risk per trade = 1%"),
    )),
)


class ChecklistError(ValueError):
    """The checklist cannot perform the requested action."""


class ChecklistNotReadyError(ChecklistError):
    """Execution was requested before the checklist allows it."""


def create_sections() -> list[ChecklistSection]:
    """Build the SOP sections with every item unanswered."""
    return [
        ChecklistSection(
            id=section_id,
            title=title,
            items=[ChecklistItem(id=item_id, label=label) for item_id, label in items],
        )
        for section_id, title, items in SOP_SECTIONS
    ]


class ChecklistEvaluator:
    """Tracks answers to the SOP checklist and produces its verdict."""

    def __init__(self, sections: Optional[list[ChecklistSection]] = None):
        self._sections = sections if sections is not None else create_sections()

    @property
    def sections(self) -> list[ChecklistSection]:
        return list(self._sections)

    @property
    def items(self) -> list[ChecklistItem]:
        return [item for section in self._sections for item in section.items]

    def answer(self, item_id: str, value: Union[bool, TriState]) -> None:
        """Answer one item.

        An answered item stays answered until ``reset``.

        Args:
            item_id: Item identifier (e.g., "tc-1").
            value: True/False or TriState.YES/TriState.NO.

        Raises:
            ChecklistError: If the item is unknown, already answered with a
                different value, or the value is not a yes/no answer.
        """
        answer = TriState.from_value(value)
        if answer is TriState.UNANSWERED:
            raise ChecklistError(f"Not a yes/no answer: {value!r}")

        for index, section in enumerate(self._sections):
            for position, item in enumerate(section.items):
                if item.id != item_id:
                    continue
                if item.checked is answer:
                    return
                if item.checked is not TriState.UNANSWERED:
                    raise ChecklistError(f"Item {item_id} is already answered")
                items = list(section.items)
                items[position] = item.model_copy(update={"checked": answer})
                self._sections[index] = section.model_copy(update={"items": items})
                return
        raise ChecklistError(f"Unknown checklist item: {item_id}")

    def reset(self) -> None:
        """Return every item to unanswered."""
        self._sections = create_sections()

    @property
    def total_count(self) -> int:
        return len(self.items)

    @property
    def answered_count(self) -> int:
        return sum(1 for item in self.items if item.checked is not TriState.UNANSWERED)

    @property
    def yes_count(self) -> int:
        return sum(1 for item in self.items if item.checked is TriState.YES)

    @property
    def no_count(self) -> int:
        return sum(1 for item in self.items if item.checked is TriState.NO)

    @property
    def progress(self) -> float:
        """Percent of items answered."""
        total = self.total_count
        return self.answered_count / total * 100 if total > 0 else 0.0

    @property
    def all_answered(self) -> bool:
        return self.answered_count == self.total_count

    @property
    def is_valid(self) -> bool:
        return self.all_answered and all(item.checked is TriState.YES for item in self.items)

    @property
    def has_any_no(self) -> bool:
        return self.no_count > 0

    @property
    def failed_items(self) -> list[str]:
        """Labels of the items answered no, in checklist order."""
        return [item.label for item in self.items if item.checked is TriState.NO]

    def section_stats(self, section_id: str) -> dict:
        """Answer counts for one section.

        Returns:
            Dictionary with total, yes, no, answered, all_yes and has_no.
        """
        for section in self._sections:
            if section.id == section_id:
                total = len(section.items)
                yes = sum(1 for item in section.items if item.checked is TriState.YES)
                no = sum(1 for item in section.items if item.checked is TriState.NO)
                return {
                    "total": total,
                    "yes": yes,
                    "no": no,
                    "answered": yes + no,
                    "all_yes": yes == total,
                    "has_no": no > 0,
                }
        raise ChecklistError(f"Unknown checklist section: {section_id}")

    def execute(
        self, override: bool = False, now: Optional[datetime] = None
    ) -> tuple[ChecklistLog, PendingChecklist]:
        """Log the checklist and hand its verdict to trade creation.

        Normal execution requires a valid checklist. With ``override`` the
        trade is logged anyway once every item is answered. Either way the
        checklist is reset afterwards.

        Args:
            override: Log even though the verdict is invalid.
            now: Execution time, defaults to the current time.

        Returns:
            Tuple of (log record, pending checklist payload).

        Raises:
            ChecklistNotReadyError: If execution is not allowed yet.
        """
        if override and not self.all_answered:
            raise ChecklistNotReadyError("Answer every item before logging the trade")
        if not override and not self.is_valid:
            raise ChecklistNotReadyError("Checklist is not valid")

        now = now or datetime.now()
        failed = self.failed_items
        is_rule_break = len(failed) > 0
        result = "INVALID" if is_rule_break else "VALID"
        timestamp = now.isoformat()

        log = ChecklistLog(
            id=str(int(now.timestamp() * 1000)),
            date=now.date().isoformat(),
            timestamp=timestamp,
            result=result,
            is_rule_break=is_rule_break,
            is_override=override and is_rule_break,
            failed_items=failed,
            sections=[
                {
                    "title": section.title,
                    "items": [
                        {"label": item.label, "checked": item.checked.to_value()}
                        for item in section.items
                    ],
                }
                for section in self._sections
            ],
            sop_version=SOP_VERSION,
        )
        pending = PendingChecklist(
            is_rule_break=is_rule_break,
            failed_items=failed,
            result=result,
            timestamp=timestamp,
        )
        self.reset()
        return log, pending

    def to_state(self) -> list[dict]:
        """Serialize the in-progress answers."""
        return [
            {
                "id": section.id,
                "items": [
                    {"id": item.id, "checked": item.checked.to_value()}
                    for item in section.items
                ],
            }
            for section in self._sections
        ]

    @classmethod
    def from_state(cls, saved: Any) -> "ChecklistEvaluator":
        """Rebuild an evaluator from saved answers.

        Saved answers are merged into fresh sections by section and item
        id, so items added or removed since the state was saved are handled.
        Malformed state gives a fresh checklist.
        """
        sections = create_sections()
        if not isinstance(saved, list):
            return cls(sections)

        saved_answers: dict[tuple[str, str], TriState] = {}
        for saved_section in saved:
            if not isinstance(saved_section, dict):
                continue
            section_id = saved_section.get("id")
            saved_items = saved_section.get("items")
            if not isinstance(section_id, str) or not isinstance(saved_items, list):
                continue
            for saved_item in saved_items:
                if isinstance(saved_item, dict) and isinstance(saved_item.get("id"), str):
                    key = (section_id, saved_item["id"])
                    saved_answers[key] = TriState.from_value(saved_item.get("checked"))

        merged = []
        for section in sections:
            items = [
                item.model_copy(
                    update={"checked": saved_answers.get((section.id, item.id), item.checked)}
                )
                for item in section.items
            ]
            merged.append(section.model_copy(update={"items": items}))
        return cls(merged)

    def save_state(self, store: BaseStore) -> None:
        store.save(CHECKLIST_STATE, self.to_state())

    @classmethod
    def restore(cls, store: BaseStore) -> "ChecklistEvaluator":
        """Load the in-progress checklist from the store."""
        return cls.from_state(store.load(CHECKLIST_STATE))


def record_execution(
    store: BaseStore, evaluator: ChecklistEvaluator, override: bool = False
) -> tuple[ChecklistLog, PendingChecklist]:
    """Execute the checklist and persist the outcome.

    The log is prepended to the checklist logs, the verdict is left for
    the next journal entry, and the cleared checklist state is saved.
    """
    log, pending = evaluator.execute(override=override)

    logs = store.load(CHECKLIST_LOGS)
    logs.insert(0, log.to_record())
    store.save(CHECKLIST_LOGS, logs)
    store.save_object(PENDING_CHECKLIST, pending.to_record())
    evaluator.save_state(store)

    logger.info("Checklist logged as %s (%d failed)", log.result, len(log.failed_items))
    return log, pending


def load_logs(store: BaseStore) -> list[ChecklistLog]:
    """Read the checklist history, newest first, skipping malformed records."""
    logs = []
    for record in store.load(CHECKLIST_LOGS):
        if not isinstance(record, dict):
            continue
        try:
            logs.append(
                ChecklistLog(
                    id=str(record["id"]),
                    date=record["date"],
                    timestamp=record["timestamp"],
                    result=record["checklistResult"],
                    is_rule_break=bool(record["isRuleBreak"]),
                    is_override=bool(record.get("isOverride", False)),
                    failed_items=record.get("failedItems") or [],
                    sections=record.get("sections") or [],
                    sop_version=str(record.get("sopVersion", SOP_VERSION)),
                )
            )
        except (KeyError, ValueError) as e:
            logger.warning("Skipping malformed checklist log: %s", e)
    return logs
