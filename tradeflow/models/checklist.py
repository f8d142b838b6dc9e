"""SOP checklist data models."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from tradeflow.models.trade import TriState


class ChecklistItem(BaseModel):
    """A single yes/no SOP condition."""

    id: str = Field(..., min_length=1, description="Stable item identifier")
    label: str = Field(..., min_length=1, description="Question shown to the trader")
    checked: TriState = Field(default=TriState.UNANSWERED, description="Current answer")

    model_config = {"frozen": True}

    @field_validator("checked", mode="before")
    @classmethod
    def _coerce_tristate(cls, value: Any) -> TriState:
        return TriState.from_value(value)


class ChecklistSection(BaseModel):
    """An ordered group of checklist items."""

    id: str = Field(..., min_length=1, description="Stable section identifier")
    title: str = Field(..., min_length=1, description="Section title")
    items: list[ChecklistItem] = Field(default_factory=list, description="Ordered items")

    model_config = {"frozen": True}


class ChecklistLog(BaseModel):
    """Immutable record of one checklist execution."""

    id: str = Field(..., description="Creation-ordered identifier")
    date: str = Field(..., description="Execution date (YYYY-MM-DD)")
    timestamp: str = Field(..., description="Execution timestamp (ISO 8601)")
    result: Literal["VALID", "INVALID"] = Field(..., description="Checklist verdict")
    is_rule_break: bool = Field(..., description="At least one item answered no")
    is_override: bool = Field(default=False, description="Logged despite an invalid verdict")
    failed_items: list[str] = Field(default_factory=list, description="Labels of failed items")
    sections: list[dict] = Field(default_factory=list, description="Per-item answers")
    sop_version: str = Field(..., description="Checklist definition version")

    model_config = {"frozen": True}

    def to_record(self) -> dict:
        """Serialize to the stored JSON shape."""
        return {
            "id": self.id,
            "date": self.date,
            "timestamp": self.timestamp,
            "checklistResult": self.result,
            "isRuleBreak": self.is_rule_break,
            "isOverride": self.is_override,
            "failedItems": list(self.failed_items),
            "sections": self.sections,
            "sopVersion": self.sop_version,
        }


class PendingChecklist(BaseModel):
    """Checklist verdict handed to the next journal entry."""

    is_rule_break: bool = Field(..., description="At least one item answered no")
    failed_items: list[str] = Field(default_factory=list, description="Labels of failed items")
    result: Literal["VALID", "INVALID"] = Field(..., description="Checklist verdict")
    timestamp: str = Field(..., description="Execution timestamp (ISO 8601)")

    model_config = {"frozen": True}

    def to_record(self) -> dict:
        return {
            "isRuleBreak": self.is_rule_break,
            "failedItems": list(self.failed_items),
            "checklistResult": self.result,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_record(cls, record: Any) -> Optional["PendingChecklist"]:
        """Rebuild from the stored JSON shape, None if it is malformed."""
        if not isinstance(record, dict):
            return None
        failed = record.get("failedItems") or []
        if not isinstance(failed, list):
            return None
        is_rule_break = bool(record.get("isRuleBreak"))
        return cls(
            is_rule_break=is_rule_break,
            failed_items=[str(item) for item in failed],
            result="INVALID" if is_rule_break else "VALID",
            timestamp=str(record.get("timestamp") or ""),
        )
