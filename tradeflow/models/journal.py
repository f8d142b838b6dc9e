"""JournalEntryForm data model."""

from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from tradeflow.models.trade import TriState


class JournalEntryForm(BaseModel):
    """Represents the fields a user fills in to journal one trade."""

    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = (
        "pair",
        "trade_type",
        "date",
        "bias",
        "entry_price",
        "stop_loss",
        "take_profit",
        "outcome",
        "emotion",
    )

    pair: str = Field(default="", description="Journal pair key (EU, GU, UJ, ...)")
    trade_type: str = Field(default="", description="Trade type")
    date: str = Field(default="", description="Trade date (YYYY-MM-DD)")
    time: str = Field(default="", description="Entry time")
    bias: str = Field(default="", description="1H bias (Bullish / Bearish)")
    range_type: str = Field(default="", description="Range type")
    poi_type: str = Field(default="", description="POI type")
    entry_price: str = Field(default="", description="Entry price")
    stop_loss: str = Field(default="", description="Stop-loss price")
    take_profit: str = Field(default="", description="Take-profit price")
    entry_type: str = Field(default="", description="Entry type")
    lot_size: str = Field(default="", description="Lot size")
    poi_tapped: TriState = Field(default=TriState.UNANSWERED)
    choch_confirmed: TriState = Field(default=TriState.UNANSWERED)
    outcome: str = Field(default="", description="Win / Loss / BE")
    profit_loss: str = Field(default="", description="Profit/loss amount")
    emotion: str = Field(default="", description="Emotional state")
    followed_rules: TriState = Field(default=TriState.UNANSWERED)
    mistakes: str = Field(default="", description="Mistake notes")
    screenshots: list[str] = Field(default_factory=list, description="Screenshot references")

    model_config = {"frozen": True}

    @field_validator("poi_tapped", "choch_confirmed", "followed_rules", mode="before")
    @classmethod
    def _coerce_tristate(cls, value: Any) -> TriState:
        return TriState.from_value(value)

    def missing_fields(self) -> list[str]:
        """Names of required fields that are still empty."""
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name).strip()]

    def is_complete(self) -> bool:
        return not self.missing_fields()
