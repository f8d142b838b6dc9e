"""Trade data model."""

import math
import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


PLACEHOLDER = "—"

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_number(value: Any) -> Optional[float]:
    """Parse a free-form numeric value.

    Strings are read up to the first character that cannot be part of a
    number, so "12.5 pips" parses as 12.5 and "abc" does not parse.

    Args:
        value: Number, numeric string, or anything else.

    Returns:
        The parsed float, or None if nothing numeric could be read.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) else number
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match:
            return float(match.group(0))
    return None


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` decimals with halves going up, unlike ``round``.

    Examples:
        round_half_up(0.125, 2) -> 0.13
        round_half_up(-2.5) -> -2.0
    """
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


class TriState(Enum):
    """Answer to a yes/no question that may not have been asked yet."""

    UNANSWERED = None
    YES = True
    NO = False

    @classmethod
    def from_value(cls, value: Any) -> "TriState":
        """Convert a stored value (null/true/false) into a TriState."""
        if isinstance(value, TriState):
            return value
        if value is True:
            return cls.YES
        if value is False:
            return cls.NO
        return cls.UNANSWERED

    def to_value(self) -> Optional[bool]:
        return self.value


class Outcome(str, Enum):
    """Result classification of a closed trade."""

    WIN = "Win"
    LOSS = "Loss"
    BREAK_EVEN = "BE"
    UNKNOWN = PLACEHOLDER

    @classmethod
    def parse(cls, value: Optional[str]) -> "Outcome":
        for outcome in (cls.WIN, cls.LOSS, cls.BREAK_EVEN):
            if value == outcome.value:
                return outcome
        return cls.UNKNOWN


class Trade(BaseModel):
    """Canonical journaled trade.

    Every record read from the store, whichever shape it was written in,
    is normalized into this model before any analytics touch it.
    """

    id: str = Field(..., description="Creation-ordered unique identifier")
    pair: str = Field(default=PLACEHOLDER, description="Pair symbol or journal key")
    trade_type: str = Field(default=PLACEHOLDER, description="Trade type (15min PT / CT / ECT)")
    date: str = Field(default=PLACEHOLDER, description="Trade date (YYYY-MM-DD)")
    time: str = Field(default="", description="Optional entry time")
    bias: str = Field(default=PLACEHOLDER, description="1H directional bias")
    range_type: str = Field(default=PLACEHOLDER, description="Range type (LSL / MIT / IDM / mChoCH)")
    poi_type: str = Field(default=PLACEHOLDER, description="Point-of-interest type")
    entry_type: str = Field(default=PLACEHOLDER, description="Entry type (Limit / Market)")
    entry_price: str = Field(default=PLACEHOLDER, description="Entry price as entered")
    stop_loss: str = Field(default=PLACEHOLDER, description="Stop-loss price as entered")
    take_profit: str = Field(default=PLACEHOLDER, description="Take-profit price as entered")
    rr_ratio: float = Field(default=0.0, description="Risk/reward ratio, 0 when unset")
    lot_size: str = Field(default="", description="Lot size as entered")
    poi_tapped: TriState = Field(default=TriState.UNANSWERED, description="POI tapped properly")
    choch_confirmed: TriState = Field(
        default=TriState.UNANSWERED, description="3min ChoCH confirmed"
    )
    outcome: str = Field(default=PLACEHOLDER, description="Win / Loss / BE")
    profit_loss: str = Field(default="0", description="Signed profit/loss as entered")
    emotion: str = Field(default=PLACEHOLDER, description="Emotional state label")
    followed_rules: TriState = Field(
        default=TriState.UNANSWERED, description="Whether the SOP was followed"
    )
    mistakes: str = Field(default="", description="Free-text mistake notes")
    screenshots: list[str] = Field(default_factory=list, description="Screenshot references")

    model_config = {"frozen": True}

    @field_validator("poi_tapped", "choch_confirmed", "followed_rules", mode="before")
    @classmethod
    def _coerce_tristate(cls, value: Any) -> TriState:
        return TriState.from_value(value)

    @property
    def outcome_kind(self) -> Outcome:
        return Outcome.parse(self.outcome)

    @property
    def is_win(self) -> bool:
        return self.outcome_kind is Outcome.WIN

    @property
    def pnl_value(self) -> float:
        """Parsed profit/loss, 0 when the stored text is not numeric."""
        return parse_number(self.profit_loss) or 0.0
