"""Economic calendar event model."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class EconomicEvent(BaseModel):
    """Represents a scheduled macro-economic release."""

    event: str = Field(default="", description="Event name")
    currency: str = Field(default="", description="Affected currency")
    impact: Literal["High", "Medium", "Low"] = Field(default="Low", description="Impact level")
    date: str = Field(default="", description="Release time, UTC 'YYYY-MM-DD HH:MM:SS'")
    local_time: Optional[datetime] = Field(default=None, description="Release time, local zone")
    actual: Optional[str] = Field(default=None, description="Reported value")
    forecast: Optional[str] = Field(default=None, description="Consensus estimate")
    previous: Optional[str] = Field(default=None, description="Previous value")
    country: str = Field(default="", description="Country code")
    change: Optional[float] = Field(default=None, description="Change from previous")
    change_percentage: Optional[float] = Field(default=None, description="Percent change")
    surprise: Optional[Literal["beat", "met", "missed"]] = Field(
        default=None, description="Actual compared with forecast"
    )

    model_config = {"frozen": True}
