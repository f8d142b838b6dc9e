"""Position size result model."""

from typing import Literal

from pydantic import BaseModel, Field


class PositionSizeResult(BaseModel):
    """Represents a computed position size for a planned trade."""

    risk_amount: float = Field(..., ge=0, description="Account currency put at risk")
    price_difference: float = Field(..., gt=0, description="Distance from entry to stop")
    pip_count: float = Field(..., ge=0, description="Stop distance in pips (1 decimal)")
    lot_size: float = Field(..., ge=0, description="Standard lots to trade (2 decimals)")
    direction: Literal["LONG", "SHORT"] = Field(..., description="Trade direction")
    small_pip_warning: bool = Field(
        default=False, description="Stop is under one pip away"
    )
    pip_step: float = Field(..., gt=0, description="Pip step of the pair used")
    pip_value_per_lot: float = Field(..., gt=0, description="Pip value of the pair used")
    pair_label: str = Field(..., description="Display label of the pair used")

    model_config = {"frozen": True}
