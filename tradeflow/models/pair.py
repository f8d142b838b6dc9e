"""ForexPair reference data model."""

from pydantic import BaseModel, Field


class ForexPair(BaseModel):
    """Pip conventions for a tradable currency pair."""

    symbol: str = Field(..., min_length=1, description="Pair symbol (e.g., 'EURUSD')")
    label: str = Field(..., min_length=1, description="Display label (e.g., 'EUR/USD')")
    journal_key: str = Field(..., min_length=1, description="Short code used in the journal")
    pip_step: float = Field(..., gt=0, description="Price movement of one pip")
    pip_value_per_lot: float = Field(
        ..., gt=0, description="Account-currency value of one pip per standard lot"
    )
    is_jpy: bool = Field(default=False, description="Yen-quoted pair flag")

    model_config = {"frozen": True}
