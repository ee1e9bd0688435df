"""
CONTRACT 1: Candle Input

Input: candle series supplied by the data-fetching collaborator
Output: validated Candle models

Candles arrive already fetched and cached (Binance, CryptoCompare, ...).
This module only normalizes them into a standard format.
"""

from datetime import datetime, timedelta
from enum import Enum
from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H2 = "2h"
    H4 = "4h"
    H6 = "6h"
    D1 = "1d"
    D3 = "3d"
    W1 = "1w"

    @property
    def interval(self) -> timedelta:
        """Duration of one candle in this timeframe."""
        return _TIMEFRAME_INTERVALS[self]


_TIMEFRAME_INTERVALS = {
    Timeframe.M15: timedelta(minutes=15),
    Timeframe.M30: timedelta(minutes=30),
    Timeframe.H1: timedelta(hours=1),
    Timeframe.H2: timedelta(hours=2),
    Timeframe.H4: timedelta(hours=4),
    Timeframe.H6: timedelta(hours=6),
    Timeframe.D1: timedelta(days=1),
    Timeframe.D3: timedelta(days=3),
    Timeframe.W1: timedelta(weeks=1),
}


# =============================================================================
# Candle
# =============================================================================


class Candle(BaseModel):
    """Single candlestick data point."""

    time: datetime
    open: float = Field(..., gt=0, allow_inf_nan=False)
    high: float = Field(..., gt=0, allow_inf_nan=False)
    low: float = Field(..., gt=0, allow_inf_nan=False)
    close: float = Field(..., gt=0, allow_inf_nan=False)
    volume: float = Field(..., ge=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def check_range(self) -> "Candle":
        if self.high < self.low:
            raise ValueError(f"high ({self.high}) is below low ({self.low})")
        if min(self.open, self.close) < self.low or max(self.open, self.close) > self.high:
            raise ValueError(
                f"open/close ({self.open}/{self.close}) outside low-high range ({self.low}-{self.high})"
            )
        return self

    model_config = {"frozen": True}


class SymbolSeries(BaseModel):
    """Candle series for one symbol/timeframe pair."""

    symbol: str = Field(..., min_length=1, description="e.g. 'BTC/USDT'")
    timeframe: Timeframe = Timeframe.H1
    candles: list[Candle]
    current_price: float | None = Field(
        default=None,
        gt=0,
        description="Latest ticker price; defaults to the last close",
    )

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "BTC/USDT",
                "timeframe": "1h",
                "candles": [
                    {
                        "time": "2024-02-04T10:00:00Z",
                        "open": 42950.1,
                        "high": 43120.0,
                        "low": 42880.5,
                        "close": 43050.2,
                        "volume": 1532.7,
                    }
                ],
                "current_price": 43061.0,
            }
        }
