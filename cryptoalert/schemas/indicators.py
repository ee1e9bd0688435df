"""
CONTRACT 2: Indicator Snapshot

Input: candle series (SymbolSeries)
Output: IndicatorSnapshot | InsufficientData

The snapshot holds the LAST computed value of each indicator for one
symbol/timeframe pair. It is a value object, recreated on every call.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from cryptoalert.schemas.market import Candle, Timeframe


# =============================================================================
# ENUMS
# =============================================================================


class Significance(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class VolumeTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    NEUTRAL = "neutral"


# =============================================================================
# Indicator components
# =============================================================================


class MACDValues(BaseModel):
    """Last MACD values."""

    line: float
    signal: float
    histogram: float
    previous_histogram: Optional[float] = Field(
        default=None, description="Histogram one period earlier"
    )


class BollingerValues(BaseModel):
    """Last Bollinger Bands values."""

    upper: float
    middle: float
    lower: float


class VolumeAnalysis(BaseModel):
    """Volume anomaly and trend analysis."""

    average_volume: Optional[float] = None
    volume_change: Optional[float] = Field(
        default=None, description="% change of the last volume vs the average"
    )
    is_volume_high: bool = False
    trend: VolumeTrend = VolumeTrend.NEUTRAL


class SupportResistance(BaseModel):
    """Clustered price levels, strongest first."""

    support: list[float] = Field(default_factory=list)
    resistance: list[float] = Field(default_factory=list)


class FibonacciLevels(BaseModel):
    """Retracement levels measured down from the period high."""

    level_0: float
    level_236: float
    level_382: float
    level_500: float
    level_618: float
    level_786: float
    level_1000: float


class ADXValues(BaseModel):
    """Last ADX / directional indicator values."""

    value: float = Field(..., ge=0, le=100)
    plus_di: float = Field(..., ge=0, le=100)
    minus_di: float = Field(..., ge=0, le=100)


class CandlePattern(BaseModel):
    """Candlestick pattern found at a series position."""

    pattern: str
    position: int = Field(..., ge=0)
    significance: Significance
    description: str


class IndicatorValues(BaseModel):
    """Full set of indicator values inside a snapshot."""

    rsi: float = Field(..., ge=0, le=100)
    sma20: float
    ema50: float
    ema200: Optional[float] = None
    macd: MACDValues
    bollinger: BollingerValues
    volume: VolumeAnalysis
    support_resistance: SupportResistance
    fibonacci: FibonacciLevels
    atr: float = Field(..., ge=0)
    adx: ADXValues
    patterns: list[CandlePattern] = Field(default_factory=list)


# =============================================================================
# OUTPUT: IndicatorSnapshot / InsufficientData
# =============================================================================


class IndicatorSnapshot(BaseModel):
    """
    Complete indicator analysis for a symbol/timeframe.
    Returned by: Indicator Aggregator
    Consumed by: Alert Rule Engine
    """

    symbol: str
    timeframe: Timeframe
    last_price: float = Field(..., gt=0)
    last_update: datetime
    candle_count: int = Field(..., ge=1, description="Length of the analysed series")
    candles: list[Candle] = Field(..., min_length=1, description="Most recent candles")
    indicators: IndicatorValues

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "BTC/USDT",
                "timeframe": "1h",
                "last_price": 43050.2,
                "last_update": "2024-02-04T10:30:00Z",
                "candle_count": 100,
                "indicators": {
                    "rsi": 27.4,
                    "macd": {"line": -120.5, "signal": -98.2, "histogram": -22.3},
                    "bollinger": {"upper": 44100.0, "middle": 43500.0, "lower": 42900.0},
                    "support_resistance": {"support": [42800.0], "resistance": [44250.0]},
                    "adx": {"value": 31.2, "plus_di": 14.1, "minus_di": 27.9},
                },
            }
        }


@dataclass(frozen=True)
class InsufficientData:
    """Marker returned when a snapshot cannot be computed."""

    symbol: str
    timeframe: Timeframe
    reason: str
