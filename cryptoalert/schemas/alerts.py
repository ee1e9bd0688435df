"""
CONTRACT 3: Alerts

Input: IndicatorSnapshot + current price
Output: AlertSet (buy / sell / monitoring)

Alerts are regenerated on every refresh cycle. Only the `read` flag is
changed afterwards, and only by the presentation layer.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from cryptoalert.schemas.market import SymbolSeries, Timeframe


# =============================================================================
# ENUMS
# =============================================================================


class AlertType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    MONITORING = "MONITORING"


class Confidence(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class MonitoringType(str, Enum):
    """Display labels shown by the (Brazilian) alert dashboard."""

    SUPPORT = "Próximo ao Suporte"
    RESISTANCE = "Próximo à Resistência"
    VOLUME = "Volume Atípico"
    PATTERN = "Padrão Gráfico"
    TREND = "Tendência Forte"


# =============================================================================
# Alert components
# =============================================================================


class AlertIndicators(BaseModel):
    """Indicator summary attached to an alert."""

    rsi: float
    macd: str = Field(..., description="BULLISH / BEARISH")
    moving_averages: str = Field(..., description="UPTREND / DOWNTREND")
    bollinger_bands: str = Field(..., description="LOWER_TOUCH / UPPER_TOUCH / MIDDLE_BAND")


class AlertLevels(BaseModel):
    """Price levels for an alert."""

    support: float
    resistance: float
    stop_loss: Optional[float] = None
    target: Optional[float] = None


class Alert(BaseModel):
    """Single generated alert."""

    id: str
    symbol: str
    type: AlertType
    price: float
    confidence: Confidence
    created_at: datetime
    read: bool = False
    timeframe: Timeframe
    indicators: AlertIndicators
    recommendation: str
    levels: AlertLevels
    monitoring_type: Optional[MonitoringType] = None


class AlertSet(BaseModel):
    """Alerts for one or more symbols, grouped by category."""

    buy: list[Alert] = Field(default_factory=list)
    sell: list[Alert] = Field(default_factory=list)
    monitoring: list[Alert] = Field(default_factory=list)

    def extend(self, other: "AlertSet") -> None:
        """Concatenate another set into this one."""
        self.buy.extend(other.buy)
        self.sell.extend(other.sell)
        self.monitoring.extend(other.monitoring)


# =============================================================================
# INPUT: batch request
# =============================================================================


class AlertBatchRequest(BaseModel):
    """
    Request for alerts over several symbols.
    Sent by: refresh cycle / API
    Received by: Alert Service
    """

    series: list[SymbolSeries] = Field(..., min_length=1, max_length=50)


# =============================================================================
# OUTPUT: batch response
# =============================================================================


class AlertBatchResponse(BaseModel):
    """
    Combined alerts for a batch.
    Returned by: Alert Service
    """

    alerts: AlertSet = Field(default_factory=AlertSet)
    skipped: dict[str, str] = Field(
        default_factory=dict,
        description="'SYMBOL:timeframe' keys of series without alerts, mapped to the reason",
    )
