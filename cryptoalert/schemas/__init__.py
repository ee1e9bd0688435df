"""
Crypto Alert Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from cryptoalert.schemas.market import (
    Candle,
    SymbolSeries,
    Timeframe,
)
from cryptoalert.schemas.indicators import (
    IndicatorSnapshot,
    IndicatorValues,
    InsufficientData,
    MACDValues,
    BollingerValues,
    VolumeAnalysis,
    SupportResistance,
    FibonacciLevels,
    ADXValues,
    CandlePattern,
    Significance,
    VolumeTrend,
)
from cryptoalert.schemas.alerts import (
    Alert,
    AlertSet,
    AlertType,
    AlertLevels,
    AlertIndicators,
    AlertBatchRequest,
    AlertBatchResponse,
    Confidence,
    MonitoringType,
)

__all__ = [
    # Market
    "Candle",
    "SymbolSeries",
    "Timeframe",
    # Indicators
    "IndicatorSnapshot",
    "IndicatorValues",
    "InsufficientData",
    "MACDValues",
    "BollingerValues",
    "VolumeAnalysis",
    "SupportResistance",
    "FibonacciLevels",
    "ADXValues",
    "CandlePattern",
    "Significance",
    "VolumeTrend",
    # Alerts
    "Alert",
    "AlertSet",
    "AlertType",
    "AlertLevels",
    "AlertIndicators",
    "AlertBatchRequest",
    "AlertBatchResponse",
    "Confidence",
    "MonitoringType",
]
