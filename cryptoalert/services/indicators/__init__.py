"""
Indicator Aggregator Service

CONTRACT:
    Input:  SymbolSeries (candles for one symbol/timeframe)
    Output: IndicatorSnapshot | InsufficientData

RESPONSIBILITIES:
    - Calculate all technical indicators (RSI, MACD, EMA, Bollinger, ATR, ADX)
    - Analyze volume anomalies and trend
    - Detect support/resistance levels and Fibonacci retracements
    - Collect recent candlestick patterns

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from cryptoalert.services.indicators.interface import IndicatorServiceInterface
from cryptoalert.services.indicators.service import (
    IndicatorService,
    compute_indicator_snapshot,
    get_indicator_service,
)

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "compute_indicator_snapshot",
    "get_indicator_service",
]
