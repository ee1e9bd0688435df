"""
Candlestick Pattern Detector

Recognizes Doji, Hammer, Shooting Star, Engulfing and Harami shapes.
"""

from cryptoalert.services.patterns.candlesticks import detect_at, identify_candle_patterns

__all__ = [
    "detect_at",
    "identify_candle_patterns",
]
