"""
Candlestick Pattern Detection

Scans every window of three consecutive candles and classifies the most
recent one against the one before it. Several patterns may fire at the
same position.
"""

from dataclasses import dataclass
from typing import Sequence

from cryptoalert.schemas.indicators import CandlePattern, Significance
from cryptoalert.schemas.market import Candle


@dataclass(frozen=True)
class _Shape:
    """Body and shadow measurements of one candle."""

    body: float
    range: float
    upper_shadow: float
    lower_shadow: float
    bullish: bool
    bearish: bool

    @classmethod
    def of(cls, candle: Candle) -> "_Shape":
        top = max(candle.open, candle.close)
        bottom = min(candle.open, candle.close)
        return cls(
            body=abs(candle.close - candle.open),
            range=candle.high - candle.low,
            upper_shadow=candle.high - top,
            lower_shadow=bottom - candle.low,
            bullish=candle.close > candle.open,
            bearish=candle.close < candle.open,
        )


def _pattern(name: str, position: int, significance: Significance, description: str) -> CandlePattern:
    return CandlePattern(
        pattern=name,
        position=position,
        significance=significance,
        description=description,
    )


def detect_at(prev: Candle, current: Candle, position: int) -> list[CandlePattern]:
    """Patterns formed by `current` (at `position`) against `prev`."""
    found = []
    cur = _Shape.of(current)
    before = _Shape.of(prev)

    # Doji: tiny body relative to the range (range 0 treated as 1)
    if cur.body / (cur.range or 1) < 0.1:
        found.append(_pattern("Doji", position, Significance.NEUTRAL, "Market indecision"))

    if cur.bullish and cur.lower_shadow > cur.body * 2 and cur.upper_shadow < cur.body * 0.5:
        found.append(
            _pattern("Hammer", position, Significance.BULLISH, "Possible reversal from down to up")
        )

    if cur.bearish and cur.upper_shadow > cur.body * 2 and cur.lower_shadow < cur.body * 0.5:
        found.append(
            _pattern("Shooting Star", position, Significance.BEARISH, "Possible reversal from up to down")
        )

    if (
        before.bearish
        and cur.bullish
        and current.close > prev.open
        and current.open < prev.close
    ):
        found.append(
            _pattern("Bullish Engulfing", position, Significance.BULLISH, "Strong bullish reversal signal")
        )

    if (
        before.bullish
        and cur.bearish
        and current.close < prev.open
        and current.open > prev.close
    ):
        found.append(
            _pattern("Bearish Engulfing", position, Significance.BEARISH, "Strong bearish reversal signal")
        )

    # Harami: whole range of the current candle inside the previous body
    if before.bearish and cur.bullish and current.high < prev.open and current.low > prev.close:
        found.append(
            _pattern("Bullish Harami", position, Significance.BULLISH, "Selling pressure is fading")
        )

    if before.bullish and cur.bearish and current.high < prev.close and current.low > prev.open:
        found.append(
            _pattern("Bearish Harami", position, Significance.BEARISH, "Buying pressure is fading")
        )

    return found


def identify_candle_patterns(candles: Sequence[Candle]) -> list[CandlePattern]:
    """All patterns in the series; empty when fewer than 3 candles."""
    if len(candles) < 3:
        return []

    patterns = []
    for i in range(2, len(candles)):
        patterns.extend(detect_at(candles[i - 1], candles[i], i))
    return patterns
