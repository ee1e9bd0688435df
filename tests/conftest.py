"""
Shared fixtures: candle builders and hand-made indicator snapshots.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from cryptoalert.schemas import (
    ADXValues,
    BollingerValues,
    Candle,
    CandlePattern,
    FibonacciLevels,
    IndicatorSnapshot,
    IndicatorValues,
    MACDValues,
    SupportResistance,
    Timeframe,
    VolumeAnalysis,
)

START = datetime(2024, 2, 1, tzinfo=timezone.utc)
NOW = datetime(2024, 2, 5, 12, 0, tzinfo=timezone.utc)


def build_candles(closes, volumes=None, spread=0.005, step=timedelta(hours=1)) -> list[Candle]:
    """Each candle opens at the previous close; wicks extend `spread` beyond the body."""
    candles = []
    prev = float(closes[0])
    for i, close in enumerate(closes):
        close = float(close)
        candles.append(
            Candle(
                time=START + i * step,
                open=prev,
                high=max(prev, close) * (1 + spread),
                low=min(prev, close) * (1 - spread),
                close=close,
                volume=float(volumes[i]) if volumes is not None else 1000.0,
            )
        )
        prev = close
    return candles


def random_walk(n: int, seed: int, start: float = 100.0) -> list[Candle]:
    rng = np.random.default_rng(seed)
    closes = start * np.exp(np.cumsum(rng.normal(0, 0.01, n)))
    volumes = rng.uniform(500, 1500, n)
    return build_candles(closes, volumes)


def candle(open_, high, low, close, index=0, volume=1000.0) -> Candle:
    return Candle(
        time=START + timedelta(hours=index),
        open=open_,
        high=high,
        low=low,
        close=close,
        volume=volume,
    )


@pytest.fixture
def make_candles():
    return build_candles


@pytest.fixture
def make_walk():
    return random_walk


@pytest.fixture
def make_candle():
    return candle


@pytest.fixture
def make_snapshot():
    """
    Snapshot with neutral readings around price 100.

    Keyword overrides replace top-level IndicatorValues fields.
    """

    def _make(
        last_price: float = 100.0,
        candle_count: int = 100,
        candles: list[Candle] | None = None,
        **overrides,
    ) -> IndicatorSnapshot:
        values = {
            "rsi": 50.0,
            "sma20": 100.0,
            "ema50": 100.0,
            "ema200": None,
            "macd": MACDValues(line=0.0, signal=0.0, histogram=0.0, previous_histogram=0.0),
            "bollinger": BollingerValues(upper=105.0, middle=100.0, lower=95.0),
            "volume": VolumeAnalysis(average_volume=1000.0, volume_change=0.0),
            "support_resistance": SupportResistance(),
            "fibonacci": FibonacciLevels(
                level_0=110.0,
                level_236=107.64,
                level_382=106.18,
                level_500=105.0,
                level_618=103.82,
                level_786=102.14,
                level_1000=100.0,
            ),
            "atr": 1.0,
            "adx": ADXValues(value=20.0, plus_di=20.0, minus_di=20.0),
            "patterns": [],
        }
        values.update(overrides)

        if candles is None:
            candles = build_candles([100.0, 99.0, 98.0, 99.5, 100.0, 101.0, 100.5, 99.8, 100.2, 100.0])

        return IndicatorSnapshot(
            symbol="BTC/USDT",
            timeframe=Timeframe.H1,
            last_price=last_price,
            last_update=NOW,
            candle_count=candle_count,
            candles=candles,
            indicators=IndicatorValues(**values),
        )

    return _make


@pytest.fixture
def pattern():
    def _make(name: str, position: int, significance) -> CandlePattern:
        return CandlePattern(
            pattern=name,
            position=position,
            significance=significance,
            description=f"{name} test pattern",
        )

    return _make
