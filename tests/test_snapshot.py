"""
Indicator Aggregator Tests

Snapshot assembly, insufficient data handling and candle validation.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest
from pydantic import ValidationError as PydanticValidationError

from cryptoalert.schemas import Candle, IndicatorSnapshot, InsufficientData, SymbolSeries, Timeframe
from cryptoalert.services.base import MalformedCandleError, ValidationError
from cryptoalert.services.indicators import compute_indicator_snapshot, get_indicator_service

NOW = datetime(2024, 2, 5, 12, 0, tzinfo=timezone.utc)


class TestInsufficientData:
    def test_empty_series(self):
        result = compute_indicator_snapshot([], "BTC/USDT", "1h")
        assert isinstance(result, InsufficientData)
        assert result.symbol == "BTC/USDT"
        assert result.timeframe == Timeframe.H1

    def test_short_series_names_missing_indicators(self, make_walk):
        result = compute_indicator_snapshot(make_walk(40, seed=1), "ETH/USDT", Timeframe.H4)
        assert isinstance(result, InsufficientData)
        assert "ema50" in result.reason
        assert "rsi" not in result.reason

    def test_fifty_candles_is_enough(self, make_walk):
        result = compute_indicator_snapshot(make_walk(50, seed=1), "ETH/USDT", Timeframe.H4)
        assert isinstance(result, IndicatorSnapshot)
        assert result.indicators.ema200 is None


class TestMalformedCandles:
    def test_missing_field(self, make_walk):
        raw = [c.model_dump() for c in make_walk(60, seed=2)]
        del raw[10]["close"]
        with pytest.raises(MalformedCandleError) as exc:
            compute_indicator_snapshot(raw, "BTC/USDT", "1h")
        assert exc.value.details["index"] == 10

    def test_high_below_low(self, make_walk):
        raw = [c.model_dump() for c in make_walk(60, seed=2)]
        raw[5]["high"], raw[5]["low"] = raw[5]["low"], raw[5]["high"]
        with pytest.raises(MalformedCandleError):
            compute_indicator_snapshot(raw, "BTC/USDT", "1h")

    def test_non_positive_price(self, make_walk):
        raw = [c.model_dump() for c in make_walk(60, seed=2)]
        raw[0]["open"] = 0
        with pytest.raises(MalformedCandleError):
            compute_indicator_snapshot(raw, "BTC/USDT", "1h")

    def test_out_of_order(self, make_walk):
        candles = make_walk(60, seed=2)
        candles[20], candles[21] = candles[21], candles[20]
        with pytest.raises(MalformedCandleError) as exc:
            compute_indicator_snapshot(candles, "BTC/USDT", "1h")
        assert exc.value.details["index"] == 21

    def test_close_above_high(self, make_walk):
        raw = [c.model_dump() for c in make_walk(60, seed=2)]
        raw[7]["close"] = raw[7]["high"] * 1.01
        with pytest.raises(MalformedCandleError) as exc:
            compute_indicator_snapshot(raw, "BTC/USDT", "1h")
        assert exc.value.details["index"] == 7

    def test_open_below_low(self, make_walk):
        raw = [c.model_dump() for c in make_walk(60, seed=2)]
        raw[12]["open"] = raw[12]["low"] * 0.99
        with pytest.raises(MalformedCandleError):
            compute_indicator_snapshot(raw, "BTC/USDT", "1h")

    def test_body_outside_range_rejected_by_model(self):
        with pytest.raises(PydanticValidationError):
            Candle(time=NOW, open=100.0, high=100.2, low=98.0, close=100.5, volume=10.0)

    def test_is_a_validation_error(self):
        assert issubclass(MalformedCandleError, ValidationError)


class TestSnapshot:
    def test_fields(self, make_walk):
        candles = make_walk(120, seed=7)
        snapshot = compute_indicator_snapshot(candles, "SOL/USDT", "15m", now=NOW)

        assert isinstance(snapshot, IndicatorSnapshot)
        assert snapshot.symbol == "SOL/USDT"
        assert snapshot.timeframe == Timeframe.M15
        assert snapshot.candle_count == 120
        assert snapshot.last_price == candles[-1].close
        assert snapshot.last_update == NOW
        assert snapshot.candles == candles[-10:]

        ind = snapshot.indicators
        assert ind.ema200 is None
        assert ind.bollinger.upper >= ind.bollinger.middle >= ind.bollinger.lower
        assert ind.atr >= 0
        assert ind.macd.previous_histogram is not None
        assert ind.fibonacci.level_0 == round(max(c.high for c in candles), 2)
        assert ind.fibonacci.level_1000 == round(min(c.low for c in candles), 2)
        assert all(p.position >= 117 for p in ind.patterns)

    def test_ema200_with_long_series(self, make_walk):
        snapshot = compute_indicator_snapshot(make_walk(250, seed=8), "BTC/USDT", "1d")
        assert snapshot.indicators.ema200 is not None

    def test_snapshot_candle_count_configurable(self, make_walk):
        snapshot = compute_indicator_snapshot(make_walk(80, seed=8), "BTC/USDT", "1h", snapshot_candles=3)
        assert len(snapshot.candles) == 3

    def test_accepts_raw_mappings(self, make_walk):
        candles = make_walk(80, seed=9)
        from_models = compute_indicator_snapshot(candles, "BTC/USDT", "1h", now=NOW)
        from_dicts = compute_indicator_snapshot(
            [c.model_dump(mode="json") for c in candles], "BTC/USDT", "1h", now=NOW
        )
        assert from_models == from_dicts

    def test_deterministic(self, make_walk):
        candles = make_walk(100, seed=10)
        first = compute_indicator_snapshot(candles, "BTC/USDT", "1h", now=NOW)
        second = compute_indicator_snapshot(list(candles), "BTC/USDT", "1h", now=NOW)
        assert first.model_dump() == second.model_dump()

    def test_constant_series(self, make_candles):
        snapshot = compute_indicator_snapshot(make_candles([100.0] * 60), "BTC/USDT", "1h")
        ind = snapshot.indicators
        assert ind.rsi == 50.0
        assert ind.macd.histogram == 0.0
        assert ind.adx.value == 0.0
        assert ind.volume.volume_change == 0.0
        assert ind.support_resistance.support == []

    @pytest.mark.parametrize("seed", range(20))
    def test_bounds_on_random_walks(self, make_walk, seed):
        rng = np.random.default_rng(seed)
        n = int(rng.integers(50, 300))
        snapshot = compute_indicator_snapshot(make_walk(n, seed=seed), "BTC/USDT", "1h")

        ind = snapshot.indicators
        assert 0 <= ind.rsi <= 100
        assert 0 <= ind.adx.value <= 100
        assert 0 <= ind.adx.plus_di <= 100
        assert 0 <= ind.adx.minus_di <= 100
        assert ind.bollinger.upper >= ind.bollinger.middle >= ind.bollinger.lower
        assert len(ind.support_resistance.support) <= 3
        assert len(ind.support_resistance.resistance) <= 3


class TestIndicatorService:
    def test_execute(self, make_walk):
        series = SymbolSeries(symbol="BTC/USDT", timeframe="1h", candles=make_walk(80, seed=11))
        result = asyncio.run(get_indicator_service().execute(series))
        assert isinstance(result, IndicatorSnapshot)
        assert len(result.candles) == 10

    def test_execute_insufficient(self, make_walk):
        series = SymbolSeries(symbol="BTC/USDT", candles=make_walk(20, seed=11))
        result = asyncio.run(get_indicator_service().execute(series))
        assert isinstance(result, InsufficientData)

    def test_health(self):
        assert asyncio.run(get_indicator_service().health_check()) is True

    def test_singleton(self):
        assert get_indicator_service() is get_indicator_service()


def test_timeframe_intervals():
    assert Timeframe.M15.interval == timedelta(minutes=15)
    assert Timeframe.W1.interval == timedelta(weeks=1)
    assert all(tf.interval > timedelta(0) for tf in Timeframe)
