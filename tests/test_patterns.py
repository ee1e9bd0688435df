"""
Candlestick Pattern Tests
"""

from __future__ import annotations

import pytest

from cryptoalert.schemas import Significance
from cryptoalert.services.patterns import detect_at, identify_candle_patterns


def _names(patterns):
    return [p.pattern for p in patterns]


class TestSingleCandlePatterns:
    def test_doji(self, make_candle):
        plain = make_candle(100.0, 102.5, 99.5, 102.0)
        doji = make_candle(100.0, 101.0, 99.0, 100.05)
        found = detect_at(plain, doji, 5)
        assert _names(found) == ["Doji"]
        assert found[0].significance == Significance.NEUTRAL
        assert found[0].position == 5

    def test_zero_range_candle_is_doji(self, make_candle):
        plain = make_candle(100.0, 102.5, 99.5, 102.0)
        flat = make_candle(100.0, 100.0, 100.0, 100.0)
        assert "Doji" in _names(detect_at(plain, flat, 2))

    def test_hammer(self, make_candle):
        plain = make_candle(100.0, 102.5, 99.5, 102.0)
        hammer = make_candle(100.0, 101.2, 97.0, 101.0)
        found = detect_at(plain, hammer, 3)
        assert _names(found) == ["Hammer"]
        assert found[0].significance == Significance.BULLISH

    def test_shooting_star(self, make_candle):
        plain = make_candle(100.0, 102.5, 99.5, 102.0)
        star = make_candle(101.0, 104.0, 99.8, 100.0)
        found = detect_at(plain, star, 3)
        assert _names(found) == ["Shooting Star"]
        assert found[0].significance == Significance.BEARISH


class TestTwoCandlePatterns:
    @pytest.mark.parametrize(
        "prev, current, expected, significance",
        [
            (
                (102.0, 102.5, 99.8, 100.0),
                (99.5, 103.2, 99.3, 103.0),
                "Bullish Engulfing",
                Significance.BULLISH,
            ),
            (
                (100.0, 102.2, 99.8, 102.0),
                (102.5, 102.7, 98.8, 99.0),
                "Bearish Engulfing",
                Significance.BEARISH,
            ),
            (
                (105.0, 105.5, 99.5, 100.0),
                (101.0, 104.0, 100.5, 103.0),
                "Bullish Harami",
                Significance.BULLISH,
            ),
            (
                (100.0, 105.5, 99.5, 105.0),
                (103.0, 104.0, 100.5, 101.0),
                "Bearish Harami",
                Significance.BEARISH,
            ),
        ],
    )
    def test_pattern(self, make_candle, prev, current, expected, significance):
        found = detect_at(make_candle(*prev), make_candle(*current, index=1), 1)
        assert _names(found) == [expected]
        assert found[0].significance == significance

    def test_engulfing_needs_opposite_colours(self, make_candle):
        prev = make_candle(100.0, 102.2, 99.8, 102.0)
        current = make_candle(99.5, 103.2, 99.3, 103.0, index=1)
        assert "Bullish Engulfing" not in _names(detect_at(prev, current, 1))


class TestIdentifyCandlePatterns:
    def test_fewer_than_three_candles(self, make_candle):
        doji = make_candle(100.0, 101.0, 99.0, 100.0)
        assert identify_candle_patterns([]) == []
        assert identify_candle_patterns([doji, doji]) == []

    def test_positions_start_at_third_candle(self, make_candle):
        plain = make_candle(100.0, 102.5, 99.5, 102.0)
        doji = make_candle(100.0, 101.0, 99.0, 100.0)
        found = identify_candle_patterns([plain, doji, doji])
        assert _names(found) == ["Doji"]
        assert found[0].position == 2

    def test_every_window_scanned(self, make_candles):
        candles = make_candles([100.0] * 6)
        found = identify_candle_patterns(candles)
        assert [p.position for p in found] == [2, 3, 4, 5]
        assert set(_names(found)) == {"Doji"}
