"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
NO I/O, NO LOGGING - All math is deterministic.

Series outputs are aligned to the input length; entries that cannot be
computed yet are NaN (never zero). Outputs are rounded: 2 decimals for
prices and percentages, 4 for ATR. Alert thresholds compare against these
rounded values.
"""

import numpy as np
from typing import Optional

from cryptoalert.schemas.indicators import FibonacciLevels, VolumeAnalysis, VolumeTrend

PRICE_DECIMALS = 2
ATR_DECIMALS = 4


def _as_array(data) -> np.ndarray:
    return np.asarray(data, dtype=float)


def _true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """True range from the second candle on (length n - 1)."""
    high = highs[1:]
    low = lows[1:]
    prev_close = closes[:-1]
    return np.maximum.reduce(
        [high - low, np.abs(high - prev_close), np.abs(low - prev_close)]
    )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data, period: int) -> np.ndarray:
    """Simple Moving Average."""
    data = _as_array(data)
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return np.round(result, PRICE_DECIMALS)


def ema(data, period: int) -> np.ndarray:
    """Exponential Moving Average, seeded with the SMA of the first `period` values."""
    data = _as_array(data)
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    multiplier = 2 / (period + 1)

    # Start with SMA
    result[period - 1] = np.mean(data[:period])

    for i in range(period, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return np.round(result, PRICE_DECIMALS)


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes, period: int = 14) -> Optional[float]:
    """
    Relative Strength Index (Wilder's smoothing).

    Only the final value is returned. None when fewer than `period + 1`
    prices are given.
    """
    closes = _as_array(closes)
    if len(closes) < period + 1:
        return None

    deltas = np.diff(closes)

    # No price movement at all
    if np.all(deltas == 0):
        return 50.0

    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    if np.all(losses == 0):
        return 100.0
    if np.all(gains == 0):
        return 0.0

    # First average
    avg_gain = np.mean(gains[:period])
    avg_loss = np.mean(losses[:period])

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return round(float(100 - (100 / (1 + rs))), PRICE_DECIMALS)


def macd(
    closes,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    The signal line is the EMA of the defined part of the MACD line,
    padded back to the input length.

    Returns: (macd_line, signal_line, histogram)
    """
    closes = _as_array(closes)
    n = len(closes)
    if n < slow_period + signal_period:
        return np.full(n, np.nan), np.full(n, np.nan), np.full(n, np.nan)

    macd_line = np.round(ema(closes, fast_period) - ema(closes, slow_period), PRICE_DECIMALS)

    valid = macd_line[~np.isnan(macd_line)]
    signal_line = np.concatenate(
        [np.full(n - len(valid), np.nan), ema(valid, signal_period)]
    )

    histogram = np.round(macd_line - signal_line, PRICE_DECIMALS)

    return macd_line, signal_line, histogram


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands (population standard deviation).

    Returns: (upper, middle, lower)
    """
    closes = _as_array(closes)
    middle = sma(closes, period)

    upper = np.full(len(closes), np.nan)
    lower = np.full(len(closes), np.nan)

    for i in range(period - 1, len(closes)):
        std = np.std(closes[i - period + 1 : i + 1])
        upper[i] = middle[i] + std_dev * std
        lower[i] = middle[i] - std_dev * std

    return np.round(upper, PRICE_DECIMALS), middle, np.round(lower, PRICE_DECIMALS)


def atr(highs, lows, closes, period: int = 14) -> np.ndarray:
    """
    Average True Range.

    Seeded with the mean of the first `period` true ranges, then Wilder
    smoothed. The first defined entry is at index `period`.
    """
    highs, lows, closes = _as_array(highs), _as_array(lows), _as_array(closes)
    result = np.full(len(closes), np.nan)
    if len(closes) < period + 1:
        return result

    tr = _true_range(highs, lows, closes)

    value = np.mean(tr[:period])
    result[period] = value

    for i in range(period, len(tr)):
        value = (value * (period - 1) + tr[i]) / period
        result[i + 1] = value

    return np.round(result, ATR_DECIMALS)


# =============================================================================
# VOLUME INDICATORS
# =============================================================================


def analyze_volume(volumes, period: int = 14) -> VolumeAnalysis:
    """
    Volume anomaly and trend analysis.

    - average over the trailing `period`
    - % change of the last volume against that average (high when > 50%)
    - trend: mean of last 3 vs mean of the 3 before (+/-20%)
    """
    volumes = _as_array(volumes)
    if len(volumes) < period:
        return VolumeAnalysis()

    average = float(np.mean(volumes[-period:]))
    last = float(volumes[-1])
    change = round((last - average) / average * 100, PRICE_DECIMALS) if average > 0 else 0.0

    trend = VolumeTrend.NEUTRAL
    if len(volumes) >= 6:
        last_3 = np.mean(volumes[-3:])
        prev_3 = np.mean(volumes[-6:-3])
        if last_3 > prev_3 * 1.2:
            trend = VolumeTrend.INCREASING
        elif last_3 < prev_3 * 0.8:
            trend = VolumeTrend.DECREASING

    return VolumeAnalysis(
        average_volume=round(average, PRICE_DECIMALS),
        volume_change=change,
        is_volume_high=change > 50,
        trend=trend,
    )


# =============================================================================
# TREND INDICATORS
# =============================================================================


def adx(
    highs, lows, closes, period: int = 14
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Average Directional Index.

    TR, +DM and -DM are seeded with the sum of their first `period` values
    and Wilder smoothed. DI values start at index `period + 1`, ADX at
    index `2 * period`. Needs at least `2 * period + 1` candles.

    Returns: (adx, plus_di, minus_di)
    """
    highs, lows, closes = _as_array(highs), _as_array(lows), _as_array(closes)
    n = len(closes)

    adx_result = np.full(n, np.nan)
    plus_di = np.full(n, np.nan)
    minus_di = np.full(n, np.nan)
    if n < 2 * period + 1:
        return adx_result, plus_di, minus_di

    tr = _true_range(highs, lows, closes)

    # Only the larger positive move counts
    up_move = highs[1:] - highs[:-1]
    down_move = lows[:-1] - lows[1:]
    plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)

    smoothed_tr = np.sum(tr[:period])
    smoothed_plus_dm = np.sum(plus_dm[:period])
    smoothed_minus_dm = np.sum(minus_dm[:period])

    dx_values = []
    for i in range(period, n - 1):
        smoothed_tr = smoothed_tr - (smoothed_tr / period) + tr[i]
        smoothed_plus_dm = smoothed_plus_dm - (smoothed_plus_dm / period) + plus_dm[i]
        smoothed_minus_dm = smoothed_minus_dm - (smoothed_minus_dm / period) + minus_dm[i]

        if smoothed_tr > 0:
            plus = smoothed_plus_dm / smoothed_tr * 100
            minus = smoothed_minus_dm / smoothed_tr * 100
        else:
            plus = minus = 0.0

        plus_di[i + 1] = plus
        minus_di[i + 1] = minus

        di_sum = plus + minus
        dx = abs(plus - minus) / di_sum * 100 if di_sum > 0 else 0.0
        dx_values.append(round(dx, PRICE_DECIMALS))

    # ADX is the smoothed mean of DX; dx_values[k] belongs to index period + 1 + k
    value = np.mean(dx_values[:period])
    adx_result[2 * period] = value
    for k in range(period, len(dx_values)):
        value = (value * (period - 1) + dx_values[k]) / period
        adx_result[period + 1 + k] = value

    return (
        np.round(adx_result, PRICE_DECIMALS),
        np.round(plus_di, PRICE_DECIMALS),
        np.round(minus_di, PRICE_DECIMALS),
    )


# =============================================================================
# RETRACEMENTS
# =============================================================================


def fibonacci_levels(high: float, low: float) -> FibonacciLevels:
    """Fibonacci retracement levels between a period high and low."""
    diff = high - low
    return FibonacciLevels(
        level_0=round(high, PRICE_DECIMALS),
        level_236=round(high - 0.236 * diff, PRICE_DECIMALS),
        level_382=round(high - 0.382 * diff, PRICE_DECIMALS),
        level_500=round(high - 0.5 * diff, PRICE_DECIMALS),
        level_618=round(high - 0.618 * diff, PRICE_DECIMALS),
        level_786=round(high - 0.786 * diff, PRICE_DECIMALS),
        level_1000=round(low, PRICE_DECIMALS),
    )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_last_valid(arr: np.ndarray) -> Optional[float]:
    """Get last non-NaN value from array."""
    valid = arr[~np.isnan(arr)]
    return float(valid[-1]) if len(valid) > 0 else None


def get_previous_valid(arr: np.ndarray) -> Optional[float]:
    """Get the non-NaN value before the last one."""
    valid = arr[~np.isnan(arr)]
    return float(valid[-2]) if len(valid) > 1 else None
