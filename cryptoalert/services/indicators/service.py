"""
Indicator Aggregator Service Implementation

Computes the full indicator snapshot for one candle series.
Pure Python/NumPy calculations - no fetching, no caching.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Union

import numpy as np
from pydantic import ValidationError as PydanticValidationError

from cryptoalert.core.config import settings
from cryptoalert.schemas.market import Candle, SymbolSeries, Timeframe
from cryptoalert.schemas.indicators import (
    ADXValues,
    BollingerValues,
    IndicatorSnapshot,
    IndicatorValues,
    InsufficientData,
    MACDValues,
)
from cryptoalert.services.base import MalformedCandleError
from cryptoalert.services.indicators.interface import IndicatorServiceInterface
from cryptoalert.services.indicators.calculations import (
    sma,
    ema,
    rsi,
    macd,
    bollinger_bands,
    analyze_volume,
    atr,
    adx,
    fibonacci_levels,
    get_last_valid,
    get_previous_valid,
)
from cryptoalert.services.indicators.levels import find_support_resistance
from cryptoalert.services.patterns import identify_candle_patterns

logger = logging.getLogger(__name__)

RECENT_PATTERN_POSITIONS = 3


def _validate_candles(candles: Sequence[Union[Candle, Mapping[str, Any]]], symbol: str) -> list[Candle]:
    """Coerce raw mappings into Candle models and check ordering."""
    series = []
    for index, raw in enumerate(candles):
        if isinstance(raw, Candle):
            series.append(raw)
            continue
        try:
            series.append(Candle.model_validate(raw))
        except PydanticValidationError as e:
            raise MalformedCandleError(
                "IndicatorService",
                f"Candle {index} for {symbol} is malformed",
                {"index": index, "errors": e.errors(include_url=False, include_context=False)},
            ) from e

    for index in range(1, len(series)):
        if series[index].time < series[index - 1].time:
            raise MalformedCandleError(
                "IndicatorService",
                f"Candles for {symbol} are not in chronological order at index {index}",
                {"index": index},
            )

    return series


def _ohlcv_to_arrays(candles: list[Candle]) -> tuple:
    """Convert Candle list to numpy arrays."""
    opens = np.array([c.open for c in candles])
    highs = np.array([c.high for c in candles])
    lows = np.array([c.low for c in candles])
    closes = np.array([c.close for c in candles])
    volumes = np.array([c.volume for c in candles])
    return opens, highs, lows, closes, volumes


def compute_indicator_snapshot(
    candles: Sequence[Union[Candle, Mapping[str, Any]]],
    symbol: str,
    timeframe: Union[Timeframe, str],
    snapshot_candles: int = 10,
    now: Optional[datetime] = None,
) -> Union[IndicatorSnapshot, InsufficientData]:
    """
    Compute every indicator for a candle series.

    Returns InsufficientData (never raises) when the series is empty or
    too short for a required indicator. EMA200 is optional and reported
    as None for shorter series.

    Raises:
        MalformedCandleError: a candle is missing fields, has invalid
            values, or the series is not chronological
    """
    timeframe = Timeframe(timeframe)
    series = _validate_candles(candles, symbol)

    if not series:
        return InsufficientData(symbol, timeframe, "No candles available")

    _, highs, lows, closes, volumes = _ohlcv_to_arrays(series)

    rsi_val = rsi(closes, 14)
    sma20 = get_last_valid(sma(closes, 20))
    ema50 = get_last_valid(ema(closes, 50))
    ema200 = get_last_valid(ema(closes, 200))

    macd_line, signal_line, histogram = macd(closes, 12, 26, 9)
    macd_val = get_last_valid(macd_line)
    signal_val = get_last_valid(signal_line)
    hist_val = get_last_valid(histogram)

    upper, middle, lower = bollinger_bands(closes, 20, 2.0)
    upper_val = get_last_valid(upper)
    middle_val = get_last_valid(middle)
    lower_val = get_last_valid(lower)

    volume = analyze_volume(volumes, 14)

    atr_val = get_last_valid(atr(highs, lows, closes, 14))

    adx_arr, plus_di_arr, minus_di_arr = adx(highs, lows, closes, 14)
    adx_val = get_last_valid(adx_arr)
    plus_di = get_last_valid(plus_di_arr)
    minus_di = get_last_valid(minus_di_arr)

    required = {
        "rsi": rsi_val,
        "sma20": sma20,
        "ema50": ema50,
        "macd": hist_val,
        "bollinger": lower_val,
        "volume": volume.average_volume,
        "atr": atr_val,
        "adx": adx_val,
    }
    missing = [name for name, value in required.items() if value is None]
    if missing:
        return InsufficientData(
            symbol,
            timeframe,
            f"Not enough candles ({len(series)}) for: {', '.join(missing)}",
        )

    patterns = [
        p
        for p in identify_candle_patterns(series)
        if p.position >= len(series) - RECENT_PATTERN_POSITIONS
    ]

    indicators = IndicatorValues(
        rsi=rsi_val,
        sma20=sma20,
        ema50=ema50,
        ema200=ema200,
        macd=MACDValues(
            line=macd_val,
            signal=signal_val,
            histogram=hist_val,
            previous_histogram=get_previous_valid(histogram),
        ),
        bollinger=BollingerValues(upper=upper_val, middle=middle_val, lower=lower_val),
        volume=volume,
        support_resistance=find_support_resistance(series),
        fibonacci=fibonacci_levels(float(np.max(highs)), float(np.min(lows))),
        atr=atr_val,
        adx=ADXValues(value=adx_val, plus_di=plus_di, minus_di=minus_di),
        patterns=patterns,
    )

    return IndicatorSnapshot(
        symbol=symbol,
        timeframe=timeframe,
        last_price=float(closes[-1]),
        last_update=now or datetime.now(timezone.utc),
        candle_count=len(series),
        candles=series[-snapshot_candles:],
        indicators=indicators,
    )


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Aggregator Service.

    Wraps compute_indicator_snapshot for the API and batch layers.
    All calculations are deterministic and reproducible.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(
        self, input_data: SymbolSeries
    ) -> Union[IndicatorSnapshot, InsufficientData]:
        """Compute the snapshot for a single symbol series."""
        result = compute_indicator_snapshot(
            input_data.candles,
            input_data.symbol,
            input_data.timeframe,
            snapshot_candles=settings.snapshot_candles,
        )
        if isinstance(result, InsufficientData):
            logger.info(f"No snapshot for {result.symbol} ({result.timeframe.value}): {result.reason}")
        return result

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
