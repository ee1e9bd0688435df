"""
Indicator API Endpoints

Computes an indicator snapshot from candles supplied by the caller.
"""

import logging

from fastapi import APIRouter, HTTPException

from cryptoalert.schemas.indicators import IndicatorSnapshot, InsufficientData
from cryptoalert.schemas.market import SymbolSeries
from cryptoalert.services.base import MalformedCandleError
from cryptoalert.services.indicators import get_indicator_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/snapshot", response_model=IndicatorSnapshot)
async def get_snapshot(series: SymbolSeries):
    """
    Get the full indicator snapshot for a candle series.

    Returns:
        - RSI, SMA20, EMA50, EMA200 (when available)
        - MACD line/signal/histogram
        - Bollinger Bands, ATR, ADX with DI
        - Volume analysis, support/resistance, Fibonacci levels
        - Candlestick patterns on the latest candles
    """
    service = get_indicator_service()

    try:
        result = await service.execute(series)
    except MalformedCandleError as e:
        raise HTTPException(status_code=422, detail={"message": e.message, **e.details})

    if isinstance(result, InsufficientData):
        raise HTTPException(status_code=422, detail=result.reason)

    return result
