"""
Alert API Endpoints

Generates buy, sell and monitoring alerts from candle series.
"""

import logging

from fastapi import APIRouter, HTTPException

from cryptoalert.core.config import settings
from cryptoalert.schemas.alerts import AlertBatchRequest, AlertBatchResponse, AlertSet
from cryptoalert.schemas.indicators import InsufficientData
from cryptoalert.schemas.market import SymbolSeries, Timeframe
from cryptoalert.services.alerts import get_alert_service
from cryptoalert.services.base import MalformedCandleError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=AlertSet)
async def generate_symbol_alerts(series: SymbolSeries):
    """
    Generate alerts for a single symbol.

    A series too short for the indicators yields an empty alert set.
    """
    service = get_alert_service()

    try:
        result = service.generate_for_series(series)
    except MalformedCandleError as e:
        raise HTTPException(status_code=422, detail={"message": e.message, **e.details})

    if isinstance(result, InsufficientData):
        logger.info(f"No alerts for {series.symbol}: {result.reason}")
        return AlertSet()

    return result


@router.post("/batch", response_model=AlertBatchResponse)
async def generate_batch_alerts(request: AlertBatchRequest):
    """
    Generate alerts for several symbols at once.

    Symbols that cannot be analyzed are listed in `skipped` with the reason.
    """
    service = get_alert_service()
    return await service.execute(request)


@router.get("/timeframes")
async def get_timeframes():
    """List supported timeframes and the symbols monitored by default."""
    return {
        "timeframes": [
            {"value": tf.value, "interval_seconds": int(tf.interval.total_seconds())}
            for tf in Timeframe
        ],
        "default": settings.default_timeframe.value,
        "monitored_symbols": settings.monitored_symbols,
    }
