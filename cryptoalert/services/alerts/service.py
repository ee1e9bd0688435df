"""
Alert Service Implementation

Runs the indicator aggregator and the rule engine for each symbol.
Symbols are processed concurrently in fixed-size batches.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional, Union

from cryptoalert.core.config import settings
from cryptoalert.schemas.alerts import AlertBatchRequest, AlertBatchResponse, AlertSet
from cryptoalert.schemas.indicators import InsufficientData
from cryptoalert.schemas.market import SymbolSeries
from cryptoalert.services.alerts.interface import AlertServiceInterface
from cryptoalert.services.alerts.rules import generate_alerts
from cryptoalert.services.base import ServiceError
from cryptoalert.services.indicators import compute_indicator_snapshot

logger = logging.getLogger(__name__)


def series_key(series: SymbolSeries) -> str:
    """'BTC/USDT:1h', unique per symbol and timeframe within a batch."""
    return f"{series.symbol}:{series.timeframe.value}"


class AlertService(AlertServiceInterface):
    """
    Alert Service.

    Stateless: every call recomputes snapshots from the candles given.
    """

    def __init__(self, batch_size: Optional[int] = None):
        self.batch_size = batch_size or settings.alert_batch_size

    @property
    def name(self) -> str:
        return "AlertService"

    def generate_for_series(
        self,
        series: SymbolSeries,
        now: Optional[datetime] = None,
    ) -> Union[AlertSet, InsufficientData]:
        """Snapshot one series and run the rules against it."""
        snapshot = compute_indicator_snapshot(
            series.candles,
            series.symbol,
            series.timeframe,
            snapshot_candles=settings.snapshot_candles,
            now=now,
        )
        if isinstance(snapshot, InsufficientData):
            return snapshot

        return generate_alerts(
            series.symbol,
            snapshot,
            series.current_price,
            series.timeframe,
            now=now,
        )

    async def _process(self, series: SymbolSeries) -> Union[AlertSet, InsufficientData]:
        # NumPy work runs off the event loop
        return await asyncio.to_thread(self.generate_for_series, series)

    async def execute(self, input_data: AlertBatchRequest) -> AlertBatchResponse:
        """
        Generate alerts for every series in the request.

        Insufficient data and per-symbol errors are logged and reported
        in `skipped`; the rest of the batch still completes.
        """
        response = AlertBatchResponse()
        series_list = input_data.series

        for start in range(0, len(series_list), self.batch_size):
            batch = series_list[start:start + self.batch_size]
            results = await asyncio.gather(
                *[self._process(series) for series in batch],
                return_exceptions=True,
            )

            for series, result in zip(batch, results):
                key = series_key(series)
                if isinstance(result, AlertSet):
                    response.alerts.extend(result)
                elif isinstance(result, InsufficientData):
                    logger.info(f"Skipping {key}: {result.reason}")
                    response.skipped[key] = result.reason
                elif isinstance(result, ServiceError):
                    logger.warning(f"Skipping {key}: {result.message}")
                    response.skipped[key] = result.message
                else:
                    logger.error(f"Error generating alerts for {key}: {result}")
                    response.skipped[key] = str(result)

        logger.info(
            f"Generated {len(response.alerts.buy)} buy, {len(response.alerts.sell)} sell and "
            f"{len(response.alerts.monitoring)} monitoring alerts for {len(series_list)} symbols"
        )
        return response

    async def health_check(self) -> bool:
        """Alert service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[AlertService] = None


def get_alert_service() -> AlertService:
    """Get or create alert service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AlertService()
    return _service_instance
