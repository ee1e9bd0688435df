"""
Alert Service Interface

Defines the contract for turning candle series into alerts.
"""

from abc import abstractmethod

from cryptoalert.services.base import BaseService
from cryptoalert.schemas.alerts import AlertBatchRequest, AlertBatchResponse


class AlertServiceInterface(BaseService[AlertBatchRequest, AlertBatchResponse]):
    """
    Alert Service Contract.

    INPUT: AlertBatchRequest
        - One SymbolSeries per symbol (candles + optional live price)

    OUTPUT: AlertBatchResponse
        - Merged AlertSet across all symbols
        - skipped: "SYMBOL:timeframe" -> reason for series that produced no snapshot

    One failing symbol never aborts the batch.
    """

    @property
    def name(self) -> str:
        return "AlertService"

    @abstractmethod
    async def execute(self, input_data: AlertBatchRequest) -> AlertBatchResponse:
        """Generate alerts for every series in the request."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the alert service is healthy."""
        pass
