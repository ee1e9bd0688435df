"""
Indicator Aggregator Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Union

from cryptoalert.services.base import BaseService
from cryptoalert.schemas.market import SymbolSeries
from cryptoalert.schemas.indicators import IndicatorSnapshot, InsufficientData


class IndicatorServiceInterface(
    BaseService[SymbolSeries, Union[IndicatorSnapshot, InsufficientData]]
):
    """
    Indicator Aggregator Contract.

    INPUT: SymbolSeries
        - symbol, timeframe
        - candles ordered oldest to newest

    OUTPUT: IndicatorSnapshot | InsufficientData
        - Snapshot with the last value of every indicator
        - InsufficientData when the series is too short for any
          required indicator (never raised)

    RAISES: MalformedCandleError for invalid or unordered candles
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(
        self, input_data: SymbolSeries
    ) -> Union[IndicatorSnapshot, InsufficientData]:
        """Compute the indicator snapshot for one series."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
