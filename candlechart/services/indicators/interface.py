"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from candlechart.services.base import BaseService
from candlechart.schemas.indicators import IndicatorPoint, FibLevels
from candlechart.services.indicators.calculations import CandleSeries


class IndicatorServiceInterface(BaseService[CandleSeries, list[IndicatorPoint]]):
    """
    Indicator Engine Service Contract.

    INPUT: CandleSeries
        - Candles ordered by strictly increasing timestamp

    OUTPUT: list[IndicatorPoint]
        - Exactly one point per input candle, in the same order
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: CandleSeries) -> list[IndicatorPoint]:
        """Calculate indicators for every candle in the series."""
        pass

    @abstractmethod
    def compute_indicators(self, series: CandleSeries) -> list[IndicatorPoint]:
        """
        Calculate SMA, EMA and RSI for each candle.

        Args:
            series: Ordered candles

        Returns:
            One IndicatorPoint per candle

        Raises:
            DataIntegrityError: If any close is NaN or infinite
        """
        pass

    @abstractmethod
    def compute_fibonacci(self, low: float, high: float) -> FibLevels:
        """
        Calculate Fibonacci retracement levels for a price range.

        Raises:
            ValidationError: If high < low
            DataIntegrityError: If either bound is NaN or infinite
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
