"""
Indicator Engine Service Implementation

Calculates the chart indicators from an ordered candle series.
Pure NumPy calculations with no shared state; safe to call concurrently
as long as each call owns its series.
"""

import logging
import math
from typing import Optional

import numpy as np

from candlechart.schemas.indicators import IndicatorPoint, FibLevel, FibLevels
from candlechart.services.base import DataIntegrityError, ValidationError
from candlechart.services.indicators.interface import IndicatorServiceInterface
from candlechart.services.indicators.calculations import (
    CandleSeries,
    INDICATOR_PERIOD,
    sma,
    ema,
    rsi,
    fibonacci_levels,
    to_optional,
    all_finite,
)

logger = logging.getLogger(__name__)


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Computes SMA(14), EMA(14) and RSI(14) per candle and Fibonacci
    retracement levels per price range.
    All calculations are deterministic and reproducible.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: CandleSeries) -> list[IndicatorPoint]:
        """Calculate indicators for every candle in the series."""
        return self.compute_indicators(input_data)

    def compute_indicators(self, series: CandleSeries) -> list[IndicatorPoint]:
        """Calculate SMA, EMA and RSI for each candle, preserving order."""
        if len(series) == 0:
            return []

        closes = series.closes
        if not all_finite(closes):
            bad = [
                series.timestamps[i]
                for i in np.flatnonzero(~np.isfinite(closes))[:5]
            ]
            logger.error(f"Non-finite close prices in series at {bad}")
            raise DataIntegrityError(
                self.name,
                "Candle data contains NaN or infinite close prices",
                {"timestamps": [str(ts) for ts in bad]},
            )

        sma_values = sma(closes, INDICATOR_PERIOD)
        ema_values = ema(closes, INDICATOR_PERIOD)
        rsi_values = rsi(closes, INDICATOR_PERIOD)

        return [
            IndicatorPoint(
                timestamp=ts,
                sma_14=to_optional(sma_values[i]),
                ema_14=to_optional(ema_values[i]),
                rsi_14=to_optional(rsi_values[i]),
            )
            for i, ts in enumerate(series.timestamps)
        ]

    def compute_fibonacci(self, low: float, high: float) -> FibLevels:
        """Calculate retracement levels between low and high."""
        if not (math.isfinite(low) and math.isfinite(high)):
            raise DataIntegrityError(
                self.name,
                f"Price range is not finite (low={low}, high={high})",
                {"low": str(low), "high": str(high)},
            )
        if high < low:
            raise ValidationError(
                self.name,
                f"Invalid price range: high ({high}) is below low ({low})",
                {"low": low, "high": high},
            )

        return FibLevels(
            low=low,
            high=high,
            levels=[
                FibLevel(ratio=ratio, value=value)
                for ratio, value in fibonacci_levels(low, high)
            ],
        )

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
