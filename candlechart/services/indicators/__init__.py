"""
Indicator Engine Service

CONTRACT:
    Input:  CandleSeries (ordered OHLCV candles)
    Output: list[IndicatorPoint], FibLevels

RESPONSIBILITIES:
    - Calculate SMA(14), EMA(14) and RSI(14) for every candle
    - Calculate Fibonacci retracement levels for a price range

PURE PYTHON - No I/O.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from candlechart.services.indicators.calculations import CandleSeries
from candlechart.services.indicators.interface import IndicatorServiceInterface
from candlechart.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "CandleSeries",
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
]
