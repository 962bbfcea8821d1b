"""
Candle Chart Schema Contracts

This module defines the JSON contracts between the store, the indicator
engine and the HTTP layer.
"""

from candlechart.schemas.market import Candle
from candlechart.schemas.indicators import (
    IndicatorPoint,
    FibLevel,
    FibLevels,
)

__all__ = [
    # Market
    "Candle",
    # Indicators
    "IndicatorPoint",
    "FibLevel",
    "FibLevels",
]
