"""
CONTRACT 2: Indicator Engine

Input: CandleSeries (ordered candles)
Output: list[IndicatorPoint] and FibLevels

Absent indicator values are None (JSON null), never a placeholder number.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_serializer

from candlechart.core.time_range import format_timestamp


# =============================================================================
# OUTPUT: IndicatorPoint
# =============================================================================


class IndicatorPoint(BaseModel):
    """Indicator values for one candle, in input order."""

    timestamp: datetime
    sma_14: Optional[float] = Field(default=None, description="14-period SMA (partial windows allowed)")
    ema_14: Optional[float] = Field(default=None, description="14-period EMA seeded with the first close")
    rsi_14: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        description="14-period RSI; null when there is no loss in the window",
    )

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    class Config:
        json_schema_extra = {
            "example": {
                "timestamp": "2024-02-01 09:30:00",
                "sma_14": 183.12,
                "ema_14": 183.4,
                "rsi_14": 61.8,
            }
        }


# =============================================================================
# OUTPUT: FibLevels
# =============================================================================


class FibLevel(BaseModel):
    """Single retracement level."""

    ratio: float = Field(..., ge=0, le=1)
    value: float


class FibLevels(BaseModel):
    """Fibonacci retracement levels between a range's low and high."""

    low: float
    high: float
    levels: list[FibLevel] = Field(..., description="Ordered by ratio, high to low in value")

    class Config:
        json_schema_extra = {
            "example": {
                "low": 50.0,
                "high": 150.0,
                "levels": [
                    {"ratio": 0.0, "value": 150.0},
                    {"ratio": 0.236, "value": 126.4},
                    {"ratio": 0.382, "value": 111.8},
                    {"ratio": 0.5, "value": 100.0},
                    {"ratio": 0.618, "value": 88.2},
                    {"ratio": 0.786, "value": 71.4},
                    {"ratio": 1.0, "value": 50.0},
                ],
            }
        }
