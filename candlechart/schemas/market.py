"""
CONTRACT 1: Candle Store

Output: list[Candle]

Candles are read from the store ordered by timestamp and serialized with
the "YYYY-MM-DD HH:MM:SS" timestamp format used by the chart client.
"""

from datetime import datetime
from pydantic import BaseModel, Field, field_serializer

from candlechart.core.time_range import format_timestamp


class Candle(BaseModel):
    """Single candlestick data point."""

    timestamp: datetime
    open: float = Field(..., ge=0)
    high: float = Field(..., ge=0)
    low: float = Field(..., ge=0)
    close: float = Field(..., ge=0)
    volume: float = Field(..., ge=0)

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    class Config:
        json_schema_extra = {
            "example": {
                "timestamp": "2024-02-01 09:30:00",
                "open": 182.15,
                "high": 184.2,
                "low": 181.9,
                "close": 183.7,
                "volume": 1250300,
            }
        }
