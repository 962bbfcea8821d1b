"""
Database module for Candle Chart.

Provides the SQLite-backed candle store and its models.
"""

from candlechart.db.database import CandleStore, get_candle_store, sqlite_url
from candlechart.db.loader import CandleDataError, read_candles_csv
from candlechart.db.models import Base, CandleRecord

__all__ = [
    "CandleStore",
    "get_candle_store",
    "sqlite_url",
    "CandleDataError",
    "read_candles_csv",
    "Base",
    "CandleRecord",
]
