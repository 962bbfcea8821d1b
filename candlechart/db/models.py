"""
SQLAlchemy models for the Candle Chart database.

Uses SQLite for local persistence of one OHLCV candle series.
"""

from sqlalchemy import Column, DateTime, Float
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class CandleRecord(Base):
    """
    One stored candle.
    The timestamp is the primary key, so the series has no duplicates and
    range scans ordered by timestamp use the key index.
    """
    __tablename__ = "candles"

    timestamp = Column(DateTime, primary_key=True)
    open = Column(Float, nullable=False)
    high = Column(Float, nullable=False)
    low = Column(Float, nullable=False)
    close = Column(Float, nullable=False)
    volume = Column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<CandleRecord {self.timestamp} close={self.close}>"
