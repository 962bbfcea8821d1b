"""
Database connection and candle store.

Uses SQLite with aiosqlite for async support. The store owns a single
connection; every query runs under one asyncio.Lock so only one query
executes against it at a time.
"""

import asyncio
import logging
import math
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import Request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from candlechart.core.time_range import TimeRange
from candlechart.db.loader import read_candles_csv, to_records
from candlechart.db.models import Base, CandleRecord
from candlechart.schemas.market import Candle
from candlechart.services.base import DataIntegrityError, StoreError

logger = logging.getLogger(__name__)

STORE_NAME = "CandleStore"


def sqlite_url(path: str) -> str:
    """SQLAlchemy URL for an SQLite file, creating its directory if needed."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{path}"


class CandleStore:
    """
    Ordered OHLCV candle storage.

    Created once per application and handed to request handlers through
    get_candle_store(); handlers never touch the engine directly.
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        # Note: SQLite requires check_same_thread=False for async
        self._engine: AsyncEngine = create_async_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,  # One shared connection
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Exclusive session on the store connection.

        Holds the store lock for the whole block and converts driver
        errors to StoreError.
        """
        async with self._lock:
            async with self._session_factory() as session:
                try:
                    yield session
                    await session.commit()
                except SQLAlchemyError as e:
                    await session.rollback()
                    logger.error(f"Candle store query failed: {e}")
                    raise StoreError(STORE_NAME, f"Candle store query failed: {e}") from e

    async def init(self, csv_path: Optional[str] = None) -> int:
        """
        Create the candles table and seed it from CSV when empty.
        Called on application startup.

        Returns:
            Number of rows loaded from CSV (0 if the table already had data)
        """
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Failed to initialize candle store: {e}")
            raise StoreError(STORE_NAME, f"Failed to initialize candle store: {e}") from e

        existing = await self.count()
        if existing > 0:
            logger.info(f"Candle store has {existing} candles")
            return 0

        if not csv_path or not Path(csv_path).exists():
            logger.warning(f"Candle store is empty and no CSV found at {csv_path}")
            return 0

        return await self.load_csv(csv_path)

    async def load_csv(self, csv_path: str) -> int:
        """Bulk-insert a validated candle CSV."""
        df = read_candles_csv(csv_path)
        records = to_records(df)
        if not records:
            logger.warning(f"Candle CSV {csv_path} has no rows")
            return 0

        async with self.session() as session:
            await session.execute(insert(CandleRecord), records)

        logger.info(f"Loaded {len(records)} candles from {csv_path}")
        return len(records)

    async def close(self) -> None:
        """
        Close database connections.
        Called on application shutdown.
        """
        await self._engine.dispose()
        logger.info("Candle store connections closed")

    # Queries

    async def count(self) -> int:
        """Number of stored candles."""
        async with self.session() as session:
            result = await session.execute(select(func.count()).select_from(CandleRecord))
            return int(result.scalar_one())

    async def fetch_candles(self, limit: int) -> list[Candle]:
        """First `limit` candles ordered by timestamp."""
        async with self.session() as session:
            result = await session.execute(
                select(CandleRecord).order_by(CandleRecord.timestamp).limit(limit)
            )
            records = result.scalars().all()
        return [_to_candle(r) for r in records]

    async def fetch_series(self, time_range: Optional[TimeRange] = None) -> list[Candle]:
        """All candles, or those inside time_range, ordered by timestamp."""
        query = select(CandleRecord).order_by(CandleRecord.timestamp)
        if time_range is not None:
            query = query.where(
                CandleRecord.timestamp.between(time_range.start, time_range.end)
            )

        async with self.session() as session:
            result = await session.execute(query)
            records = result.scalars().all()
        return [_to_candle(r) for r in records]

    async def fetch_price_range(
        self, time_range: Optional[TimeRange] = None
    ) -> Optional[tuple[float, float]]:
        """
        (min low, max high) over all candles or those inside time_range.

        Returns None when no candles match.
        """
        query = select(
            func.min(CandleRecord.low),
            func.max(CandleRecord.high),
            func.count(),
            func.count(CandleRecord.low),
            func.count(CandleRecord.high),
        )
        if time_range is not None:
            query = query.where(
                CandleRecord.timestamp.between(time_range.start, time_range.end)
            )

        async with self.session() as session:
            result = await session.execute(query)
            low, high, rows, lows, highs = result.one()

        if rows == 0:
            return None
        # SQLite stores NaN as NULL; min/max would silently skip those rows
        if lows < rows or highs < rows:
            raise DataIntegrityError(
                STORE_NAME,
                f"{rows - min(lows, highs)} candle(s) in range have no low/high value",
            )
        _check_finite({"low": low, "high": high}, "price range")
        return float(low), float(high)


def _check_finite(values: dict, where) -> None:
    bad = [
        name for name, value in values.items()
        if value is None or not math.isfinite(value)
    ]
    if bad:
        raise DataIntegrityError(
            STORE_NAME,
            f"Candle {where} has missing or non-finite {', '.join(bad)}",
            {"fields": bad, "at": str(where)},
        )


def _to_candle(record: CandleRecord) -> Candle:
    """Convert a stored row to a Candle, rejecting NULL/NaN or negative numerics."""
    values = {
        "open": record.open,
        "high": record.high,
        "low": record.low,
        "close": record.close,
        "volume": record.volume,
    }
    _check_finite(values, record.timestamp)
    try:
        return Candle(timestamp=record.timestamp, **values)
    except PydanticValidationError as e:
        bad = [str(err["loc"][0]) for err in e.errors() if err.get("loc")]
        raise DataIntegrityError(
            STORE_NAME,
            f"Candle {record.timestamp} has invalid {', '.join(bad)}",
            {"fields": bad, "at": str(record.timestamp)},
        ) from e


def get_candle_store(request: Request) -> CandleStore:
    """
    Dependency that provides the application's candle store.
    Use with FastAPI Depends().
    """
    return request.app.state.candle_store
