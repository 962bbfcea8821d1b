"""Shared test fixtures and utilities."""

from datetime import datetime, timedelta

import numpy as np
import pytest
from fastapi.testclient import TestClient

from candlechart.core.config import Settings
from candlechart.main import create_app
from candlechart.schemas.market import Candle
from candlechart.services.indicators import CandleSeries, IndicatorService

BASE_TIME = datetime(2024, 2, 1, 0, 0, 0)

CSV_HEADER = "timestamp,open,high,low,close,volume"


def make_candles(closes, start: datetime = BASE_TIME, step: timedelta = timedelta(hours=1)) -> list[Candle]:
    """Build candles around the given closes, one per `step`."""
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        open_price = prev
        candles.append(
            Candle(
                timestamp=start + i * step,
                open=open_price,
                high=max(open_price, close) + 1.0,
                low=max(min(open_price, close) - 1.0, 0.0),
                close=close,
                volume=1000.0 + i,
            )
        )
        prev = close
    return candles


def make_series(closes) -> CandleSeries:
    """CandleSeries with the given closes; other columns mirror the close."""
    closes = np.asarray(closes, dtype=float)
    return CandleSeries(
        timestamps=[BASE_TIME + timedelta(hours=i) for i in range(len(closes))],
        opens=closes.copy(),
        highs=closes.copy(),
        lows=closes.copy(),
        closes=closes,
        volumes=np.ones(len(closes)),
    )


def write_csv(path, candles: list[Candle]) -> None:
    """Write candles in the bulk-load CSV format."""
    lines = [CSV_HEADER]
    for c in candles:
        lines.append(
            f"{c.timestamp:%Y-%m-%d %H:%M:%S},{c.open},{c.high},{c.low},{c.close},{c.volume}"
        )
    path.write_text("\n".join(lines) + "\n")


@pytest.fixture
def service():
    """A fresh indicator service."""
    return IndicatorService()


@pytest.fixture
def linear_closes():
    """15 consecutive integer closes 10..24."""
    return [float(x) for x in range(10, 25)]


@pytest.fixture
def sample_candles():
    """30 hourly candles with a mix of up and down moves."""
    closes = [
        100.0, 101.5, 100.8, 102.3, 103.0, 102.1, 104.2, 105.0, 104.1, 103.3,
        104.9, 106.2, 105.7, 107.1, 106.4, 105.2, 106.8, 108.3, 107.9, 109.4,
        108.6, 107.7, 109.0, 110.2, 109.5, 111.0, 110.1, 112.4, 111.8, 113.0,
    ]
    return make_candles(closes)


@pytest.fixture
def candle_csv(tmp_path, sample_candles):
    """CSV file seeded with sample_candles."""
    path = tmp_path / "stocks.csv"
    write_csv(path, sample_candles)
    return path


@pytest.fixture
def test_settings(tmp_path, candle_csv):
    """Settings pointing at a temporary database and CSV."""
    return Settings(
        sqlite_path=str(tmp_path / "candles.db"),
        csv_path=str(candle_csv),
        static_dir=str(tmp_path / "no-static"),
        log_level="WARNING",
    )


@pytest.fixture
def client(test_settings):
    """Test client with the lifespan (store init + CSV load) running."""
    app = create_app(test_settings)
    with TestClient(app) as client:
        yield client
