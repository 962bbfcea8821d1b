"""
CSV bulk loading for the candle store.

Reads a timestamp,open,high,low,close,volume CSV with pandas and validates
it against the candle invariants before anything is inserted.
"""

import logging
from pathlib import Path

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]
PRICE_COLUMNS = ["open", "high", "low", "close"]


class CandleDataError(ValueError):
    """CSV candle data violates the candle invariants."""
    pass


def read_candles_csv(path: str | Path) -> pd.DataFrame:
    """
    Load and validate a candle CSV.

    Args:
        path: CSV file with a header row containing CSV_COLUMNS

    Returns:
        DataFrame sorted by timestamp with naive datetime timestamps

    Raises:
        FileNotFoundError: If the file does not exist
        CandleDataError: If columns are missing or any row is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Candle CSV not found: {path}")

    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]

    missing = set(CSV_COLUMNS) - set(df.columns)
    if missing:
        raise CandleDataError(f"Missing required columns in {path}: {sorted(missing)}")

    df = df[CSV_COLUMNS].copy()

    try:
        timestamps = pd.to_datetime(df["timestamp"])
    except (ValueError, TypeError) as e:
        raise CandleDataError(f"Unparseable timestamp in {path}: {e}") from e
    if timestamps.dt.tz is not None:
        timestamps = timestamps.dt.tz_convert("UTC").dt.tz_localize(None)
    df["timestamp"] = timestamps

    for col in CSV_COLUMNS[1:]:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    _validate(df, path)

    return df.sort_values("timestamp").reset_index(drop=True)


def _validate(df: pd.DataFrame, path: Path) -> None:
    """Raise CandleDataError on the first class of invalid rows found."""
    numeric = df[CSV_COLUMNS[1:]]

    finite = np.isfinite(numeric.to_numpy(dtype=float)).all(axis=1)
    bad = df["timestamp"].isna() | ~pd.Series(finite, index=df.index)
    if bad.any():
        raise CandleDataError(
            f"{int(bad.sum())} row(s) in {path} have missing or non-numeric values "
            f"(first at line {_line(df, bad)})"
        )

    negative = (numeric < 0).any(axis=1)
    if negative.any():
        raise CandleDataError(
            f"{int(negative.sum())} row(s) in {path} have negative values "
            f"(first at line {_line(df, negative)})"
        )

    inverted = (df["high"] < df[["open", "close", "low"]].max(axis=1)) | (
        df["low"] > df[["open", "close", "high"]].min(axis=1)
    )
    if inverted.any():
        raise CandleDataError(
            f"{int(inverted.sum())} row(s) in {path} break high/low bounds "
            f"(first at line {_line(df, inverted)})"
        )

    duplicated = df["timestamp"].duplicated(keep=False)
    if duplicated.any():
        first = df.loc[duplicated, "timestamp"].iloc[0]
        raise CandleDataError(f"Duplicate timestamp {first} in {path}")


def _line(df: pd.DataFrame, mask: pd.Series) -> int:
    # +2: header row and 1-based line numbers
    return int(df.index[mask][0]) + 2


def to_records(df: pd.DataFrame) -> list[dict]:
    """Convert a validated candle DataFrame to insert-ready dicts."""
    return [
        {
            "timestamp": row.timestamp.to_pydatetime(),
            "open": float(row.open),
            "high": float(row.high),
            "low": float(row.low),
            "close": float(row.close),
            "volume": float(row.volume),
        }
        for row in df.itertuples(index=False)
    ]
