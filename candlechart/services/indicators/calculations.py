"""
Technical Indicator Calculations

Pure NumPy implementations of the chart indicators.
All math is deterministic; NaN in a result marks a value that is not
defined at that point (warm-up or zero loss), never bad input.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from candlechart.schemas.market import Candle

INDICATOR_PERIOD = 14

FIB_RATIOS = (0.0, 0.236, 0.382, 0.5, 0.618, 0.786, 1.0)


@dataclass
class CandleSeries:
    """Ordered OHLCV arrays for calculations."""

    timestamps: list
    opens: np.ndarray
    highs: np.ndarray
    lows: np.ndarray
    closes: np.ndarray
    volumes: np.ndarray

    def __len__(self) -> int:
        return len(self.timestamps)

    @classmethod
    def from_candles(cls, candles: list[Candle]) -> "CandleSeries":
        """Convert a list of candles (already ordered by timestamp) to arrays."""
        return cls(
            timestamps=[c.timestamp for c in candles],
            opens=np.array([c.open for c in candles], dtype=float),
            highs=np.array([c.high for c in candles], dtype=float),
            lows=np.array([c.low for c in candles], dtype=float),
            closes=np.array([c.close for c in candles], dtype=float),
            volumes=np.array([c.volume for c in candles], dtype=float),
        )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int = INDICATOR_PERIOD) -> np.ndarray:
    """
    Simple Moving Average with partial windows.

    Point i averages data[max(0, i - period + 1) : i + 1], so the first
    period - 1 points use a shorter window instead of being undefined.
    """
    result = np.empty(len(data))
    for i in range(len(data)):
        result[i] = np.mean(data[max(0, i - period + 1) : i + 1])
    return result


def ema(data: np.ndarray, period: int = INDICATOR_PERIOD) -> np.ndarray:
    """
    Exponential Moving Average seeded with the first value.

    Single forward pass: each value depends on the previous one.
    """
    result = np.empty(len(data))
    if len(data) == 0:
        return result

    alpha = 2 / (period + 1)

    result[0] = data[0]
    for i in range(1, len(data)):
        result[i] = alpha * data[i] + (1 - alpha) * result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = INDICATOR_PERIOD) -> np.ndarray:
    """
    Relative Strength Index from rolling-mean gains and losses.

    Gains and losses are averaged with the same trailing partial window as
    sma() rather than Wilder smoothing. The first point has no price change
    and counts as zero gain and zero loss. Points whose average loss is
    zero are left undefined (NaN) instead of reporting 100.
    """
    result = np.full(len(closes), np.nan)
    if len(closes) < 2:
        return result

    # Price changes, with no change recorded for the first candle
    deltas = np.concatenate(([0.0], np.diff(closes)))

    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = sma(gains, period)
    avg_loss = sma(losses, period)

    for i in range(1, len(closes)):
        if avg_loss[i] == 0:
            continue
        rs = avg_gain[i] / avg_loss[i]
        result[i] = 100 - (100 / (1 + rs))

    return result


# =============================================================================
# SUPPORT/RESISTANCE
# =============================================================================


def fibonacci_levels(low: float, high: float) -> list[tuple[float, float]]:
    """
    Fibonacci retracement levels between low and high.

    Returns (ratio, value) pairs ordered by ratio; value = high - range * ratio,
    so ratio 0 is the high and ratio 1 is the low. Evaluated as a weighted
    sum of the bounds so both endpoints come out exact.
    """
    return [(ratio, high * (1 - ratio) + low * ratio) for ratio in FIB_RATIOS]


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def to_optional(value: float) -> Optional[float]:
    """Convert a NaN marker to None, otherwise to a plain float."""
    return None if np.isnan(value) else float(value)


def all_finite(arr: np.ndarray) -> bool:
    """True when the array holds no NaN or infinite values."""
    return bool(np.all(np.isfinite(arr)))
