"""
Indicator API Endpoints

Endpoints for technical indicator series and Fibonacci levels.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from candlechart.core.time_range import select_range
from candlechart.db import CandleStore, get_candle_store
from candlechart.schemas.indicators import IndicatorPoint, FibLevels
from candlechart.services.indicators import CandleSeries, IndicatorService, get_indicator_service

logger = logging.getLogger(__name__)

router = APIRouter()

START_DESCRIPTION = "Range start, YYYY-MM-DD HH:MM:SS (requires end)"
END_DESCRIPTION = "Range end, YYYY-MM-DD HH:MM:SS (requires start)"


@router.get("/indicators", response_model=list[IndicatorPoint])
async def get_indicators(
    start: Optional[str] = Query(default=None, description=START_DESCRIPTION),
    end: Optional[str] = Query(default=None, description=END_DESCRIPTION),
    store: CandleStore = Depends(get_candle_store),
    service: IndicatorService = Depends(get_indicator_service),
):
    """
    Get SMA(14), EMA(14) and RSI(14) for every candle.

    Computed over the full series, or over [start, end] when both are given.
    Values that are not yet defined are null.
    """
    time_range = select_range(start, end)
    candles = await store.fetch_series(time_range)

    series = CandleSeries.from_candles(candles)
    return service.compute_indicators(series)


@router.get("/fib", response_model=FibLevels)
async def get_fib(
    start: Optional[str] = Query(default=None, description=START_DESCRIPTION),
    end: Optional[str] = Query(default=None, description=END_DESCRIPTION),
    store: CandleStore = Depends(get_candle_store),
    service: IndicatorService = Depends(get_indicator_service),
):
    """
    Get Fibonacci retracement levels.

    Uses the lowest low and highest high over the full series, or over
    [start, end] when both are given.
    """
    time_range = select_range(start, end)
    price_range = await store.fetch_price_range(time_range)

    if price_range is None:
        if time_range is None:
            detail = "No candles loaded"
        else:
            detail = f"No candles between {start} and {end}"
        raise HTTPException(status_code=404, detail=detail)

    low, high = price_range
    logger.debug(f"Fibonacci range low={low} high={high}")
    return service.compute_fibonacci(low, high)
