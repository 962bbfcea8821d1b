"""
Candle API Endpoints

Endpoints for fetching raw OHLCV candles.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from candlechart.core.config import Settings
from candlechart.db import CandleStore, get_candle_store
from candlechart.schemas.market import Candle
from candlechart.services.base import ValidationError

router = APIRouter()


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


@router.get("", response_model=list[Candle])
async def get_candles(
    limit: Optional[int] = Query(
        default=None,
        ge=1,
        description="Maximum number of candles, oldest first",
    ),
    settings: Settings = Depends(get_app_settings),
    store: CandleStore = Depends(get_candle_store),
):
    """
    Get candles ordered by timestamp.

    Returns at most `limit` candles starting from the oldest.
    """
    if limit is None:
        limit = settings.default_candle_limit
    elif limit > settings.max_candle_limit:
        raise ValidationError(
            "CandleQuery",
            f"limit {limit} exceeds the maximum of {settings.max_candle_limit}",
            {"limit": limit, "max_limit": settings.max_candle_limit},
        )
    return await store.fetch_candles(limit)
