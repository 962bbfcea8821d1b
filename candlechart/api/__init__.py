"""
API Router

All API endpoints for the chart client.
"""

from fastapi import APIRouter

from candlechart.api.endpoints import candles, indicators

router = APIRouter()

# Include all endpoint routers
router.include_router(candles.router, prefix="/candles", tags=["Candles"])
router.include_router(indicators.router, tags=["Indicators"])
