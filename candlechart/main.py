"""
Candle Chart Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from candlechart.api import router as api_router
from candlechart.core.config import Settings, get_settings
from candlechart.db import CandleStore, sqlite_url
from candlechart.services.base import ServiceError, StoreError, ValidationError

logger = logging.getLogger(__name__)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """
    Map service errors to HTTP responses.

    Caller input problems are 400; store and data-integrity failures are 500.
    """
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        logger.error(f"{request.method} {request.url.path} failed: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": type(exc).__name__, **exc.details},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed query parameters as a bad request."""
    error_details = []
    for error in exc.errors():
        error_details.append({
            "location": list(error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", ""),
        })

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request parameters", "errors": error_details},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application for the given settings."""
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Environment: {settings.environment}")

        store = CandleStore(sqlite_url(settings.sqlite_path))
        await store.init(settings.csv_path)
        app.state.candle_store = store
        logger.info(f"Candle store ready at {settings.sqlite_path}")

        yield

        # Shutdown
        logger.info("Shutting down...")
        await store.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        Candle Chart API

        - **Candles**: OHLCV candles ordered by timestamp
        - **Indicators**: SMA(14), EMA(14) and RSI(14) per candle
        - **Fibonacci**: retracement levels over a time range
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        store: CandleStore = request.app.state.candle_store
        try:
            candles = await store.count()
        except StoreError:
            candles = None
        return {
            "status": "healthy" if candles is not None else "degraded",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "candles": candles,
        }

    # Static chart client; mounted last so API routes take precedence
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning(f"Static directory {static_dir} not found; chart client not served")

    return app


app = create_app()
