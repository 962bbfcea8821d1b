"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Candle Chart"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Candle store (SQLite file, seeded from CSV when empty)
    sqlite_path: str = "data/candles.db"
    csv_path: str = "data/stocks.csv"

    # Static chart client
    static_dir: str = "static"

    # CORS
    allowed_origins: list[str] = ["http://localhost:8000"]

    # Candle endpoint limits
    default_candle_limit: int = 500
    max_candle_limit: int = 10000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
