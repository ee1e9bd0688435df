"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings

from cryptoalert.schemas.market import Timeframe


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Crypto Alert Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Analysis
    default_timeframe: Timeframe = Timeframe.H1
    snapshot_candles: int = 10  # Trailing candles kept in a snapshot
    alert_batch_size: int = 5  # Symbols processed per batch

    # Coins shown on the dashboard
    monitored_symbols: list[str] = [
        "BTC/USDT",
        "ETH/USDT",
        "SOL/USDT",
        "BNB/USDT",
        "AVAX/USDT",
        "LINK/USDT",
        "MATIC/USDT",
        "DOT/USDT",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
