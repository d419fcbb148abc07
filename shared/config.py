"""
Centralized configuration for the Hive client.

All settings are loaded from environment variables with sensible defaults.
Variables are prefixed with HIVE_ (e.g., HIVE_API_BASE_URL).
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Hive Client"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Backend
    api_base_url: str = "http://localhost:5000/api"
    socket_url: str = "http://localhost:5000"
    request_timeout: float = 300.0  # seconds, large uploads go through the same client

    # Local persistence (JSON key-value file)
    storage_path: str = ".hive/session.json"

    # Client-side rate limiting (minimum seconds between attempts)
    login_min_interval_seconds: float = 5.0
    register_min_interval_seconds: float = 30.0
    logout_min_interval_seconds: float = 5.0
    user_refresh_min_interval_seconds: float = 30.0


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logging for applications embedding the client.

    Uses HIVE_LOG_LEVEL, or DEBUG when HIVE_DEBUG is set.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).debug(f"Logging configured at {logging.getLevelName(level)}")
