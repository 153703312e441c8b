"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Every field has a default; the validator rejects
storage URLs the cache cannot drive.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SQLITE_ASYNC_SCHEME = "sqlite+aiosqlite://"


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "assetcache"
    app_version: str = "1.0.0"
    debug: bool = False

    # Durable store: an SQLite file driven through aiosqlite.
    database_url: str = "sqlite+aiosqlite:///./asset_cache.db"
    database_echo: bool = False
    database_busy_timeout_seconds: float = 5.0

    # Run one expired-asset sweep when the cache is opened at startup.
    asset_cleanup_on_startup: bool = True

    # Asset loader (outbound fetch on cache miss)
    asset_source_base_url: str | None = None
    asset_fetch_timeout_seconds: float = 30.0
    logo_source_url: str = "/assets/logo.png"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_storage_and_timeouts(self) -> "Settings":
        """Validate the storage URL scheme and timeout values.

        - DATABASE_URL must use the sqlite+aiosqlite driver (writes use SQLite upserts).
        - Busy and fetch timeouts must be positive.
        """
        if not self.database_url.startswith(SQLITE_ASYNC_SCHEME):
            raise ValueError(
                f"DATABASE_URL must start with {SQLITE_ASYNC_SCHEME!r}, "
                f"got: {self.database_url!r}"
            )
        if self.database_busy_timeout_seconds <= 0:
            raise ValueError("DATABASE_BUSY_TIMEOUT_SECONDS must be positive")
        if self.asset_fetch_timeout_seconds <= 0:
            raise ValueError("ASSET_FETCH_TIMEOUT_SECONDS must be positive")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
