"""Tests for Settings validation and get_settings caching."""

import pytest
from pydantic import ValidationError

from assetcache.core.config import Settings, get_settings


def test_defaults_are_valid() -> None:
    settings = Settings()
    assert settings.database_url.startswith("sqlite+aiosqlite://")
    assert settings.asset_cleanup_on_startup is True


def test_database_url_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    url = f"sqlite+aiosqlite:///{tmp_path / 'env.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    get_settings.cache_clear()
    assert get_settings().database_url == url


def test_rejects_non_sqlite_url() -> None:
    with pytest.raises(ValidationError, match="sqlite\\+aiosqlite"):
        Settings(database_url="postgresql+asyncpg://localhost/cache")


@pytest.mark.parametrize(
    "field", ["database_busy_timeout_seconds", "asset_fetch_timeout_seconds"]
)
def test_rejects_non_positive_timeouts(field: str) -> None:
    with pytest.raises(ValidationError, match="must be positive"):
        Settings(**{field: 0})


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
