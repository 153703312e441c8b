"""Pytest configuration and fixtures for assetcache.

Every cache fixture gets its own SQLite file under tmp_path and a fake
clock, so tests control time and never share state.
"""

import pytest

from assetcache.core.config import get_settings
from assetcache.infrastructure.cache import AssetCache
from assetcache.infrastructure.persistence.database import AssetDatabase

# Arbitrary fixed start time (2025-01-15T12:00:00Z) in epoch milliseconds.
_START_MS = 1_736_942_400_000


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = _START_MS) -> None:
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop cached settings around each test so env overrides apply."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def database_url(tmp_path) -> str:
    """URL of a fresh asset store file for this test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'asset_cache.db'}"


@pytest.fixture
def unavailable_database_url(tmp_path) -> str:
    """URL whose parent directory does not exist, so SQLite cannot open it."""
    return f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nested' / 'asset_cache.db'}"


@pytest.fixture
async def asset_database(database_url: str) -> AssetDatabase:
    """Opened AssetDatabase; disposed after the test."""
    database = AssetDatabase(database_url)
    await database.open()
    yield database
    await database.dispose()


@pytest.fixture
async def asset_cache(database_url: str, clock: FakeClock) -> AssetCache:
    """AssetCache over a fresh store file, driven by the fake clock."""
    cache = AssetCache(AssetDatabase(database_url), clock=clock)
    yield cache
    await cache.close()


@pytest.fixture
async def unavailable_cache(unavailable_database_url: str, clock: FakeClock) -> AssetCache:
    """AssetCache whose store can never be opened."""
    cache = AssetCache(AssetDatabase(unavailable_database_url), clock=clock)
    yield cache
    await cache.close()
