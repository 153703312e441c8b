"""Tests for the startup factory open_asset_cache."""

from assetcache.core.config import Settings
from assetcache.infrastructure.cache import AssetCache, open_asset_cache
from assetcache.infrastructure.persistence.database import AssetDatabase


async def test_opens_store_and_sweeps_expired(database_url: str, clock) -> None:
    async with AssetCache(AssetDatabase(database_url), clock=clock) as seed:
        await seed.store("stale", b"x", max_age_ms=10)
        await seed.store("live", b"y", max_age_ms=10_000)
    clock.advance(100)

    cache = await open_asset_cache(Settings(database_url=database_url), clock=clock)
    try:
        assert cache.database.is_open is True
        stats = await cache.get_cache_stats()
        assert stats.total_assets == 1
        assert await cache.get("live") == b"y"
    finally:
        await cache.close()


async def test_startup_sweep_can_be_disabled(database_url: str, clock) -> None:
    async with AssetCache(AssetDatabase(database_url), clock=clock) as seed:
        await seed.store("stale", b"x", max_age_ms=10)
    clock.advance(100)

    settings = Settings(database_url=database_url, asset_cleanup_on_startup=False)
    cache = await open_asset_cache(settings, clock=clock)
    try:
        assert (await cache.get_cache_stats()).total_assets == 1
    finally:
        await cache.close()


async def test_unavailable_store_does_not_raise(unavailable_database_url: str) -> None:
    cache = await open_asset_cache(Settings(database_url=unavailable_database_url))
    try:
        assert cache.database.is_open is False
        assert await cache.get("anything") is None
    finally:
        await cache.close()
