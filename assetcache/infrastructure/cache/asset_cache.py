"""Durable TTL cache for binary assets (logos, images).

AssetCache stores blobs in an SQLite file so they survive restarts, and
expires each entry against the max age it was written with. It is a
best-effort layer: every data method converts storage errors into a miss
value (None, False, 0, empty stats) and logs them, so callers always fall
back to the asset's original source instead of failing.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any

from assetcache.core.config import Settings, get_settings
from assetcache.core.constants import DEFAULT_ASSET_TYPE, DEFAULT_MAX_AGE_MS
from assetcache.domain.entities import CacheEntry
from assetcache.domain.exceptions import AssetCacheException, ValidationException
from assetcache.infrastructure.exceptions import StorageUnavailable
from assetcache.infrastructure.persistence.database import AssetDatabase
from assetcache.infrastructure.persistence.repositories import AssetRepository
from assetcache.shared.telemetry.tracing import add_span_attributes, traced
from assetcache.shared.utils.datetime import Clock, now_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Aggregate over every stored entry (expired entries not yet evicted included)."""

    total_assets: int = 0
    total_size: int = 0
    by_type: dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Return the camelCase shape: totalAssets, totalSize, byType."""
        return {
            "totalAssets": self.total_assets,
            "totalSize": self.total_size,
            "byType": dict(self.by_type),
        }


class AssetCache:
    """TTL key/value store for binary assets over a durable SQLite file.

    Construct once at startup (see open_asset_cache) and pass it to
    consumers. The store opens lazily: every method awaits initialize(),
    and concurrent first callers share one open.
    """

    def __init__(
        self,
        database: AssetDatabase | None = None,
        *,
        clock: Clock = now_ms,
    ) -> None:
        """Initialize the cache without touching storage.

        Args:
            database: Store to use; defaults to one built from settings.
            clock: Returns current epoch milliseconds (inject a fake in tests).
        """
        self.database = database or AssetDatabase()
        self._clock = clock
        self._init_task: asyncio.Task[None] | None = None

    async def __aenter__(self) -> AssetCache:
        try:
            await self.initialize()
        except StorageUnavailable as e:
            logger.warning("Asset cache disabled: %s", e.message)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def initialize(self) -> None:
        """Open the durable store once; later calls return immediately.

        All concurrent callers await the same open task. A failed open is
        forgotten so the next call retries.

        Raises:
            StorageUnavailable: If the store cannot be opened.
        """
        if self.database.is_open:
            return
        if self._init_task is None:
            self._init_task = asyncio.create_task(self.database.open())
        task = self._init_task
        try:
            # shield: a cancelled caller must not cancel the open other callers await.
            await asyncio.shield(task)
        except StorageUnavailable:
            if self._init_task is task:
                self._init_task = None
            raise

    async def close(self) -> None:
        """Release the store handle. The cache reopens lazily on next use."""
        if self._init_task is not None and not self._init_task.done():
            try:
                await self._init_task
            except StorageUnavailable:
                pass
        self._init_task = None
        await self.database.dispose()

    @traced("asset_cache.store")
    async def store(
        self,
        key: str,
        data: bytes | bytearray | memoryview,
        asset_type: str = DEFAULT_ASSET_TYPE,
        max_age_ms: int = DEFAULT_MAX_AGE_MS,
    ) -> bool:
        """Write or fully replace the entry for key, stamped with the current time.

        Args:
            key: Non-empty unique asset key (e.g. 'elra-logo-v2').
            data: Asset payload.
            asset_type: Classification tag used by stats (e.g. 'logo').
            max_age_ms: Lifetime in milliseconds (default 7 days).

        Returns:
            True if stored, False otherwise. Never raises.
        """
        try:
            entry = CacheEntry.create(
                key, data, self._clock(), asset_type=asset_type, max_age=max_age_ms
            )
            await self.initialize()
            async with self.database.transaction("store") as session:
                await AssetRepository(session).put(entry)
        except ValidationException as e:
            logger.warning("Asset cache store rejected for key %r: %s", key, e.message)
            return False
        except StorageUnavailable as e:
            logger.warning("Asset cache store unavailable for key %s: %s", key, e.message)
            return False
        except AssetCacheException:
            logger.exception("Asset cache store error for key %s", key)
            return False
        logger.debug(
            "Asset cache STORE: %s (%s bytes, type=%s, max_age=%sms)",
            key,
            entry.size,
            entry.asset_type,
            entry.max_age,
        )
        return True

    @traced("asset_cache.get")
    async def get(self, key: str) -> bytes | None:
        """Return the payload for key, or None if missing, expired, or unavailable.

        An expired entry is deleted in the same transaction that read it.

        Args:
            key: Asset key.

        Returns:
            Stored bytes or None. Never raises.
        """
        try:
            await self.initialize()
            async with self.database.transaction("get") as session:
                repo = AssetRepository(session)
                entry = await repo.get(key)
                if entry is None:
                    logger.debug("Asset cache MISS: %s", key)
                    add_span_attributes(cache_hit=False)
                    return None
                now = self._clock()
                if entry.is_expired(now):
                    await repo.delete(key, timestamp=entry.timestamp)
                    logger.debug(
                        "Asset cache EXPIRED: %s (age: %s minutes)",
                        key,
                        round(entry.age(now) / 1000 / 60),
                    )
                    add_span_attributes(cache_hit=False, cache_expired=True)
                    return None
        except StorageUnavailable as e:
            logger.warning("Asset cache get unavailable for key %s: %s", key, e.message)
            return None
        except AssetCacheException:
            logger.exception("Asset cache get error for key %s", key)
            return None
        logger.debug("Asset cache HIT: %s", key)
        add_span_attributes(cache_hit=True)
        return entry.data

    @traced("asset_cache.delete")
    async def delete(self, key: str) -> bool:
        """Remove the entry for key. Absent keys are not an error.

        Returns:
            True on success, False on storage failure.
        """
        try:
            await self.initialize()
            async with self.database.transaction("delete") as session:
                await AssetRepository(session).delete(key)
        except StorageUnavailable as e:
            logger.warning("Asset cache delete unavailable for key %s: %s", key, e.message)
            return False
        except AssetCacheException:
            logger.exception("Asset cache delete error for key %s", key)
            return False
        logger.debug("Asset cache DELETE: %s", key)
        return True

    @traced("asset_cache.clear")
    async def clear(self) -> bool:
        """Remove every entry. For manual resets, not normal flows.

        Returns:
            True if cleared, False otherwise.
        """
        try:
            await self.initialize()
            async with self.database.transaction("clear") as session:
                removed = await AssetRepository(session).clear()
        except StorageUnavailable as e:
            logger.warning("Asset cache clear unavailable: %s", e.message)
            return False
        except AssetCacheException:
            logger.exception("Asset cache clear error")
            return False
        logger.warning("Asset cache CLEARED: %s assets deleted", removed)
        return True

    @traced("asset_cache.get_cache_stats")
    async def get_cache_stats(self) -> CacheStats:
        """Count entries, sum payload sizes, and count entries per type.

        Returns:
            CacheStats; the empty aggregate when the store is unavailable.
        """
        try:
            await self.initialize()
            async with self.database.transaction("get_cache_stats") as session:
                per_type = await AssetRepository(session).stats_by_type()
        except StorageUnavailable as e:
            logger.warning("Asset cache stats unavailable: %s", e.message)
            return CacheStats()
        except AssetCacheException:
            logger.exception("Asset cache stats error")
            return CacheStats()
        return CacheStats(
            total_assets=sum(count for count, _ in per_type.values()),
            total_size=sum(size for _, size in per_type.values()),
            by_type={asset_type: count for asset_type, (count, _) in per_type.items()},
        )

    @traced("asset_cache.cleanup_expired_assets")
    async def cleanup_expired_assets(self) -> int:
        """Delete every entry expired at call time, each against its own max age.

        Proactive sweep for entries nobody reads any more; reads evict lazily.

        Returns:
            Number of entries deleted; 0 on failure.
        """
        try:
            await self.initialize()
            now = self._clock()
            async with self.database.transaction("cleanup_expired_assets") as session:
                cleaned = await AssetRepository(session).delete_expired(now)
        except StorageUnavailable as e:
            logger.warning("Asset cache cleanup unavailable: %s", e.message)
            return 0
        except AssetCacheException:
            logger.exception("Asset cache cleanup error")
            return 0
        logger.info("Asset cache cleanup: %s expired assets deleted", cleaned)
        return cleaned


async def open_asset_cache(settings: Settings | None = None, *, clock: Clock = now_ms) -> AssetCache:
    """Build and warm up the process's AssetCache. Call on application startup.

    Opens the store and, when asset_cleanup_on_startup is set, runs one
    expired-asset sweep. An unavailable store is logged, not raised: the
    returned cache then answers every call with a miss and retries the
    open on each use.

    Args:
        settings: Settings to use; defaults to get_settings().
        clock: Epoch-millisecond clock passed to the cache.

    Returns:
        The AssetCache to share with consumers.
    """
    settings = settings or get_settings()
    cache = AssetCache(
        AssetDatabase(
            settings.database_url,
            echo=settings.database_echo,
            busy_timeout=settings.database_busy_timeout_seconds,
        ),
        clock=clock,
    )
    try:
        await cache.initialize()
    except StorageUnavailable as e:
        logger.warning("Asset cache disabled at startup: %s", e.message)
        return cache
    if settings.asset_cleanup_on_startup:
        await cache.cleanup_expired_assets()
    return cache
