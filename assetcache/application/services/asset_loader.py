"""Cached asset loader: cache first, source on miss, write back in the background.

The loader is the consumer side of AssetCache. A hit is returned straight
from the cache. A miss is fetched from the authoritative HTTP source and
returned at once; the write-back to the cache runs as a background task so
the caller never waits on it. Fetch failures raise AssetFetchException;
cache failures only ever show up as misses.
"""

import asyncio
import logging
from collections.abc import Callable

import httpx

from assetcache.core.config import get_settings
from assetcache.core.constants import (
    DEFAULT_ASSET_TYPE,
    DEFAULT_MAX_AGE_MS,
    LOGO_ASSET_TYPE,
    LOGO_CACHE_KEY,
    LOGO_MAX_AGE_MS,
)
from assetcache.infrastructure.cache.asset_cache import AssetCache
from assetcache.infrastructure.exceptions import AssetFetchException
from assetcache.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class CachedAssetLoader:
    """Load binary assets through an AssetCache.

    Concurrent misses on the same key are not de-duplicated: each fetches
    and each writes back (last write wins).
    """

    def __init__(
        self,
        cache: AssetCache,
        http_client: httpx.AsyncClient | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize with a cache and an optional shared HTTP client.

        Args:
            cache: The application's AssetCache.
            http_client: Injected client; not closed by aclose().
            base_url: Base for relative source URLs when the loader builds its own client.
            timeout: Fetch timeout in seconds when the loader builds its own client.
        """
        settings = get_settings()
        self.cache = cache
        if http_client is not None:
            self._http = http_client
        else:
            self._http = httpx.AsyncClient(
                base_url=base_url or settings.asset_source_base_url or "",
                timeout=timeout or settings.asset_fetch_timeout_seconds,
            )
        self._owns_http = http_client is None
        self._logo_source_url = settings.logo_source_url
        self._pending: set[asyncio.Task[bool]] = set()

    @traced("asset_loader.load")
    async def load(
        self,
        key: str,
        source_url: str,
        asset_type: str = DEFAULT_ASSET_TYPE,
        max_age_ms: int = DEFAULT_MAX_AGE_MS,
    ) -> bytes:
        """Return the asset for key, from cache if live, else from source_url.

        Args:
            key: Cache key (e.g. 'elra-logo-v2').
            source_url: Authoritative location of the asset.
            asset_type: Type tag stored with the asset.
            max_age_ms: Lifetime given to the cached copy.

        Returns:
            Asset bytes.

        Raises:
            AssetFetchException: On a cache miss when the source cannot be fetched.
        """
        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug("Asset %s loaded from cache", key)
            return cached

        logger.debug("Asset %s not cached; fetching %s", key, source_url)
        data = await self._fetch(source_url)
        self._schedule_store(key, data, asset_type, max_age_ms)
        return data

    async def load_logo(self) -> bytes:
        """Load the application logo (30-day cached copy)."""
        return await self.load(
            LOGO_CACHE_KEY,
            self._logo_source_url,
            asset_type=LOGO_ASSET_TYPE,
            max_age_ms=LOGO_MAX_AGE_MS,
        )

    async def wait_pending(self) -> None:
        """Wait for every in-flight cache write-back to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def aclose(self) -> None:
        """Drain write-backs, then close the HTTP client only if we created it."""
        await self.wait_pending()
        if self._owns_http:
            await self._http.aclose()

    async def _fetch(self, source_url: str) -> bytes:
        try:
            response = await self._http.get(source_url)
        except httpx.HTTPError as e:
            raise AssetFetchException(source_url, str(e)) from e
        if not response.is_success:
            raise AssetFetchException(
                source_url,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.content

    def _schedule_store(self, key: str, data: bytes, asset_type: str, max_age_ms: int) -> None:
        task = asyncio.create_task(
            self.cache.store(key, data, asset_type=asset_type, max_age_ms=max_age_ms)
        )
        self._pending.add(task)
        task.add_done_callback(self._on_store_done(key))

    def _on_store_done(self, key: str) -> Callable[[asyncio.Task[bool]], None]:
        def callback(task: asyncio.Task[bool]) -> None:
            self._pending.discard(task)
            if task.cancelled():
                logger.warning("Asset %s cache write-back cancelled", key)
            elif task.result():
                logger.debug("Asset %s cached", key)
            else:
                logger.warning("Asset %s could not be cached", key)

        return callback
