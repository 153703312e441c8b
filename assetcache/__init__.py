"""assetcache: durable TTL cache for binary assets.

Typical startup wiring::

    cache = await open_asset_cache()
    loader = CachedAssetLoader(cache)
    logo = await loader.load_logo()
"""

from assetcache.application.services import CachedAssetLoader
from assetcache.infrastructure.cache import AssetCache, CacheStats, open_asset_cache

__all__ = ["AssetCache", "CacheStats", "CachedAssetLoader", "open_asset_cache"]
