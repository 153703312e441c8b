"""Cache: durable TTL asset cache and its startup factory."""

from assetcache.infrastructure.cache.asset_cache import AssetCache, CacheStats, open_asset_cache

__all__ = ["AssetCache", "CacheStats", "open_asset_cache"]
