"""Domain entities: business concepts independent of persistence."""

from assetcache.domain.entities.asset import CacheEntry, is_expired

__all__ = ["CacheEntry", "is_expired"]
