"""Domain layer: entities and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from assetcache.domain.entities import CacheEntry, is_expired
from assetcache.domain.exceptions import AssetCacheException, ValidationException

__all__ = [
    "CacheEntry",
    "is_expired",
    "AssetCacheException",
    "ValidationException",
]
