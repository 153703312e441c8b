"""Persistence models: ORM entities."""

from assetcache.infrastructure.persistence.models.asset import CachedAsset

__all__ = ["CachedAsset"]
