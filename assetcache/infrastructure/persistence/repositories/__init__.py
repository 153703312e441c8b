"""Repositories: data access over AsyncSession."""

from assetcache.infrastructure.persistence.repositories.asset_repo import AssetRepository

__all__ = ["AssetRepository"]
