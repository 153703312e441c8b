"""Application services built on the asset cache."""

from assetcache.application.services.asset_loader import CachedAssetLoader

__all__ = ["CachedAssetLoader"]
