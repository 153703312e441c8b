"""Sweep expired assets from the asset store and print cache stats.

Usage:
    python -m scripts.cleanup_expired_assets [--clear]
With --clear, every asset is deleted instead (full cache reset).
Uses DATABASE_URL from config.
"""

import asyncio
import sys

from assetcache.core.config import get_settings
from assetcache.infrastructure.cache import AssetCache
from assetcache.infrastructure.exceptions import StorageUnavailable
from assetcache.infrastructure.persistence.database import AssetDatabase
from assetcache.shared.telemetry import setup_logging


async def main() -> None:
    """Open the store, sweep (or clear), and report what is left."""
    setup_logging()
    settings = get_settings()
    clear_all = "--clear" in sys.argv[1:]

    cache = AssetCache(AssetDatabase(settings.database_url))
    try:
        await cache.initialize()
    except StorageUnavailable as e:
        print(f"Asset store unavailable: {e.message}", file=sys.stderr)
        sys.exit(1)

    try:
        if clear_all:
            if not await cache.clear():
                print("Clear failed", file=sys.stderr)
                sys.exit(1)
            print("Cleared all assets")
        else:
            cleaned = await cache.cleanup_expired_assets()
            print(f"Deleted {cleaned} expired asset(s)")

        stats = await cache.get_cache_stats()
        print(f"Remaining: {stats.total_assets} asset(s), {stats.total_size} byte(s)")
        for asset_type, count in sorted(stats.by_type.items()):
            print(f"  {asset_type}: {count}")
    finally:
        await cache.close()


if __name__ == "__main__":
    asyncio.run(main())
