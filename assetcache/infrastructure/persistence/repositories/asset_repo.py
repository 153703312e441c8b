"""Asset repository: record-level operations on the assets table.

Runs inside a session opened by AssetDatabase.transaction(); commit and
rollback belong to the caller. Returns domain CacheEntry objects, never
ORM rows.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from assetcache.domain.entities import CacheEntry, is_expired
from assetcache.infrastructure.persistence.models import CachedAsset

# Every non-key column: an overwrite replaces the whole entry.
_REPLACED_COLUMNS = ("data", "type", "timestamp", "max_age")


class AssetRepository:
    """Get, upsert, delete and scan cached assets."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, key: str) -> CacheEntry | None:
        """Return the entry for key, or None. Expiry is not checked here."""
        row = await self.db.get(CachedAsset, key)
        if row is None:
            return None
        return self._to_entry(row)

    async def put(self, entry: CacheEntry) -> None:
        """Insert or fully replace the row for entry.key in one statement."""
        table = CachedAsset.__table__
        stmt = sqlite_insert(table).values(
            key=entry.key,
            data=entry.data,
            type=entry.asset_type,
            timestamp=entry.timestamp,
            max_age=entry.max_age,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={name: stmt.excluded[name] for name in _REPLACED_COLUMNS},
        )
        await self.db.execute(stmt)

    async def delete(self, key: str, *, timestamp: int | None = None) -> int:
        """Delete the row for key; return rows removed (0 or 1).

        When timestamp is given only the row written at that time is removed,
        so an eviction never deletes a newer overwrite of the same key.
        """
        stmt = delete(CachedAsset).where(CachedAsset.key == key)
        if timestamp is not None:
            stmt = stmt.where(CachedAsset.timestamp == timestamp)
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def clear(self) -> int:
        """Delete every row; return rows removed."""
        result = await self.db.execute(delete(CachedAsset))
        return result.rowcount or 0

    async def delete_expired(self, now: int) -> int:
        """Delete every entry expired at now; return how many were removed.

        Scans key, timestamp and max_age only (payloads are not loaded),
        oldest first via the timestamp index.
        """
        result = await self.db.execute(
            select(CachedAsset.key, CachedAsset.timestamp, CachedAsset.max_age).order_by(
                CachedAsset.timestamp
            )
        )
        deleted = 0
        for key, timestamp, max_age in result.all():
            if is_expired(timestamp, max_age, now):
                deleted += await self.delete(key, timestamp=timestamp)
        return deleted

    async def stats_by_type(self) -> dict[str, tuple[int, int]]:
        """Return {type: (count, total_bytes)} over all stored rows."""
        result = await self.db.execute(
            select(
                CachedAsset.asset_type,
                func.count(),
                func.coalesce(func.sum(func.length(CachedAsset.data)), 0),
            ).group_by(CachedAsset.asset_type)
        )
        return {asset_type: (count, size) for asset_type, count, size in result.all()}

    @staticmethod
    def _to_entry(row: CachedAsset) -> CacheEntry:
        return CacheEntry(
            key=row.key,
            data=row.data,
            asset_type=row.asset_type,
            timestamp=row.timestamp,
            max_age=row.max_age,
        )
