"""Asset repository and schema tests against a real SQLite store file."""

import pytest
from sqlalchemy import inspect

from assetcache.core.constants import ASSET_SCHEMA_VERSION, ASSET_STORE_NAME
from assetcache.domain.entities import CacheEntry
from assetcache.infrastructure.persistence.database import AssetDatabase
from assetcache.infrastructure.persistence.repositories import AssetRepository

NOW = 1_736_942_400_000


def _entry(key: str, data: bytes = b"data", asset_type: str = "image", timestamp: int = NOW, max_age: int = 1000) -> CacheEntry:
    return CacheEntry(key=key, data=data, asset_type=asset_type, timestamp=timestamp, max_age=max_age)


@pytest.mark.requires_db
async def test_open_creates_table_indexes_and_version(asset_database: AssetDatabase) -> None:
    async with asset_database.engine.connect() as conn:
        version = (await conn.exec_driver_sql("PRAGMA user_version")).scalar_one()

        def describe(sync_conn):
            inspector = inspect(sync_conn)
            columns = {c["name"] for c in inspector.get_columns(ASSET_STORE_NAME)}
            indexed = {
                col for index in inspector.get_indexes(ASSET_STORE_NAME) for col in index["column_names"]
            }
            return columns, indexed

        columns, indexed = await conn.run_sync(describe)

    assert version == ASSET_SCHEMA_VERSION
    assert columns == {"key", "data", "type", "timestamp", "max_age"}
    assert indexed == {"type", "timestamp"}


@pytest.mark.requires_db
async def test_reopen_existing_store_keeps_rows(database_url: str) -> None:
    first = AssetDatabase(database_url)
    await first.open()
    async with first.transaction("put") as session:
        await AssetRepository(session).put(_entry("kept"))
    await first.dispose()

    second = AssetDatabase(database_url)
    await second.open()
    async with second.transaction("get") as session:
        found = await AssetRepository(session).get("kept")
    await second.dispose()
    assert found == _entry("kept")


@pytest.mark.requires_db
async def test_put_replaces_whole_row(asset_database: AssetDatabase) -> None:
    async with asset_database.transaction("put") as session:
        repo = AssetRepository(session)
        await repo.put(_entry("k", b"one", "image", NOW, 1000))
        await repo.put(_entry("k", b"two", "logo", NOW + 5, 2000))
    async with asset_database.transaction("get") as session:
        found = await AssetRepository(session).get("k")
    assert found == _entry("k", b"two", "logo", NOW + 5, 2000)


@pytest.mark.requires_db
async def test_get_missing_returns_none(asset_database: AssetDatabase) -> None:
    async with asset_database.transaction("get") as session:
        assert await AssetRepository(session).get("missing") is None


@pytest.mark.requires_db
async def test_delete_with_stale_timestamp_keeps_newer_row(asset_database: AssetDatabase) -> None:
    async with asset_database.transaction("put") as session:
        await AssetRepository(session).put(_entry("k", timestamp=NOW + 100))
    async with asset_database.transaction("delete") as session:
        repo = AssetRepository(session)
        assert await repo.delete("k", timestamp=NOW) == 0
        assert await repo.get("k") is not None
        assert await repo.delete("k", timestamp=NOW + 100) == 1
        assert await repo.delete("k") == 0


@pytest.mark.requires_db
async def test_delete_expired_and_stats(asset_database: AssetDatabase) -> None:
    async with asset_database.transaction("put") as session:
        repo = AssetRepository(session)
        await repo.put(_entry("old", b"x" * 10, "image", NOW - 5000, 1000))
        await repo.put(_entry("fresh", b"x" * 20, "image", NOW, 1000))
        await repo.put(_entry("logo", b"x" * 30, "logo", NOW - 5000, 10_000))

    async with asset_database.transaction("stats") as session:
        assert await AssetRepository(session).stats_by_type() == {
            "image": (2, 30),
            "logo": (1, 30),
        }

    async with asset_database.transaction("cleanup") as session:
        assert await AssetRepository(session).delete_expired(NOW) == 1

    async with asset_database.transaction("clear") as session:
        repo = AssetRepository(session)
        assert await repo.get("old") is None
        assert await repo.clear() == 2
        assert await repo.stats_by_type() == {}
