"""Persistence: async engine, session factory, and Base for the asset store.

The store is an SQLite file driven by SQLAlchemy's asyncio extension over
aiosqlite. AssetDatabase owns the engine; nothing is created at import
time. open() runs the one-time schema step: when the file's
PRAGMA user_version is below ASSET_SCHEMA_VERSION the assets table and its
indexes are created if absent and the version is recorded.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from assetcache.core.config import get_settings
from assetcache.core.constants import ASSET_SCHEMA_VERSION
from assetcache.infrastructure.exceptions import StorageUnavailable, TransactionFailure

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


class AssetDatabase:
    """Owns the engine and session factory for one asset store file.

    Call open() before transaction(); dispose() releases the connection
    pool. open() is not guarded against concurrent callers: AssetCache
    serializes it behind its init-once task.
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        echo: bool | None = None,
        busy_timeout: float | None = None,
    ) -> None:
        """Initialize from explicit arguments, falling back to settings.

        Args:
            database_url: sqlite+aiosqlite URL of the store file.
            echo: Log emitted SQL.
            busy_timeout: Seconds a writer waits on a locked database.
        """
        settings = get_settings()
        self.database_url = database_url or settings.database_url
        self.echo = settings.database_echo if echo is None else echo
        self.busy_timeout = (
            settings.database_busy_timeout_seconds if busy_timeout is None else busy_timeout
        )
        self.engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_open(self) -> bool:
        return self._sessionmaker is not None

    async def open(self) -> None:
        """Create the engine and apply the schema step. Idempotent once open.

        Raises:
            StorageUnavailable: If the file cannot be opened or the schema step fails.
        """
        if self.is_open:
            return
        # Register the asset model on Base.metadata before create_all.
        from assetcache.infrastructure.persistence.models import CachedAsset  # noqa: F401

        try:
            engine = create_async_engine(
                self.database_url,
                echo=self.echo,
                connect_args={"timeout": self.busy_timeout},
            )
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e
        try:
            async with engine.begin() as conn:
                result = await conn.exec_driver_sql("PRAGMA user_version")
                version = result.scalar_one()
                if version < ASSET_SCHEMA_VERSION:
                    await conn.run_sync(Base.metadata.create_all)
                    # PRAGMA does not accept bound parameters; the value is an int constant.
                    await conn.exec_driver_sql(
                        f"PRAGMA user_version = {int(ASSET_SCHEMA_VERSION)}"
                    )
                    logger.info(
                        "Asset store schema upgraded: version %s -> %s",
                        version,
                        ASSET_SCHEMA_VERSION,
                    )
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise StorageUnavailable(str(e)) from e
        self.engine = engine
        self._sessionmaker = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Asset store opened: %s", self.database_url)

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Yield a session inside a transaction; commit on success, roll back on error.

        Args:
            operation: Name used in TransactionFailure and logs (e.g. 'store').

        Raises:
            StorageUnavailable: If open() has not succeeded.
            TransactionFailure: If any SQLAlchemy error occurs inside the block or at commit,
                or the driver rejects a value outside the 64-bit integer range.
        """
        if self._sessionmaker is None:
            raise StorageUnavailable("asset store is not open")
        try:
            async with self._sessionmaker() as session:
                async with session.begin():
                    yield session
        except (SQLAlchemyError, OverflowError) as e:
            raise TransactionFailure(operation, str(e)) from e

    async def dispose(self) -> None:
        """Dispose the engine. The database can be opened again afterwards."""
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Asset store closed: %s", self.database_url)
        self.engine = None
        self._sessionmaker = None
