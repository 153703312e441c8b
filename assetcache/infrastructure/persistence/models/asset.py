"""CachedAsset ORM model. One row per cached asset in the assets record space."""

from sqlalchemy import BigInteger, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from assetcache.core.constants import ASSET_STORE_NAME, ASSET_TYPE_MAX_LENGTH
from assetcache.infrastructure.persistence.database import Base


class CachedAsset(Base):
    """Cached asset row. Table: assets.

    key is the primary key (a write with an existing key replaces the row).
    type is indexed for stats, timestamp for cleanup scans. timestamp and
    max_age are epoch/duration milliseconds.
    """

    __tablename__ = ASSET_STORE_NAME

    key: Mapped[str] = mapped_column(String, primary_key=True)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    asset_type: Mapped[str] = mapped_column(
        "type", String(ASSET_TYPE_MAX_LENGTH), nullable=False, index=True
    )
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    max_age: Mapped[int] = mapped_column(BigInteger, nullable=False)
