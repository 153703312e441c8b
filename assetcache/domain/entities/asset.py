"""Cache entry domain entity.

Represents one cached asset and its liveness rule, independent of the
storage engine.
"""

from dataclasses import dataclass

from assetcache.core.constants import (
    ASSET_TYPE_MAX_LENGTH,
    DEFAULT_ASSET_TYPE,
    DEFAULT_MAX_AGE_MS,
    SQLITE_INTEGER_MAX,
)
from assetcache.domain.exceptions import ValidationException


def is_expired(timestamp: int, max_age: int, now: int) -> bool:
    """Return whether an entry written at timestamp is stale at now.

    An entry is live iff max_age > 0 and now - timestamp <= max_age. A
    max_age of zero has no tolerance at all: the entry is expired as soon
    as it is written.

    Args:
        timestamp: Write time, epoch milliseconds.
        max_age: Allowed age in milliseconds.
        now: Current time, epoch milliseconds.
    """
    if max_age <= 0:
        return True
    return now - timestamp > max_age


@dataclass(frozen=True)
class CacheEntry:
    """Domain entity for a cached binary asset.

    key is unique in the store; a write with an existing key replaces the
    whole entry. timestamp is set at write time and never touched by reads.
    Validation runs on construction.
    """

    key: str
    data: bytes
    asset_type: str
    timestamp: int
    max_age: int

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate entry invariants. Raises ValidationException if invalid."""
        if not isinstance(self.key, str) or not self.key:
            raise ValidationException("Asset key must be a non-empty string", field="key")
        if not isinstance(self.data, bytes):
            raise ValidationException("Asset data must be bytes", field="data")
        if (
            not isinstance(self.asset_type, str)
            or not self.asset_type
            or len(self.asset_type) > ASSET_TYPE_MAX_LENGTH
        ):
            raise ValidationException(
                f"Asset type must be a string of 1-{ASSET_TYPE_MAX_LENGTH} characters",
                field="asset_type",
            )
        if not isinstance(self.max_age, int) or isinstance(self.max_age, bool):
            raise ValidationException("max_age must be an integer", field="max_age")
        if not 0 <= self.max_age <= SQLITE_INTEGER_MAX:
            raise ValidationException(
                f"max_age must be between 0 and {SQLITE_INTEGER_MAX}", field="max_age"
            )

    @classmethod
    def create(
        cls,
        key: str,
        data: bytes | bytearray | memoryview,
        now: int,
        asset_type: str = DEFAULT_ASSET_TYPE,
        max_age: int = DEFAULT_MAX_AGE_MS,
    ) -> "CacheEntry":
        """Build a fresh entry stamped with now.

        Raises:
            ValidationException: If data is not a bytes-like object or any field is invalid.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ValidationException("Asset data must be bytes-like", field="data")
        return cls(
            key=key,
            data=bytes(data),
            asset_type=asset_type,
            timestamp=now,
            max_age=max_age,
        )

    @property
    def size(self) -> int:
        """Payload size in bytes."""
        return len(self.data)

    def age(self, now: int) -> int:
        """Milliseconds elapsed since the entry was written."""
        return now - self.timestamp

    def is_expired(self, now: int) -> bool:
        return is_expired(self.timestamp, self.max_age, now)
