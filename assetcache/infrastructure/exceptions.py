"""Infrastructure exceptions for the durable store and outbound fetches.

Storage errors extend AssetCacheException so the cache boundary maps them
to miss values consistently.
"""

from assetcache.domain.exceptions import AssetCacheException


class StorageUnavailable(AssetCacheException):
    """The durable store could not be opened (missing path, permission, corrupt file)."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Asset store unavailable: {reason}",
            "STORAGE_UNAVAILABLE",
            {"reason": reason},
        )


class TransactionFailure(AssetCacheException):
    """A single get/put/delete/scan transaction failed."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Asset store transaction failed: {operation}",
            "TRANSACTION_FAILURE",
            {"operation": operation, "reason": reason},
        )


class AssetFetchException(AssetCacheException):
    """Fetching an asset from its source failed (transport error or non-2xx)."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        details: dict[str, str | int] = {"url": url, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            f"Failed to fetch asset: {url}",
            "ASSET_FETCH_ERROR",
            details,
        )
