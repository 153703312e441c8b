"""Domain exceptions for the asset cache.

Defines domain-level exceptions independent of storage concerns. The
cache boundary converts them into miss values; nothing here is meant to
reach a caller of AssetCache's data methods.
"""

from typing import Any


class AssetCacheException(Exception):
    """Base exception for all asset cache errors.

    All custom exceptions inherit from this class so the cache boundary
    can catch the whole taxonomy in one clause.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. key, operation).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(AssetCacheException):
    """Raised when input validation fails (e.g. empty key or negative max age)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)
