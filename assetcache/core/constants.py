"""Core constants: asset store schema, default lifetimes, and well-known keys.

Single source of truth for literals shared by the cache, the repository and
the asset loader.
"""

# Durable store schema. Bump ASSET_SCHEMA_VERSION when the table layout changes.
ASSET_STORE_NAME = "assets"
ASSET_SCHEMA_VERSION = 1

# Lifetimes are milliseconds since they are compared to epoch-ms timestamps.
MS_PER_DAY = 24 * 60 * 60 * 1000
DEFAULT_MAX_AGE_MS = 7 * MS_PER_DAY
DEFAULT_ASSET_TYPE = "asset"

# Logo asset (the cached-logo consumer)
LOGO_CACHE_KEY = "elra-logo-v2"
LOGO_ASSET_TYPE = "logo"
LOGO_MAX_AGE_MS = 30 * MS_PER_DAY

ASSET_TYPE_MAX_LENGTH = 64

# Largest value an SQLite INTEGER column holds (signed 64-bit).
SQLITE_INTEGER_MAX = 2**63 - 1
