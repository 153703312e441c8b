"""
Clock utilities for cache timestamps.

Cache timestamps and lifetimes are integer epoch milliseconds. Use these
helpers instead of time.time() arithmetic scattered across modules.
"""

import time
from collections.abc import Callable

# A clock returns the current time as epoch milliseconds.
Clock = Callable[[], int]


def now_ms() -> int:
    """
    Return the current time as integer milliseconds since the Unix epoch.

    Default clock for AssetCache; tests inject their own.

    Returns:
        Epoch milliseconds
    """
    return time.time_ns() // 1_000_000
