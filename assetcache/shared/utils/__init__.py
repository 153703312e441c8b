"""Shared utilities."""

from assetcache.shared.utils.datetime import Clock, now_ms

__all__ = ["Clock", "now_ms"]
