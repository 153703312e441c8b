"""Logging configuration for scripts and host applications."""

import logging
import sys

from assetcache.core.config import get_settings

# Chatty third-party loggers: aiosqlite logs every driver call at DEBUG,
# httpx logs every request at INFO.
_NOISY_LOGGERS = ("aiosqlite", "httpx", "httpcore")


def setup_logging() -> None:
    """Configure process-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO. Output goes
    to stdout. Driver and HTTP client loggers are held at WARNING so cache
    HIT/MISS lines stay readable at DEBUG.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
