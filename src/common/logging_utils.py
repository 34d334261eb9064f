"""Centralized logging helpers.

Provides the root logger setup used by the CLI, the ``extra_context`` helper
for structured DEBUG traces, URL redaction and a small timing context manager.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_QUERY_KEYS = ("token", "access_token", "api_key", "apikey", "password", "secret")


def configure_logging(log_file: Optional[str] = None) -> None:
    """Configure the root logger from the environment.

    The level is read from ``FEATUREBRANCH_LOG_LEVEL`` (default INFO). Calling
    this more than once replaces the previously installed handlers.
    """
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=Constants.LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted for ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records, dropping None values."""
    return {k: v for k, v in kwargs.items() if v is not None}


def safe_url(url: str) -> str:
    """Strip credentials and sensitive query parameters from a URL for logging."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid-url>"

    netloc = parts.netloc
    if "@" in netloc:
        netloc = "***@" + netloc.rsplit("@", 1)[1]

    query = parts.query
    if query:
        kept = []
        for pair in query.split("&"):
            key = pair.split("=", 1)[0]
            if key.lower() in _SENSITIVE_QUERY_KEYS:
                kept.append(f"{key}=***")
            else:
                kept.append(pair)
        query = "&".join(kept)

    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
