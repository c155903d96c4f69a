"""Centralized logging helpers.

Every module obtains its logger via ``logging.getLogger(__name__)``; this
module owns handler/format setup and the small helpers used to attach
structured context to DEBUG traces without leaking credentials.
"""
from __future__ import annotations

import logging
import os
import re
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_KEYS = ("token", "access_token", "auth", "key", "password", "secret")
_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9_\-\.]+", re.IGNORECASE)
_GH_TOKEN_RE = re.compile(r"\b(gh[pousr]_|github_pat_)[A-Za-z0-9_]+")


def configure_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> None:
    """Configure root logging once for the process.

    Level precedence: explicit ``level`` argument, then the METAPKG_LOG_LEVEL
    environment variable, then INFO.

    Args:
        level: Optional level name (e.g. "DEBUG").
        logfile: Optional path; when set, records are also appended there.
    """
    name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    value = getattr(logging, name, logging.INFO)
    if not isinstance(value, int):
        value = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(Constants.LOG_FORMAT)
    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if logfile:
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s " + Constants.LOG_FORMAT))
        root.addHandler(file_handler)

    root.setLevel(value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped so formatters only see populated fields.
    """
    return {key: value for key, value in fields.items() if value is not None}


def redact(text: Optional[str]) -> str:
    """Mask bearer tokens and GitHub personal access tokens in ``text``."""
    if not text:
        return ""
    masked = _BEARER_RE.sub(r"\1***", text)
    return _GH_TOKEN_RE.sub("***", masked)


def safe_url(url: str) -> str:
    """Return ``url`` with credential-looking query parameters masked."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    if not parts.query:
        return redact(url)
    query = []
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key.lower() in _SENSITIVE_KEYS:
            value = "***"
        query.append((key, value))
    return redact(urlunsplit(parts._replace(query=urlencode(query))))


class Timer:
    """Context manager measuring elapsed wall time in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds so far (or total, once the block exited)."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
