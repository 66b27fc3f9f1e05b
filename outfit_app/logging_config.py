"""Structured JSON logging with correlation ids for the outfit engine."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import sys
import time
import uuid
from enum import Enum
from typing import IO, Any, Dict, Iterator, Optional

CORRELATION_ID: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else on a record came in via ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# Wardrobe rows can carry personal or commercial details that do not belong in logs.
REDACTED_FIELDS = frozenset({"user_id", "email", "image_url", "source_url", "brand", "notes"})
REDACTED = "[redacted]"

_EMAIL = re.compile(r"[\w.\-]+@[\w.\-]+")
_URL = re.compile(r"^https?://", re.IGNORECASE)


class JsonFormatter(logging.Formatter):
    """One JSON object per line: level, logger, event, correlation id and extras."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES and key not in entry:
                entry[key] = redact_for_log(value)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: int | str | None = None, stream: Optional[IO[str]] = None) -> None:
    """Route root logging through a single JSON handler.

    ``level`` falls back to ``LOG_LEVEL`` and then ``INFO``; pass
    ``EngineConfig.log_level`` to keep logging in step with engine config.
    """

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level or os.getenv("LOG_LEVEL", "INFO"))


def _redact_text(value: str) -> str:
    if _URL.match(value):
        return "[redacted-url]"
    return _EMAIL.sub("[redacted-email]", value)


def redact_for_log(value: Any) -> Any:
    """Make a value JSON-safe and strip likely PII.

    Enums log as their value and sets as sorted lists, so slots, tuck styles
    and season tags read the same in logs as in payloads.
    """

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, str):
        return _redact_text(value)
    if isinstance(value, dict):
        return {key: REDACTED if key in REDACTED_FIELDS else redact_for_log(item) for key, item in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(redact_for_log(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item) for item in value]
    return str(value)


def get_logger(name: str) -> logging.Logger:
    """Module logger; installs the JSON handler if nothing configured logging yet."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id``, keep the current one, or mint a new one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    minted = uuid.uuid4().hex
    CORRELATION_ID.set(minted)
    return minted


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with redacted structured fields and the active correlation id."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    extra = {key: redact_for_log(value) for key, value in fields.items()}
    logger.log(level, event, exc_info=exc_info, extra={"event": event, "correlation_id": correlation_id, **extra})


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id around one named engine operation and time it."""

    logger = logging.getLogger(__name__)
    with correlation_context(correlation_id) as scoped_id:
        start = time.perf_counter()
        log_event(logger, logging.DEBUG, "operation_started", operation=name)
        try:
            yield scoped_id
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            log_event(logger, logging.DEBUG, "operation_finished", operation=name, duration_ms=duration_ms)


__all__ = [
    "CORRELATION_ID",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
