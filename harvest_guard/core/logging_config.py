"""JSON logging for the API and scripts, with a queryable in-memory tail."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Optional

from pythonjsonlogger import jsonlogger

from harvest_guard.core.config import settings

# Assessment context callers attach with ``extra={...}``
CONTEXT_FIELDS = ("batch_id", "location")

_CONFIGURED = False
_LOG_BUFFER: deque[dict[str, str]] = deque(maxlen=settings.log_buffer_size)


class _AssessmentContextFilter(logging.Filter):
    """Stamp the service name and default the context fields to null."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        for field in CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, None)
        return True


class _RecentRecordsHandler(logging.Handler):
    """Keep the newest records for ``GET /api/logs``."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "time": datetime.fromtimestamp(record.created, tz=timezone.utc)
                .isoformat()
                .replace("+00:00", "Z"),
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
            }
            for field in CONTEXT_FIELDS:
                value = getattr(record, field, None)
                if value is not None:
                    entry[field] = str(value)
            _LOG_BUFFER.appendleft(entry)
        except Exception:
            self.handleError(record)


def setup_logging(service_name: Optional[str] = None, level: Optional[str] = None) -> None:
    """Install JSON console output and the in-memory tail on the root logger."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    context = _AssessmentContextFilter(service_name or settings.service_name)

    console = logging.StreamHandler()
    console.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s %(service)s %(batch_id)s %(location)s"
        )
    )
    console.addFilter(context)

    tail = _RecentRecordsHandler()
    tail.addFilter(context)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.addHandler(tail)
    root.setLevel((level or settings.log_level).upper())
    logging.captureWarnings(True)
    _CONFIGURED = True


def get_log_buffer(
    limit: int = 100,
    min_level: Optional[str] = None,
    location: Optional[str] = None,
    batch_id: Optional[str] = None,
) -> list[dict[str, str]]:
    """Newest records first, optionally filtered by severity or assessment context."""

    threshold = _level_number(min_level) if min_level else None
    if threshold is None and min_level:
        raise ValueError(f"Unknown log level: {min_level}")

    entries = []
    for entry in _LOG_BUFFER:
        if threshold is not None and (_level_number(entry["level"]) or 0) < threshold:
            continue
        if location is not None and entry.get("location") != location:
            continue
        if batch_id is not None and entry.get("batch_id") != batch_id:
            continue
        entries.append(entry)
        if len(entries) >= limit:
            break
    return entries


def _level_number(name: str) -> Optional[int]:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else None


__all__ = ["CONTEXT_FIELDS", "setup_logging", "get_log_buffer"]
