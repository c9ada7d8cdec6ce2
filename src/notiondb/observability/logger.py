"""Single-line JSON logging for notiondb.

The transport logs through :func:`get_logger`; structured fields are passed
as ``extra={"extra_fields": {...}}`` and merged into the emitted object::

    {"ts": "2026-10-19T12:00:00.000000+00:00", "level": "WARNING",
     "logger": "notiondb.transport", "message": "Rate limited by Notion API",
     "method": "POST", "path": "/databases/abc/query", "retry_after": 2}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any


class StructuredFormatter(logging.Formatter):
    """Render each record as one JSON object.

    Guaranteed keys are ``ts``, ``level``, ``logger`` and ``message``;
    ``exception`` is added when the record carries exception info.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "extra_fields", None)
        if isinstance(fields, dict):
            entry.update(fields)
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


# Loggers that already received a handler from get_logger.
_configured: set[str] = set()


def get_logger(
    name: str = "notiondb",
    *,
    level: int | str = logging.WARNING,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Return the logger *name* with a :class:`StructuredFormatter` handler.

    The handler is attached once per name, so repeated calls are cheap and
    never duplicate output.  *level* accepts ``logging`` constants or their
    names (``"DEBUG"``).
    """
    logger = logging.getLogger(name)
    if name in _configured:
        return logger

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _configured.add(name)
    return logger
