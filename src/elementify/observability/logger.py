"""Structured JSON logger for elementify.

Every log record is emitted as a single-line JSON object so transform
diagnostics can be shipped to a log pipeline without extra parsing.

Typical structured output::

    {"ts": "2026-10-19T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "elementify.converter", "message": "markdown parse failed",
     "op": "convert", "input_length": 42}

Usage::

    from elementify.observability import get_logger

    log = get_logger("elementify.converter")
    log.warning("markdown parse failed", extra={"extra_fields": {"op": "convert"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys: ``ts``, ``level``, ``logger``, ``message``.  Fields
    passed as ``extra={"extra_fields": {...}}`` are merged into the top
    level; ``exception`` and ``stack_info`` appear when the record has them.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


# One handler per logger name, so repeated get_logger calls never stack
# handlers.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "elementify",
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"elementify"``.
    level:
        Minimum log level as an ``int`` or a case-insensitive name.  The
        transform runs once per document, so the default of ``WARNING``
        keeps it quiet unless something is actually wrong.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The named logger with a :class:`StructuredFormatter` handler.
        Only the first call for a given *name* configures it.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
