"""Structured JSON logging for notionpress.

Each record is written as one JSON object per line::

    {"ts": "2026-01-05T09:30:00.000000+00:00", "level": "INFO",
     "logger": "notionpress.publish", "message": "chunk published",
     "op": "publish_chunk", "parent_id": "...", "blocks": 100}

Structured fields travel in ``extra={"extra_fields": {...}}``.  Only the
package logger ``notionpress`` owns a handler; module loggers such as
``notionpress.transport`` propagate to it.  The default level is
``WARNING``; call ``get_logger().setLevel(logging.DEBUG)`` to see the
per-request events.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER_NAME = "notionpress"


class StructuredFormatter(logging.Formatter):
    """Render a :class:`logging.LogRecord` as a single-line JSON object.

    The keys ``ts``, ``level``, ``logger`` and ``message`` are always
    present; ``extra_fields`` are merged at the top level and exception
    text is added under ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields:
            entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def _configure_root(level: int | str, stream: Any | None) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.setLevel(level.upper() if isinstance(level, str) else level)
        root.propagate = False
    return root


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Return a logger under the ``notionpress`` hierarchy.

    Parameters
    ----------
    name:
        Logger name, e.g. ``"notionpress.publish"``.
    level:
        Level applied to the package logger the first time it is
        configured.  Accepts an ``int`` or a level name.
    stream:
        Handler stream; defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        Repeated calls never attach a second handler.
    """
    root = _configure_root(level, stream)
    if name == ROOT_LOGGER_NAME:
        return root
    return logging.getLogger(name)
