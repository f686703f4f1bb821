"""JSON log output for batch planning runs."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Set on every record by WorkerContextFilter
_WORKER_FIELDS = ("worker_id", "file_id", "file_path")

# Attributes of a bare LogRecord, plus ones added by formatting and filters
_BUILTIN_ATTRS: frozenset[str] = frozenset(
    logging.makeLogRecord({}).__dict__
) | {"message", "asctime", "worker_tag", *_WORKER_FIELDS}


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Collect ``extra`` attributes and the worker/file ids of a record."""
    context = {
        key: value
        for key, value in vars(record).items()
        if key not in _BUILTIN_ATTRS and not key.startswith("_")
    }
    context.update(
        (name, getattr(record, name))
        for name in _WORKER_FIELDS
        if getattr(record, name, None)
    )
    return context


class JSONFormatter(logging.Formatter):
    """Render each record as a single-line JSON object.

    Keys: ``timestamp`` (UTC, ISO-8601), ``level``, ``message``, ``logger``
    (omitted for the root logger), ``context`` (the worker and file being
    planned plus any ``extra`` values, omitted when empty) and
    ``exception``. Values json cannot encode are stringified, so a Path in
    ``extra`` is logged as its text.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        context = _record_context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)
