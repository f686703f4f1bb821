"""Structured logging with JSON output, file rotation and worker context."""

from mediaplan.logging.config import configure_logging
from mediaplan.logging.context import (
    WorkerContextFilter,
    get_worker_context,
    worker_context,
)
from mediaplan.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "WorkerContextFilter",
    "configure_logging",
    "get_worker_context",
    "worker_context",
]
