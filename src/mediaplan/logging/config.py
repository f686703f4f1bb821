"""Root logger setup for the mediaplan CLI.

Every handler carries WorkerContextFilter, so records emitted while a batch
worker plans a file are tagged with that worker and file, in text output
as a ``[W01:F003] `` prefix and in JSON output under ``context``.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from mediaplan.logging.context import WorkerContextFilter
from mediaplan.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from mediaplan.config.models import LoggingConfig

_LEVEL_MAP: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

TEXT_FORMAT = "%(asctime)s - %(worker_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def _make_formatter(log_format: str) -> logging.Formatter:
    if log_format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _open_log_file(config: LoggingConfig) -> RotatingFileHandler | None:
    """Open the rotating log file, or return None if it cannot be created."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {config.file}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    Output goes to the rotating log file when one is configured and can be
    opened, and to stderr when no file is in use or ``include_stderr`` is
    set.

    Args:
        config: Logging section of the application config.
    """
    level = _LEVEL_MAP.get(config.level.casefold(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for old in list(root_logger.handlers):
        root_logger.removeHandler(old)
        old.close()

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _make_formatter(config.format)
    context_filter = WorkerContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)
