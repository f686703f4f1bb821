"""Environment variable reader with dependency injection support.

EnvReader reads and converts MEDIAPLAN_* variables. Tests inject a plain
mapping instead of touching os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Environment variable reader with type conversion.

    Example:
        reader = EnvReader(env={"MEDIAPLAN_WORKERS": "4"})
        reader.get_int("MEDIAPLAN_WORKERS", 2)  # Returns 4
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string from an environment variable."""
        value = self._env.get(var)
        if value is None:
            return default
        return value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Get an integer from an environment variable.

        Args:
            var: Environment variable name.
            default: Default value if not set or invalid.

        Returns:
            Parsed integer, or default if not set or unparsable. An
            unparsable value is logged as a warning.
        """
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a boolean from an environment variable.

        "true", "1", "yes" and "on" (any case) are true; any other set
        value is false.
        """
        value = self._env.get(var)
        if value is None:
            return default
        return value.strip().lower() in _TRUE_VALUES

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Get a user-expanded path from an environment variable."""
        value = self._env.get(var)
        if not value:
            return default
        return Path(value).expanduser()
