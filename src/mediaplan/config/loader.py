"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to load_app_config)
2. Environment variables (MEDIAPLAN_*)
3. Config file (~/.mediaplan/config.toml)
4. Default values

Environment variables:
- MEDIAPLAN_CONFIG_PATH: Path to config file (overrides default location)
- MEDIAPLAN_FFMPEG_PATH: Path to ffmpeg executable
- MEDIAPLAN_FFPROBE_PATH: Path to ffprobe executable
- MEDIAPLAN_PROBE_TIMEOUT: ffprobe timeout in seconds
- MEDIAPLAN_ANALYSIS_TIMEOUT: idet/cropdetect timeout in seconds
- MEDIAPLAN_WORKERS: Number of files planned concurrently
- MEDIAPLAN_LOG_LEVEL: debug, info, warning or error
- MEDIAPLAN_LOG_FILE: Log file path
- MEDIAPLAN_LOG_FORMAT: text or json
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from mediaplan.config.env import EnvReader
from mediaplan.config.models import (
    AppConfig,
    LoggingConfig,
    ProbeConfig,
    ProcessingConfig,
    ToolPathsConfig,
)
from mediaplan.policy.loader import PolicyValidationError, load_policy_from_dict
from mediaplan.policy.types import PlanningConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".mediaplan"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

_KNOWN_SECTIONS = frozenset({"tools", "probe", "processing", "logging", "planning"})


class ConfigError(Exception):
    """Application config file or environment could not be applied."""


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by the MEDIAPLAN_CONFIG_PATH environment variable.
    """
    reader = env_reader or EnvReader()
    return reader.get_path("MEDIAPLAN_CONFIG_PATH") or DEFAULT_CONFIG_FILE


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a TOML config file.

    Args:
        path: Path to the config file.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    unknown = sorted(set(data) - _KNOWN_SECTIONS)
    if unknown:
        logger.warning("Ignoring unknown config sections in %s: %s", path, unknown)
    logger.debug("Loaded config from %s", path)
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def _pick(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _as_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


def _load_planning(data: dict[str, Any]) -> PlanningConfig:
    section = _section(data, "planning")
    if not section:
        return PlanningConfig()
    try:
        return load_policy_from_dict(section)
    except PolicyValidationError as e:
        raise ConfigError(f"[planning] {e.message}") from e


def load_app_config(
    config_path: Path | None = None,
    *,
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    workers: int | None = None,
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    env_reader: EnvReader | None = None,
) -> AppConfig:
    """Load the application configuration with full precedence handling.

    Args:
        config_path: Config file (overrides MEDIAPLAN_CONFIG_PATH).
        ffmpeg_path: CLI override for the ffmpeg binary.
        ffprobe_path: CLI override for the ffprobe binary.
        workers: CLI override for the worker count.
        log_level: CLI override for the log level.
        log_file: CLI override for the log file.
        log_format: CLI override for the log format ("text" or "json").
        env_reader: Optional EnvReader for testing (uses os.environ if None).

    Returns:
        Merged AppConfig.

    Raises:
        ConfigError: If the file is malformed or a value is invalid.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    data = load_config_file(path)

    tools = _section(data, "tools")
    probe = _section(data, "probe")
    processing = _section(data, "processing")
    log = _section(data, "logging")

    try:
        return AppConfig(
            tools=ToolPathsConfig(
                ffmpeg=_pick(
                    ffmpeg_path,
                    reader.get_path("MEDIAPLAN_FFMPEG_PATH"),
                    _as_path(tools.get("ffmpeg")),
                ),
                ffprobe=_pick(
                    ffprobe_path,
                    reader.get_path("MEDIAPLAN_FFPROBE_PATH"),
                    _as_path(tools.get("ffprobe")),
                ),
            ),
            probe=ProbeConfig(
                timeout=int(
                    _pick(
                        reader.get_int("MEDIAPLAN_PROBE_TIMEOUT"),
                        probe.get("timeout"),
                        ProbeConfig.timeout,
                    )
                ),
                analysis_timeout=int(
                    _pick(
                        reader.get_int("MEDIAPLAN_ANALYSIS_TIMEOUT"),
                        probe.get("analysis_timeout"),
                        ProbeConfig.analysis_timeout,
                    )
                ),
            ),
            processing=ProcessingConfig(
                workers=int(
                    _pick(
                        workers,
                        reader.get_int("MEDIAPLAN_WORKERS"),
                        processing.get("workers"),
                        ProcessingConfig.workers,
                    )
                ),
            ),
            logging=LoggingConfig(
                level=_pick(
                    log_level,
                    reader.get_str("MEDIAPLAN_LOG_LEVEL"),
                    log.get("level"),
                    LoggingConfig.level,
                ),
                file=_pick(
                    log_file,
                    reader.get_path("MEDIAPLAN_LOG_FILE"),
                    _as_path(log.get("file")),
                ),
                format=_pick(
                    log_format,
                    reader.get_str("MEDIAPLAN_LOG_FORMAT"),
                    log.get("format"),
                    LoggingConfig.format,
                ),
                include_stderr=bool(
                    log.get("include_stderr", LoggingConfig.include_stderr)
                ),
                max_bytes=int(log.get("max_bytes", LoggingConfig.max_bytes)),
                backup_count=int(log.get("backup_count", LoggingConfig.backup_count)),
            ),
            planning=_load_planning(data),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
