"""Application configuration: TOML file, MEDIAPLAN_* environment, CLI."""

from mediaplan.config.env import EnvReader
from mediaplan.config.loader import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    get_default_config_path,
    load_app_config,
    load_config_file,
)
from mediaplan.config.models import (
    AppConfig,
    LoggingConfig,
    ProbeConfig,
    ProcessingConfig,
    ToolPathsConfig,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "AppConfig",
    "ConfigError",
    "EnvReader",
    "LoggingConfig",
    "ProbeConfig",
    "ProcessingConfig",
    "ToolPathsConfig",
    "get_default_config_path",
    "load_app_config",
    "load_config_file",
]
