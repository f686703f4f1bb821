"""Application configuration models.

Defines the dataclasses for the sections of ``~/.mediaplan/config.toml``.
Planning knobs live in PlanningConfig; everything here configures how the
planner is run rather than what it decides.
"""

from dataclasses import dataclass, field
from pathlib import Path

from mediaplan.policy.types import PlanningConfig

_VALID_LEVELS = frozenset({"debug", "info", "warning", "error"})
_VALID_FORMATS = frozenset({"text", "json"})


@dataclass(frozen=True)
class ToolPathsConfig:
    """Paths to the external media tools.

    None means the binary is looked up on PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass(frozen=True)
class ProbeConfig:
    """Subprocess timeouts for media probing."""

    # ffprobe metadata queries (seconds)
    timeout: int = 60

    # idet / cropdetect analysis passes (seconds)
    analysis_timeout: int = 300

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.timeout < 1 or self.analysis_timeout < 1:
            raise ValueError("probe timeouts must be at least 1 second")


@dataclass(frozen=True)
class ProcessingConfig:
    """Batch planning settings."""

    # Number of files planned concurrently
    workers: int = 2

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")


@dataclass(frozen=True)
class LoggingConfig:
    """Logging output settings."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.level.lower() not in _VALID_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(_VALID_LEVELS)}, got {self.level}"
            )
        if self.format.lower() not in _VALID_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(_VALID_FORMATS)}, got {self.format}"
            )


@dataclass(frozen=True)
class AppConfig:
    """Merged application configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    planning: PlanningConfig = field(default_factory=PlanningConfig)
