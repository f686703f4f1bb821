"""MediaProbe interface for sampling and probing source files."""

from pathlib import Path
from typing import Protocol

from mediaplan.domain.models import Chapter, CropSample, FrameSample, StreamDescriptor


class ProbeError(Exception):
    """Raised when a probe operation cannot produce data."""

    pass


class ProbeTimeoutError(ProbeError):
    """Raised when a probe subprocess exceeds its time limit."""

    def __init__(self, operation: str, path: Path, timeout: float) -> None:
        self.operation = operation
        self.path = path
        self.timeout = timeout
        super().__init__(f"{operation} timed out for {path} after {timeout}s")


class MediaProbe(Protocol):
    """Protocol for media probe implementations.

    Implementations decode frames and run analysis filters on behalf of the
    planners. Every operation raises ProbeError (or ProbeTimeoutError) when
    no data can be obtained; callers treat that as missing data.
    """

    def sample_interlace(
        self, path: Path, window_start_pct: float, frame_count: int
    ) -> FrameSample:
        """Run field detection over frame_count frames starting at a fraction
        of the title duration."""
        ...

    def sample_telecine(self, path: Path, frame_count: int) -> FrameSample:
        """Run field detection from the start of the title, including
        repeated-field counts."""
        ...

    def sample_crop(
        self, path: Path, time_fractions: tuple[float, ...]
    ) -> list[CropSample]:
        """Detect a crop rectangle at each fraction of the title duration."""
        ...

    def probe_streams(self, path: Path) -> list[StreamDescriptor]:
        """Return the elementary streams of the file."""
        ...

    def probe_chapters(self, path: Path) -> list[Chapter]:
        """Return the chapter markers of the file (possibly empty)."""
        ...

    def probe_duration(self, path: Path) -> float | None:
        """Return the title duration in seconds, or None if unknown."""
        ...
