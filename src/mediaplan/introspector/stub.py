"""In-memory MediaProbe for tests and dry runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mediaplan.domain.models import Chapter, CropSample, FrameSample, StreamDescriptor
from mediaplan.introspector.interface import ProbeError


@dataclass
class StubMedia:
    """Canned probe data for one file.

    A field left as None makes the corresponding operation raise ProbeError,
    which simulates a failed or timed-out probe.
    """

    streams: list[StreamDescriptor] | None = field(default_factory=list)
    chapters: list[Chapter] | None = field(default_factory=list)
    duration: float | None = None
    interlace: FrameSample | None = field(default_factory=FrameSample)
    telecine: FrameSample | None = field(default_factory=FrameSample)
    crops: list[CropSample] | None = field(default_factory=list)


class StubProbe:
    """MediaProbe that serves StubMedia entries keyed by path.

    Records every call so tests can assert which operations ran.
    """

    def __init__(self, media: dict[Path, StubMedia] | None = None) -> None:
        self._media = dict(media or {})
        self.calls: list[tuple[str, Path]] = []

    def add(self, path: Path, media: StubMedia) -> None:
        """Register canned data for a path."""
        self._media[path] = media

    def _get(self, operation: str, path: Path) -> StubMedia:
        self.calls.append((operation, path))
        try:
            return self._media[path]
        except KeyError:
            raise ProbeError(f"No stub data for {path}") from None

    @staticmethod
    def _require(value, operation: str, path: Path):
        if value is None:
            raise ProbeError(f"{operation} unavailable for {path}")
        return value

    def sample_interlace(
        self, path: Path, window_start_pct: float, frame_count: int
    ) -> FrameSample:
        media = self._get("sample_interlace", path)
        return self._require(media.interlace, "sample_interlace", path)

    def sample_telecine(self, path: Path, frame_count: int) -> FrameSample:
        media = self._get("sample_telecine", path)
        return self._require(media.telecine, "sample_telecine", path)

    def sample_crop(
        self, path: Path, time_fractions: tuple[float, ...]
    ) -> list[CropSample]:
        media = self._get("sample_crop", path)
        return list(self._require(media.crops, "sample_crop", path))

    def probe_streams(self, path: Path) -> list[StreamDescriptor]:
        media = self._get("probe_streams", path)
        return list(self._require(media.streams, "probe_streams", path))

    def probe_chapters(self, path: Path) -> list[Chapter]:
        media = self._get("probe_chapters", path)
        return list(self._require(media.chapters, "probe_chapters", path))

    def probe_duration(self, path: Path) -> float | None:
        return self._get("probe_duration", path).duration
