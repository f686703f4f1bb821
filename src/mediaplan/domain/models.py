"""Domain models for mediaplan.

These models hold the raw measurements supplied by the media probe. They are
immutable and produced once per source file.
"""

from dataclasses import dataclass

from mediaplan.domain.enums import StreamKind

# Language tag used when a stream carries none
UNDETERMINED_LANGUAGE = "und"


@dataclass(frozen=True)
class FrameSample:
    """Frame statistics gathered over a sampled window of a title.

    Counts come from the multi-frame field detector. Repeated-field counts
    are only populated by telecine sampling.
    """

    progressive: int = 0
    tff: int = 0
    bff: int = 0
    repeated_top: int = 0
    repeated_bottom: int = 0

    def __post_init__(self) -> None:
        """Validate counts."""
        for name in ("progressive", "tff", "bff", "repeated_top", "repeated_bottom"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(
                    f"{name} must be a non-negative integer, got {value!r}"
                )

    @property
    def total(self) -> int:
        """Return the number of classified frames."""
        return self.progressive + self.tff + self.bff

    @property
    def interlaced(self) -> int:
        """Return the number of frames detected as interlaced."""
        return self.tff + self.bff

    @property
    def total_repeated(self) -> int:
        """Return the number of repeated fields."""
        return self.repeated_top + self.repeated_bottom


@dataclass(frozen=True)
class CropSample:
    """One crop rectangle observed at a sample point."""

    width: int
    height: int
    x: int
    y: int

    @property
    def area(self) -> int:
        """Return the retained picture area in pixels."""
        return self.width * self.height

    def fits_within(self, source_width: int, source_height: int) -> bool:
        """Return True if the rectangle lies inside the source frame."""
        return (
            self.width > 0
            and self.height > 0
            and self.x >= 0
            and self.y >= 0
            and self.x + self.width <= source_width
            and self.y + self.height <= source_height
        )


@dataclass(frozen=True)
class StreamDescriptor:
    """Represents one elementary stream of a source file.

    ``index`` is the position among streams of the same kind (the ``N`` in
    ffmpeg's ``0:a:N`` stream specifier), which is what output mappings use.
    """

    kind: StreamKind
    index: int
    codec: str | None = None
    language: str = UNDETERMINED_LANGUAGE
    title: str | None = None
    # Audio-specific
    channels: int | None = None
    # Video-specific
    width: int | None = None
    height: int | None = None
    bit_depth: int | None = None
    pix_fmt: str | None = None
    # HDR color metadata
    color_transfer: str | None = None  # e.g. "smpte2084" (PQ), "arib-std-b67" (HLG)
    color_primaries: str | None = None  # e.g. "bt2020"
    dolby_vision: bool = False

    @property
    def is_video(self) -> bool:
        return self.kind is StreamKind.VIDEO

    @property
    def is_audio(self) -> bool:
        return self.kind is StreamKind.AUDIO

    @property
    def is_subtitle(self) -> bool:
        return self.kind is StreamKind.SUBTITLE


@dataclass(frozen=True)
class Chapter:
    """A chapter marker: ordinal index and start time in seconds."""

    index: int
    start_time: float


def streams_of_kind(
    streams: list[StreamDescriptor] | tuple[StreamDescriptor, ...],
    kind: StreamKind,
) -> list[StreamDescriptor]:
    """Return the streams of one kind, ordered by their per-kind index."""
    return sorted((s for s in streams if s.kind is kind), key=lambda s: s.index)


def primary_video_stream(
    streams: list[StreamDescriptor] | tuple[StreamDescriptor, ...],
) -> StreamDescriptor | None:
    """Return the first video stream, or None if there is none."""
    videos = streams_of_kind(streams, StreamKind.VIDEO)
    return videos[0] if videos else None
