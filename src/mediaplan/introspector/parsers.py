"""Pure parsing functions for ffmpeg and ffprobe output.

These functions turn analysis-filter logs and ffprobe JSON into domain
objects. All functions are pure (no I/O, no side effects) for easy testing.
"""

import logging
import math
import re
from collections import Counter

from mediaplan.domain.enums import StreamKind
from mediaplan.domain.language import normalize_language
from mediaplan.domain.models import Chapter, CropSample, FrameSample, StreamDescriptor

logger = logging.getLogger(__name__)

_MULTI_FRAME_RE = re.compile(
    r"Multi frame detection:\s*TFF:\s*(\d+)\s+BFF:\s*(\d+)\s+Progressive:\s*(\d+)"
)
_REPEATED_FIELDS_RE = re.compile(r"Repeated Fields:.*?Top:\s*(\d+)\s+Bottom:\s*(\d+)")
_CROP_RE = re.compile(r"crop=(\d+):(\d+):(\d+):(\d+)")

# Trailing cropdetect lines considered per sample point; early lines are
# noisy while the detector settles.
CROPDETECT_TAIL_LINES = 20

_STREAM_KINDS: dict[str, StreamKind] = {
    "video": StreamKind.VIDEO,
    "audio": StreamKind.AUDIO,
    "subtitle": StreamKind.SUBTITLE,
}

_DOVI_SIDE_DATA = "DOVI configuration record"
_DOVI_CODEC_TAGS = frozenset({"dvh1", "dvhe", "dav1", "dva1", "dvav"})


def sanitize_string(value: str | None) -> str | None:
    """Replace invalid UTF-8 characters in a tag value."""
    if value is None:
        return None
    return value.encode("utf-8", errors="replace").decode("utf-8")


def parse_idet_output(output: str) -> FrameSample | None:
    """Parse the summary of ffmpeg's idet filter.

    Uses the last "Multi frame detection" line (the end-of-stream summary)
    and, when present, the last "Repeated Fields" line.

    Args:
        output: Combined stderr of an ffmpeg run with ``-vf idet``.

    Returns:
        FrameSample, or None if no multi-frame summary was printed.
    """
    multi = _MULTI_FRAME_RE.findall(output)
    if not multi:
        return None
    tff, bff, progressive = (int(v) for v in multi[-1])

    repeated_top = repeated_bottom = 0
    repeated = _REPEATED_FIELDS_RE.findall(output)
    if repeated:
        repeated_top, repeated_bottom = (int(v) for v in repeated[-1])

    return FrameSample(
        progressive=progressive,
        tff=tff,
        bff=bff,
        repeated_top=repeated_top,
        repeated_bottom=repeated_bottom,
    )


def parse_cropdetect_output(
    output: str, tail: int = CROPDETECT_TAIL_LINES
) -> CropSample | None:
    """Parse ffmpeg cropdetect output at one sample point.

    The most frequent rectangle among the trailing ``tail`` reports wins;
    ties go to the most recent report.

    Args:
        output: Combined stderr of an ffmpeg run with ``-vf cropdetect``.
        tail: Number of trailing reports to consider.

    Returns:
        CropSample, or None if cropdetect printed nothing.
    """
    rects = [tuple(int(v) for v in m) for m in _CROP_RE.findall(output)][-tail:]
    if not rects:
        return None
    counts = Counter(rects)
    last_seen = {rect: pos for pos, rect in enumerate(rects)}
    width, height, x, y = max(counts, key=lambda r: (counts[r], last_seen[r]))
    return CropSample(width=width, height=height, x=x, y=y)


def _positive_int(value: object, field_name: str) -> int | None:
    if value is None:
        return None
    try:
        number = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        logger.warning("Expected int for %s, got %r", field_name, value)
        return None
    if number <= 0:
        logger.warning("Invalid non-positive %s: %d", field_name, number)
        return None
    return number


def parse_float(value: object) -> float | None:
    """Parse a numeric ffprobe field, returning None for unusable values."""
    if value is None:
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def has_dolby_vision(stream: dict) -> bool:
    """Return True if an ffprobe video stream carries Dolby Vision."""
    for side_data in stream.get("side_data_list") or []:
        if side_data.get("side_data_type") == _DOVI_SIDE_DATA:
            return True
    return (stream.get("codec_tag_string") or "").casefold() in _DOVI_CODEC_TAGS


def parse_streams(data: dict) -> list[StreamDescriptor]:
    """Parse ffprobe ``-show_streams`` JSON into stream descriptors.

    Indices are assigned per kind in file order, matching ffmpeg's
    ``0:v:N`` / ``0:a:N`` / ``0:s:N`` stream specifiers. Streams of other
    kinds (attachments, data) are ignored.

    Args:
        data: Parsed ffprobe JSON.

    Returns:
        Stream descriptors in file order.
    """
    counters: Counter[StreamKind] = Counter()
    descriptors: list[StreamDescriptor] = []

    for stream in sorted(data.get("streams") or [], key=lambda s: s.get("index", 0)):
        kind = _STREAM_KINDS.get(stream.get("codec_type", ""))
        if kind is None:
            continue
        # Cover art is reported as a video stream
        if kind is StreamKind.VIDEO and (stream.get("disposition") or {}).get(
            "attached_pic"
        ):
            continue

        tags = stream.get("tags") or {}
        index = counters[kind]
        counters[kind] += 1

        fields: dict = {
            "kind": kind,
            "index": index,
            "codec": stream.get("codec_name"),
            "language": normalize_language(tags.get("language")),
            "title": sanitize_string(tags.get("title")),
        }
        if kind is StreamKind.AUDIO:
            fields["channels"] = _positive_int(stream.get("channels"), "channels")
        elif kind is StreamKind.VIDEO:
            fields.update(
                width=_positive_int(stream.get("width"), "width"),
                height=_positive_int(stream.get("height"), "height"),
                bit_depth=_positive_int(
                    stream.get("bits_per_raw_sample"), "bits_per_raw_sample"
                ),
                pix_fmt=stream.get("pix_fmt"),
                color_transfer=stream.get("color_transfer"),
                color_primaries=stream.get("color_primaries"),
                dolby_vision=has_dolby_vision(stream),
            )
        descriptors.append(StreamDescriptor(**fields))

    return descriptors


def parse_chapters(data: dict) -> list[Chapter]:
    """Parse ffprobe ``-show_chapters`` JSON into chapters.

    Chapters whose start time cannot be parsed are skipped; range checks
    are left to the chapter segmenter.
    """
    chapters: list[Chapter] = []
    for position, chapter in enumerate(data.get("chapters") or []):
        start = parse_float(chapter.get("start_time"))
        if start is None:
            logger.warning(
                "Skipping chapter %d with unparsable start %r",
                position,
                chapter.get("start_time"),
            )
            continue
        chapters.append(Chapter(index=position, start_time=start))
    return chapters


def parse_duration(data: dict) -> float | None:
    """Return the container duration in seconds, or None."""
    duration = parse_float((data.get("format") or {}).get("duration"))
    if duration is None or duration <= 0:
        return None
    return duration
