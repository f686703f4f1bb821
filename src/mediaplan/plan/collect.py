"""Gathering probe data for one source file.

This is the only place planning touches the media probe. Each probe
operation that fails becomes missing data plus a warning; the builder then
resolves missing data to its documented fallback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from mediaplan.detection.telecine import classify_telecine, should_check_telecine
from mediaplan.domain.models import (
    Chapter,
    CropSample,
    FrameSample,
    StreamDescriptor,
    primary_video_stream,
)
from mediaplan.introspector.interface import MediaProbe, ProbeError
from mediaplan.policy.chapters import usable_duration
from mediaplan.policy.types import PlanningConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ProbeData:
    """Raw measurements for one file. None marks data that is unavailable."""

    streams: tuple[StreamDescriptor, ...] | None = None
    chapters: tuple[Chapter, ...] = ()
    duration: float | None = None
    interlace: FrameSample | None = None
    telecine: FrameSample | None = None
    crops: tuple[CropSample, ...] = ()
    warnings: tuple[str, ...] = ()


def _attempt(
    operation: str,
    path: Path,
    call: Callable[[], T],
    warnings: list[str],
) -> T | None:
    try:
        return call()
    except ProbeError as e:
        logger.warning("%s failed for %s: %s", operation, path.name, e)
        warnings.append(f"{operation}: {e}")
        return None


def collect_probe_data(
    probe: MediaProbe, path: Path, config: PlanningConfig
) -> ProbeData:
    """Run the probe operations a plan for ``path`` needs.

    Sampling is skipped where the configuration makes it irrelevant: no
    telecine sampling when pulldown checks do not apply, no interlace
    sampling when the title is telecined, interlace detection is off or an
    adaptive deinterlacer is requested, and no crop sampling when crop
    detection is off.

    Args:
        probe: Media probe implementation.
        path: Source file.
        config: Planning configuration.

    Returns:
        ProbeData with every failed operation left as None (or empty).
    """
    warnings: list[str] = []

    streams = _attempt(
        "probe_streams", path, lambda: probe.probe_streams(path), warnings
    )
    duration = _attempt(
        "probe_duration", path, lambda: probe.probe_duration(path), warnings
    )
    if duration is not None and usable_duration(duration) is None:
        logger.warning("Ignoring duration %r for %s", duration, path.name)
        warnings.append(f"probe_duration: unusable value {duration!r}")
        duration = None
    chapters = _attempt(
        "probe_chapters", path, lambda: probe.probe_chapters(path), warnings
    )

    video = primary_video_stream(streams) if streams is not None else None
    height = video.height if video else None

    telecine = None
    if should_check_telecine(config.pulldown, height):
        telecine = _attempt(
            "sample_telecine",
            path,
            lambda: probe.sample_telecine(path, config.telecine_frame_count),
            warnings,
        )

    interlace = None
    if (
        config.detect_interlacing
        and not config.adaptive_deinterlace
        and not classify_telecine(telecine)
    ):
        interlace = _attempt(
            "sample_interlace",
            path,
            lambda: probe.sample_interlace(
                path, config.interlace_window_start, config.interlace_frame_count
            ),
            warnings,
        )

    crops = None
    if config.detect_crop:
        crops = _attempt(
            "sample_crop",
            path,
            lambda: probe.sample_crop(path, config.crop_sample_points),
            warnings,
        )

    return ProbeData(
        streams=tuple(streams) if streams is not None else None,
        chapters=tuple(chapters or ()),
        duration=duration,
        interlace=interlace,
        telecine=telecine,
        crops=tuple(crops or ()),
        warnings=tuple(warnings),
    )
