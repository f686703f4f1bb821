"""Encoding plan types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mediaplan.detection.colorspace import ColorSpaceDecision
from mediaplan.detection.crop import CropRect
from mediaplan.domain.enums import FieldOrder
from mediaplan.plan.filters import FilterStep
from mediaplan.policy.advisories import Advisory
from mediaplan.policy.audio import AudioPlan
from mediaplan.policy.chapters import Episode, GroupingDecision
from mediaplan.policy.encoder import EncoderChoice
from mediaplan.policy.subtitles import SubtitlePlan


@dataclass(frozen=True)
class VideoAnalysis:
    """Classifier outcomes that shaped the video filter chain."""

    field_order: FieldOrder = FieldOrder.PROGRESSIVE
    telecined: bool = False
    adaptive_deinterlace: bool = False
    crop: CropRect | None = None
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class EncodingPlan:
    """Immutable encoding plan for one source file.

    Built by build_encoding_plan() from probe data; identical inputs always
    produce equal plans.
    """

    source_file: Path
    video: VideoAnalysis
    filters: tuple[FilterStep, ...]
    """Video filter chain in application order."""

    encoder: EncoderChoice
    color: ColorSpaceDecision
    audio: AudioPlan
    subtitles: SubtitlePlan
    episodes: tuple[Episode, ...]
    grouping: GroupingDecision
    advisories: tuple[Advisory, ...] = ()
    """Policy conflicts and fallbacks the caller should surface."""

    warnings: tuple[str, ...] = ()
    """Missing or degraded probe data."""

    @property
    def is_split(self) -> bool:
        """Return True if the file is cut into chapter-grouped episodes."""
        return any(ep.chapter_span is not None for ep in self.episodes)
