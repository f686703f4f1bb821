"""Encoding plan construction.

build_encoding_plan() combines the classifier and planner outputs into one
immutable EncodingPlan. It performs no I/O. Each component runs behind a
guard: an unexpected failure degrades that component to its safe default,
records a warning and an advisory, and never aborts the plan.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from mediaplan.detection.colorspace import (
    ColorSpaceDecision,
    default_color_space,
    resolve_color_space,
)
from mediaplan.detection.crop import CropRect, estimate_crop
from mediaplan.detection.interlace import classify_interlace
from mediaplan.detection.telecine import classify_telecine, should_check_telecine
from mediaplan.domain.enums import ContentType, FieldOrder, StreamKind
from mediaplan.domain.models import (
    StreamDescriptor,
    primary_video_stream,
    streams_of_kind,
)
from mediaplan.exceptions import ClassificationError
from mediaplan.plan.collect import ProbeData
from mediaplan.plan.filters import (
    ColorConvert,
    Crop,
    Deinterlace,
    DeinterlaceKind,
    FilterStep,
    FormatConvert,
    HardwareUpload,
    InverseTelecine,
)
from mediaplan.plan.types import EncodingPlan, VideoAnalysis
from mediaplan.policy.advisories import Advisory, AdvisoryCode
from mediaplan.policy.audio import (
    AudioAction,
    AudioPlan,
    AudioTrackSelection,
    plan_audio,
)
from mediaplan.policy.chapters import (
    Episode,
    GroupingDecision,
    segment_episodes,
    usable_duration,
)
from mediaplan.policy.encoder import (
    EncoderChoice,
    EncoderKind,
    bit_depth_from_pix_fmt,
    select_encoder,
)
from mediaplan.policy.subtitles import SubtitlePlan, plan_subtitles
from mediaplan.policy.thresholds import DEFAULT_BIT_DEPTH
from mediaplan.policy.types import PlanningConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Guard:
    """Runs plan components, substituting defaults on failure."""

    def __init__(self, source_file: Path) -> None:
        self.source_file = source_file
        self.warnings: list[str] = []
        self.advisories: list[Advisory] = []

    def run(
        self, component: str, call: Callable[[], T], fallback: Callable[[], T]
    ) -> T:
        try:
            return call()
        except ClassificationError as e:
            logger.warning("%s for %s, using fallback", e, self.source_file.name)
            return self._fallback(component, e.reason, fallback)
        except Exception as e:
            logger.warning(
                "%s failed for %s, using fallback: %s",
                component,
                self.source_file.name,
                e,
                exc_info=True,
            )
            return self._fallback(component, str(e), fallback)

    def _fallback(self, component: str, reason: str, fallback: Callable[[], T]) -> T:
        self.warnings.append(f"{component}: {reason}")
        self.advisories.append(
            Advisory(
                AdvisoryCode.COMPONENT_FALLBACK,
                f"{component} fell back to its default decision.",
            )
        )
        return fallback()


def source_bit_depth(video: StreamDescriptor | None) -> int:
    """Return the video bit depth, inferring it from the pixel format."""
    if video is None:
        return DEFAULT_BIT_DEPTH
    if video.bit_depth:
        return video.bit_depth
    return bit_depth_from_pix_fmt(video.pix_fmt) or DEFAULT_BIT_DEPTH


def build_filter_chain(
    encoder: EncoderChoice,
    crop: CropRect | None,
    field_order: FieldOrder,
    telecined: bool,
    adaptive: bool,
    color: ColorSpaceDecision,
) -> tuple[FilterStep, ...]:
    """Order the video filter steps for an encode.

    Software: crop, inverse telecine or deinterlace, format conversion,
    color conversion. Hardware: crop, inverse telecine, format conversion,
    upload, hardware deinterlace, color conversion. Color conversion is
    always last so that it sees the final pixel layout.
    """
    hardware = encoder.kind is EncoderKind.HARDWARE
    steps: list[FilterStep] = []

    if crop is not None:
        steps.append(Crop(crop))

    deinterlace: Deinterlace | None = None
    if not telecined and (adaptive or field_order.is_interlaced):
        deinterlace = Deinterlace(
            kind=DeinterlaceKind.HARDWARE if hardware else DeinterlaceKind.SOFTWARE,
            parity=None if adaptive else field_order,
            adaptive=adaptive,
        )

    if telecined:
        steps.append(InverseTelecine())
    elif deinterlace is not None and not hardware:
        steps.append(deinterlace)

    steps.append(FormatConvert(encoder.pix_fmt))

    if hardware:
        steps.append(HardwareUpload())
        if deinterlace is not None:
            steps.append(deinterlace)

    if color.emits_filter:
        steps.append(ColorConvert(color.target))

    return tuple(steps)


def _fallback_encoder(height: int | None) -> EncoderChoice:
    return select_encoder(height, DEFAULT_BIT_DEPTH, PlanningConfig())


def _fallback_audio(
    tracks: list[StreamDescriptor], config: PlanningConfig
) -> AudioPlan:
    """First track as the only, default track at the stereo tier."""
    if not tracks:
        return AudioPlan()
    first = tracks[0]
    return AudioPlan(
        selections=(
            AudioTrackSelection(
                source_index=first.index,
                output_index=0,
                action=AudioAction.TRANSCODE,
                codec=config.audio_codec,
                bitrate=config.audio_bitrates.stereo,
                language=first.language,
                title=first.title,
                is_default=True,
                reason="fallback",
            ),
        )
    )


def build_encoding_plan(
    source_file: Path,
    data: ProbeData,
    config: PlanningConfig,
    content_type: ContentType | None = None,
) -> EncodingPlan:
    """Build the encoding plan for one source file.

    Args:
        source_file: Path of the source file.
        data: Measurements gathered by collect_probe_data().
        config: Planning configuration.
        content_type: Series or movie; overrides config.content_type.

    Returns:
        EncodingPlan. Equal inputs always produce equal plans.
    """
    guard = _Guard(source_file)
    warnings = list(data.warnings)
    duration = usable_duration(data.duration)
    if data.duration is not None and duration is None:
        warnings.append(f"Ignoring unusable duration {data.duration!r}")

    streams = list(data.streams or ())
    video = primary_video_stream(streams)
    if data.streams is not None and video is None:
        warnings.append("No video stream found")
    width = video.width if video else None
    height = video.height if video else None

    telecined = guard.run(
        "telecine",
        lambda: should_check_telecine(config.pulldown, height)
        and classify_telecine(data.telecine),
        lambda: False,
    )
    adaptive = config.adaptive_deinterlace and not telecined

    if telecined or adaptive or not config.detect_interlacing:
        field_order = FieldOrder.PROGRESSIVE
    else:
        field_order = guard.run(
            "interlace",
            lambda: classify_interlace(data.interlace),
            lambda: FieldOrder.PROGRESSIVE,
        )

    crop = None
    if config.detect_crop:
        crop = guard.run(
            "crop",
            lambda: estimate_crop(list(data.crops), width, height),
            lambda: None,
        )

    encoder = guard.run(
        "encoder",
        lambda: select_encoder(height, source_bit_depth(video), config),
        lambda: _fallback_encoder(height),
    )

    color = guard.run(
        "color_space",
        lambda: resolve_color_space(video, config.color_space),
        lambda: ColorSpaceDecision(target=default_color_space(height)),
    )

    audio_tracks = streams_of_kind(streams, StreamKind.AUDIO)
    audio = guard.run(
        "audio",
        lambda: plan_audio(audio_tracks, config),
        lambda: _fallback_audio(audio_tracks, config),
    )

    subtitles = guard.run(
        "subtitles",
        lambda: plan_subtitles(
            streams_of_kind(streams, StreamKind.SUBTITLE),
            config.languages,
            audio.default_language,
        ),
        SubtitlePlan,
    )

    whole_file = (
        (Episode(source_file, 1, None, 0.0, duration),),
        GroupingDecision(None),
    )
    episodes, grouping = guard.run(
        "chapters",
        lambda: segment_episodes(
            source_file, data.chapters, duration, config, content_type
        ),
        lambda: whole_file,
    )

    filters = build_filter_chain(encoder, crop, field_order, telecined, adaptive, color)

    advisories = [
        *color.advisories,
        *encoder.advisories,
        *grouping.advisories,
        *guard.advisories,
    ]

    plan = EncodingPlan(
        source_file=source_file,
        video=VideoAnalysis(
            field_order=field_order,
            telecined=telecined,
            adaptive_deinterlace=adaptive,
            crop=crop,
            width=width,
            height=height,
        ),
        filters=filters,
        encoder=encoder,
        color=color,
        audio=audio,
        subtitles=subtitles,
        episodes=episodes,
        grouping=grouping,
        advisories=tuple(advisories),
        warnings=tuple(warnings + guard.warnings),
    )
    logger.debug(
        "Plan for %s: %s, %d filter(s), %d audio, %d subtitle, %d episode(s)",
        source_file.name,
        encoder.encoder,
        len(filters),
        len(audio.selections),
        len(subtitles.selections),
        len(episodes),
    )
    return plan

