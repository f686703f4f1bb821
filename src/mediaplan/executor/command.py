"""FFmpeg command rendering for encoding plans.

Turns an EncodingPlan into an ffmpeg argument vector: the video filter
string, encoder options, stream maps with per-track codecs, dispositions
and, for split files, the seek window of one episode. Nothing is executed
here; the CLI prints the command and the caller's invoker runs it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mediaplan.detection.colorspace import ColorSpace, HDRType
from mediaplan.domain.enums import FieldOrder
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
from mediaplan.plan.types import EncodingPlan
from mediaplan.policy.audio import AudioAction
from mediaplan.policy.chapters import Episode
from mediaplan.policy.encoder import EncoderKind
from mediaplan.policy.types import EncodeSettings, PlanningConfig

logger = logging.getLogger(__name__)

INVERSE_TELECINE_FILTER = (
    "fieldmatch=order=tff:mode=pc_n:mchroma=false,yadif=deint=interlaced,decimate"
)

# bwdif parity: 0 = top field first, 1 = bottom field first
_BWDIF_PARITY = {FieldOrder.TFF: 0, FieldOrder.BFF: 1}

# x265 / ffmpeg color tags per target; SD uses SMPTE 170M (NTSC/PAL digital)
_COLOR_TAGS: dict[ColorSpace, str] = {
    ColorSpace.BT601: "smpte170m",
    ColorSpace.BT709: "bt709",
}

_HDR_TRANSFER: dict[HDRType, str] = {
    HDRType.HDR10: "smpte2084",
    HDRType.DOLBY_VISION: "smpte2084",  # base layer is HDR10
    HDRType.HLG: "arib-std-b67",
}


def render_filter_step(step: FilterStep) -> str:
    """Render one filter step as an ffmpeg filtergraph fragment."""
    if isinstance(step, Crop):
        return f"crop={step.rect.as_filter_value()}"
    if isinstance(step, InverseTelecine):
        return INVERSE_TELECINE_FILTER
    if isinstance(step, Deinterlace):
        if step.kind is DeinterlaceKind.HARDWARE:
            if step.adaptive:
                return "deinterlace_vaapi=mode=motion_adaptive:rate=frame"
            return "deinterlace_vaapi=rate=frame"
        if step.adaptive:
            return "yadif=mode=0:parity=-1:deint=1"
        parity = _BWDIF_PARITY.get(step.parity, -1)
        return f"bwdif=mode=0:parity={parity}:deint=0"
    if isinstance(step, FormatConvert):
        return f"format={step.pix_fmt}"
    if isinstance(step, HardwareUpload):
        return "hwupload"
    if isinstance(step, ColorConvert):
        matrix = step.target.value
        return (
            f"scale=in_color_matrix={matrix}:out_color_matrix={matrix}:flags=lanczos"
        )
    raise TypeError(f"Unknown filter step: {step!r}")


def render_filter_chain(plan: EncodingPlan) -> str:
    """Render the plan's video filters as a comma-joined filtergraph.

    On the hardware path the color conversion runs on the GPU surface, so
    it is rendered with scale_vaapi instead of the software scaler.
    """
    hardware = plan.encoder.kind is EncoderKind.HARDWARE
    parts = []
    for step in plan.filters:
        if hardware and isinstance(step, ColorConvert):
            matrix = _COLOR_TAGS[step.target]
            parts.append(f"scale_vaapi=out_color_matrix={matrix}")
        else:
            parts.append(render_filter_step(step))
    return ",".join(parts)


def _x265_params(plan: EncodingPlan, settings: EncodeSettings) -> str:
    params = (
        f"keyint={settings.gop_size}:min-keyint={settings.min_keyint}"
        f":bframes={settings.bframes}:ref={settings.refs}"
        f":pools={settings.x265_pools}"
    )
    tag = _COLOR_TAGS.get(plan.color.target)
    if tag:
        params += f":colorprim={tag}:transfer={tag}:colormatrix={tag}:range=limited"
    return params


def hdr_passthrough_args(hdr_type: HDRType) -> list[str]:
    """Return output color tags that keep HDR signalling on re-encode.

    Args:
        hdr_type: HDR format of the source.

    Returns:
        ffmpeg color arguments, or an empty list for SDR sources.
    """
    transfer = _HDR_TRANSFER.get(hdr_type)
    if transfer is None:
        return []
    return [
        "-colorspace",
        "bt2020nc",
        "-color_primaries",
        "bt2020",
        "-color_trc",
        transfer,
    ]


def _video_args(plan: EncodingPlan, settings: EncodeSettings) -> list[str]:
    encoder = plan.encoder
    if encoder.kind is EncoderKind.HARDWARE:
        args = [
            "-c:v",
            encoder.encoder,
            "-rc_mode",
            "CQP",
            "-qp",
            str(settings.quality),
            "-g",
            str(settings.gop_size),
            "-keyint_min",
            str(settings.min_keyint),
            "-bf",
            str(settings.bframes),
            "-low_power",
            "false",
            "-refs",
            str(settings.refs),
            "-profile:v",
            encoder.profile,
        ]
    else:
        args = [
            "-c:v",
            encoder.encoder,
            "-preset",
            settings.preset,
            "-crf",
            str(settings.quality),
            "-pix_fmt",
            encoder.pix_fmt,
            "-x265-params",
            _x265_params(plan, settings),
        ]
    if plan.color.target is ColorSpace.PASSTHROUGH:
        args.extend(hdr_passthrough_args(plan.color.hdr_type))
    return args


def _audio_args(plan: EncodingPlan, config: PlanningConfig) -> list[str]:
    args: list[str] = []
    for sel in plan.audio.selections:
        out = sel.output_index
        args.extend(["-map", f"0:a:{sel.source_index}"])
        if sel.action is AudioAction.COPY:
            args.extend([f"-c:a:{out}", "copy"])
        else:
            args.extend(
                [
                    f"-c:a:{out}",
                    sel.codec or config.audio_codec,
                    f"-profile:a:{out}",
                    config.audio_profile,
                    f"-b:a:{out}",
                    sel.bitrate or config.audio_bitrates.stereo,
                ]
            )
    for sel in plan.audio.selections:
        disposition = "default" if sel.is_default else "0"
        args.extend([f"-disposition:a:{sel.output_index}", disposition])
    return args


def _subtitle_args(plan: EncodingPlan) -> list[str]:
    subs = plan.subtitles
    if not subs.selections:
        return []
    args: list[str] = []
    for sub in subs.selections:
        args.extend(["-map", f"0:s:{sub.source_index}"])
    args.extend(["-c:s", "copy", "-disposition:s", "0"])
    if subs.default_output_index is not None:
        args.extend([f"-disposition:s:{subs.default_output_index}", "default"])
    return args


def build_ffmpeg_args(
    plan: EncodingPlan,
    output_path: Path,
    config: PlanningConfig,
    episode: Episode | None = None,
    ffmpeg_path: Path | str = "ffmpeg",
) -> list[str]:
    """Build the ffmpeg argument vector that executes a plan.

    Args:
        plan: Plan to render.
        output_path: Destination file.
        config: Planning configuration (audio profile and encode settings).
        episode: Episode of a split file to encode; None encodes the whole
            file.
        ffmpeg_path: ffmpeg binary.

    Returns:
        List of command arguments, starting with the binary.
    """
    settings = config.encode
    args: list[str] = [str(ffmpeg_path), "-hide_banner"]

    hardware = plan.encoder.kind is EncoderKind.HARDWARE
    if hardware:
        args.extend(["-vaapi_device", settings.vaapi_device])

    if episode is not None and episode.chapter_span is not None:
        args.extend(["-ss", f"{episode.start_time:.3f}"])
        if episode.duration is not None:
            args.extend(["-t", f"{episode.duration:.3f}"])

    args.extend(["-i", str(plan.source_file), "-map", "0:v:0"])
    args.extend(_audio_args(plan, config))
    args.extend(_subtitle_args(plan))
    args.extend(_video_args(plan, settings))

    filter_chain = render_filter_chain(plan)
    if filter_chain:
        args.extend(["-vf", filter_chain])

    if episode is None or episode.chapter_span is None:
        args.extend(["-map_chapters", "0"])
    else:
        args.extend(["-map_chapters", "-1"])

    args.extend(["-f", settings.container, str(output_path), "-y"])
    logger.debug("ffmpeg command for %s: %d args", plan.source_file.name, len(args))
    return args
