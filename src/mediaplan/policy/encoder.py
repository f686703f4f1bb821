"""Encoder, profile and bit depth selection.

SD content is encoded in software for finer filter control during color
correction; HD and above goes to the hardware encoder for throughput. The
hardware encoders in use stop at 10-bit, so 12-bit output is software-only.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from mediaplan.policy.advisories import Advisory, AdvisoryCode
from mediaplan.policy.thresholds import (
    DEFAULT_BIT_DEPTH,
    HARDWARE_MAX_BIT_DEPTH,
    SD_MAX_HEIGHT,
)
from mediaplan.policy.types import EncoderMode, PlanningConfig

logger = logging.getLogger(__name__)

SOFTWARE_ENCODER = "libx265"
HARDWARE_ENCODER = "hevc_vaapi"

# (profile, pixel format) per output bit depth
_SOFTWARE_FORMATS: dict[int, tuple[str, str]] = {
    8: ("main", "yuv420p"),
    10: ("main10", "yuv420p10le"),
    12: ("main12", "yuv420p12le"),
}
_HARDWARE_FORMATS: dict[int, tuple[str, str]] = {
    8: ("main", "nv12"),
    10: ("main10", "p010le"),
}

_PIX_FMT_DEPTH_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"(p12|12le|12be|p012|p212|p412)"), 12),
    (re.compile(r"(p10|10le|10be|p010|p210|p410)"), 10),
)


class EncoderKind(Enum):
    """Class of video encoder."""

    SOFTWARE = "software"
    HARDWARE = "hardware"


@dataclass(frozen=True)
class EncoderChoice:
    """Chosen encoder and output format."""

    kind: EncoderKind
    encoder: str
    """FFmpeg encoder name (e.g., 'libx265', 'hevc_vaapi')."""

    profile: str
    """HEVC profile (main, main10, main12)."""

    pix_fmt: str
    """Pixel format fed to the encoder."""

    bit_depth: int
    """Output bit depth after upgrade/downgrade rules."""

    source_bit_depth: int
    """Bit depth detected on the source."""

    advisories: tuple[Advisory, ...] = ()


def bit_depth_from_pix_fmt(pix_fmt: str | None) -> int | None:
    """Infer bit depth from an ffmpeg pixel format name.

    Args:
        pix_fmt: Pixel format such as 'yuv420p10le' or 'p010le'.

    Returns:
        12, 10 or 8, or None if pix_fmt is empty.
    """
    if not pix_fmt:
        return None
    fmt = pix_fmt.casefold()
    for pattern, depth in _PIX_FMT_DEPTH_PATTERNS:
        if pattern.search(fmt):
            return depth
    return 8


def output_bit_depth(
    source_bit_depth: int | None,
    upgrade_8bit: bool = True,
    downgrade_12bit: bool = False,
) -> int:
    """Apply the bit depth upgrade/downgrade rules.

    Args:
        source_bit_depth: Detected source depth; None means 8-bit.
        upgrade_8bit: Promote 8-bit sources to 10-bit output.
        downgrade_12bit: Reduce 12-bit sources to 10-bit output.

    Returns:
        Output bit depth (8, 10 or 12).
    """
    depth = source_bit_depth or DEFAULT_BIT_DEPTH
    if depth > 12:
        depth = 12
    elif depth not in (8, 10, 12):
        depth = 10 if depth > 8 else 8

    if depth == 8 and upgrade_8bit:
        return 10
    if depth == 12 and downgrade_12bit:
        return 10
    return depth


def select_encoder(
    height: int | None,
    source_bit_depth: int | None,
    config: PlanningConfig,
) -> EncoderChoice:
    """Choose encoder kind, profile and pixel format.

    Auto policy: 12-bit output forces software; otherwise heights up to
    SD_MAX_HEIGHT use software and everything else (including unknown
    heights) uses hardware. An explicit encoder override always wins; a
    hardware override on 12-bit output is clamped to 10-bit and flagged.

    Args:
        height: Source frame height, or None if unknown.
        source_bit_depth: Detected source bit depth, or None.
        config: Planning configuration.

    Returns:
        EncoderChoice describing the encode.
    """
    source_depth = source_bit_depth or DEFAULT_BIT_DEPTH
    depth = output_bit_depth(source_depth, config.upgrade_8bit, config.downgrade_12bit)
    advisories: list[Advisory] = []

    if config.encoder is EncoderMode.SOFTWARE:
        kind = EncoderKind.SOFTWARE
    elif config.encoder is EncoderMode.HARDWARE:
        kind = EncoderKind.HARDWARE
        if depth > HARDWARE_MAX_BIT_DEPTH:
            advisories.append(
                Advisory(
                    AdvisoryCode.TWELVE_BIT_HARDWARE_OVERRIDE,
                    f"Hardware encoder forced on {depth}-bit content; output "
                    f"reduced to {HARDWARE_MAX_BIT_DEPTH}-bit.",
                )
            )
            depth = HARDWARE_MAX_BIT_DEPTH
    elif depth > HARDWARE_MAX_BIT_DEPTH:
        kind = EncoderKind.SOFTWARE
    elif height is not None and height <= SD_MAX_HEIGHT:
        kind = EncoderKind.SOFTWARE
    else:
        kind = EncoderKind.HARDWARE

    if kind is EncoderKind.SOFTWARE:
        encoder = SOFTWARE_ENCODER
        profile, pix_fmt = _SOFTWARE_FORMATS[depth]
    else:
        encoder = HARDWARE_ENCODER
        profile, pix_fmt = _HARDWARE_FORMATS[depth]

    logger.debug(
        "Encoder: height=%s depth=%d->%d mode=%s -> %s/%s",
        height,
        source_depth,
        depth,
        config.encoder.value,
        encoder,
        profile,
    )
    return EncoderChoice(
        kind=kind,
        encoder=encoder,
        profile=profile,
        pix_fmt=pix_fmt,
        bit_depth=depth,
        source_bit_depth=source_depth,
        advisories=tuple(advisories),
    )
