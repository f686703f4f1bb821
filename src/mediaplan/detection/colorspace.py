"""Color space resolution and HDR detection.

HDR metadata cannot be synthesized after the fact, so HDR sources always
pass through untouched unless the user explicitly asks for a conversion.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from mediaplan.domain.models import StreamDescriptor
from mediaplan.policy.advisories import Advisory, AdvisoryCode
from mediaplan.policy.thresholds import SD_MAX_HEIGHT
from mediaplan.policy.types import ColorSpaceMode

logger = logging.getLogger(__name__)


class HDRType(Enum):
    """Type of HDR content detected in video."""

    NONE = "none"
    """No HDR detected - standard dynamic range."""

    HDR10 = "hdr10"
    """HDR10 - PQ transfer function (smpte2084) or BT.2020 primaries."""

    HLG = "hlg"
    """Hybrid Log-Gamma - broadcast HDR (arib-std-b67)."""

    DOLBY_VISION = "dolby_vision"
    """Dolby Vision - RPU/enhancement layer present on an HDR10 base."""


class ColorSpace(Enum):
    """Target color space of the encode."""

    BT601 = "bt601"
    BT709 = "bt709"
    PASSTHROUGH = "passthrough"  # HDR metadata carried through
    NONE = "none"  # No conversion requested


@dataclass(frozen=True)
class ColorSpaceDecision:
    """Result of color space resolution."""

    target: ColorSpace
    """Chosen target color space."""

    hdr_type: HDRType = HDRType.NONE
    """HDR format detected on the source."""

    advisories: tuple[Advisory, ...] = ()
    """Advisories raised while resolving."""

    @property
    def emits_filter(self) -> bool:
        """Return True if a color conversion filter step is needed."""
        return self.target in (ColorSpace.BT601, ColorSpace.BT709)


def detect_hdr_type(video: StreamDescriptor | None) -> HDRType:
    """Detect HDR type from video color metadata.

    Detection priority:
    1. Dolby Vision configuration record (probe flag)
    2. color_transfer: smpte2084 -> HDR10, arib-std-b67 -> HLG
    3. BT.2020 primaries -> HDR10
    4. Title metadata fallback

    Args:
        video: Primary video stream, or None.

    Returns:
        Detected HDRType.
    """
    if video is None:
        return HDRType.NONE

    if video.dolby_vision:
        return HDRType.DOLBY_VISION

    if video.color_transfer:
        transfer = video.color_transfer.casefold()
        if transfer == "smpte2084":
            return HDRType.HDR10
        if transfer == "arib-std-b67":
            return HDRType.HLG

    if video.color_primaries and video.color_primaries.casefold() == "bt2020":
        return HDRType.HDR10

    if video.title:
        title = video.title.casefold()
        if "dolby vision" in title or "dovi" in title:
            return HDRType.DOLBY_VISION
        if "hlg" in title:
            return HDRType.HLG
        if "hdr" in title or "bt2020" in title:
            return HDRType.HDR10

    return HDRType.NONE


def default_color_space(height: int | None) -> ColorSpace:
    """Return BT.601 for SD heights and BT.709 otherwise.

    Unknown heights are treated as HD.
    """
    if height is not None and height <= SD_MAX_HEIGHT:
        return ColorSpace.BT601
    return ColorSpace.BT709


def resolve_color_space(
    video: StreamDescriptor | None,
    mode: ColorSpaceMode = ColorSpaceMode.AUTO,
) -> ColorSpaceDecision:
    """Pick the color space handling for a title.

    Args:
        video: Primary video stream, or None if the stream list is missing.
        mode: Color space policy. NONE disables any conversion; BT601 and
            BT709 force that target even on HDR sources (with an advisory).

    Returns:
        ColorSpaceDecision. Dolby Vision sources always carry an advisory
        that only the HDR10 base layer survives re-encoding.
    """
    hdr_type = detect_hdr_type(video)
    advisories: list[Advisory] = []

    if hdr_type is HDRType.DOLBY_VISION:
        advisories.append(
            Advisory(
                AdvisoryCode.DOLBY_VISION_BASE_LAYER_ONLY,
                "Dolby Vision enhancement layer/RPU cannot be preserved; "
                "only the HDR10 base layer will survive the encode.",
            )
        )

    if mode is ColorSpaceMode.NONE:
        target = ColorSpace.NONE
    elif mode in (ColorSpaceMode.BT601, ColorSpaceMode.BT709):
        target = ColorSpace(mode.value)
        if hdr_type is not HDRType.NONE:
            advisories.append(
                Advisory(
                    AdvisoryCode.HDR_CONVERSION_OVERRIDE,
                    f"{hdr_type.value} source forced to {target.value}; "
                    "HDR metadata will be lost.",
                )
            )
    elif hdr_type is not HDRType.NONE:
        target = ColorSpace.PASSTHROUGH
    else:
        target = default_color_space(video.height if video else None)

    logger.debug(
        "Color space: hdr=%s mode=%s -> %s", hdr_type.value, mode.value, target.value
    )
    return ColorSpaceDecision(
        target=target, hdr_type=hdr_type, advisories=tuple(advisories)
    )
