"""Classifiers that turn sampled measurements into video decisions.

All functions in this package are pure and can be tested without ffmpeg:

- classify_interlace: progressive / TFF / BFF from frame statistics
- classify_telecine, should_check_telecine: 3:2 pulldown detection
- estimate_crop: conservative, macroblock-aligned crop rectangle
- resolve_color_space, detect_hdr_type: BT.601 / BT.709 / HDR passthrough
"""

from mediaplan.detection.colorspace import (
    ColorSpace,
    ColorSpaceDecision,
    HDRType,
    default_color_space,
    detect_hdr_type,
    resolve_color_space,
)
from mediaplan.detection.crop import CropRect, align_down, estimate_crop
from mediaplan.detection.interlace import classify_interlace, interlaced_percentage
from mediaplan.detection.telecine import (
    classify_telecine,
    repeated_field_percentage,
    should_check_telecine,
)

__all__ = [
    "ColorSpace",
    "ColorSpaceDecision",
    "CropRect",
    "HDRType",
    "align_down",
    "classify_interlace",
    "classify_telecine",
    "default_color_space",
    "detect_hdr_type",
    "estimate_crop",
    "interlaced_percentage",
    "repeated_field_percentage",
    "resolve_color_space",
    "should_check_telecine",
]
