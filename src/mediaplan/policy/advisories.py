"""Advisory flags attached to encoding plans.

An advisory marks a decision the caller should surface to the user: a
policy conflict resolved in favour of an explicit override, metadata that
cannot survive the encode, or a component that fell back to its default.
"""

from dataclasses import dataclass
from enum import Enum


class AdvisoryCode(Enum):
    """Kinds of advisories a plan can carry."""

    DOLBY_VISION_BASE_LAYER_ONLY = "dolby_vision_base_layer_only"
    HDR_CONVERSION_OVERRIDE = "hdr_conversion_override"
    TWELVE_BIT_HARDWARE_OVERRIDE = "twelve_bit_hardware_override"
    CHAPTER_OVERRIDE_REJECTED = "chapter_override_rejected"
    COMPONENT_FALLBACK = "component_fallback"


@dataclass(frozen=True)
class Advisory:
    """A single advisory with a human-readable message."""

    code: AdvisoryCode
    message: str

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"
