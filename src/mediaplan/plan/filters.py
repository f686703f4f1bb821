"""Video filter steps.

A filter chain is an ordered tuple of step values. Each step type carries
only the parameters it needs; ``name`` and ``params`` give the flat
string-keyed form used by the parameter serializer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from mediaplan.detection.colorspace import ColorSpace
from mediaplan.detection.crop import CropRect
from mediaplan.domain.enums import FieldOrder


class DeinterlaceKind(Enum):
    """Where deinterlacing runs."""

    SOFTWARE = "software"
    HARDWARE = "hardware"


@dataclass(frozen=True)
class Crop:
    rect: CropRect

    name = "crop"

    @property
    def params(self) -> dict[str, str]:
        return {"rect": self.rect.as_filter_value()}


@dataclass(frozen=True)
class InverseTelecine:
    """Field matching, deinterlace of unmatched fields, then decimation."""

    name = "inverse_telecine"

    @property
    def params(self) -> dict[str, str]:
        return {}


@dataclass(frozen=True)
class Deinterlace:
    """Deinterlace step.

    ``parity`` is None for adaptive deinterlacing, where the filter detects
    field order and only touches frames flagged interlaced.
    """

    kind: DeinterlaceKind
    parity: FieldOrder | None = None
    adaptive: bool = False

    name = "deinterlace"

    @property
    def params(self) -> dict[str, str]:
        params = {"kind": self.kind.value, "adaptive": str(self.adaptive).lower()}
        if self.parity is not None:
            params["parity"] = self.parity.value
        return params


@dataclass(frozen=True)
class FormatConvert:
    pix_fmt: str

    name = "format"

    @property
    def params(self) -> dict[str, str]:
        return {"pix_fmt": self.pix_fmt}


@dataclass(frozen=True)
class HardwareUpload:
    name = "hwupload"

    @property
    def params(self) -> dict[str, str]:
        return {}


@dataclass(frozen=True)
class ColorConvert:
    """Color matrix conversion; always the last step of a chain."""

    target: ColorSpace

    name = "color"

    @property
    def params(self) -> dict[str, str]:
        return {"matrix": self.target.value}


FilterStep = Union[
    Crop, InverseTelecine, Deinterlace, FormatConvert, HardwareUpload, ColorConvert
]
