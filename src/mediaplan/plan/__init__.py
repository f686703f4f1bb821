"""Encoding plan construction and rendering.

- collect_probe_data: run the media probe for one file
- build_encoding_plan: pure combination of classifier/planner outputs
- plan_to_parameters / plan_to_dict: flat and nested renderings
"""

from mediaplan.plan.builder import build_encoding_plan, build_filter_chain
from mediaplan.plan.collect import ProbeData, collect_probe_data
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
from mediaplan.plan.serializer import plan_to_dict, plan_to_parameters
from mediaplan.plan.types import EncodingPlan, VideoAnalysis

__all__ = [
    "ColorConvert",
    "Crop",
    "Deinterlace",
    "DeinterlaceKind",
    "EncodingPlan",
    "FilterStep",
    "FormatConvert",
    "HardwareUpload",
    "InverseTelecine",
    "ProbeData",
    "VideoAnalysis",
    "build_encoding_plan",
    "build_filter_chain",
    "collect_probe_data",
    "plan_to_dict",
    "plan_to_parameters",
]
