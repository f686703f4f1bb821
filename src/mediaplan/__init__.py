"""mediaplan - encoding-plan decisions for video titles.

Probe a source file, classify its scan type, crop and color, and decide
the encoder, filter chain, audio and subtitle tracks and episode split.
"""

from mediaplan.plan import EncodingPlan, build_encoding_plan, collect_probe_data
from mediaplan.policy import PlanningConfig, load_policy
from mediaplan.workflow import FilePlanResult, plan_batch, plan_file

__version__ = "0.1.0"

__all__ = [
    "EncodingPlan",
    "FilePlanResult",
    "PlanningConfig",
    "__version__",
    "build_encoding_plan",
    "collect_probe_data",
    "load_policy",
    "plan_batch",
    "plan_file",
]
