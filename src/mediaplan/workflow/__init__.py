"""Batch planning workflow."""

from mediaplan.workflow.batch import FilePlanResult, plan_batch, plan_file

__all__ = ["FilePlanResult", "plan_batch", "plan_file"]
