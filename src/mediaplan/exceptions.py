"""Exception classes for encoding plan construction.

Planning never aborts a batch: these errors are raised by individual
components and caught by the plan builder, which substitutes the
component's safe default.
"""


class PlanningError(Exception):
    """Base class for planning errors."""

    pass


class ClassificationError(PlanningError):
    """A classifier or planner could not produce a decision from its input."""

    def __init__(self, component: str, reason: str) -> None:
        self.component = component
        self.reason = reason
        super().__init__(f"{component}: {reason}")
