"""Telecine (3:2 pulldown) detection."""

import logging

from mediaplan.domain.models import FrameSample
from mediaplan.policy.thresholds import SD_MAX_HEIGHT, TELECINE_REPEATED_PCT_THRESHOLD
from mediaplan.policy.types import PulldownMode

logger = logging.getLogger(__name__)


def should_check_telecine(mode: PulldownMode, height: int | None) -> bool:
    """Decide whether a title should be sampled for pulldown.

    Args:
        mode: Pulldown policy.
        height: Source frame height, or None if unknown.

    Returns:
        True for PulldownMode.ON, False for PulldownMode.OFF. In auto mode,
        True only for content of known height up to SD_MAX_HEIGHT.
    """
    if mode is PulldownMode.ON:
        return True
    if mode is PulldownMode.OFF:
        return False
    return height is not None and height <= SD_MAX_HEIGHT


def repeated_field_percentage(sample: FrameSample | None) -> float | None:
    """Return repeated fields as a percentage of classified frames."""
    if sample is None or sample.total == 0:
        return None
    return sample.total_repeated / sample.total * 100


def classify_telecine(sample: FrameSample | None) -> bool:
    """Return True when the sample shows 3:2 pulldown.

    Telecine is assumed when repeated fields exceed
    TELECINE_REPEATED_PCT_THRESHOLD percent of the classified frames
    (strictly greater, exact integer comparison).

    Args:
        sample: Frame statistics including repeated-field counts. None or
            an empty sample is not telecined.
    """
    if sample is None or sample.total == 0:
        return False

    telecined = (
        sample.total_repeated * 100 > TELECINE_REPEATED_PCT_THRESHOLD * sample.total
    )
    if telecined:
        logger.debug(
            "Telecine detected: %d repeated fields over %d frames",
            sample.total_repeated,
            sample.total,
        )
    return telecined
