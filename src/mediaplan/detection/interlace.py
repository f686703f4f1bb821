"""Interlace classification from sampled frame statistics.

Container scan-type flags are unreliable on DVD and broadcast captures, so
the decision is made from measured field statistics only.
"""

import logging

from mediaplan.domain.enums import FieldOrder
from mediaplan.domain.models import FrameSample
from mediaplan.policy.thresholds import INTERLACED_PCT_THRESHOLD

logger = logging.getLogger(__name__)


def interlaced_percentage(sample: FrameSample | None) -> float | None:
    """Return the percentage of frames detected as interlaced.

    Args:
        sample: Frame statistics, or None if sampling produced no data.

    Returns:
        Percentage in [0, 100], or None when no frames were classified.
    """
    if sample is None or sample.total == 0:
        return None
    return sample.interlaced / sample.total * 100


def classify_interlace(sample: FrameSample | None) -> FieldOrder:
    """Classify a title as progressive, TFF or BFF.

    The title is interlaced only when strictly more than
    INTERLACED_PCT_THRESHOLD percent of the sampled frames are interlaced.
    The comparison uses integer arithmetic so the boundary is exact.

    Args:
        sample: Frame statistics from the interlace window. None or an
            empty sample classifies as progressive.

    Returns:
        FieldOrder.TFF or FieldOrder.BFF for interlaced content (TFF wins
        ties), FieldOrder.PROGRESSIVE otherwise.
    """
    if sample is None or sample.total == 0:
        logger.debug("No frames sampled for interlace detection, assuming progressive")
        return FieldOrder.PROGRESSIVE

    if sample.interlaced * 100 <= INTERLACED_PCT_THRESHOLD * sample.total:
        return FieldOrder.PROGRESSIVE

    order = FieldOrder.TFF if sample.tff >= sample.bff else FieldOrder.BFF
    logger.debug(
        "Interlaced content: %d/%d frames (tff=%d, bff=%d) -> %s",
        sample.interlaced,
        sample.total,
        sample.tff,
        sample.bff,
        order.value,
    )
    return order
