"""Crop estimation from multi-point crop samples."""

import logging
from collections import Counter
from dataclasses import dataclass

from mediaplan.domain.models import CropSample
from mediaplan.policy.thresholds import CROP_ALIGNMENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CropRect:
    """Crop decision: retained width/height and top-left offset.

    Invariant: width and height are multiples of CROP_ALIGNMENT.
    """

    width: int
    height: int
    x: int
    y: int

    def as_filter_value(self) -> str:
        """Return the ``w:h:x:y`` form used by the crop filter."""
        return f"{self.width}:{self.height}:{self.x}:{self.y}"


def align_down(value: int, alignment: int = CROP_ALIGNMENT) -> int:
    """Round a dimension down to a multiple of ``alignment``."""
    return value - (value % alignment)


def select_crop_sample(samples: list[CropSample]) -> CropSample | None:
    """Pick the representative rectangle among samples.

    The most frequently observed rectangle wins. Ties go to the rectangle
    with the largest retained area, then to the one observed first.

    Args:
        samples: Valid crop samples.

    Returns:
        The chosen sample, or None if samples is empty.
    """
    if not samples:
        return None

    counts = Counter(samples)
    first_seen = {sample: pos for pos, sample in reversed(list(enumerate(samples)))}
    return min(
        counts,
        key=lambda s: (-counts[s], -s.area, first_seen[s]),
    )


def estimate_crop(
    samples: list[CropSample],
    source_width: int | None,
    source_height: int | None,
) -> CropRect | None:
    """Derive a conservative crop rectangle for a title.

    Samples that are degenerate or extend past the source frame are
    discarded before aggregation.

    Args:
        samples: Crop rectangles observed at the sample points.
        source_width: Width of the source frame.
        source_height: Height of the source frame.

    Returns:
        The crop rectangle, or None when no crop should be applied (no
        usable samples, unknown source size, or the aligned rectangle covers
        the full frame).
    """
    if not source_width or not source_height:
        logger.debug("Source dimensions unknown, skipping crop")
        return None

    valid = [s for s in samples if s.fits_within(source_width, source_height)]
    discarded = len(samples) - len(valid)
    if discarded:
        logger.debug("Discarded %d invalid crop sample(s)", discarded)

    chosen = select_crop_sample(valid)
    if chosen is None:
        return None

    width = align_down(chosen.width)
    height = align_down(chosen.height)

    if width == 0 or height == 0:
        logger.debug("Crop %s collapses below alignment, skipping", chosen)
        return None

    if width == source_width and height == source_height:
        return None

    crop = CropRect(width=width, height=height, x=chosen.x, y=chosen.y)
    logger.debug(
        "Crop %dx%d -> %s (%d sample(s))",
        source_width,
        source_height,
        crop.as_filter_value(),
        len(valid),
    )
    return crop
