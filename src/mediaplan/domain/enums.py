"""Domain enums for mediaplan.

These enums are shared by the probe layer, the classifiers and the planners.
"""

from enum import Enum


class StreamKind(Enum):
    """Kind of elementary stream reported by the media probe."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"


class FieldOrder(Enum):
    """Scan type of a title as measured from its frames.

    Container flags are never used to derive this value; only sampled
    frame statistics are.
    """

    PROGRESSIVE = "progressive"
    TFF = "tff"  # Top field first
    BFF = "bff"  # Bottom field first

    @property
    def is_interlaced(self) -> bool:
        """Return True for either interlaced field order."""
        return self is not FieldOrder.PROGRESSIVE


class ContentType(Enum):
    """Type of content a source file belongs to."""

    SERIES = "series"
    MOVIE = "movie"
