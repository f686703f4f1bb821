"""Domain models and enums for mediaplan.

This package contains the probe-level measurement types:

- Domain models: FrameSample, CropSample, StreamDescriptor, Chapter
- Domain enums: StreamKind, FieldOrder, ContentType

Usage:
    from mediaplan.domain import FrameSample, StreamDescriptor
    from mediaplan.domain import FieldOrder, StreamKind
"""

from .enums import (
    ContentType,
    FieldOrder,
    StreamKind,
)
from .language import normalize_language
from .models import (
    UNDETERMINED_LANGUAGE,
    Chapter,
    CropSample,
    FrameSample,
    StreamDescriptor,
    primary_video_stream,
    streams_of_kind,
)

__all__ = [
    # Models
    "Chapter",
    "CropSample",
    "FrameSample",
    "StreamDescriptor",
    "UNDETERMINED_LANGUAGE",
    "primary_video_stream",
    "streams_of_kind",
    "normalize_language",
    # Enums
    "ContentType",
    "FieldOrder",
    "StreamKind",
]
