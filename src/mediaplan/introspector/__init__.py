"""Media probe package: sampling and metadata extraction."""

from mediaplan.introspector.ffmpeg import FFmpegProbe
from mediaplan.introspector.interface import MediaProbe, ProbeError, ProbeTimeoutError
from mediaplan.introspector.stub import StubMedia, StubProbe

__all__ = [
    "FFmpegProbe",
    "MediaProbe",
    "ProbeError",
    "ProbeTimeoutError",
    "StubMedia",
    "StubProbe",
]
