"""Rendering of encoding plans into external tool invocations."""

from mediaplan.executor.command import (
    build_ffmpeg_args,
    hdr_passthrough_args,
    render_filter_chain,
    render_filter_step,
)

__all__ = [
    "build_ffmpeg_args",
    "hdr_passthrough_args",
    "render_filter_chain",
    "render_filter_step",
]
