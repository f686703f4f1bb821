"""ffmpeg/ffprobe-based implementation of the MediaProbe protocol."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess  # nosec B404 - only for TimeoutExpired
import threading
from pathlib import Path

from mediaplan.core.subprocess_utils import run_command
from mediaplan.domain.models import Chapter, CropSample, FrameSample, StreamDescriptor
from mediaplan.introspector.interface import ProbeError, ProbeTimeoutError
from mediaplan.introspector.parsers import (
    parse_chapters,
    parse_cropdetect_output,
    parse_duration,
    parse_idet_output,
    parse_streams,
)

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 60
DEFAULT_ANALYSIS_TIMEOUT = 300

# cropdetect=limit:round:reset; round=16 matches the crop alignment
CROPDETECT_FILTER = "cropdetect=0.1:16:100"
CROPDETECT_FRAMES = 240


class FFmpegProbe:
    """MediaProbe backed by the ffmpeg and ffprobe binaries.

    ffprobe metadata is fetched once per file and cached, so stream,
    chapter and duration lookups share one subprocess. Instances are safe
    to share between worker threads.
    """

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        ffprobe_path: Path | None = None,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        analysis_timeout: float = DEFAULT_ANALYSIS_TIMEOUT,
    ) -> None:
        """Initialize the probe.

        Args:
            ffmpeg_path: Explicit ffmpeg binary; defaults to the one on PATH.
            ffprobe_path: Explicit ffprobe binary; defaults to the one on PATH.
            probe_timeout: Timeout in seconds for ffprobe metadata calls.
            analysis_timeout: Timeout in seconds for each analysis-filter run.

        Raises:
            ProbeError: If either tool cannot be found.
        """
        self._ffmpeg = ffmpeg_path or _which("ffmpeg")
        self._ffprobe = ffprobe_path or _which("ffprobe")
        self._probe_timeout = probe_timeout
        self._analysis_timeout = analysis_timeout
        self._metadata: dict[Path, dict] = {}
        self._lock = threading.Lock()

    def _run(
        self, operation: str, path: Path, args: list, timeout: float
    ) -> tuple[str, str]:
        """Run a tool and return (stdout, stderr), translating failures."""
        try:
            stdout, stderr, returncode = run_command(args, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise ProbeTimeoutError(operation, path, timeout) from e
        except OSError as e:
            raise ProbeError(f"{operation} could not start for {path}: {e}") from e
        if returncode != 0:
            detail = stderr.strip().splitlines()[-1:] or ["no output"]
            raise ProbeError(
                f"{operation} failed for {path} (exit {returncode}): {detail[0]}"
            )
        return stdout, stderr

    def _probe_metadata(self, path: Path) -> dict:
        with self._lock:
            cached = self._metadata.get(path)
        if cached is not None:
            return cached

        output, _ = self._run(
            "ffprobe",
            path,
            [
                self._ffprobe,
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                "-show_chapters",
                path,
            ],
            self._probe_timeout,
        )
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise ProbeError(f"Invalid ffprobe output for {path}: {e}") from e
        if "streams" not in data:
            raise ProbeError(
                f"Missing 'streams' in ffprobe output for {path}. "
                "File may be corrupted or not a valid media file."
            )

        with self._lock:
            self._metadata[path] = data
        return data

    def _analysis_args(
        self, path: Path, seek: float, video_filter: str, frame_count: int
    ) -> list:
        args: list = [self._ffmpeg, "-hide_banner", "-nostats"]
        if seek > 0:
            args.extend(["-ss", f"{seek:.2f}"])
        args.extend(
            [
                "-i",
                path,
                "-map",
                "0:v:0",
                "-vf",
                video_filter,
                "-frames:v",
                str(frame_count),
                "-an",
                "-sn",
                "-f",
                "null",
                "-",
            ]
        )
        return args

    def sample_interlace(
        self, path: Path, window_start_pct: float, frame_count: int
    ) -> FrameSample:
        duration = self.probe_duration(path)
        seek = duration * window_start_pct if duration else 0.0
        _, output = self._run(
            "idet",
            path,
            self._analysis_args(path, seek, "idet", frame_count),
            self._analysis_timeout,
        )
        sample = parse_idet_output(output)
        if sample is None:
            raise ProbeError(f"idet produced no frame statistics for {path}")
        return sample

    def sample_telecine(self, path: Path, frame_count: int) -> FrameSample:
        _, output = self._run(
            "idet",
            path,
            self._analysis_args(path, 0.0, "idet", frame_count),
            self._analysis_timeout,
        )
        sample = parse_idet_output(output)
        if sample is None:
            raise ProbeError(f"idet produced no frame statistics for {path}")
        return sample

    def sample_crop(
        self, path: Path, time_fractions: tuple[float, ...]
    ) -> list[CropSample]:
        duration = self.probe_duration(path)
        if not duration:
            raise ProbeError(f"Cannot place crop samples without a duration: {path}")

        samples: list[CropSample] = []
        for fraction in time_fractions:
            _, output = self._run(
                "cropdetect",
                path,
                self._analysis_args(
                    path, duration * fraction, CROPDETECT_FILTER, CROPDETECT_FRAMES
                ),
                self._analysis_timeout,
            )
            sample = parse_cropdetect_output(output)
            if sample is None:
                logger.debug("No crop reported at %.0f%% of %s", fraction * 100, path)
                continue
            samples.append(sample)
        return samples

    def probe_streams(self, path: Path) -> list[StreamDescriptor]:
        return parse_streams(self._probe_metadata(path))

    def probe_chapters(self, path: Path) -> list[Chapter]:
        return parse_chapters(self._probe_metadata(path))

    def probe_duration(self, path: Path) -> float | None:
        return parse_duration(self._probe_metadata(path))


def _which(tool: str) -> Path:
    found = shutil.which(tool)
    if found is None:
        raise ProbeError(
            f"{tool} is not installed or not in PATH. Install ffmpeg or set "
            f"MEDIAPLAN_{tool.upper()}_PATH / [tools] {tool} in the config file."
        )
    return Path(found)
