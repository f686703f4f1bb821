"""Subprocess wrapper for external tool invocation.

Every ffmpeg/ffprobe call goes through run_command so that timeouts,
decoding and logging are handled the same way everywhere.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def run_command(
    args: list[str | Path],
    timeout: float = 120,
    capture_output: bool = True,
    text: bool = True,
    errors: str = "replace",
    **kwargs: Any,
) -> tuple[str, str, int]:
    """Run an external command with a bounded timeout.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds.
        capture_output: Capture stdout/stderr.
        text: Return text instead of bytes.
        errors: Error handling mode for text decoding.
        **kwargs: Additional subprocess.run arguments.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        subprocess.TimeoutExpired: If the command times out. subprocess.run()
            kills the child before raising, so nothing is left running.
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()
    try:
        result = subprocess.run(  # nosec B603 - caller validates args
            str_args,
            capture_output=capture_output,
            text=text,
            errors=errors,
            timeout=timeout,
            **kwargs,
        )
    except subprocess.TimeoutExpired:
        elapsed = time.monotonic() - start_time
        logger.warning(
            "Command timed out after %ss: %s",
            timeout,
            " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
            extra={
                "command": command_name,
                "timeout_seconds": timeout,
                "elapsed_seconds": round(elapsed, 3),
            },
        )
        raise

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": result.returncode,
        },
    )
    return result.stdout or "", result.stderr or "", result.returncode
