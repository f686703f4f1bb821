"""CLI probe command for mediaplan."""

import json
import logging
import sys
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any

import click

from mediaplan.cli.exit_codes import ExitCode
from mediaplan.config import AppConfig
from mediaplan.introspector import MediaProbe, ProbeError

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _optional(operation: str, call, errors: dict[str, str]) -> Any:
    try:
        return call()
    except ProbeError as e:
        logger.warning("%s failed: %s", operation, e)
        errors[operation] = str(e)
        return None


def collect_raw_probe(
    probe: MediaProbe, path: Path, app_config: AppConfig, analyze: bool
) -> dict[str, Any]:
    """Gather raw probe output for one file.

    Stream metadata is required; chapters, duration and the analysis
    samples are reported as null (with an entry under ``errors``) when
    their probe operation fails.

    Raises:
        ProbeError: If the stream metadata cannot be read.
    """
    planning = app_config.planning
    errors: dict[str, str] = {}
    streams = probe.probe_streams(path)
    data: dict[str, Any] = {
        "file": str(path),
        "duration": _optional("duration", lambda: probe.probe_duration(path), errors),
        "streams": [asdict(s) for s in streams],
        "chapters": [
            asdict(c)
            for c in _optional(
                "chapters", lambda: probe.probe_chapters(path), errors
            )
            or ()
        ],
    }

    if analyze:
        interlace = _optional(
            "interlace",
            lambda: probe.sample_interlace(
                path, planning.interlace_window_start, planning.interlace_frame_count
            ),
            errors,
        )
        telecine = _optional(
            "telecine",
            lambda: probe.sample_telecine(path, planning.telecine_frame_count),
            errors,
        )
        crops = _optional(
            "crop",
            lambda: probe.sample_crop(path, planning.crop_sample_points),
            errors,
        )
        data["analysis"] = {
            "interlace": asdict(interlace) if interlace else None,
            "telecine": asdict(telecine) if telecine else None,
            "crop": [asdict(c) for c in crops] if crops is not None else None,
        }

    if errors:
        data["errors"] = errors
    return data


@click.command("probe")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--analyze",
    is_flag=True,
    default=False,
    help="Also run the interlace, telecine and crop sampling passes.",
)
@click.pass_context
def probe_command(ctx: click.Context, file: Path, analyze: bool) -> None:
    """Print raw probe data for FILE as JSON."""
    app_config: AppConfig = ctx.obj["config"]

    if not file.exists():
        click.echo(f"Error: File not found: {file}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    try:
        probe = ctx.obj["probe_factory"](app_config)
    except ProbeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)

    try:
        data = collect_raw_probe(probe, file, app_config, analyze)
    except ProbeError as e:
        click.echo(f"Error: Could not probe file: {file}", err=True)
        click.echo(f"Reason: {e}", err=True)
        sys.exit(ExitCode.PROBE_FAILED)

    click.echo(json.dumps(data, indent=2, default=_json_default))
    sys.exit(ExitCode.SUCCESS)
