"""CLI module for mediaplan."""

import logging
import sys
from pathlib import Path

import click

from mediaplan.cli.exit_codes import ExitCode
from mediaplan.config import AppConfig, ConfigError, load_app_config
from mediaplan.introspector import FFmpegProbe, MediaProbe
from mediaplan.logging import configure_logging

logger = logging.getLogger(__name__)


def create_probe(config: AppConfig) -> MediaProbe:
    """Build the ffmpeg-backed probe from the application config.

    Raises:
        ProbeError: If ffmpeg or ffprobe cannot be found.
    """
    return FFmpegProbe(
        ffmpeg_path=config.tools.ffmpeg,
        ffprobe_path=config.tools.ffprobe,
        probe_timeout=config.probe.timeout,
        analysis_timeout=config.probe.analysis_timeout,
    )


@click.group()
@click.version_option(package_name="mediaplan")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.mediaplan/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """mediaplan - Decide how each video title should be encoded."""
    ctx.ensure_object(dict)

    try:
        app_config = load_app_config(
            config_path,
            log_level=log_level.lower() if log_level else None,
            log_file=log_file,
            log_format="json" if log_json else None,
        )
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)

    configure_logging(app_config.logging)
    logger.debug(
        "mediaplan starting: workers=%d, log_level=%s",
        app_config.processing.workers,
        app_config.logging.level,
    )

    ctx.obj["config"] = app_config
    ctx.obj.setdefault("probe_factory", create_probe)


# Defer import to avoid circular dependency
def _register_commands():
    from mediaplan.cli.plan import plan_command
    from mediaplan.cli.probe import probe_command

    main.add_command(plan_command)
    main.add_command(probe_command)


_register_commands()
