"""CLI plan command for mediaplan."""

import logging
import shlex
import sys
from dataclasses import replace
from pathlib import Path

import click

from mediaplan.cli.exit_codes import ExitCode
from mediaplan.config import AppConfig
from mediaplan.domain.enums import ContentType
from mediaplan.domain.language import normalize_language
from mediaplan.executor import build_ffmpeg_args
from mediaplan.introspector import ProbeError
from mediaplan.plan.formatters import format_human, format_json, format_parameters
from mediaplan.plan.types import EncodingPlan
from mediaplan.policy import (
    EncoderMode,
    PlanningConfig,
    PolicyValidationError,
    load_policy,
)
from mediaplan.policy.chapters import Episode
from mediaplan.workflow import FilePlanResult, plan_batch

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".mkv"


def _validate_workers(
    ctx: click.Context, param: click.Parameter, value: int | None
) -> int | None:
    if value is not None and value < 1:
        raise click.BadParameter("must be at least 1")
    return value


def _validate_language(
    ctx: click.Context, param: click.Parameter, value: str | tuple[str, ...] | None
) -> str | tuple[str, ...] | None:
    """Normalize language codes to ISO 639-2/B, rejecting unknown ones."""
    if value is None:
        return None
    codes = (value,) if isinstance(value, str) else value
    normalized = []
    for code in codes:
        lang = normalize_language(code)
        if lang == "und" and code.strip().casefold() != "und":
            raise click.BadParameter(f"unknown language code '{code}'")
        normalized.append(lang)
    return normalized[0] if isinstance(value, str) else tuple(normalized)


def resolve_planning_config(
    base: PlanningConfig,
    policy_path: Path | None,
    languages: tuple[str, ...],
    original_language: str | None,
    encoder: str | None,
) -> PlanningConfig:
    """Apply the policy file and CLI overrides to the configured policy.

    Raises:
        PolicyValidationError: If the policy file or an override is invalid.
        FileNotFoundError: If the policy file does not exist.
    """
    config = load_policy(policy_path) if policy_path is not None else base

    overrides: dict = {}
    if languages:
        overrides["languages"] = languages
    if original_language is not None:
        overrides["original_language"] = original_language
        overrides["prefer_original"] = True
    if encoder is not None:
        overrides["encoder"] = EncoderMode(encoder)
    if not overrides:
        return config
    try:
        return replace(config, **overrides)
    except ValueError as e:
        raise PolicyValidationError(str(e)) from e


def output_path_for(plan: EncodingPlan, episode: Episode | None) -> Path:
    """Return the default output file for a plan or one of its episodes."""
    source = plan.source_file
    if episode is None or episode.chapter_span is None:
        return source.with_name(f"{source.stem}.hevc{OUTPUT_SUFFIX}")
    return source.with_name(f"{source.stem}.e{episode.number:02d}{OUTPUT_SUFFIX}")


def format_commands(
    plan: EncodingPlan, config: AppConfig, planning: PlanningConfig
) -> list[str]:
    """Render one shell-quoted ffmpeg command per output file."""
    ffmpeg = config.tools.ffmpeg or "ffmpeg"
    episodes: list[Episode | None] = list(plan.episodes) if plan.is_split else [None]
    return [
        shlex.join(
            build_ffmpeg_args(
                plan,
                output_path_for(plan, episode),
                planning,
                episode=episode,
                ffmpeg_path=ffmpeg,
            )
        )
        for episode in episodes
    ]


def _emit_results(
    results: list[FilePlanResult],
    output_format: str,
    show_command: bool,
    app_config: AppConfig,
    planning: PlanningConfig,
) -> None:
    plans = [r.plan for r in results if r.plan is not None]

    if output_format == "json":
        click.echo(format_json(plans))
    else:
        blocks = []
        for plan in plans:
            if output_format == "params":
                block = format_parameters(plan)
            else:
                block = format_human(plan)
            if show_command:
                commands = format_commands(plan, app_config, planning)
                if output_format == "params":
                    block += "\n" + "\n".join(f"command={c}" for c in commands)
                else:
                    block += "\n\nCommands:\n" + "\n".join(f"  {c}" for c in commands)
            blocks.append(block)
        if blocks:
            click.echo("\n\n".join(blocks))

    for result in results:
        if not result.success:
            click.echo(f"Error: {result.path}: {result.error}", err=True)


@click.command("plan")
@click.argument("files", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "--policy",
    "policy_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Planning policy YAML file (default: [planning] from config).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["human", "json", "params"]),
    default="human",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--type",
    "content_type",
    type=click.Choice(["series", "movie"]),
    default=None,
    help="Content type of every file (enables automatic episode splitting).",
)
@click.option(
    "--language",
    "languages",
    multiple=True,
    callback=_validate_language,
    help="Allowed audio/subtitle language (repeatable, e.g. eng).",
)
@click.option(
    "--original-lang",
    "original_language",
    default=None,
    callback=_validate_language,
    help="Original language; its audio becomes the default track.",
)
@click.option(
    "--encoder",
    type=click.Choice([m.value for m in EncoderMode]),
    default=None,
    help="Encoder selection (overrides the policy).",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    callback=_validate_workers,
    help="Number of files planned concurrently (default: from config).",
)
@click.option(
    "--show-command",
    is_flag=True,
    default=False,
    help="Also print the ffmpeg command for each output file.",
)
@click.pass_context
def plan_command(
    ctx: click.Context,
    files: tuple[Path, ...],
    policy_path: Path | None,
    output_format: str,
    content_type: str | None,
    languages: tuple[str, ...],
    original_language: str | None,
    encoder: str | None,
    workers: int | None,
    show_command: bool,
) -> None:
    """Plan the encode of one or more video files.

    FILES are the source files to analyze. Nothing is encoded; the plan
    (and, with --show-command, the ffmpeg command) is printed.
    """
    app_config: AppConfig = ctx.obj["config"]

    missing = [f for f in files if not f.exists()]
    if missing:
        for path in missing:
            click.echo(f"Error: File not found: {path}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    try:
        planning = resolve_planning_config(
            app_config.planning,
            policy_path,
            languages,
            original_language,
            encoder,
        )
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)
    except PolicyValidationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(ExitCode.POLICY_VALIDATION_ERROR)

    try:
        probe = ctx.obj["probe_factory"](app_config)
    except ProbeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)

    try:
        results = plan_batch(
            list(files),
            probe,
            planning,
            workers=workers or app_config.processing.workers,
            content_type=ContentType(content_type) if content_type else None,
        )
    except KeyboardInterrupt:
        click.echo("\nInterrupted", err=True)
        sys.exit(ExitCode.INTERRUPTED)

    _emit_results(results, output_format, show_command, app_config, planning)

    if any(not r.success for r in results):
        sys.exit(ExitCode.OPERATION_FAILED)
    sys.exit(ExitCode.SUCCESS)
