"""Formatters for encoding plans.

Human-readable, JSON and flat-parameter renderings shared by the CLI
commands.
"""

import json

from mediaplan.plan.serializer import plan_to_dict, plan_to_parameters
from mediaplan.plan.types import EncodingPlan


def format_human(plan: EncodingPlan) -> str:
    """Format a plan for terminal output.

    Args:
        plan: The plan to format.

    Returns:
        Multi-line string.
    """
    lines: list[str] = [f"File: {plan.source_file}"]

    video = plan.video
    if video.width and video.height:
        lines.append(f"Source: {video.width}x{video.height}")

    scan = video.field_order.value
    if video.telecined:
        scan = "telecined (3:2 pulldown)"
    elif video.adaptive_deinterlace:
        scan = "adaptive deinterlace"
    lines.append(f"Scan: {scan}")
    lines.append(f"Crop: {video.crop.as_filter_value() if video.crop else 'none'}")

    encoder = plan.encoder
    lines.append(
        f"Encoder: {encoder.encoder} ({encoder.kind.value}) "
        f"{encoder.profile} {encoder.bit_depth}-bit {encoder.pix_fmt}"
    )
    color = plan.color.target.value
    if plan.color.hdr_type.value != "none":
        color += f" [{plan.color.hdr_type.value}]"
    lines.append(f"Color: {color}")

    if plan.filters:
        lines.append("Filters:")
        for step in plan.filters:
            detail = ", ".join(f"{k}={v}" for k, v in sorted(step.params.items()))
            lines.append(f"  - {step.name}" + (f" ({detail})" if detail else ""))

    lines.append("Audio:")
    if not plan.audio.selections:
        lines.append("  (no audio)")
    for sel in plan.audio.selections:
        action = "copy" if sel.bitrate is None else f"{sel.codec} {sel.bitrate}"
        line = f"  a:{sel.source_index} -> {sel.output_index} {sel.language} {action}"
        if sel.title:
            line += f' "{sel.title}"'
        if sel.is_default:
            line += " (default)"
        lines.append(line)

    lines.append("Subtitles:")
    if not plan.subtitles.selections:
        lines.append("  (none kept)")
    for sub in plan.subtitles.selections:
        line = f"  s:{sub.source_index} -> {sub.output_index} {sub.language}"
        if sub.is_default:
            line += " (default)"
        lines.append(line)

    if plan.is_split:
        lines.append(
            f"Episodes: {len(plan.episodes)} "
            f"({plan.grouping.chapters_per_episode} chapters each)"
        )
        for ep in plan.episodes:
            span = ep.chapter_span
            chapters = f"chapters {span.first + 1}-{span.last + 1}" if span else ""
            end = f"{ep.end_time:.1f}s" if ep.end_time is not None else "end"
            lines.append(f"  {ep.number}: {chapters} [{ep.start_time:.1f}s - {end}]")

    if plan.advisories:
        lines.append("")
        lines.append("Advisories:")
        for advisory in plan.advisories:
            lines.append(f"  ! {advisory}")

    if plan.warnings:
        lines.append("")
        lines.append("Warnings:")
        for warning in plan.warnings:
            lines.append(f"  - {warning}")

    return "\n".join(lines)


def format_json(plans: list[EncodingPlan]) -> str:
    """Format one or more plans as a JSON document."""
    return json.dumps([plan_to_dict(p) for p in plans], indent=2)


def format_parameters(plan: EncodingPlan) -> str:
    """Format a plan as ``key=value`` lines."""
    return "\n".join(f"{key}={value}" for key, value in plan_to_parameters(plan))
