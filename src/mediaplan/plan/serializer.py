"""Flat and nested renderings of an EncodingPlan.

plan_to_parameters() produces the ordered (key, value) list handed to an
encoder invoker; plan_to_dict() produces the JSON-serializable form. Both
are deterministic: equal plans render identically.
"""

from __future__ import annotations

from typing import Any

from mediaplan.plan.types import EncodingPlan
from mediaplan.policy.chapters import Episode


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _seconds(value: float | None) -> str:
    return "end" if value is None else f"{value:.3f}"


def _episode_chapters(episode: Episode) -> str:
    span = episode.chapter_span
    return "all" if span is None else f"{span.first}-{span.last}"


def plan_to_parameters(plan: EncodingPlan) -> list[tuple[str, str]]:
    """Render a plan as an ordered list of string parameters.

    Filter steps appear as ``filter.N`` (step name) followed by
    ``filter.N.<param>`` entries; track selections as ``source->output``
    index pairs followed by their per-track settings.

    Args:
        plan: Plan to render.

    Returns:
        Ordered (key, value) pairs.
    """
    params: list[tuple[str, str]] = [("source", str(plan.source_file))]

    video = plan.video
    params.append(("video.field_order", video.field_order.value))
    params.append(("video.telecined", _bool(video.telecined)))
    params.append(("video.adaptive_deinterlace", _bool(video.adaptive_deinterlace)))
    crop = video.crop.as_filter_value() if video.crop else "none"
    params.append(("video.crop", crop))

    for position, step in enumerate(plan.filters):
        params.append((f"filter.{position}", step.name))
        for key, value in sorted(step.params.items()):
            params.append((f"filter.{position}.{key}", value))

    encoder = plan.encoder
    params.extend(
        [
            ("encoder", encoder.encoder),
            ("encoder.kind", encoder.kind.value),
            ("encoder.profile", encoder.profile),
            ("encoder.pix_fmt", encoder.pix_fmt),
            ("encoder.bit_depth", str(encoder.bit_depth)),
            ("color_space", plan.color.target.value),
            ("hdr", plan.color.hdr_type.value),
        ]
    )

    for sel in plan.audio.selections:
        prefix = f"audio.{sel.output_index}"
        params.append((prefix, f"{sel.source_index}->{sel.output_index}"))
        params.append((f"{prefix}.action", sel.action.value))
        if sel.codec:
            params.append((f"{prefix}.codec", sel.codec))
        if sel.bitrate:
            params.append((f"{prefix}.bitrate", sel.bitrate))
        params.append((f"{prefix}.language", sel.language))
        params.append((f"{prefix}.default", _bool(sel.is_default)))

    for sub in plan.subtitles.selections:
        prefix = f"subtitle.{sub.output_index}"
        params.append((prefix, f"{sub.source_index}->{sub.output_index}"))
        params.append((f"{prefix}.language", sub.language))
    default_sub = plan.subtitles.default_output_index
    params.append(
        ("subtitle.default", "none" if default_sub is None else str(default_sub))
    )

    for episode in plan.episodes:
        prefix = f"episode.{episode.number}"
        params.append((f"{prefix}.chapters", _episode_chapters(episode)))
        params.append((f"{prefix}.start", _seconds(episode.start_time)))
        params.append((f"{prefix}.end", _seconds(episode.end_time)))

    for advisory in plan.advisories:
        params.append(("advisory", advisory.code.value))
    for warning in plan.warnings:
        params.append(("warning", warning))

    return params


def plan_to_dict(plan: EncodingPlan) -> dict[str, Any]:
    """Convert an EncodingPlan to a JSON-serializable dict."""
    video = plan.video
    return {
        "source": str(plan.source_file),
        "video": {
            "width": video.width,
            "height": video.height,
            "field_order": video.field_order.value,
            "telecined": video.telecined,
            "adaptive_deinterlace": video.adaptive_deinterlace,
            "crop": video.crop.as_filter_value() if video.crop else None,
        },
        "filters": [{"name": step.name, **step.params} for step in plan.filters],
        "encoder": {
            "kind": plan.encoder.kind.value,
            "name": plan.encoder.encoder,
            "profile": plan.encoder.profile,
            "pix_fmt": plan.encoder.pix_fmt,
            "bit_depth": plan.encoder.bit_depth,
            "source_bit_depth": plan.encoder.source_bit_depth,
        },
        "color": {
            "target": plan.color.target.value,
            "hdr": plan.color.hdr_type.value,
        },
        "audio": [
            {
                "source_index": sel.source_index,
                "output_index": sel.output_index,
                "action": sel.action.value,
                "codec": sel.codec,
                "bitrate": sel.bitrate,
                "language": sel.language,
                "title": sel.title,
                "default": sel.is_default,
                "reason": sel.reason,
            }
            for sel in plan.audio.selections
        ],
        "subtitles": {
            "tracks": [
                {
                    "source_index": sub.source_index,
                    "output_index": sub.output_index,
                    "language": sub.language,
                    "title": sub.title,
                    "default": sub.is_default,
                }
                for sub in plan.subtitles.selections
            ],
            "default_output_index": plan.subtitles.default_output_index,
        },
        "episodes": [
            {
                "number": ep.number,
                "chapters": (
                    None
                    if ep.chapter_span is None
                    else [ep.chapter_span.first, ep.chapter_span.last]
                ),
                "start": ep.start_time,
                "end": ep.end_time,
            }
            for ep in plan.episodes
        ],
        "chapters_per_episode": plan.grouping.chapters_per_episode,
        "advisories": [
            {"code": a.code.value, "message": a.message} for a in plan.advisories
        ],
        "warnings": list(plan.warnings),
    }
