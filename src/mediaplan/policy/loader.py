"""Planning policy loading and validation.

This module loads YAML policy files, validates them with the Pydantic
models and converts them into an immutable PlanningConfig.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mediaplan.domain.enums import ContentType
from mediaplan.policy.pydantic_models import PolicyModel
from mediaplan.policy.types import (
    AudioBitrateTiers,
    ColorSpaceMode,
    EncoderMode,
    EncodeSettings,
    PlanningConfig,
    PulldownMode,
    SplitMode,
)


class PolicyValidationError(Exception):
    """Error during policy validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


def load_policy(policy_path: Path) -> PlanningConfig:
    """Load and validate a planning policy from a YAML file.

    Args:
        policy_path: Path to the YAML policy file.

    Returns:
        Validated PlanningConfig.

    Raises:
        PolicyValidationError: If the policy file is invalid.
        FileNotFoundError: If the policy file does not exist.
    """
    if not policy_path.exists():
        raise FileNotFoundError(f"Policy file not found: {policy_path}")

    try:
        with open(policy_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PolicyValidationError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise PolicyValidationError("Policy file is empty")

    if not isinstance(data, dict):
        raise PolicyValidationError("Policy file must be a YAML mapping")

    return load_policy_from_dict(data)


def load_policy_from_dict(data: dict[str, Any]) -> PlanningConfig:
    """Validate a policy mapping and convert it to a PlanningConfig.

    Args:
        data: Policy mapping (from YAML or the TOML ``[planning]`` table).

    Returns:
        Validated PlanningConfig.

    Raises:
        PolicyValidationError: If the policy data is invalid.
    """
    try:
        model = PolicyModel.model_validate(data)
    except ValidationError as e:
        raise PolicyValidationError(*_format_validation_error(e)) from e

    try:
        return policy_to_planning_config(model)
    except ValueError as e:
        raise PolicyValidationError(f"Policy validation failed: {e}") from e


def policy_to_planning_config(model: PolicyModel) -> PlanningConfig:
    """Convert a validated PolicyModel into a PlanningConfig."""
    audio = model.audio
    video = model.video
    return PlanningConfig(
        languages=tuple(model.languages),
        original_language=model.original_language,
        prefer_original=model.prefer_original,
        audio_copy_first=audio.copy_first,
        audio_filter_languages=audio.filter_languages,
        audio_codec=audio.codec,
        audio_profile=audio.profile,
        audio_bitrates=AudioBitrateTiers(**audio.bitrates.model_dump()),
        commentary_patterns=tuple(audio.commentary_patterns),
        detect_interlacing=video.detect_interlacing,
        adaptive_deinterlace=video.adaptive_deinterlace,
        detect_crop=video.detect_crop,
        pulldown=PulldownMode(video.pulldown),
        interlace_window_start=video.interlace_window_start,
        interlace_frame_count=video.interlace_frame_count,
        telecine_frame_count=video.telecine_frame_count,
        crop_sample_points=tuple(video.crop_sample_points),
        encoder=EncoderMode(video.encoder),
        upgrade_8bit=video.upgrade_8bit,
        downgrade_12bit=video.downgrade_12bit,
        color_space=ColorSpaceMode(video.color_space),
        split_chapters=SplitMode(model.chapters.split),
        chapters_per_episode=model.chapters.chapters_per_episode,
        content_type=ContentType(model.content_type) if model.content_type else None,
        encode=EncodeSettings(**model.encode.model_dump()),
    )


def _format_validation_error(error: ValidationError) -> tuple[str, str | None]:
    """Format a Pydantic validation error into (message, field)."""
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return f"Policy validation failed: {loc}: {msg}", loc
        return f"Policy validation failed: {msg}", None
    return f"Policy validation failed: {error}", None
