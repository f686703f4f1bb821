"""Pydantic models for planning policy files.

These models validate the YAML (or TOML ``[planning]``) form of a policy
before it is converted into the frozen PlanningConfig dataclass.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mediaplan.policy.matchers import validate_regex_patterns
from mediaplan.policy.thresholds import MAX_CHAPTERS_PER_EPISODE

_LANGUAGE_PATTERN = re.compile(r"^[a-z]{3}$")
_BITRATE_PATTERN = re.compile(r"^\d+(\.\d+)?[kKmM]$")


def _validate_language(lang: str, field_name: str) -> str:
    lang = lang.casefold()
    if not _LANGUAGE_PATTERN.match(lang):
        raise ValueError(
            f"Invalid language code '{lang}' in {field_name}. "
            "Use ISO 639-2 codes (e.g., 'eng', 'jpn')."
        )
    return lang


class BitrateTiersModel(BaseModel):
    """Audio transcode bitrates per channel layout."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mono: str = "96k"
    stereo: str = "128k"
    surround: str = "192k"
    surround_plus: str = "256k"

    @field_validator("mono", "stereo", "surround", "surround_plus")
    @classmethod
    def validate_bitrate(cls, v: str) -> str:
        if not _BITRATE_PATTERN.match(v):
            raise ValueError(f"Invalid bitrate '{v}' (expected e.g. '128k')")
        return v


class AudioModel(BaseModel):
    """Audio track handling."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    copy_first: bool = True
    filter_languages: bool = True
    codec: str = "libfdk_aac"
    profile: str = "aac_he"
    bitrates: BitrateTiersModel = Field(default_factory=BitrateTiersModel)
    commentary_patterns: list[str] = Field(default_factory=lambda: ["commentary"])

    @field_validator("commentary_patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        errors = validate_regex_patterns(v, "commentary_patterns")
        if errors:
            raise ValueError("; ".join(errors))
        return v


class VideoModel(BaseModel):
    """Video analysis and encoder selection."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    detect_interlacing: bool = True
    adaptive_deinterlace: bool = False
    detect_crop: bool = True
    pulldown: Literal["auto", "on", "off"] = "auto"
    interlace_window_start: float = Field(default=0.10, ge=0.0, lt=1.0)
    interlace_frame_count: int = Field(default=200, ge=1)
    telecine_frame_count: int = Field(default=500, ge=1)
    crop_sample_points: list[float] = Field(
        default_factory=lambda: [0.25, 0.50, 0.75], min_length=1
    )
    encoder: Literal["auto", "software", "hardware"] = "auto"
    upgrade_8bit: bool = True
    downgrade_12bit: bool = False
    color_space: Literal["auto", "none", "bt601", "bt709"] = "auto"

    @field_validator("crop_sample_points")
    @classmethod
    def validate_sample_points(cls, v: list[float]) -> list[float]:
        for point in v:
            if not 0.0 <= point < 1.0:
                raise ValueError(f"crop sample point {point} must be in [0, 1)")
        return v


class ChaptersModel(BaseModel):
    """Chapter-based episode splitting."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    split: Literal["auto", "on", "off"] = "auto"
    chapters_per_episode: int | None = Field(
        default=None, ge=1, le=MAX_CHAPTERS_PER_EPISODE
    )


class EncodeModel(BaseModel):
    """Encoder tuning used when rendering commands."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    quality: int = Field(default=20, ge=0, le=51)
    preset: str = "medium"
    x265_pools: str = "+"
    gop_size: int = Field(default=120, ge=1)
    min_keyint: int = Field(default=12, ge=1)
    bframes: int = Field(default=0, ge=0)
    refs: int = Field(default=4, ge=1, le=16)
    vaapi_device: str = "/dev/dri/renderD128"
    container: str = "matroska"


class PolicyModel(BaseModel):
    """Top-level planning policy."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: Literal[1] = 1
    languages: list[str] = Field(default_factory=lambda: ["eng"], min_length=1)
    original_language: str | None = None
    prefer_original: bool = False
    content_type: Literal["series", "movie"] | None = None
    audio: AudioModel = Field(default_factory=AudioModel)
    video: VideoModel = Field(default_factory=VideoModel)
    chapters: ChaptersModel = Field(default_factory=ChaptersModel)
    encode: EncodeModel = Field(default_factory=EncodeModel)

    @field_validator("languages")
    @classmethod
    def validate_languages(cls, v: list[str]) -> list[str]:
        return [_validate_language(lang, "languages") for lang in v]

    @field_validator("original_language")
    @classmethod
    def validate_original_language(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _validate_language(v, "original_language")

    @model_validator(mode="after")
    def validate_prefer_original(self) -> "PolicyModel":
        """prefer_original needs an original language to prefer."""
        if self.prefer_original and self.original_language is None:
            raise ValueError("prefer_original requires original_language to be set")
        return self
