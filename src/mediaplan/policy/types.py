"""Planning configuration types.

PlanningConfig is the single immutable object every classifier and planner
receives. Components never read global or environment state.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum

from mediaplan.domain.enums import ContentType
from mediaplan.policy.thresholds import (
    CROP_SAMPLE_POINTS,
    INTERLACE_FRAME_COUNT,
    INTERLACE_WINDOW_START,
    MAX_CHAPTERS_PER_EPISODE,
    TELECINE_FRAME_COUNT,
)

_LANGUAGE_PATTERN = re.compile(r"^[a-z]{3}$")


class PulldownMode(Enum):
    """When to check for 3:2 pulldown."""

    AUTO = "auto"  # SD content only
    ON = "on"  # Always check
    OFF = "off"  # Never check


class EncoderMode(Enum):
    """Encoder selection policy."""

    AUTO = "auto"  # Height and bit depth heuristic
    SOFTWARE = "software"  # Force libx265
    HARDWARE = "hardware"  # Force VAAPI


class ColorSpaceMode(Enum):
    """Color space conversion policy."""

    AUTO = "auto"  # BT.601 for SD, BT.709 for HD, passthrough for HDR
    NONE = "none"  # Never convert
    BT601 = "bt601"  # Force BT.601
    BT709 = "bt709"  # Force BT.709


class SplitMode(Enum):
    """When to split a file into episodes by chapters."""

    AUTO = "auto"  # Series files over an hour with several chapters
    ON = "on"  # Any file with chapters
    OFF = "off"  # Never


@dataclass(frozen=True)
class AudioBitrateTiers:
    """Transcode bitrate per channel layout (HE-AAC transparency targets)."""

    mono: str = "96k"
    stereo: str = "128k"
    surround: str = "192k"  # up to 5.1
    surround_plus: str = "256k"  # 7.1 and beyond

    def for_channels(self, channels: int | None) -> str:
        """Return the bitrate tier for a channel count.

        Unknown or invalid channel counts fall back to the stereo tier.
        """
        if channels is None or channels < 1:
            return self.stereo
        if channels == 1:
            return self.mono
        if channels <= 2:
            return self.stereo
        if channels <= 6:
            return self.surround
        return self.surround_plus


@dataclass(frozen=True)
class EncodeSettings:
    """Encoder tuning used when rendering a plan into ffmpeg arguments.

    These settings do not influence any planning decision.
    """

    quality: int = 20  # CRF for libx265, QP for VAAPI CQP
    preset: str = "medium"
    x265_pools: str = "+"
    gop_size: int = 120
    min_keyint: int = 12
    bframes: int = 0  # 0 for compatibility with older AMD hardware encoders
    refs: int = 4
    vaapi_device: str = "/dev/dri/renderD128"
    container: str = "matroska"


@dataclass(frozen=True)
class PlanningConfig:
    """Immutable configuration for one planning run.

    Invariants:
    - languages is non-empty and holds lowercase ISO 639-2 codes
    - chapters_per_episode, when set, is between 1 and MAX_CHAPTERS_PER_EPISODE
    - sampling fractions lie in [0, 1)
    """

    # Languages
    languages: tuple[str, ...] = ("eng",)
    original_language: str | None = None
    prefer_original: bool = False

    # Audio
    audio_copy_first: bool = True
    audio_filter_languages: bool = True
    audio_codec: str = "libfdk_aac"
    audio_profile: str = "aac_he"
    audio_bitrates: AudioBitrateTiers = field(default_factory=AudioBitrateTiers)
    commentary_patterns: tuple[str, ...] = ("commentary",)

    # Video analysis
    detect_interlacing: bool = True
    adaptive_deinterlace: bool = False
    detect_crop: bool = True
    pulldown: PulldownMode = PulldownMode.AUTO
    interlace_window_start: float = INTERLACE_WINDOW_START
    interlace_frame_count: int = INTERLACE_FRAME_COUNT
    telecine_frame_count: int = TELECINE_FRAME_COUNT
    crop_sample_points: tuple[float, ...] = CROP_SAMPLE_POINTS

    # Encoder and color
    encoder: EncoderMode = EncoderMode.AUTO
    upgrade_8bit: bool = True
    downgrade_12bit: bool = False
    color_space: ColorSpaceMode = ColorSpaceMode.AUTO

    # Chapters
    split_chapters: SplitMode = SplitMode.AUTO
    chapters_per_episode: int | None = None
    content_type: ContentType | None = None

    encode: EncodeSettings = field(default_factory=EncodeSettings)

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.languages:
            raise ValueError("languages must contain at least one language code")
        for lang in self.languages:
            if not _LANGUAGE_PATTERN.match(lang):
                raise ValueError(
                    f"Invalid language code '{lang}'. "
                    "Use ISO 639-2 codes (e.g., 'eng', 'jpn')."
                )
        if self.original_language is not None and not _LANGUAGE_PATTERN.match(
            self.original_language
        ):
            raise ValueError(
                f"Invalid original_language '{self.original_language}'. "
                "Use ISO 639-2 codes (e.g., 'jpn')."
            )
        if self.chapters_per_episode is not None and not (
            1 <= self.chapters_per_episode <= MAX_CHAPTERS_PER_EPISODE
        ):
            raise ValueError(
                "chapters_per_episode must be between 1 and "
                f"{MAX_CHAPTERS_PER_EPISODE}, got {self.chapters_per_episode}"
            )
        if not self.crop_sample_points:
            raise ValueError("crop_sample_points must not be empty")
        for point in (*self.crop_sample_points, self.interlace_window_start):
            if not math.isfinite(point) or not 0.0 <= point < 1.0:
                raise ValueError(f"sample fractions must be in [0, 1), got {point}")
        if self.interlace_frame_count < 1 or self.telecine_frame_count < 1:
            raise ValueError("frame counts must be positive")

    @property
    def preferred_audio_language(self) -> str | None:
        """Return the language to pick as default audio, if any."""
        if self.prefer_original and self.original_language:
            return self.original_language
        return None

    @property
    def allowed_audio_languages(self) -> tuple[str, ...]:
        """Return the languages kept by the audio language filter.

        The undetermined tag is exempted separately by the audio planner.
        """
        allowed = list(self.languages)
        preferred = self.preferred_audio_language
        if preferred and preferred not in allowed:
            allowed.append(preferred)
        return tuple(allowed)
