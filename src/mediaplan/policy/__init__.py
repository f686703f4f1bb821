"""Planning policy: configuration, thresholds and the track/encoder planners.

Planners here are pure functions of their inputs and a PlanningConfig:

- select_encoder: encoder kind, profile, pixel format and bit depth
- plan_audio / plan_subtitles: track selection and dispositions
- segment_episodes: chapter grouping into episodes
"""

from mediaplan.policy.advisories import Advisory, AdvisoryCode
from mediaplan.policy.audio import (
    AudioAction,
    AudioPlan,
    AudioTrackSelection,
    plan_audio,
)
from mediaplan.policy.chapters import (
    ChapterSpan,
    Episode,
    GroupingDecision,
    GroupingStats,
    detect_chapters_per_episode,
    sanitize_chapters,
    segment_episodes,
    should_split_by_chapters,
)
from mediaplan.policy.encoder import (
    EncoderChoice,
    EncoderKind,
    output_bit_depth,
    select_encoder,
)
from mediaplan.policy.loader import (
    PolicyValidationError,
    load_policy,
    load_policy_from_dict,
)
from mediaplan.policy.subtitles import (
    SubtitlePlan,
    SubtitleTrackSelection,
    plan_subtitles,
)
from mediaplan.policy.types import (
    AudioBitrateTiers,
    ColorSpaceMode,
    EncodeSettings,
    EncoderMode,
    PlanningConfig,
    PulldownMode,
    SplitMode,
)

__all__ = [
    # Configuration
    "AudioBitrateTiers",
    "ColorSpaceMode",
    "EncodeSettings",
    "EncoderMode",
    "PlanningConfig",
    "PulldownMode",
    "SplitMode",
    "PolicyValidationError",
    "load_policy",
    "load_policy_from_dict",
    # Advisories
    "Advisory",
    "AdvisoryCode",
    # Encoder
    "EncoderChoice",
    "EncoderKind",
    "output_bit_depth",
    "select_encoder",
    # Audio and subtitles
    "AudioAction",
    "AudioPlan",
    "AudioTrackSelection",
    "SubtitlePlan",
    "SubtitleTrackSelection",
    "plan_audio",
    "plan_subtitles",
    # Chapters
    "ChapterSpan",
    "Episode",
    "GroupingDecision",
    "GroupingStats",
    "detect_chapters_per_episode",
    "sanitize_chapters",
    "segment_episodes",
    "should_split_by_chapters",
]
