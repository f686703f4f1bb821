"""Audio track selection and disposition planning.

The default audio track is mapped first (output 0) and is the only track
flagged default. Remaining tracks survive the language filter when they are
commentary, untagged, or in an allowed language.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from mediaplan.domain.models import UNDETERMINED_LANGUAGE, StreamDescriptor
from mediaplan.policy.matchers import CommentaryMatcher
from mediaplan.policy.types import PlanningConfig

logger = logging.getLogger(__name__)


class AudioAction(Enum):
    """How an audio track is carried into the output."""

    COPY = "copy"
    TRANSCODE = "transcode"


@dataclass(frozen=True)
class AudioTrackSelection:
    """One audio track kept in the output."""

    source_index: int
    """Audio stream index in the source (the N in 0:a:N)."""

    output_index: int
    """Audio stream index in the output."""

    action: AudioAction
    codec: str | None
    """Encoder name, or None when copied."""

    bitrate: str | None
    """Bitrate tier (e.g. '128k'), or None when copied."""

    language: str
    title: str | None
    is_default: bool
    reason: str


@dataclass(frozen=True)
class AudioPlan:
    """Ordered audio selections for a file."""

    selections: tuple[AudioTrackSelection, ...] = ()
    dropped: tuple[int, ...] = ()
    """Source indices of tracks removed by the language filter."""

    @property
    def default_track(self) -> AudioTrackSelection | None:
        """Return the selection flagged default, if any."""
        return next((s for s in self.selections if s.is_default), None)

    @property
    def default_language(self) -> str | None:
        """Return the language of the default track, or None without audio."""
        default = self.default_track
        return default.language if default else None


def select_default_audio(
    tracks: list[StreamDescriptor],
    preferred_language: str | None,
) -> StreamDescriptor | None:
    """Pick the default audio track.

    Args:
        tracks: Audio streams in source order.
        preferred_language: Language to prefer (original-language mode), or
            None to always take the first track.

    Returns:
        The first track in the preferred language if one exists, otherwise
        the first track, or None when there are no audio tracks.
    """
    if not tracks:
        return None
    if preferred_language:
        for track in tracks:
            if track.language == preferred_language:
                return track
    return tracks[0]


def _evaluate_remaining_track(
    track: StreamDescriptor,
    config: PlanningConfig,
    matcher: CommentaryMatcher,
) -> tuple[bool, str]:
    """Decide whether a non-default audio track is kept.

    Returns:
        Tuple of (keep, reason).
    """
    if not config.audio_filter_languages:
        return True, "language filtering disabled"
    if matcher.is_commentary(track.title):
        return True, "commentary track"
    if track.language == UNDETERMINED_LANGUAGE:
        return True, "undetermined language"
    if track.language in config.allowed_audio_languages:
        return True, "language in keep list"
    return False, "language not in keep list"


def plan_audio(
    tracks: list[StreamDescriptor],
    config: PlanningConfig,
) -> AudioPlan:
    """Plan audio track selection, codecs and dispositions.

    Args:
        tracks: Audio streams in source order.
        config: Planning configuration.

    Returns:
        AudioPlan with the default track at output index 0 followed by the
        kept remaining tracks in source order. Empty for files without audio.
    """
    tracks = sorted(tracks, key=lambda t: t.index)
    default = select_default_audio(tracks, config.preferred_audio_language)
    if default is None:
        return AudioPlan()

    matcher = CommentaryMatcher(config.commentary_patterns)
    tiers = config.audio_bitrates

    if config.audio_copy_first:
        default_selection = AudioTrackSelection(
            source_index=default.index,
            output_index=0,
            action=AudioAction.COPY,
            codec=None,
            bitrate=None,
            language=default.language,
            title=default.title,
            is_default=True,
            reason="default track (copied)",
        )
    else:
        default_selection = AudioTrackSelection(
            source_index=default.index,
            output_index=0,
            action=AudioAction.TRANSCODE,
            codec=config.audio_codec,
            bitrate=tiers.for_channels(default.channels),
            language=default.language,
            title=default.title,
            is_default=True,
            reason="default track",
        )

    selections = [default_selection]
    dropped: list[int] = []
    for track in tracks:
        if track.index == default.index:
            continue
        keep, reason = _evaluate_remaining_track(track, config, matcher)
        if not keep:
            logger.debug(
                "Dropping audio track %d (%s): %s", track.index, track.language, reason
            )
            dropped.append(track.index)
            continue
        selections.append(
            AudioTrackSelection(
                source_index=track.index,
                output_index=len(selections),
                action=AudioAction.TRANSCODE,
                codec=config.audio_codec,
                bitrate=tiers.for_channels(track.channels),
                language=track.language,
                title=track.title,
                is_default=False,
                reason=reason,
            )
        )

    return AudioPlan(selections=tuple(selections), dropped=tuple(dropped))
