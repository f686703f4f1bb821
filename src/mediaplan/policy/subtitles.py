"""Subtitle track filtering and default-disposition planning.

Unlike audio, subtitles are filtered by exact language membership only;
untagged and commentary subtitles get no exemption.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mediaplan.domain.models import StreamDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubtitleTrackSelection:
    """One subtitle track kept in the output (stream-copied)."""

    source_index: int
    output_index: int
    language: str
    title: str | None
    is_default: bool


@dataclass(frozen=True)
class SubtitlePlan:
    """Filtered subtitle tracks and their default disposition."""

    selections: tuple[SubtitleTrackSelection, ...] = ()
    default_output_index: int | None = None
    """Output index of the default subtitle, or None for no default."""

    dropped: tuple[int, ...] = ()

    @property
    def index_map(self) -> dict[int, int]:
        """Return the source index -> output index mapping."""
        return {s.source_index: s.output_index for s in self.selections}


def subtitle_default_source_index(
    tracks: list[StreamDescriptor],
    native_languages: tuple[str, ...],
    audio_language: str | None,
) -> int | None:
    """Find the source subtitle that should play by default.

    Args:
        tracks: Subtitle streams in source order.
        native_languages: The viewer's languages.
        audio_language: Language of the default audio track, or None.

    Returns:
        None if the audio is already in a native language or no native
        subtitle exists, otherwise the source index of the first subtitle
        in a native language.
    """
    if audio_language is not None and audio_language in native_languages:
        return None
    for track in tracks:
        if track.language in native_languages:
            return track.index
    return None


def plan_subtitles(
    tracks: list[StreamDescriptor],
    native_languages: tuple[str, ...],
    audio_language: str | None,
) -> SubtitlePlan:
    """Plan subtitle selection and the default disposition.

    Args:
        tracks: Subtitle streams in source order.
        native_languages: Languages to keep.
        audio_language: Language of the default audio track, or None.

    Returns:
        SubtitlePlan whose default is expressed as an output index.
    """
    tracks = sorted(tracks, key=lambda t: t.index)
    kept = [t for t in tracks if t.language in native_languages]
    dropped = tuple(t.index for t in tracks if t.language not in native_languages)

    index_map = {track.index: pos for pos, track in enumerate(kept)}
    default_source = subtitle_default_source_index(
        tracks, native_languages, audio_language
    )
    default_output = None
    if default_source is not None:
        default_output = index_map.get(default_source)

    selections = tuple(
        SubtitleTrackSelection(
            source_index=track.index,
            output_index=index_map[track.index],
            language=track.language,
            title=track.title,
            is_default=index_map[track.index] == default_output,
        )
        for track in kept
    )

    if dropped:
        logger.debug("Dropping subtitle tracks %s (language not in keep list)", dropped)

    return SubtitlePlan(
        selections=selections,
        default_output_index=default_output,
        dropped=dropped,
    )
