"""Chapter-based episode segmentation.

Multi-episode source files (typically one title per disc holding a run of
series episodes) are split by grouping consecutive chapters. The grouping
size is chosen from 1..MAX_CHAPTERS_PER_EPISODE by picking the candidate
whose episodes are most uniform in length, subject to a plausibility guard
on the mean episode duration.
"""

from __future__ import annotations

import logging
import math
import statistics
from dataclasses import dataclass
from pathlib import Path

from mediaplan.domain.enums import ContentType
from mediaplan.domain.models import Chapter
from mediaplan.exceptions import ClassificationError
from mediaplan.policy.advisories import Advisory, AdvisoryCode
from mediaplan.policy.thresholds import (
    AUTO_SPLIT_MIN_SECONDS,
    EPISODE_MAX_SECONDS,
    EPISODE_MIN_SECONDS,
    MAX_CHAPTERS_PER_EPISODE,
    STDDEV_TIE_TOLERANCE,
)
from mediaplan.policy.types import PlanningConfig, SplitMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChapterSpan:
    """Source chapter indices (inclusive) covered by one episode.

    Chapters discarded as unusable are skipped, so the range may contain
    indices that belong to no episode.
    """

    first: int
    last: int


@dataclass(frozen=True)
class Episode:
    """One output episode cut from a source file."""

    source_file: Path
    number: int
    """1-based position of the episode within its source file."""

    chapter_span: ChapterSpan | None
    """Chapters covered, or None for an ungrouped whole-file episode."""

    start_time: float
    end_time: float | None
    """End in seconds, or None when the title duration is unknown."""

    @property
    def duration(self) -> float | None:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time


@dataclass(frozen=True)
class GroupingStats:
    """Uniformity statistics for one candidate grouping size."""

    chapters_per_episode: int
    episode_count: int
    mean: float
    stddev: float

    @property
    def plausible(self) -> bool:
        """Return True if the mean episode length is within the guard band."""
        return EPISODE_MIN_SECONDS <= self.mean <= EPISODE_MAX_SECONDS


@dataclass(frozen=True)
class GroupingDecision:
    """Chosen grouping and the candidates that were considered."""

    chapters_per_episode: int | None
    """Chosen grouping size, or None when the file stays whole."""

    candidates: tuple[GroupingStats, ...] = ()
    advisories: tuple[Advisory, ...] = ()


def should_split_by_chapters(
    mode: SplitMode,
    content_type: ContentType | None,
    chapter_count: int,
    total_duration: float | None,
) -> bool:
    """Decide whether a file is split into episodes.

    Args:
        mode: Split policy.
        content_type: Series or movie, or None if unknown.
        chapter_count: Number of valid chapters.
        total_duration: Title duration in seconds, or None.

    Returns:
        True for ON with any chapters; for AUTO only series content with
        more than one chapter running longer than an hour.
    """
    if mode is SplitMode.OFF or chapter_count == 0:
        return False
    if mode is SplitMode.ON:
        return True
    return (
        content_type is ContentType.SERIES
        and chapter_count > 1
        and total_duration is not None
        and total_duration > AUTO_SPLIT_MIN_SECONDS
    )


def usable_duration(duration: float | None) -> float | None:
    """Return the title duration, or None when it is non-finite or not positive."""
    if duration is None or not math.isfinite(duration) or duration <= 0:
        return None
    return duration


def sanitize_chapters(
    chapters: list[Chapter] | tuple[Chapter, ...],
    total_duration: float | None,
) -> list[Chapter]:
    """Drop chapters whose start time cannot be used.

    Discards non-finite or negative starts, starts at or past the end of the
    title, and starts that do not strictly increase.

    Returns:
        Valid chapters in index order.
    """
    valid: list[Chapter] = []
    previous: float | None = None
    for chapter in sorted(chapters, key=lambda c: c.index):
        start = chapter.start_time
        if not math.isfinite(start) or start < 0:
            logger.debug(
                "Discarding chapter %d: invalid start %r", chapter.index, start
            )
            continue
        if total_duration is not None and start >= total_duration:
            logger.debug(
                "Discarding chapter %d: start %.3f past end %.3f",
                chapter.index,
                start,
                total_duration,
            )
            continue
        if previous is not None and start <= previous:
            logger.debug(
                "Discarding chapter %d: start %.3f not after %.3f",
                chapter.index,
                start,
                previous,
            )
            continue
        valid.append(chapter)
        previous = start
    return valid


def chapter_durations(chapters: list[Chapter], total_duration: float) -> list[float]:
    """Return each chapter's duration; the last one runs to the title end."""
    starts = [c.start_time for c in chapters]
    ends = starts[1:] + [total_duration]
    return [end - start for start, end in zip(starts, ends)]


def evaluate_grouping(durations: list[float], group_size: int) -> GroupingStats:
    """Compute mean and population stddev of episode lengths for a grouping.

    Raises:
        ClassificationError: If group_size does not evenly divide the
            chapter count.
    """
    if group_size < 1 or not durations or len(durations) % group_size:
        raise ClassificationError(
            "chapters",
            f"grouping of {group_size} does not divide {len(durations)} chapters",
        )
    episodes = [
        math.fsum(durations[i : i + group_size])
        for i in range(0, len(durations), group_size)
    ]
    return GroupingStats(
        chapters_per_episode=group_size,
        episode_count=len(episodes),
        mean=statistics.fmean(episodes),
        stddev=statistics.pstdev(episodes),
    )


def detect_chapters_per_episode(
    durations: list[float],
    max_group: int = MAX_CHAPTERS_PER_EPISODE,
) -> GroupingDecision:
    """Choose the most uniform plausible grouping size.

    Args:
        durations: Chapter durations in seconds.
        max_group: Largest grouping size considered.

    Returns:
        GroupingDecision with the lowest-stddev surviving candidate (ties go
        to the smaller size), or chapters_per_episode None if none survive.
    """
    count = len(durations)
    candidates = tuple(
        evaluate_grouping(durations, size)
        for size in range(1, max_group + 1)
        if count and count % size == 0
    )

    best: GroupingStats | None = None
    for stats in candidates:
        if not stats.plausible:
            continue
        if best is None or stats.stddev < best.stddev - STDDEV_TIE_TOLERANCE:
            best = stats

    chosen = best.chapters_per_episode if best else None
    logger.debug(
        "Chapter grouping over %d chapters: %s -> %s",
        count,
        ", ".join(
            f"{s.chapters_per_episode}(mean={s.mean:.0f}s sd={s.stddev:.1f})"
            for s in candidates
        )
        or "no candidates",
        chosen,
    )
    return GroupingDecision(chapters_per_episode=chosen, candidates=candidates)


def _whole_file(
    source_file: Path, total_duration: float | None
) -> tuple[Episode, ...]:
    return (
        Episode(
            source_file=source_file,
            number=1,
            chapter_span=None,
            start_time=0.0,
            end_time=total_duration,
        ),
    )


def segment_episodes(
    source_file: Path,
    chapters: list[Chapter] | tuple[Chapter, ...],
    total_duration: float | None,
    config: PlanningConfig,
    content_type: ContentType | None = None,
) -> tuple[tuple[Episode, ...], GroupingDecision]:
    """Split a source file into episodes.

    Args:
        source_file: Path of the source file.
        chapters: Chapters reported by the probe.
        total_duration: Title duration in seconds, or None; non-finite or
            non-positive values are treated as None.
        config: Planning configuration.
        content_type: Content type; falls back to config.content_type.

    Returns:
        Tuple of (episodes, decision). The episodes cover every valid
        chapter exactly once, in order. A single ungrouped episode is
        returned when splitting does not apply or no grouping survives.
    """
    content_type = content_type or config.content_type
    total_duration = usable_duration(total_duration)
    valid = sanitize_chapters(chapters, total_duration)

    if total_duration is None or not should_split_by_chapters(
        config.split_chapters, content_type, len(valid), total_duration
    ):
        return _whole_file(source_file, total_duration), GroupingDecision(None)

    advisories: list[Advisory] = []
    override = config.chapters_per_episode
    durations = chapter_durations(valid, total_duration)
    if override is not None and len(valid) % override == 0:
        decision = GroupingDecision(
            chapters_per_episode=override,
            candidates=(evaluate_grouping(durations, override),),
        )
    else:
        if override is not None:
            advisories.append(
                Advisory(
                    AdvisoryCode.CHAPTER_OVERRIDE_REJECTED,
                    f"{override} chapters per episode does not divide "
                    f"{len(valid)} chapters; grouping detected automatically.",
                )
            )
        detected = detect_chapters_per_episode(durations)
        decision = GroupingDecision(
            chapters_per_episode=detected.chapters_per_episode,
            candidates=detected.candidates,
            advisories=tuple(advisories),
        )

    size = decision.chapters_per_episode
    if size is None:
        return _whole_file(source_file, total_duration), decision

    episodes = []
    for number, first in enumerate(range(0, len(valid), size), start=1):
        last = first + size - 1
        end = valid[last + 1].start_time if last + 1 < len(valid) else total_duration
        episodes.append(
            Episode(
                source_file=source_file,
                number=number,
                chapter_span=ChapterSpan(valid[first].index, valid[last].index),
                start_time=valid[first].start_time,
                end_time=end,
            )
        )

    logger.info(
        "Split %s into %d episodes of %d chapters",
        source_file.name,
        len(episodes),
        size,
    )
    return tuple(episodes), decision
