"""Tests for batch planning over the worker pool."""

import logging
from pathlib import Path

import pytest

from mediaplan.domain.enums import ContentType, StreamKind
from mediaplan.domain.models import Chapter, StreamDescriptor
from mediaplan.introspector.stub import StubMedia, StubProbe
from mediaplan.policy.types import PlanningConfig
from mediaplan.workflow import plan_batch, plan_file


def make_media(height: int = 1080, duration: float | None = 1800.0) -> StubMedia:
    return StubMedia(
        streams=[
            StreamDescriptor(StreamKind.VIDEO, 0, width=1920, height=height),
            StreamDescriptor(StreamKind.AUDIO, 0, language="eng", channels=2),
        ],
        duration=duration,
    )


class ExplodingProbe(StubProbe):
    """StubProbe whose stream probing fails with an unexpected error."""

    def __init__(self, failing: Path, media: dict[Path, StubMedia]) -> None:
        super().__init__(media)
        self.failing = failing

    def probe_streams(self, path: Path) -> list[StreamDescriptor]:
        if path == self.failing:
            raise RuntimeError("decoder crashed")
        return super().probe_streams(path)


CONFIG = PlanningConfig(detect_interlacing=False, detect_crop=False)


class TestPlanFile:
    """Tests for plan_file."""

    def test_plans_single_file(self) -> None:
        path = Path("/media/movie.mkv")
        probe = StubProbe({path: make_media()})

        plan = plan_file(path, probe, CONFIG)

        assert plan.source_file == path
        assert plan.video.height == 1080
        assert len(plan.episodes) == 1

    def test_content_type_override(self) -> None:
        path = Path("/media/disc.mkv")
        media = make_media(duration=4800.0)
        media.chapters = [Chapter(i, i * 1200.0) for i in range(4)]
        probe = StubProbe({path: media})

        movie = plan_file(path, probe, CONFIG, ContentType.MOVIE)
        series = plan_file(path, probe, CONFIG, ContentType.SERIES)

        assert len(movie.episodes) == 1
        assert len(series.episodes) > 1


class TestPlanBatch:
    """Tests for plan_batch."""

    def test_results_in_input_order(self) -> None:
        paths = [Path(f"/media/ep{i:02d}.mkv") for i in range(6)]
        probe = StubProbe({path: make_media() for path in paths})

        results = plan_batch(paths, probe, CONFIG, workers=3)

        assert [r.path for r in results] == paths
        assert all(r.success for r in results)

    def test_failure_is_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        paths = [Path("/media/a.mkv"), Path("/media/b.mkv"), Path("/media/c.mkv")]
        probe = ExplodingProbe(paths[1], {path: make_media() for path in paths})

        with caplog.at_level(logging.ERROR, logger="mediaplan.workflow"):
            results = plan_batch(paths, probe, CONFIG, workers=2)

        assert [r.success for r in results] == [True, False, True]
        assert results[1].plan is None
        assert results[1].error == "decoder crashed"
        assert "Error planning /media/b.mkv" in caplog.text

    def test_missing_probe_data_still_plans(self) -> None:
        path = Path("/media/broken.mkv")
        probe = StubProbe({path: StubMedia(streams=None)})

        [result] = plan_batch([path], probe, CONFIG)

        assert result.success
        assert result.plan.warnings

    def test_unknown_file_still_plans(self) -> None:
        [result] = plan_batch([Path("/media/absent.mkv")], StubProbe(), CONFIG)
        assert result.success

    def test_empty_batch(self) -> None:
        assert plan_batch([], StubProbe(), CONFIG) == []

    @pytest.mark.parametrize("workers", [0, -1])
    def test_invalid_worker_count(self, workers: int) -> None:
        with pytest.raises(ValueError, match="workers must be at least 1"):
            plan_batch([Path("/media/a.mkv")], StubProbe(), CONFIG, workers=workers)

    def test_log_records_tagged_with_worker(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = Path("/media/a.mkv")
        probe = StubProbe({path: make_media()})

        with caplog.at_level(logging.INFO, logger="mediaplan.workflow"):
            plan_batch([path], probe, CONFIG, workers=4)

        [record] = [r for r in caplog.records if "=== FILE" in r.getMessage()]
        assert record.getMessage() == "=== FILE F1: /media/a.mkv"
