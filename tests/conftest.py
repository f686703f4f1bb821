"""Shared test fixtures for mediaplan."""

import json
import logging
import os
from pathlib import Path

import pytest

from mediaplan.domain.enums import ContentType, StreamKind
from mediaplan.domain.models import Chapter, CropSample, FrameSample, StreamDescriptor
from mediaplan.plan.builder import build_encoding_plan
from mediaplan.plan.collect import ProbeData
from mediaplan.plan.types import EncodingPlan
from mediaplan.policy.types import PlanningConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_ffprobe_fixture(name: str) -> dict:
    """Load an ffprobe JSON fixture by name.

    Args:
        name: Name of the fixture file (without .json extension).

    Returns:
        Parsed JSON data from the fixture.
    """
    fixture_path = FIXTURES_DIR / "ffprobe" / f"{name}.json"
    return json.loads(fixture_path.read_text())


def load_ffmpeg_log(name: str) -> str:
    """Load captured ffmpeg stderr by name (without .txt extension)."""
    return (FIXTURES_DIR / "ffmpeg" / f"{name}.txt").read_text()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep MEDIAPLAN_* variables and the user's config file out of tests."""
    for var in list(os.environ):
        if var.startswith("MEDIAPLAN_"):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("MEDIAPLAN_CONFIG_PATH", str(tmp_path / "no-config.toml"))


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after a test reconfigures them."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def media_file(tmp_path: Path) -> Path:
    """Create an empty placeholder source file."""
    path = tmp_path / "title.mkv"
    path.touch()
    return path


@pytest.fixture
def anime_dvd_fixture() -> dict:
    """ffprobe output for an interlaced DVD with mixed audio and chapters."""
    return load_ffprobe_fixture("anime_dvd")


@pytest.fixture
def dolby_vision_fixture() -> dict:
    """ffprobe output for a UHD Dolby Vision title."""
    return load_ffprobe_fixture("uhd_dolby_vision")


@pytest.fixture
def ffmpeg_log():
    """Return a loader for captured ffmpeg stderr fixtures."""
    return load_ffmpeg_log


@pytest.fixture
def dvd_config() -> PlanningConfig:
    """English viewer who prefers original-language audio."""
    return PlanningConfig(
        languages=("eng",), original_language="jpn", prefer_original=True
    )


@pytest.fixture
def dvd_plan(dvd_config: PlanningConfig) -> EncodingPlan:
    """Plan for an interlaced, letterboxed NTSC DVD title."""
    streams = (
        StreamDescriptor(kind=StreamKind.VIDEO, index=0, width=720, height=480),
        StreamDescriptor(kind=StreamKind.AUDIO, index=0, language="jpn", channels=2),
        StreamDescriptor(kind=StreamKind.AUDIO, index=1, language="eng", channels=6),
        StreamDescriptor(
            kind=StreamKind.AUDIO,
            index=2,
            language="fre",
            title="Commentary",
            channels=2,
        ),
        StreamDescriptor(kind=StreamKind.SUBTITLE, index=0, language="eng"),
        StreamDescriptor(kind=StreamKind.SUBTITLE, index=1, language="fre"),
    )
    data = ProbeData(
        streams=streams,
        duration=1800.0,
        interlace=FrameSample(progressive=15, tff=80, bff=5),
        crops=(CropSample(720, 352, 0, 64),) * 3,
    )
    return build_encoding_plan(Path("/media/dvd/title.mkv"), data, dvd_config)


@pytest.fixture
def series_plan() -> EncodingPlan:
    """Plan for an HD series title holding four 20-minute episodes."""
    streams = (
        StreamDescriptor(kind=StreamKind.VIDEO, index=0, width=1920, height=1080),
        StreamDescriptor(kind=StreamKind.AUDIO, index=0, language="eng", channels=2),
    )
    data = ProbeData(
        streams=streams,
        duration=4800.0,
        chapters=tuple(Chapter(i, i * 1200.0) for i in range(4)),
    )
    return build_encoding_plan(
        Path("/media/bluray/disc1.mkv"), data, PlanningConfig(), ContentType.SERIES
    )
