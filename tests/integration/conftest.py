"""Fixtures for CLI tests driven through click's CliRunner.

Commands run against an in-memory StubProbe, so no ffmpeg install is
needed.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from mediaplan.cli import main
from mediaplan.domain.enums import StreamKind
from mediaplan.domain.models import (
    Chapter,
    CropSample,
    FrameSample,
    StreamDescriptor,
)
from mediaplan.introspector.stub import StubMedia, StubProbe


@pytest.fixture(autouse=True)
def skip_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Leave the root logger alone while commands run."""
    monkeypatch.setattr("mediaplan.cli.configure_logging", lambda config: None)


@pytest.fixture
def dvd_media() -> StubMedia:
    """Interlaced, letterboxed NTSC DVD with Japanese and English audio."""
    return StubMedia(
        streams=[
            StreamDescriptor(
                StreamKind.VIDEO, 0, codec="mpeg2video", width=720, height=480
            ),
            StreamDescriptor(StreamKind.AUDIO, 0, language="jpn", channels=2),
            StreamDescriptor(StreamKind.AUDIO, 1, language="eng", channels=6),
            StreamDescriptor(StreamKind.SUBTITLE, 0, language="eng"),
        ],
        chapters=[Chapter(i, i * 1200.0) for i in range(4)],
        duration=4800.0,
        interlace=FrameSample(progressive=15, tff=80, bff=5),
        telecine=FrameSample(progressive=500),
        crops=[CropSample(720, 352, 0, 64)] * 3,
    )


@pytest.fixture
def run_cli(tmp_path: Path) -> Callable[..., Result]:
    """Return a helper that invokes the CLI with a given probe."""

    def _run(args: list[str], probe: StubProbe | None = None) -> Result:
        runner = CliRunner()
        obj = {"probe_factory": lambda config: probe or StubProbe()}
        return runner.invoke(
            main,
            ["--config", str(tmp_path / "absent.toml"), *args],
            obj=obj,
        )

    return _run
