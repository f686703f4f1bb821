"""Tests for application config loading and precedence."""

import logging
from pathlib import Path

import pytest

from mediaplan.config import AppConfig, EnvReader
from mediaplan.config.loader import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    get_default_config_path,
    load_app_config,
    load_config_file,
)
from mediaplan.policy.types import SplitMode

CONFIG_TOML = """
[tools]
ffmpeg = "/opt/ffmpeg/bin/ffmpeg"

[probe]
timeout = 30
analysis_timeout = 120

[processing]
workers = 4

[logging]
level = "debug"
format = "json"
file = "/var/log/mediaplan/mediaplan.log"
backup_count = 2

[planning]
languages = ["eng", "jpn"]

[planning.chapters]
split = "on"
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML)
    return path


def empty_env() -> EnvReader:
    return EnvReader(env={})


class TestLoadConfigFile:
    """Tests for load_config_file."""

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_config_file(tmp_path / "absent.toml") == {}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[tools\nffmpeg = ")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config_file(path)

    def test_unknown_section_warns(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[server]\nport = 8080\n")
        with caplog.at_level(logging.WARNING):
            assert load_config_file(path) == {"server": {"port": 8080}}
        assert "unknown config sections" in caplog.text


class TestDefaultConfigPath:
    """Tests for get_default_config_path."""

    def test_default_location(self) -> None:
        assert get_default_config_path(empty_env()) == DEFAULT_CONFIG_FILE

    def test_env_override(self, tmp_path: Path) -> None:
        reader = EnvReader(env={"MEDIAPLAN_CONFIG_PATH": str(tmp_path / "mp.toml")})
        assert get_default_config_path(reader) == tmp_path / "mp.toml"


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = load_app_config(tmp_path / "absent.toml", env_reader=empty_env())
        assert config == AppConfig()

    def test_file_values(self, config_file: Path) -> None:
        config = load_app_config(config_file, env_reader=empty_env())

        assert config.tools.ffmpeg == Path("/opt/ffmpeg/bin/ffmpeg")
        assert config.tools.ffprobe is None
        assert config.probe.timeout == 30
        assert config.probe.analysis_timeout == 120
        assert config.processing.workers == 4
        assert config.logging.level == "debug"
        assert config.logging.format == "json"
        assert config.logging.file == Path("/var/log/mediaplan/mediaplan.log")
        assert config.logging.backup_count == 2
        assert config.planning.languages == ("eng", "jpn")
        assert config.planning.split_chapters is SplitMode.ON

    def test_env_overrides_file(self, config_file: Path) -> None:
        reader = EnvReader(
            env={
                "MEDIAPLAN_WORKERS": "8",
                "MEDIAPLAN_LOG_LEVEL": "warning",
                "MEDIAPLAN_FFPROBE_PATH": "/usr/local/bin/ffprobe",
                "MEDIAPLAN_PROBE_TIMEOUT": "90",
            }
        )
        config = load_app_config(config_file, env_reader=reader)

        assert config.processing.workers == 8
        assert config.logging.level == "warning"
        assert config.tools.ffprobe == Path("/usr/local/bin/ffprobe")
        assert config.probe.timeout == 90
        assert config.probe.analysis_timeout == 120

    def test_cli_overrides_env(self, config_file: Path) -> None:
        reader = EnvReader(
            env={"MEDIAPLAN_WORKERS": "8", "MEDIAPLAN_LOG_FORMAT": "text"}
        )
        config = load_app_config(
            config_file,
            workers=3,
            log_format="json",
            ffmpeg_path=Path("/custom/ffmpeg"),
            env_reader=reader,
        )

        assert config.processing.workers == 3
        assert config.logging.format == "json"
        assert config.tools.ffmpeg == Path("/custom/ffmpeg")

    def test_invalid_env_integer_ignored(self, config_file: Path) -> None:
        reader = EnvReader(env={"MEDIAPLAN_WORKERS": "many"})
        config = load_app_config(config_file, env_reader=reader)
        assert config.processing.workers == 4

    def test_config_path_from_env(self, config_file: Path) -> None:
        reader = EnvReader(env={"MEDIAPLAN_CONFIG_PATH": str(config_file)})
        assert load_app_config(env_reader=reader).processing.workers == 4

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[processing]\nworkers = 0\n")
        with pytest.raises(ConfigError, match="workers must be at least 1"):
            load_app_config(path, env_reader=empty_env())

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ConfigError, match="level must be one of"):
            load_app_config(
                Path("/nonexistent/config.toml"),
                log_level="verbose",
                env_reader=empty_env(),
            )

    def test_section_must_be_table(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('tools = "ffmpeg"\n')
        with pytest.raises(ConfigError, match=r"\[tools\] must be a table"):
            load_app_config(path, env_reader=empty_env())

    def test_invalid_planning_section(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[planning]\nlanguages = ["english"]\n')
        with pytest.raises(ConfigError, match=r"^\[planning\]"):
            load_app_config(path, env_reader=empty_env())
