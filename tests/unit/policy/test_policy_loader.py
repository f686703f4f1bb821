"""Unit tests for loading planning policies from YAML."""

from pathlib import Path

import pytest

from mediaplan.domain.enums import ContentType
from mediaplan.policy.loader import (
    PolicyValidationError,
    load_policy,
    load_policy_from_dict,
)
from mediaplan.policy.types import (
    ColorSpaceMode,
    EncoderMode,
    PlanningConfig,
    PulldownMode,
    SplitMode,
)


def write_policy(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "policy.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadPolicyFromDict:
    """Tests for load_policy_from_dict."""

    def test_empty_mapping_gives_defaults(self) -> None:
        """An empty policy produces the default PlanningConfig."""
        assert load_policy_from_dict({}) == PlanningConfig()

    def test_full_policy(self) -> None:
        """Every section is converted into the matching config field."""
        config = load_policy_from_dict(
            {
                "schema_version": 1,
                "languages": ["ENG", "ger"],
                "original_language": "jpn",
                "prefer_original": True,
                "content_type": "series",
                "audio": {
                    "copy_first": False,
                    "bitrates": {"stereo": "160k"},
                    "commentary_patterns": ["commentary", "director"],
                },
                "video": {
                    "pulldown": "on",
                    "encoder": "software",
                    "color_space": "bt709",
                    "crop_sample_points": [0.5],
                },
                "chapters": {"split": "on", "chapters_per_episode": 2},
                "encode": {"quality": 22, "preset": "slow"},
            }
        )

        assert config.languages == ("eng", "ger")
        assert config.preferred_audio_language == "jpn"
        assert config.content_type is ContentType.SERIES
        assert config.audio_copy_first is False
        assert config.audio_bitrates.stereo == "160k"
        assert config.audio_bitrates.mono == "96k"
        assert config.commentary_patterns == ("commentary", "director")
        assert config.pulldown is PulldownMode.ON
        assert config.encoder is EncoderMode.SOFTWARE
        assert config.color_space is ColorSpaceMode.BT709
        assert config.crop_sample_points == (0.5,)
        assert config.split_chapters is SplitMode.ON
        assert config.chapters_per_episode == 2
        assert config.encode.quality == 22
        assert config.encode.preset == "slow"

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(PolicyValidationError) as exc_info:
            load_policy_from_dict({"video": {"deinterlace_everything": True}})
        assert exc_info.value.field == "video.deinterlace_everything"

    def test_invalid_language(self) -> None:
        with pytest.raises(PolicyValidationError, match="Invalid language code"):
            load_policy_from_dict({"languages": ["english"]})

    def test_empty_language_list(self) -> None:
        with pytest.raises(PolicyValidationError) as exc_info:
            load_policy_from_dict({"languages": []})
        assert exc_info.value.field == "languages"

    def test_invalid_enum_value(self) -> None:
        with pytest.raises(PolicyValidationError) as exc_info:
            load_policy_from_dict({"video": {"encoder": "gpu"}})
        assert exc_info.value.field == "video.encoder"

    def test_chapters_per_episode_bounds(self) -> None:
        with pytest.raises(PolicyValidationError) as exc_info:
            load_policy_from_dict({"chapters": {"chapters_per_episode": 7}})
        assert exc_info.value.field == "chapters.chapters_per_episode"

    def test_invalid_commentary_regex(self) -> None:
        with pytest.raises(PolicyValidationError, match="commentary_patterns"):
            load_policy_from_dict({"audio": {"commentary_patterns": ["("]}})

    def test_invalid_bitrate(self) -> None:
        with pytest.raises(PolicyValidationError, match="Invalid bitrate"):
            load_policy_from_dict({"audio": {"bitrates": {"mono": "loud"}}})

    def test_prefer_original_requires_language(self) -> None:
        with pytest.raises(PolicyValidationError, match="prefer_original"):
            load_policy_from_dict({"prefer_original": True})

    def test_unsupported_schema_version(self) -> None:
        with pytest.raises(PolicyValidationError) as exc_info:
            load_policy_from_dict({"schema_version": 2})
        assert exc_info.value.field == "schema_version"


class TestLoadPolicy:
    """Tests for load_policy."""

    def test_load_yaml_file(self, tmp_path: Path) -> None:
        path = write_policy(
            tmp_path,
            "schema_version: 1\n"
            "languages: [eng, jpn]\n"
            "video:\n"
            "  adaptive_deinterlace: true\n",
        )
        config = load_policy(path)
        assert config.languages == ("eng", "jpn")
        assert config.adaptive_deinterlace is True

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_policy(tmp_path / "absent.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        with pytest.raises(PolicyValidationError, match="empty"):
            load_policy(write_policy(tmp_path, ""))

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(PolicyValidationError, match="mapping"):
            load_policy(write_policy(tmp_path, "- eng\n- jpn\n"))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(PolicyValidationError, match="Invalid YAML"):
            load_policy(write_policy(tmp_path, "languages: [eng\n"))
