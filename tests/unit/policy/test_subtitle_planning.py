"""Tests for subtitle filtering and default disposition."""

from mediaplan.domain.enums import StreamKind
from mediaplan.domain.models import StreamDescriptor
from mediaplan.policy.subtitles import plan_subtitles, subtitle_default_source_index


def make_subtitle(
    index: int, language: str, title: str | None = None
) -> StreamDescriptor:
    return StreamDescriptor(
        kind=StreamKind.SUBTITLE,
        index=index,
        codec="subrip",
        language=language,
        title=title,
    )


class TestSubtitleDefault:
    """Tests for subtitle_default_source_index."""

    def test_no_default_when_audio_is_native(self) -> None:
        tracks = [make_subtitle(0, "eng")]
        assert subtitle_default_source_index(tracks, ("eng",), "eng") is None

    def test_foreign_audio_gets_native_subtitle(self) -> None:
        tracks = [make_subtitle(0, "fre"), make_subtitle(1, "eng")]
        assert subtitle_default_source_index(tracks, ("eng",), "jpn") == 1

    def test_no_native_subtitle(self) -> None:
        tracks = [make_subtitle(0, "fre")]
        assert subtitle_default_source_index(tracks, ("eng",), "jpn") is None

    def test_no_audio_still_picks_native_subtitle(self) -> None:
        tracks = [make_subtitle(0, "eng")]
        assert subtitle_default_source_index(tracks, ("eng",), None) == 0


class TestPlanSubtitles:
    """Tests for plan_subtitles."""

    def test_filters_by_language(self) -> None:
        tracks = [
            make_subtitle(0, "fre"),
            make_subtitle(1, "eng"),
            make_subtitle(2, "ger"),
            make_subtitle(3, "eng", title="SDH"),
        ]
        plan = plan_subtitles(tracks, ("eng",), "eng")

        assert [s.source_index for s in plan.selections] == [1, 3]
        assert [s.output_index for s in plan.selections] == [0, 1]
        assert plan.dropped == (0, 2)
        assert plan.index_map == {1: 0, 3: 1}

    def test_default_expressed_as_output_index(self) -> None:
        tracks = [make_subtitle(0, "fre"), make_subtitle(1, "eng")]
        plan = plan_subtitles(tracks, ("eng",), "jpn")

        assert plan.default_output_index == 0
        assert plan.selections[0].is_default

    def test_native_audio_means_no_default(self) -> None:
        plan = plan_subtitles([make_subtitle(0, "eng")], ("eng",), "eng")
        assert plan.default_output_index is None
        assert not any(s.is_default for s in plan.selections)

    def test_untagged_and_commentary_not_exempt(self) -> None:
        tracks = [make_subtitle(0, "und"), make_subtitle(1, "fre", "Commentary")]
        plan = plan_subtitles(tracks, ("eng",), "eng")
        assert plan.selections == ()
        assert plan.dropped == (0, 1)

    def test_multiple_native_languages(self) -> None:
        tracks = [make_subtitle(0, "ger"), make_subtitle(1, "eng")]
        plan = plan_subtitles(tracks, ("eng", "ger"), "jpn")
        assert [s.source_index for s in plan.selections] == [0, 1]
        assert plan.default_output_index == 0

    def test_empty(self) -> None:
        plan = plan_subtitles([], ("eng",), None)
        assert plan.selections == ()
        assert plan.default_output_index is None
