"""Tests for plan formatters."""

import json

from mediaplan.plan.formatters import format_human, format_json, format_parameters
from mediaplan.plan.types import EncodingPlan


class TestFormatHuman:
    """Tests for format_human."""

    def test_dvd_plan(self, dvd_plan: EncodingPlan) -> None:
        output = format_human(dvd_plan)
        lines = output.splitlines()

        assert lines[0] == "File: /media/dvd/title.mkv"
        assert "Source: 720x480" in lines
        assert "Scan: tff" in lines
        assert "Crop: 720:352:0:64" in lines
        assert "Encoder: libx265 (software) main10 10-bit yuv420p10le" in lines
        assert "Color: bt601" in lines
        assert "  - deinterlace (adaptive=false, kind=software, parity=tff)" in lines
        assert "  a:0 -> 0 jpn copy (default)" in lines
        assert "  a:1 -> 1 eng libfdk_aac 192k" in lines
        assert '  a:2 -> 2 fre libfdk_aac 128k "Commentary"' in lines
        assert "  s:0 -> 0 eng (default)" in lines
        assert "Episodes" not in output

    def test_split_plan(self, series_plan: EncodingPlan) -> None:
        lines = format_human(series_plan).splitlines()
        assert "Episodes: 4 (1 chapters each)" in lines
        assert "  2: chapters 2-2 [1200.0s - 2400.0s]" in lines
        assert "  (none kept)" in lines

    def test_hardware_filters(self, series_plan: EncodingPlan) -> None:
        lines = format_human(series_plan).splitlines()
        assert "  - hwupload" in lines
        assert "Encoder: hevc_vaapi (hardware) main10 10-bit p010le" in lines


class TestFormatJson:
    """Tests for format_json."""

    def test_list_of_plans(
        self, dvd_plan: EncodingPlan, series_plan: EncodingPlan
    ) -> None:
        data = json.loads(format_json([dvd_plan, series_plan]))
        assert [p["source"] for p in data] == [
            "/media/dvd/title.mkv",
            "/media/bluray/disc1.mkv",
        ]

    def test_empty(self) -> None:
        assert json.loads(format_json([])) == []


class TestFormatParameters:
    """Tests for format_parameters."""

    def test_key_value_lines(self, dvd_plan: EncodingPlan) -> None:
        lines = format_parameters(dvd_plan).splitlines()
        assert lines[0] == "source=/media/dvd/title.mkv"
        assert "encoder=libx265" in lines
        assert "audio.1.bitrate=192k" in lines
