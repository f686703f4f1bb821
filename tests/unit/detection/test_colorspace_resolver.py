"""Tests for color space resolution and HDR detection."""

from mediaplan.detection.colorspace import (
    ColorSpace,
    HDRType,
    detect_hdr_type,
    resolve_color_space,
)
from mediaplan.domain.enums import StreamKind
from mediaplan.domain.models import StreamDescriptor
from mediaplan.policy.advisories import AdvisoryCode
from mediaplan.policy.types import ColorSpaceMode


def make_video(height: int = 1080, **kwargs) -> StreamDescriptor:
    return StreamDescriptor(
        kind=StreamKind.VIDEO, index=0, width=height * 16 // 9, height=height, **kwargs
    )


class TestDetectHdrType:
    """Tests for detect_hdr_type."""

    def test_sdr(self) -> None:
        assert detect_hdr_type(make_video()) is HDRType.NONE

    def test_pq_transfer_is_hdr10(self) -> None:
        video = make_video(2160, color_transfer="smpte2084")
        assert detect_hdr_type(video) is HDRType.HDR10

    def test_hlg_transfer(self) -> None:
        video = make_video(2160, color_transfer="arib-std-b67")
        assert detect_hdr_type(video) is HDRType.HLG

    def test_bt2020_primaries_is_hdr10(self) -> None:
        video = make_video(2160, color_primaries="bt2020")
        assert detect_hdr_type(video) is HDRType.HDR10

    def test_dolby_vision_flag_wins(self) -> None:
        video = make_video(2160, color_transfer="smpte2084", dolby_vision=True)
        assert detect_hdr_type(video) is HDRType.DOLBY_VISION

    def test_title_fallback(self) -> None:
        assert detect_hdr_type(make_video(title="Main HDR")) is HDRType.HDR10

    def test_no_video(self) -> None:
        assert detect_hdr_type(None) is HDRType.NONE


class TestResolveColorSpace:
    """Tests for resolve_color_space."""

    def test_sd_gets_bt601(self) -> None:
        assert resolve_color_space(make_video(480)).target is ColorSpace.BT601

    def test_576_is_still_sd(self) -> None:
        assert resolve_color_space(make_video(576)).target is ColorSpace.BT601

    def test_hd_gets_bt709(self) -> None:
        assert resolve_color_space(make_video(720)).target is ColorSpace.BT709

    def test_unknown_height_treated_as_hd(self) -> None:
        video = StreamDescriptor(kind=StreamKind.VIDEO, index=0)
        assert resolve_color_space(video).target is ColorSpace.BT709

    def test_hdr_passes_through(self) -> None:
        decision = resolve_color_space(make_video(2160, color_transfer="smpte2084"))
        assert decision.target is ColorSpace.PASSTHROUGH
        assert decision.emits_filter is False
        assert decision.advisories == ()

    def test_dolby_vision_advisory(self) -> None:
        decision = resolve_color_space(make_video(2160, dolby_vision=True))
        assert decision.target is ColorSpace.PASSTHROUGH
        codes = [a.code for a in decision.advisories]
        assert codes == [AdvisoryCode.DOLBY_VISION_BASE_LAYER_ONLY]

    def test_forced_conversion_of_hdr_flags_override(self) -> None:
        decision = resolve_color_space(
            make_video(2160, color_transfer="smpte2084"), ColorSpaceMode.BT709
        )
        assert decision.target is ColorSpace.BT709
        assert decision.emits_filter is True
        assert [a.code for a in decision.advisories] == [
            AdvisoryCode.HDR_CONVERSION_OVERRIDE
        ]

    def test_forced_bt601_on_hd(self) -> None:
        decision = resolve_color_space(make_video(1080), ColorSpaceMode.BT601)
        assert decision.target is ColorSpace.BT601
        assert decision.advisories == ()

    def test_none_mode_disables_conversion(self) -> None:
        decision = resolve_color_space(make_video(480), ColorSpaceMode.NONE)
        assert decision.target is ColorSpace.NONE
        assert decision.emits_filter is False
