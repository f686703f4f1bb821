"""Tests for domain models."""

import pytest

from mediaplan.domain.enums import FieldOrder, StreamKind
from mediaplan.domain.models import (
    CropSample,
    FrameSample,
    StreamDescriptor,
    primary_video_stream,
    streams_of_kind,
)


class TestFrameSample:
    """Tests for FrameSample."""

    def test_totals(self) -> None:
        sample = FrameSample(
            progressive=15, tff=80, bff=5, repeated_top=3, repeated_bottom=4
        )
        assert sample.total == 100
        assert sample.interlaced == 85
        assert sample.total_repeated == 7

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ValueError, match="tff"):
            FrameSample(tff=-1)

    def test_non_integer_count_rejected(self) -> None:
        with pytest.raises(ValueError, match="progressive"):
            FrameSample(progressive=1.5)  # type: ignore[arg-type]


class TestCropSample:
    """Tests for CropSample."""

    def test_area(self) -> None:
        assert CropSample(1920, 800, 0, 140).area == 1_536_000

    @pytest.mark.parametrize(
        ("sample", "fits"),
        [
            (CropSample(1920, 800, 0, 140), True),
            (CropSample(1920, 1080, 0, 0), True),
            (CropSample(1920, 800, 8, 140), False),
            (CropSample(0, 800, 0, 0), False),
            (CropSample(1920, 800, 0, -1), False),
        ],
    )
    def test_fits_within(self, sample: CropSample, fits: bool) -> None:
        assert sample.fits_within(1920, 1080) is fits


class TestStreamHelpers:
    """Tests for stream selection helpers."""

    def test_streams_of_kind_sorted_by_index(self) -> None:
        streams = [
            StreamDescriptor(kind=StreamKind.AUDIO, index=1),
            StreamDescriptor(kind=StreamKind.VIDEO, index=0),
            StreamDescriptor(kind=StreamKind.AUDIO, index=0),
        ]
        audio = streams_of_kind(streams, StreamKind.AUDIO)
        assert [s.index for s in audio] == [0, 1]

    def test_primary_video_stream(self) -> None:
        video = StreamDescriptor(kind=StreamKind.VIDEO, index=0, height=1080)
        assert primary_video_stream([video]) is video
        assert primary_video_stream([]) is None

    def test_default_language_is_und(self) -> None:
        assert StreamDescriptor(kind=StreamKind.AUDIO, index=0).language == "und"

    def test_field_order_interlaced(self) -> None:
        assert FieldOrder.TFF.is_interlaced
        assert FieldOrder.BFF.is_interlaced
        assert not FieldOrder.PROGRESSIVE.is_interlaced
