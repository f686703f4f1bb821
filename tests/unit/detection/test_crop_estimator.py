"""Tests for crop estimation."""

import pytest

from mediaplan.detection.crop import (
    CropRect,
    align_down,
    estimate_crop,
    select_crop_sample,
)
from mediaplan.domain.models import CropSample
from mediaplan.policy.thresholds import CROP_ALIGNMENT


def make_crop(width: int, height: int, x: int = 0, y: int = 0) -> CropSample:
    return CropSample(width=width, height=height, x=x, y=y)


class TestAlignDown:
    """Tests for align_down."""

    @pytest.mark.parametrize(
        ("value", "expected"), [(1920, 1920), (1080, 1072), (800, 800), (15, 0)]
    )
    def test_rounds_down(self, value: int, expected: int) -> None:
        assert align_down(value) == expected


class TestSelectCropSample:
    """Tests for select_crop_sample."""

    def test_most_frequent_wins(self) -> None:
        common = make_crop(1920, 800, 0, 140)
        samples = [make_crop(1920, 816, 0, 132), common, common]
        assert select_crop_sample(samples) == common

    def test_tie_prefers_larger_area(self) -> None:
        small = make_crop(1920, 800, 0, 140)
        large = make_crop(1920, 816, 0, 132)
        assert select_crop_sample([small, large]) == large

    def test_empty(self) -> None:
        assert select_crop_sample([]) is None


class TestEstimateCrop:
    """Tests for estimate_crop."""

    def test_letterboxed_movie(self) -> None:
        samples = [make_crop(1920, 800, 0, 140)] * 3
        assert estimate_crop(samples, 1920, 1080) == CropRect(1920, 800, 0, 140)

    def test_dimensions_are_aligned(self) -> None:
        crop = estimate_crop([make_crop(1916, 802, 2, 139)], 1920, 1080)
        assert crop is not None
        assert crop.width % CROP_ALIGNMENT == 0
        assert crop.height % CROP_ALIGNMENT == 0
        assert (crop.width, crop.height) == (1904, 800)

    def test_full_frame_aligned_is_no_crop(self) -> None:
        assert estimate_crop([make_crop(720, 480)], 720, 480) is None

    def test_1080_full_frame_aligns_to_1072(self) -> None:
        """1080 is not a multiple of 16, so a full frame still crops 8 lines."""
        crop = estimate_crop([make_crop(1920, 1080)], 1920, 1080)
        assert crop == CropRect(1920, 1072, 0, 0)

    def test_out_of_frame_samples_discarded(self) -> None:
        samples = [make_crop(1920, 800, 0, 400), make_crop(1920, 800, 0, 140)]
        assert estimate_crop(samples, 1920, 1080) == CropRect(1920, 800, 0, 140)

    def test_degenerate_samples_discarded(self) -> None:
        assert estimate_crop([make_crop(0, 0)], 1920, 1080) is None

    def test_unknown_source_size(self) -> None:
        assert estimate_crop([make_crop(1920, 800)], None, None) is None

    def test_no_samples(self) -> None:
        assert estimate_crop([], 1920, 1080) is None

    def test_crop_never_exceeds_source(self) -> None:
        """Any accepted crop lies inside the source frame."""
        samples = [make_crop(w, h, 8, 8) for w, h in [(704, 464), (712, 470)]]
        crop = estimate_crop(samples, 720, 480)
        assert crop is not None
        assert crop.x + crop.width <= 720
        assert crop.y + crop.height <= 480
