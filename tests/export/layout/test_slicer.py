"""
Unit tests for the raster slicer.

Covers the partition properties (count, exact sum, full bands except
the remainder) and the single-page boundary cases.
"""

import math

import pytest

from dashboard_export.export.errors import InvalidInput
from dashboard_export.export.layout import Slice, slice_raster


class TestSliceScenarios:
    """Concrete pagination scenarios."""

    def test_when_height_exceeds_two_pages_then_remainder_is_last(self):
        # Act
        slices = slice_raster(1000, 400)

        # Assert
        assert [s.height_px for s in slices] == [400, 400, 200]
        assert [s.source_y_offset_px for s in slices] == [0, 400, 800]
        assert [s.index for s in slices] == [0, 1, 2]

    def test_when_height_equals_page_then_single_slice(self):
        """No spurious trailing empty page on an exact fit."""
        slices = slice_raster(400, 400)

        assert slices == [Slice(index=0, source_y_offset_px=0, height_px=400)]

    def test_when_height_below_page_then_single_short_slice(self):
        slices = slice_raster(150, 400)

        assert len(slices) == 1
        assert slices[0].height_px == 150

    def test_exact_multiple_has_no_empty_trailing_slice(self):
        slices = slice_raster(1200, 400)

        assert [s.height_px for s in slices] == [400, 400, 400]

    def test_one_pixel_pages(self):
        slices = slice_raster(5, 1)

        assert [s.source_y_offset_px for s in slices] == [0, 1, 2, 3, 4]


class TestSliceProperties:
    """Partition invariants across a spread of inputs."""

    @pytest.mark.parametrize("height", [1, 7, 399, 400, 401, 1000, 2339, 10007])
    @pytest.mark.parametrize("page", [1, 3, 146, 400, 1463])
    def test_partition_invariants(self, height, page):
        slices = slice_raster(height, page)

        # Count
        assert len(slices) == math.ceil(height / page)
        # Exact sum
        assert sum(s.height_px for s in slices) == height
        # Gap-free and ordered
        assert slices[0].source_y_offset_px == 0
        for prev, nxt in zip(slices, slices[1:]):
            assert nxt.source_y_offset_px == prev.bottom_px
        # Full bands except the remainder
        assert all(s.height_px == page for s in slices[:-1])
        assert slices[-1].height_px == height - (len(slices) - 1) * page
        assert all(s.height_px > 0 for s in slices)


class TestSliceValidation:

    @pytest.mark.parametrize("height,page", [(0, 400), (-1, 400), (400, 0), (400, -5)])
    def test_non_positive_arguments_rejected(self, height, page):
        with pytest.raises(InvalidInput):
            slice_raster(height, page)

    @pytest.mark.parametrize("height,page", [(400.5, 400), (400, 12.5), (True, 400)])
    def test_non_integer_arguments_rejected(self, height, page):
        with pytest.raises(InvalidInput):
            slice_raster(height, page)
