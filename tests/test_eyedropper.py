"""
Unit tests for eyedropper sampling and display coordinate mapping.
"""

import numpy as np
import pytest

from palettekit.services.colors.eyedropper import (
    extract_color_at_position,
    map_display_to_natural,
)
from palettekit.services.colors.pixels import PixelBuffer


@pytest.fixture
def red_center_image():
    """3x3 blue image with a red center pixel."""
    img = np.zeros((3, 3, 4), dtype=np.uint8)
    img[...] = (0, 0, 255, 255)
    img[1, 1] = (255, 0, 0, 255)
    return PixelBuffer(img)


class TestExtractColorAtPosition:
    """Test Gaussian-weighted sampling"""

    def test_center_weighted_average(self, red_center_image):
        """Center weight is 1/4 of a 3x3 Gaussian kernel"""
        assert extract_color_at_position(red_center_image, 1, 1).hex == "#4000BF"

    def test_size_one_reads_single_pixel(self, red_center_image):
        assert extract_color_at_position(red_center_image, 1, 1, size=1).hex == "#FF0000"
        assert extract_color_at_position(red_center_image, 0, 0, size=1).hex == "#0000FF"

    def test_uniform_region(self, solid_image):
        assert extract_color_at_position(solid_image, 5, 5, size=5).hex == "#C83232"

    def test_border_clipping(self, solid_image):
        assert extract_color_at_position(solid_image, 0, 0).hex == "#C83232"
        assert extract_color_at_position(solid_image, 9, 9, size=7).hex == "#C83232"

    def test_out_of_bounds_clamped(self, red_center_image):
        assert extract_color_at_position(red_center_image, -10, 50, size=1).hex == "#0000FF"

    def test_transparent_neighbors_excluded(self):
        img = np.zeros((3, 3, 4), dtype=np.uint8)
        img[1, 1] = (10, 200, 30, 255)
        assert extract_color_at_position(PixelBuffer(img), 1, 1).hex == "#0AC81E"

    def test_fully_transparent_returns_center(self):
        sample = extract_color_at_position(PixelBuffer.solid(3, 3, (40, 50, 60), alpha=0), 1, 1)
        assert sample.hex == "#28323C"

    def test_invalid_size(self, solid_image):
        for size in (0, 2, 17):
            with pytest.raises(ValueError):
                extract_color_at_position(solid_image, 1, 1, size=size)


class TestMapDisplayToNatural:
    """Test object-fit coordinate mapping"""

    def test_fill_scales_axes_independently(self):
        assert map_display_to_natural(50, 25, (100, 50), (200, 200), fit="fill") == (100, 100)

    def test_contain_letterbox(self):
        """A 200x100 image in a 100x100 box is scaled by 0.5 and centered vertically"""
        assert map_display_to_natural(50, 50, (100, 100), (200, 100)) == (100, 50)
        # clicks on the padding land on the nearest edge
        assert map_display_to_natural(50, 5, (100, 100), (200, 100)) == (100, 0)
        assert map_display_to_natural(50, 95, (100, 100), (200, 100)) == (100, 99)

    def test_cover_crops(self):
        """A 200x100 image covering a 100x100 box is scaled by 1 and cropped horizontally"""
        assert map_display_to_natural(0, 0, (100, 100), (200, 100), fit="cover") == (50, 0)

    def test_none_centers_natural_size(self):
        assert map_display_to_natural(0, 0, (100, 100), (50, 50), fit="none") == (0, 0)
        assert map_display_to_natural(30, 30, (100, 100), (50, 50), fit="none") == (5, 5)

    def test_result_in_bounds(self):
        for x in (-20, 0, 33.3, 99.9, 150):
            col, row = map_display_to_natural(x, x, (100, 80), (640, 480))
            assert 0 <= col < 640
            assert 0 <= row < 480

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            map_display_to_natural(1, 1, (0, 10), (10, 10))
        with pytest.raises(ValueError):
            map_display_to_natural(1, 1, (10, 10), (10, 10), fit="scale-down")
