"""
Unit tests for dominant color extraction.

Covers the primary pass, the frequency fallback, synthesis, and the
exact-count guarantee.
"""

import numpy as np
import pytest

from palettekit.config import config
from palettekit.exceptions import ColorExtractionError
from palettekit.services.colors import extraction
from palettekit.services.colors.extraction import (
    extract_colors,
    extract_colors_detailed,
    extract_dominant_color,
    frequency_pass,
    synthesize_variations,
)
from palettekit.services.colors.pixels import PixelBuffer
from palettekit.services.observability import MetricsCollector


class TestExtractColors:
    """Test the extraction pipeline end to end"""

    def test_solid_image_exact_count(self, solid_image):
        """A one-color image still yields exactly count distinct colors"""
        report = extract_colors_detailed(solid_image, 5)
        hexes = [c.hex for c in report.colors]
        assert len(hexes) == 5
        assert len(set(hexes)) == 5
        assert hexes[0] == "#C83232"
        assert report.primary_count == 1
        assert report.fallback_count == 0
        assert report.synthesized_count == 4

    def test_exact_count_for_every_size(self, gradient_image):
        for count in (1, 2, 5, 10, 16):
            colors = extract_colors(gradient_image, count)
            assert len(colors) == count
            assert len({c.hex for c in colors}) == count

    def test_two_color_order(self, two_color_image):
        colors = extract_colors(two_color_image, 2)
        assert [c.hex for c in colors] == ["#FF0000", "#0000FF"]

    def test_default_count(self, gradient_image):
        assert len(extract_colors(gradient_image)) == 5

    def test_colors_are_named(self, two_color_image):
        colors = extract_colors(two_color_image, 2)
        assert colors[0].name == "Red"

    def test_deterministic(self, gradient_image):
        first = [c.hex for c in extract_colors(gradient_image, 6)]
        second = [c.hex for c in extract_colors(gradient_image, 6)]
        assert first == second

    def test_kmeans_algorithm(self, two_color_image):
        report = extract_colors_detailed(two_color_image, 3, algorithm="kmeans")
        assert report.algorithm == "kmeans"
        assert len(report.colors) == 3
        assert report.colors[0].hex == "#FF0000"

    def test_semi_transparent_pixels_ignored(self):
        """Pixels below the quantizer alpha cut never reach the primary pass"""
        img = np.zeros((10, 10, 4), dtype=np.uint8)
        img[...] = (0, 0, 255, 255)
        img[:5] = (255, 0, 0, 60)
        colors = extract_colors(PixelBuffer(img), 1)
        assert colors[0].hex == "#0000FF"

    def test_fallback_fills_from_frequency(self):
        """Colors sharing one histogram cell are recovered by the frequency pass"""
        img = np.zeros((10, 10, 3), dtype=np.uint8)
        img.reshape(-1, 3)[:60] = (100, 100, 100)
        img.reshape(-1, 3)[60:] = (101, 100, 100)
        report = extract_colors_detailed(PixelBuffer(img), 2)
        assert report.primary_count == 1
        assert report.fallback_count == 1
        assert report.synthesized_count == 0
        assert {c.hex for c in report.colors} == {"#646464", "#656464"}

    def test_primary_failure_falls_back(self, two_color_image, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("quantizer exploded")

        monkeypatch.setattr(extraction, "median_cut", broken)
        report = extract_colors_detailed(two_color_image, 2)
        assert report.primary_failed
        assert report.primary_count == 0
        assert [c.hex for c in report.colors] == ["#FF0000", "#0000FF"]

    def test_transparent_image_raises(self, transparent_image):
        with pytest.raises(ColorExtractionError):
            extract_colors(transparent_image, 3)

    def test_invalid_count(self, solid_image):
        with pytest.raises(ValueError):
            extract_colors(solid_image, 0)
        with pytest.raises(ValueError):
            extract_colors(solid_image, 65)

    def test_invalid_algorithm(self, solid_image):
        with pytest.raises(ValueError):
            extract_colors(solid_image, 3, algorithm="octree")

    def test_metrics_recorded(self, solid_image):
        collector = MetricsCollector()
        extract_colors(solid_image, 3, collector=collector)
        stats = collector.get_operation_stats("extract_colors")
        assert stats["total_calls"] == 1
        assert stats["error_count"] == 0


class TestDominantColor:
    """Test single dominant color"""

    def test_majority_color_wins(self, two_color_image):
        assert extract_dominant_color(two_color_image).hex == "#FF0000"

    def test_solid_image(self, solid_image):
        assert extract_dominant_color(solid_image).hex == "#C83232"


class TestFrequencyPass:
    """Test frequency bucketing"""

    def test_most_frequent_first(self, two_color_image):
        assert frequency_pass(two_color_image) == [(255, 0, 0), (0, 0, 255)]

    def test_ties_keep_first_seen_order(self):
        img = np.array([[[0, 0, 255], [255, 0, 0], [0, 0, 255], [255, 0, 0]]], dtype=np.uint8)
        assert frequency_pass(PixelBuffer(img)) == [(0, 0, 255), (255, 0, 0)]

    def test_alpha_cut(self, transparent_image):
        assert frequency_pass(transparent_image) == []

    def test_stride_follows_target_samples(self):
        """Eight pixels with a target of four read every second pixel"""
        row = [[255, 0, 0], [0, 0, 255]] * 4
        img = np.array([row], dtype=np.uint8)
        assert frequency_pass(PixelBuffer(img)) == [(255, 0, 0), (0, 0, 255)]
        assert frequency_pass(PixelBuffer(img), target_samples=4) == [(255, 0, 0)]

    def test_stride_then_alpha_cut(self):
        """Transparent pixels are dropped from the strided sample, not before it"""
        img = np.array([[
            [255, 0, 0, 0], [0, 0, 255, 255], [0, 255, 0, 255], [0, 0, 255, 255],
            [0, 255, 0, 255], [0, 0, 255, 255], [255, 0, 0, 0], [0, 0, 255, 255],
        ]], dtype=np.uint8)
        assert frequency_pass(PixelBuffer(img), target_samples=4) == [(0, 255, 0)]

    def test_large_image_strided_order(self):
        """Sampled order is row-major and ties keep first-seen order"""
        img = np.zeros((4, 4, 3), dtype=np.uint8)
        img[0] = (10, 10, 10)
        img[1] = (20, 20, 20)
        img[2] = (30, 30, 30)
        img[3] = (10, 10, 10)
        # stride 4 reads the first pixel of each row
        assert frequency_pass(PixelBuffer(img), target_samples=4) == [
            (10, 10, 10), (20, 20, 20), (30, 30, 30)]


class TestSynthesizeVariations:
    """Test offset synthesis"""

    def test_offsets_applied_in_order(self):
        created = synthesize_variations([(100, 100, 100)], 3)
        assert created == [(124, 100, 100), (100, 124, 100), (100, 100, 124)]

    def test_distinct_from_existing(self):
        existing = [(0, 0, 0), (255, 255, 255)]
        created = synthesize_variations(existing, 20)
        assert len(created) == 20
        assert len(set(created) | set(existing)) == 22

    def test_nothing_needed(self):
        assert synthesize_variations([(1, 2, 3)], 0) == []

    def test_requires_base(self):
        with pytest.raises(ColorExtractionError):
            synthesize_variations([], 2)

    @pytest.mark.parametrize("rgb", [(0, 0, 0), (255, 255, 255), (128, 128, 128), (200, 50, 50)])
    def test_flat_images_reach_every_count(self, rgb):
        """Flat images at the channel extremes still fill every palette size"""
        img = np.zeros((8, 8, 3), dtype=np.uint8)
        img[...] = rgb
        pixels = PixelBuffer(img)
        for count in range(1, config.MAX_COLOR_COUNT + 1):
            hexes = [c.hex for c in extract_colors(pixels, count)]
            assert len(hexes) == count
            assert len(set(hexes)) == count, (rgb, count)

    def test_created_colors_seed_later_generations(self):
        """White clamps most offsets, so later colors come from earlier ones"""
        created = synthesize_variations([(255, 255, 255)], 10)
        assert created[:4] == [(231, 231, 231), (231, 255, 255), (255, 231, 255), (255, 255, 231)]
        assert len(set(created)) == 10
        assert (255, 255, 255) not in created
