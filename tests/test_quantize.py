"""
Unit tests for the quantization passes.
"""

import numpy as np
import pytest

from palettekit.services.colors.quantize import kmeans_quantize, median_cut


def _pixels(*groups):
    """Stack (rgb, count) groups into an (N, 3) uint8 array."""
    return np.concatenate([np.tile(np.array(rgb, dtype=np.uint8), (n, 1)) for rgb, n in groups])


class TestMedianCut:
    """Test modified median cut"""

    def test_single_color_is_exact(self):
        """One populated cell yields the exact pixel mean"""
        result = median_cut(_pixels(((200, 50, 50), 100)), 5)
        assert len(result) == 1
        assert result[0].rgb == (200, 50, 50)
        assert result[0].population == 100

    def test_two_colors_ordered_by_population(self):
        result = median_cut(_pixels(((255, 0, 0), 300), ((0, 0, 255), 100)), 5)
        assert [c.rgb for c in result] == [(255, 0, 0), (0, 0, 255)]

    def test_respects_max_colors(self):
        rng = np.random.default_rng(0)
        pixels = rng.integers(0, 256, size=(5000, 3), dtype=np.uint8)
        for max_colors in (1, 2, 5, 8, 16):
            result = median_cut(pixels, max_colors)
            assert 1 <= len(result) <= max_colors

    def test_fills_request_on_varied_image(self):
        rng = np.random.default_rng(1)
        pixels = rng.integers(0, 256, size=(5000, 3), dtype=np.uint8)
        assert len(median_cut(pixels, 8)) == 8

    def test_populations_cover_all_pixels(self):
        rng = np.random.default_rng(2)
        pixels = rng.integers(0, 256, size=(2000, 3), dtype=np.uint8)
        assert sum(c.population for c in median_cut(pixels, 6)) == 2000

    def test_deterministic(self):
        rng = np.random.default_rng(3)
        pixels = rng.integers(0, 256, size=(3000, 3), dtype=np.uint8)
        assert median_cut(pixels, 5) == median_cut(pixels, 5)

    def test_empty_input(self):
        assert median_cut(np.zeros((0, 3), dtype=np.uint8), 5) == []

    def test_invalid_max_colors(self):
        with pytest.raises(ValueError):
            median_cut(_pixels(((0, 0, 0), 1)), 0)


class TestKMeansQuantize:
    """Test the MiniBatchKMeans alternative"""

    def test_k_capped_by_unique_colors(self):
        result = kmeans_quantize(_pixels(((255, 0, 0), 30), ((0, 0, 255), 10)), 5)
        assert len(result) == 2
        assert result[0].rgb == (255, 0, 0)
        assert result[0].population == 30

    def test_seeded_runs_match(self):
        rng = np.random.default_rng(4)
        pixels = rng.integers(0, 256, size=(1000, 3), dtype=np.uint8)
        assert kmeans_quantize(pixels, 4, rng_seed=7) == kmeans_quantize(pixels, 4, rng_seed=7)

    def test_sorted_by_population(self):
        rng = np.random.default_rng(5)
        pixels = rng.integers(0, 256, size=(1000, 3), dtype=np.uint8)
        populations = [c.population for c in kmeans_quantize(pixels, 4)]
        assert populations == sorted(populations, reverse=True)

    def test_empty_input(self):
        assert kmeans_quantize(np.zeros((0, 3), dtype=np.uint8), 3) == []
