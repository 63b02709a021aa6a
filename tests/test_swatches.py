"""
Unit tests for swatch rendering.
"""

import cv2
import numpy as np
import pytest

from palettekit.services.colors.swatches import (
    hex_to_bgr,
    render_palette_grid,
    render_swatch_strip,
    validate_swatch_params,
)


def decode(png_bytes):
    return cv2.imdecode(np.frombuffer(png_bytes, dtype=np.uint8), cv2.IMREAD_COLOR)


class TestSwatchStrip:
    """Test horizontal strip rendering"""

    def test_png_signature(self):
        assert render_swatch_strip(["#FF0000"]).startswith(b"\x89PNG")

    def test_chip_layout(self):
        img = decode(render_swatch_strip(["#FF0000", "#00FF00", "#0000FF"], chip_size=10))
        assert img.shape == (10, 30, 3)
        assert tuple(img[5, 5]) == (0, 0, 255)
        assert tuple(img[5, 15]) == (0, 255, 0)
        assert tuple(img[5, 25]) == (255, 0, 0)

    def test_highlight_border(self):
        img = decode(render_swatch_strip(["#FFFFFF", "#FFFFFF"], chip_size=20, highlight_index=1))
        assert tuple(img[0, 25]) == (0, 0, 0)
        assert tuple(img[10, 5]) == (255, 255, 255)
        assert tuple(img[10, 30]) == (255, 255, 255)

    def test_hex_to_bgr(self):
        assert hex_to_bgr("#102030") == (48, 32, 16)


class TestPaletteGrid:
    """Test labeled grid rendering"""

    def test_grid_dimensions(self):
        colors = ["#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#00FFFF", "#FF00FF", "#000000"]
        img = decode(render_palette_grid(colors, chip_size=40, cols=5))
        assert img.shape == (80, 200, 3)

    def test_cols_capped_by_color_count(self):
        img = decode(render_palette_grid(["#FF0000", "#0000FF"], chip_size=40, cols=5))
        assert img.shape == (40, 80, 3)

    def test_without_labels(self):
        img = decode(render_palette_grid(["#0000FF"], chip_size=40, show_labels=False))
        assert tuple(img[20, 20]) == (255, 0, 0)

    def test_label_count_mismatch(self):
        with pytest.raises(ValueError):
            render_palette_grid(["#FF0000", "#0000FF"], labels=["only one"])

    def test_invalid_cols(self):
        with pytest.raises(ValueError):
            render_palette_grid(["#FF0000"], cols=0)


class TestValidation:
    """Test swatch parameter validation"""

    def test_empty_colors(self):
        with pytest.raises(ValueError):
            validate_swatch_params([], 40)

    def test_bad_chip_size(self):
        with pytest.raises(ValueError):
            validate_swatch_params(["#FF0000"], 0)

    def test_bad_hex(self):
        with pytest.raises(ValueError, match="index 1"):
            validate_swatch_params(["#FF0000", "red"], 40)

    def test_highlight_out_of_range(self):
        with pytest.raises(ValueError):
            validate_swatch_params(["#FF0000"], 40, highlight_index=1)
