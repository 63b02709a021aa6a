"""
Swatch Rendering Module

Renders palettes as PNG images: a horizontal strip of chips, or a grid
of chips labeled with their hex codes. Images are returned as PNG bytes.
"""

from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from palettekit.services.colors.conversion import hex_to_rgb, is_light_color
from palettekit.services.colors.distance import HEX_RE


def hex_to_bgr(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to BGR tuple for OpenCV."""
    r, g, b = hex_to_rgb(hex_color)
    return (b, g, r)


def validate_swatch_params(hex_colors: Sequence[str], chip_size: int,
                           highlight_index: Optional[int] = None) -> None:
    """Validate swatch rendering parameters."""
    if not hex_colors:
        raise ValueError("hex_colors cannot be empty")

    if chip_size <= 0:
        raise ValueError("chip_size must be positive")

    if highlight_index is not None and not 0 <= highlight_index < len(hex_colors):
        raise ValueError(f"highlight_index {highlight_index} out of range [0, {len(hex_colors)})")

    for i, hex_color in enumerate(hex_colors):
        if not isinstance(hex_color, str) or not HEX_RE.match(hex_color):
            raise ValueError(f"Invalid hex color at index {i}: {hex_color!r}")


def _encode_png(img: np.ndarray) -> bytes:
    success, buffer = cv2.imencode('.png', img)
    if not success:
        raise RuntimeError("Failed to encode image as PNG")
    return buffer.tobytes()


def render_swatch_strip(hex_colors: Sequence[str],
                        chip_size: int = 40,
                        highlight_index: Optional[int] = None,
                        border_color: Tuple[int, int, int] = (0, 0, 0),
                        border_width: int = 2) -> bytes:
    """
    Render a horizontal strip of color swatches.

    Args:
        hex_colors: List of hex color strings
        chip_size: Size of each color chip in pixels
        highlight_index: Index of a chip to outline
        border_color: BGR color for the highlight border
        border_width: Width of the highlight border in pixels

    Returns:
        PNG image bytes
    """
    validate_swatch_params(hex_colors, chip_size, highlight_index)

    k = len(hex_colors)
    img = np.zeros((chip_size, chip_size * k, 3), dtype=np.uint8)
    for i, hex_color in enumerate(hex_colors):
        img[:, i * chip_size:(i + 1) * chip_size, :] = hex_to_bgr(hex_color)

    if highlight_index is not None:
        x_start = highlight_index * chip_size
        cv2.rectangle(img, (x_start, 0), (x_start + chip_size - 1, chip_size - 1),
                      border_color, border_width)

    logger.debug(f"Rendered swatch strip: {k} chips of {chip_size}px")
    return _encode_png(img)


def render_palette_grid(hex_colors: Sequence[str],
                        labels: Optional[List[str]] = None,
                        chip_size: int = 80,
                        cols: int = 5,
                        show_labels: bool = True,
                        font_scale: float = 0.35) -> bytes:
    """
    Render a grid of color swatches with a text label on each chip.

    Args:
        hex_colors: List of hex color strings
        labels: Text per chip, defaults to the hex codes
        chip_size: Size of each chip
        cols: Number of columns
        show_labels: Whether to draw labels
        font_scale: Font scale for the labels

    Returns:
        PNG image bytes
    """
    validate_swatch_params(hex_colors, chip_size)
    if cols <= 0:
        raise ValueError("cols must be positive")
    labels = list(labels) if labels is not None else [h.upper() for h in hex_colors]
    if len(labels) != len(hex_colors):
        raise ValueError("labels and hex_colors must have same length")

    k = len(hex_colors)
    cols = min(cols, k)
    rows = (k + cols - 1) // cols

    img = np.full((rows * chip_size, cols * chip_size, 3), 240, dtype=np.uint8)
    for i, (hex_color, label) in enumerate(zip(hex_colors, labels)):
        y_start = (i // cols) * chip_size
        x_start = (i % cols) * chip_size
        img[y_start:y_start + chip_size, x_start:x_start + chip_size, :] = hex_to_bgr(hex_color)

        if show_labels:
            text_color = (0, 0, 0) if is_light_color(hex_color) else (255, 255, 255)
            text_size = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, font_scale, 1)[0]
            text_x = x_start + (chip_size - text_size[0]) // 2
            text_y = y_start + (chip_size + text_size[1]) // 2
            cv2.putText(img, label, (text_x, text_y),
                        cv2.FONT_HERSHEY_SIMPLEX, font_scale, text_color, 1)

        cv2.rectangle(img, (x_start, y_start),
                      (x_start + chip_size - 1, y_start + chip_size - 1), (200, 200, 200), 1)

    logger.debug(f"Rendered palette grid: {k} colors, {rows}x{cols}")
    return _encode_png(img)
