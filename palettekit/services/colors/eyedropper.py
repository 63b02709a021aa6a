"""
Eyedropper sampling.

Reads a color at a position as a Gaussian-weighted average of a small odd
square neighborhood, and maps on-screen click coordinates of a scaled or
letterboxed image back to natural pixel coordinates.
"""
import math
from typing import Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from palettekit.config import config
from palettekit.schemas import ColorValue
from palettekit.services.colors.naming import create_color_value
from palettekit.services.colors.pixels import PixelBuffer

SUPPORTED_FITS = ("contain", "cover", "fill", "none")


def _gaussian_weights(size: int) -> np.ndarray:
    """2D Gaussian kernel, center weighted highest."""
    kernel = cv2.getGaussianKernel(size, 0)
    return kernel @ kernel.T


def extract_color_at_position(pixels: PixelBuffer, x: int, y: int,
                              size: Optional[int] = None,
                              min_alpha: Optional[int] = None) -> ColorValue:
    """
    Sample the color around a natural pixel coordinate.

    Pixels with alpha below ``min_alpha`` are left out of the average;
    when every sampled pixel is that transparent the center pixel is
    returned as-is. Neighborhoods are clipped at the image border and
    coordinates outside the image are clamped onto it.

    Args:
        pixels: Decoded image
        x: Column in natural pixels
        y: Row in natural pixels
        size: Odd neighborhood side, defaults to ``config.EYEDROPPER_SIZE``
        min_alpha: Opacity cut, defaults to ``config.EYEDROPPER_MIN_ALPHA``

    Returns:
        Sampled ColorValue
    """
    size = config.EYEDROPPER_SIZE if size is None else size
    min_alpha = config.EYEDROPPER_MIN_ALPHA if min_alpha is None else min_alpha
    if not config.validate_eyedropper_size(size):
        raise ValueError(f"Eyedropper size must be odd and between 1 and 15, got {size}")
    if pixels.pixel_count == 0:
        raise ValueError("Cannot sample an empty image")

    x = min(max(int(x), 0), pixels.width - 1)
    y = min(max(int(y), 0), pixels.height - 1)
    half = size // 2

    x0, x1 = max(0, x - half), min(pixels.width, x + half + 1)
    y0, y1 = max(0, y - half), min(pixels.height, y + half + 1)
    window = pixels.rgba[y0:y1, x0:x1].astype(np.float64)

    kernel = _gaussian_weights(size)
    weights = kernel[y0 - (y - half):y1 - (y - half), x0 - (x - half):x1 - (x - half)]
    weights = np.where(window[..., 3] >= min_alpha, weights, 0.0)

    total = weights.sum()
    if total <= 0:
        r, g, b, _ = pixels.get_pixel(x, y)
        logger.debug(f"All sampled pixels transparent at ({x}, {y}), using center pixel")
        return create_color_value(r, g, b)

    rgb = (window[..., :3] * weights[..., None]).sum(axis=(0, 1)) / total
    return create_color_value(*rgb)


def map_display_to_natural(x: float, y: float,
                           display_size: Tuple[float, float],
                           natural_size: Tuple[int, int],
                           fit: str = "contain") -> Tuple[int, int]:
    """
    Map a click on a displayed image to natural pixel coordinates.

    Follows CSS ``object-fit`` semantics with centered positioning.
    Clicks in letterbox padding or outside the element land on the
    nearest edge pixel.

    Args:
        x: Click column relative to the element
        y: Click row relative to the element
        display_size: Element (width, height)
        natural_size: Image (width, height) in pixels
        fit: ``contain``, ``cover``, ``fill`` or ``none``

    Returns:
        (column, row) inside the image
    """
    display_w, display_h = display_size
    natural_w, natural_h = natural_size
    if display_w <= 0 or display_h <= 0 or natural_w <= 0 or natural_h <= 0:
        raise ValueError(f"Sizes must be positive: display={display_size}, natural={natural_size}")
    if fit not in SUPPORTED_FITS:
        raise ValueError(f"Unsupported fit: {fit}")

    if fit == "fill":
        scale_x = display_w / natural_w
        scale_y = display_h / natural_h
    else:
        if fit == "contain":
            scale = min(display_w / natural_w, display_h / natural_h)
        elif fit == "cover":
            scale = max(display_w / natural_w, display_h / natural_h)
        else:
            scale = 1.0
        scale_x = scale_y = scale

    offset_x = (display_w - natural_w * scale_x) / 2
    offset_y = (display_h - natural_h * scale_y) / 2

    natural_x = math.floor((x - offset_x) / scale_x)
    natural_y = math.floor((y - offset_y) / scale_y)

    return (
        min(max(natural_x, 0), natural_w - 1),
        min(max(natural_y, 0), natural_h - 1),
    )
