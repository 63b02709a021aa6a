"""
Test configuration and fixtures for PaletteKit tests.
"""
import numpy as np
import pytest
from loguru import logger

from palettekit.services.colors.pixels import PixelBuffer


@pytest.fixture
def solid_image():
    """10x10 opaque image of a single color."""
    return PixelBuffer.solid(10, 10, (200, 50, 50))


@pytest.fixture
def two_color_image():
    """Opaque image, 75% red on top, 25% blue at the bottom."""
    img = np.zeros((20, 20, 4), dtype=np.uint8)
    img[:15, :] = (255, 0, 0, 255)
    img[15:, :] = (0, 0, 255, 255)
    return PixelBuffer(img)


@pytest.fixture
def gradient_image():
    """Opaque 64x64 image with many distinct colors."""
    ys, xs = np.mgrid[0:64, 0:64]
    img = np.zeros((64, 64, 4), dtype=np.uint8)
    img[..., 0] = xs * 4
    img[..., 1] = ys * 4
    img[..., 2] = 255 - xs * 2
    img[..., 3] = 255
    return PixelBuffer(img)


@pytest.fixture
def transparent_image():
    """Fully transparent image."""
    return PixelBuffer.solid(8, 8, (255, 255, 255), alpha=0)


@pytest.fixture
def captured_logs():
    """Collect loguru records emitted during a test."""
    records = []
    handler_id = logger.add(records.append, level="DEBUG", format="{message}")
    yield records
    logger.remove(handler_id)
