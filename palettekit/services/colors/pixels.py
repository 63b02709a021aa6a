"""
Pixel buffer input type.

The engine never decodes image files; callers hand it already-decoded
RGBA data through a PixelBuffer.
"""
from typing import Tuple

import numpy as np
from PIL import Image


class PixelBuffer:
    """
    Decoded image held as an (height, width, 4) uint8 RGBA array.

    RGB input gets a fully opaque alpha channel.
    """

    def __init__(self, data: np.ndarray):
        array = np.asarray(data)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise ValueError(f"Expected an (H, W, 3|4) array, got shape {array.shape}")

        array = np.clip(array, 0, 255).astype(np.uint8)
        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)

        self._rgba = np.ascontiguousarray(array)
        self._rgba.setflags(write=False)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        """Build from packed RGBA bytes in row-major order."""
        expected = width * height * 4
        if len(data) != expected:
            raise ValueError(f"Expected {expected} RGBA bytes for {width}x{height}, got {len(data)}")
        array = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 4)
        return cls(array)

    @classmethod
    def from_pil(cls, image: Image.Image) -> "PixelBuffer":
        """Build from an already-decoded Pillow image of any mode."""
        return cls(np.array(image.convert("RGBA")))

    @classmethod
    def solid(cls, width: int, height: int,
              rgb: Tuple[int, int, int], alpha: int = 255) -> "PixelBuffer":
        """Build a single-color image."""
        array = np.empty((height, width, 4), dtype=np.uint8)
        array[..., :3] = rgb
        array[..., 3] = alpha
        return cls(array)

    @property
    def rgba(self) -> np.ndarray:
        """Read-only (H, W, 4) view."""
        return self._rgba

    @property
    def width(self) -> int:
        return self._rgba.shape[1]

    @property
    def height(self) -> int:
        return self._rgba.shape[0]

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def flat(self) -> np.ndarray:
        """All pixels as an (N, 4) array in row-major order."""
        return self._rgba.reshape(-1, 4)

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """RGBA of the pixel at column ``x``, row ``y``."""
        r, g, b, a = self._rgba[y, x]
        return int(r), int(g), int(b), int(a)

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"
