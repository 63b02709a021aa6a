"""
PaletteKit exception hierarchy.
"""


class PaletteKitError(Exception):
    """Base class for all engine errors."""


class ColorExtractionError(PaletteKitError):
    """Raised when an image holds no usable pixel data."""


class MixingError(PaletteKitError, ValueError):
    """Raised for invalid mixing requests (too few colors, bad ratios)."""


class DuplicateColorError(PaletteKitError):
    """Raised by a mixing session when a color with the same hex is already collected."""

    def __init__(self, hex_color: str):
        self.hex = hex_color
        super().__init__(f"duplicate color {hex_color}")


class JobNotFoundError(PaletteKitError, KeyError):
    """Raised when a batch job id is unknown to its processor."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"batch job not found: {job_id}")
