"""
PaletteKit Configuration
Manages environment variables and defaults for the color engine.
"""
import os
from typing import Literal


class Config:
    """Configuration class for PaletteKit services."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTEKIT_LOG_LEVEL", "INFO")

    # Palette sizes
    DEFAULT_COLOR_COUNT: int = int(os.environ.get("PALETTEKIT_DEFAULT_COLOR_COUNT", "5"))
    MAX_COLOR_COUNT: int = int(os.environ.get("PALETTEKIT_MAX_COLOR_COUNT", "64"))

    # Extraction
    EXTRACTION_ALGORITHM: Literal["median_cut", "kmeans"] = os.environ.get(
        "PALETTEKIT_EXTRACTION_ALGORITHM", "median_cut"
    )
    QUANTIZE_MIN_ALPHA: int = int(os.environ.get("PALETTEKIT_QUANTIZE_MIN_ALPHA", "125"))
    FALLBACK_MIN_ALPHA: int = int(os.environ.get("PALETTEKIT_FALLBACK_MIN_ALPHA", "128"))
    FALLBACK_TARGET_SAMPLES: int = int(os.environ.get("PALETTEKIT_FALLBACK_TARGET_SAMPLES", "40000"))
    KMEANS_SEED: int = int(os.environ.get("PALETTEKIT_KMEANS_SEED", "42"))

    # Eyedropper
    EYEDROPPER_SIZE: int = int(os.environ.get("PALETTEKIT_EYEDROPPER_SIZE", "3"))
    EYEDROPPER_MIN_ALPHA: int = int(os.environ.get("PALETTEKIT_EYEDROPPER_MIN_ALPHA", "10"))

    # Accessibility
    DISTINGUISHABLE_DELTA_E: float = float(os.environ.get("PALETTEKIT_DISTINGUISHABLE_DELTA_E", "3.0"))
    WCAG_SUGGESTION_STEP: float = float(os.environ.get("PALETTEKIT_WCAG_SUGGESTION_STEP", "0.5"))
    WCAG_MAX_SUGGESTION_STEPS: int = int(os.environ.get("PALETTEKIT_WCAG_MAX_SUGGESTION_STEPS", "40"))
    CVD_METHOD: Literal["heuristic", "machado"] = os.environ.get("PALETTEKIT_CVD_METHOD", "heuristic")

    # WCAG 2.1 thresholds
    WCAG_AA_NORMAL: float = 4.5
    WCAG_AA_LARGE: float = 3.0
    WCAG_AAA_NORMAL: float = 7.0
    WCAG_AAA_LARGE: float = 4.5

    SUPPORTED_ALGORITHMS = ["median_cut", "kmeans"]
    SUPPORTED_CVD_METHODS = ["heuristic", "machado"]

    @classmethod
    def validate_color_count(cls, count: int) -> bool:
        """Validate requested palette size."""
        return 1 <= count <= cls.MAX_COLOR_COUNT

    @classmethod
    def validate_eyedropper_size(cls, size: int) -> bool:
        """Validate eyedropper neighborhood size (odd square)."""
        return 1 <= size <= 15 and size % 2 == 1

    @classmethod
    def validate_algorithm(cls, algorithm: str) -> bool:
        """Validate extraction algorithm name."""
        return algorithm in cls.SUPPORTED_ALGORITHMS

    @classmethod
    def validate_cvd_method(cls, method: str) -> bool:
        """Validate color-vision-deficiency simulation method."""
        return method in cls.SUPPORTED_CVD_METHODS


# Global config instance
config = Config()
