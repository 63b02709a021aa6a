"""
PaletteKit Colors Module

Provides color conversion and distance math, dominant color extraction,
eyedropper sampling, mixing, harmony, accessibility evaluation, swatch
rendering, export and batch processing.
"""

__version__ = "1.0.0"
