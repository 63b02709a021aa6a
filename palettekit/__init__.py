"""
PaletteKit

Color extraction, conversion, mixing, harmony and accessibility engine.
"""

__version__ = "1.0.0"
