"""
Color model conversions for PaletteKit.

Converts between sRGB, hex, HSL, CIE L*a*b* and LCh (D65 / 2° observer),
computes WCAG relative luminance and contrast, and shifts lightness in Lab
space. These are hot-path functions: they assume validated input and do
not check hex syntax or channel ranges.
"""

import colorsys
import math
import warnings
from typing import NamedTuple, Tuple

import numpy as np
from skimage.color import rgb2lab, lab2rgb, lab2lch

# Lab L units moved per unit of lighten/darken amount
LIGHTNESS_STEP = 18.0


class LabColor(NamedTuple):
    """CIE L*a*b* coordinates: L in [0, 100], a/b roughly in [-128, 127]."""
    l: float
    a: float
    b: float


class LchColor(NamedTuple):
    """CIE LCh coordinates: polar form of a/b, h in degrees [0, 360)."""
    l: float
    c: float
    h: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp_channel(value: float) -> int:
    """Round and clamp a channel value into [0, 255]."""
    return max(0, min(255, round_half_up(value)))


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB channels to an uppercase ``#RRGGBB`` string."""
    return f"#{clamp_channel(r):02X}{clamp_channel(g):02X}{clamp_channel(b):02X}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert a ``#RRGGBB`` string (any case) to an RGB tuple."""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[int, int, int]:
    """
    Convert RGB to integer HSL.

    Args:
        r, g, b: Channels in [0, 255]

    Returns:
        Tuple of (h, s, l): hue in whole degrees [0, 360), saturation and
        lightness in whole percent. Achromatic colors get h = 0.
    """
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    hue = round_half_up(h * 360.0) % 360
    return hue, round_half_up(s * 100.0), round_half_up(l * 100.0)


def rgb_array_to_lab(rgb_u8: np.ndarray) -> np.ndarray:
    """Convert an (N, 3) array of 8-bit RGB values to an (N, 3) Lab array."""
    unit = np.asarray(rgb_u8, dtype=np.float64).reshape(-1, 1, 3) / 255.0
    return rgb2lab(unit).reshape(-1, 3)


def lab_array_to_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert an (N, 3) Lab array to (N, 3) unit-range RGB, clipped to gamut."""
    lab = np.asarray(lab, dtype=np.float64).reshape(-1, 1, 3)
    with warnings.catch_warnings():
        # out-of-gamut Lab values are clipped below
        warnings.simplefilter("ignore", UserWarning)
        unit = lab2rgb(lab)
    return np.clip(unit.reshape(-1, 3), 0.0, 1.0)


def rgb_to_lab(r: int, g: int, b: int) -> LabColor:
    """Convert RGB to Lab, each coordinate rounded to 2 decimals."""
    l, a, b_val = rgb_array_to_lab(np.array([[r, g, b]]))[0]
    return LabColor(round(float(l), 2), round(float(a), 2), round(float(b_val), 2))


def lab_to_rgb(lab: LabColor) -> Tuple[int, int, int]:
    """Convert Lab back to 8-bit RGB."""
    unit = lab_array_to_rgb(np.array([[lab[0], lab[1], lab[2]]]))[0]
    return tuple(clamp_channel(c * 255.0) for c in unit)


def rgb_to_lch(r: int, g: int, b: int) -> LchColor:
    """Convert RGB to LCh, each coordinate rounded to 2 decimals."""
    lab = rgb_array_to_lab(np.array([[r, g, b]])).reshape(1, 1, 3)
    l, c, h_rad = lab2lch(lab)[0, 0]
    hue = round(math.degrees(float(h_rad)) % 360.0, 2)
    if hue >= 360.0:
        hue = 0.0
    return LchColor(round(float(l), 2), round(float(c), 2), hue)


def hex_to_lab(hex_color: str) -> LabColor:
    """Convert a hex string to Lab."""
    return rgb_to_lab(*hex_to_rgb(hex_color))


def _linearize(channel: float) -> float:
    c = channel / 255.0
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance_rgb(r: float, g: float, b: float) -> float:
    """WCAG relative luminance of an RGB color, in [0, 1]."""
    return 0.2126 * _linearize(r) + 0.7152 * _linearize(g) + 0.0722 * _linearize(b)


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance of a hex color, in [0, 1]."""
    return relative_luminance_rgb(*hex_to_rgb(hex_color))


def get_contrast_ratio(color1: str, color2: str) -> float:
    """
    WCAG contrast ratio between two hex colors.

    Returns:
        (L1 + 0.05) / (L2 + 0.05) with L1 >= L2, always in [1, 21]
    """
    lum1 = relative_luminance(color1)
    lum2 = relative_luminance(color2)
    lighter, darker = max(lum1, lum2), min(lum1, lum2)
    return (lighter + 0.05) / (darker + 0.05)


def is_light_color(hex_color: str) -> bool:
    """True when relative luminance exceeds 0.5."""
    return relative_luminance(hex_color) > 0.5


def _shift_lightness(hex_color: str, delta_l: float) -> str:
    r, g, b = hex_to_rgb(hex_color)
    lab = rgb_array_to_lab(np.array([[r, g, b]]))[0]
    target_l = lab[0] + delta_l
    if target_l >= 100.0:
        return "#FFFFFF"
    if target_l <= 0.0:
        return "#000000"
    unit = lab_array_to_rgb(np.array([[target_l, lab[1], lab[2]]]))[0]
    shifted = tuple(clamp_channel(c * 255.0) for c in unit)

    before = relative_luminance_rgb(r, g, b)
    after = relative_luminance_rgb(*shifted)
    if (delta_l > 0 and after < before) or (delta_l < 0 and after > before):
        # Gamut clipping moved the wrong way; step HSL lightness instead,
        # which moves every channel in the requested direction.
        h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
        l = min(1.0, max(0.0, l + delta_l / 100.0))
        shifted = tuple(clamp_channel(c * 255.0) for c in colorsys.hls_to_rgb(h, l, s))

    return rgb_to_hex(*shifted)


def lighten_color(hex_color: str, amount: float = 1.0) -> str:
    """
    Lighten a color by ``amount`` steps of 18 Lab L units.

    Never darkens and never goes past pure white.
    """
    return _shift_lightness(hex_color, abs(amount) * LIGHTNESS_STEP)


def darken_color(hex_color: str, amount: float = 1.0) -> str:
    """
    Darken a color by ``amount`` steps of 18 Lab L units.

    Never lightens and never goes past pure black.
    """
    return _shift_lightness(hex_color, -abs(amount) * LIGHTNESS_STEP)
