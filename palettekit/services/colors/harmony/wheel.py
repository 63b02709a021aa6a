"""
Hue wheel placement and color science descriptors.

Places a color on the hue wheel, names hue bands, and derives the
educational descriptors shown next to a color: approximate wavelength,
chromaticity and psychological associations.
"""

import colorsys
from typing import List, Optional, Union

import numpy as np

from palettekit.schemas import (
    Chromaticity,
    ColorScience,
    ColorValue,
    EducationalColor,
    WheelPosition,
)
from palettekit.services.colors.conversion import (
    hex_to_rgb,
    relative_luminance_rgb,
    round_half_up,
)
from palettekit.services.colors.harmony import calculate_harmony_colors

# 30° bands; red spans 345°..15°
HUE_BAND_NAMES = [
    "Red", "Red-Orange", "Orange", "Yellow-Orange", "Yellow", "Yellow-Green",
    "Green", "Blue-Green", "Blue", "Blue-Violet", "Violet", "Red-Violet",
]

# (hue start, hue end, wavelength at start, wavelength at end) in degrees / nm
_WAVELENGTH_SEGMENTS = [
    (0, 60, 700, 625),
    (60, 120, 625, 530),
    (120, 180, 530, 500),
    (180, 240, 500, 475),
    (240, 300, 475, 410),
    (300, 360, 410, 380),
]

# sRGB (D65) linear RGB to XYZ
_SRGB_TO_XYZ = np.array([
    [0.4124, 0.3576, 0.1805],
    [0.2126, 0.7152, 0.0722],
    [0.0193, 0.1192, 0.9505],
])


def _hls(color: Union[ColorValue, str]):
    hex_color = color if isinstance(color, str) else color.hex
    r, g, b = hex_to_rgb(hex_color)
    return colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)


def calculate_wheel_position(color: Union[ColorValue, str]) -> WheelPosition:
    """Angle is the hue in degrees, radius the saturation percent."""
    h, _, s = _hls(color)
    return WheelPosition(angle=round_half_up(h * 360.0) % 360, radius=round_half_up(s * 100.0))


def color_name_from_angle(angle: float) -> str:
    """Name of the 30° hue band containing ``angle``; any angle is accepted."""
    normalized = angle % 360.0
    return HUE_BAND_NAMES[int(((normalized + 15.0) % 360.0) // 30.0)]


def hue_to_wavelength(hue: float) -> float:
    """Approximate dominant wavelength in nm for a hue in degrees."""
    hue = hue % 360.0
    for start, end, nm_start, nm_end in _WAVELENGTH_SEGMENTS:
        if start <= hue < end:
            return nm_start - (hue - start) / (end - start) * (nm_start - nm_end)
    return 380.0


def _chromaticity(r: int, g: int, b: int) -> Chromaticity:
    channels = np.array([r, g, b], dtype=np.float64) / 255.0
    linear = np.where(channels > 0.04045, ((channels + 0.055) / 1.055) ** 2.4, channels / 12.92)
    xyz = _SRGB_TO_XYZ @ (linear * 100.0)
    total = xyz.sum()
    if total == 0:
        return Chromaticity(x=0.0, y=0.0)
    return Chromaticity(x=round(float(xyz[0] / total), 4), y=round(float(xyz[1] / total), 4))


def generate_color_science(color: Union[ColorValue, str]) -> ColorScience:
    """
    Physical descriptors of a color.

    Achromatic colors have no dominant wavelength.
    """
    hex_color = color if isinstance(color, str) else color.hex
    r, g, b = hex_to_rgb(hex_color)
    h, _, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)

    return ColorScience(
        wavelength=round(hue_to_wavelength(h * 360.0), 1) if s > 0 else None,
        luminance=round(relative_luminance_rgb(r, g, b), 4),
        chromaticity=_chromaticity(r, g, b),
    )


def wavelength_description(wavelength: Optional[float]) -> str:
    """Plain-language description of a wavelength in nm."""
    if wavelength is None:
        return "Achromatic (no dominant wavelength)"
    if wavelength < 380:
        return "Ultraviolet (invisible to the human eye)"
    if wavelength < 450:
        return "Violet (shortest visible wavelengths)"
    if wavelength < 495:
        return "Blue (the color of sky and sea)"
    if wavelength < 570:
        return "Green (the most common color in nature)"
    if wavelength < 590:
        return "Yellow (the peak of sunlight)"
    if wavelength < 620:
        return "Orange (sunsets and fire)"
    if wavelength < 750:
        return "Red (longest visible wavelengths)"
    return "Infrared (invisible to the human eye)"


def psychology_effects(color: Union[ColorValue, str]) -> List[str]:
    """Up to six keywords associated with the color's hue, saturation and lightness."""
    h, l, s = _hls(color)
    hue = h * 360.0

    if hue >= 345 or hue < 15:
        effects = ["Passionate", "Energetic", "Exciting", "Attention-grabbing"]
    elif hue < 45:
        effects = ["Warm", "Friendly", "Creative", "Lively"]
    elif hue < 75:
        effects = ["Bright", "Optimistic", "Cautionary", "Intellectual"]
    elif hue < 150:
        effects = ["Natural", "Calming", "Growth", "Balanced"]
    elif hue < 180:
        effects = ["Refreshing", "Clean", "Revitalizing"]
    elif hue < 250:
        effects = ["Calm", "Trustworthy", "Stable", "Focused"]
    elif hue < 290:
        effects = ["Mysterious", "Noble", "Creative", "Imaginative"]
    else:
        effects = ["Elegant", "Romantic", "Affectionate", "Gentle"]

    if s < 0.3:
        effects += ["Subdued", "Refined"]
    elif s > 0.7:
        effects += ["Vivid", "Impactful"]

    if l < 0.3:
        effects += ["Heavy", "Grounded"]
    elif l > 0.7:
        effects += ["Light", "Airy"]

    return effects[:6]


def enhance_color(color: ColorValue) -> EducationalColor:
    """Attach science, wheel position, psychology and harmony data to a color."""
    return EducationalColor(
        rgb=color.rgb,
        name=color.name,
        id=color.id,
        science=generate_color_science(color),
        wheel_position=calculate_wheel_position(color),
        psychology_effects=psychology_effects(color),
        harmony_colors=calculate_harmony_colors(color),
    )
