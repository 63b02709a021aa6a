"""
Human-readable color names.

Names are advisory labels for display; they never take part in equality.
"""
import colorsys
from typing import Optional

from palettekit.schemas import ColorValue
from palettekit.services.colors.conversion import hex_to_rgb, rgb_to_hex

# Exact matches checked before any hue bucketing
NAMED_COLORS = {
    "#FF0000": "Red",
    "#00FF00": "Green",
    "#0000FF": "Blue",
    "#FFFF00": "Yellow",
    "#FF00FF": "Magenta",
    "#00FFFF": "Cyan",
    "#000000": "Black",
    "#FFFFFF": "White",
    "#808080": "Gray",
    "#FFA500": "Orange",
    "#800080": "Purple",
    "#FFC0CB": "Pink",
    "#A52A2A": "Brown",
    "#008000": "Dark Green",
    "#000080": "Navy",
}

# (upper bound in degrees, family name), checked in order
_HUE_FAMILIES = [
    (15, "Red"),
    (45, "Orange"),
    (75, "Yellow"),
    (150, "Green"),
    (180, "Cyan"),
    (250, "Blue"),
    (290, "Purple"),
    (345, "Pink"),
    (360, "Red"),
]


def get_color_name(hex_color: str) -> str:
    """
    Name a color.

    Exact table matches win; otherwise near-gray colors are named by
    lightness, extreme lightness reads as "Dark"/"Light", and everything
    else falls into a hue family such as "Blue Tone".

    Args:
        hex_color: ``#RRGGBB`` string, any case

    Returns:
        Display name
    """
    hex_upper = hex_color.upper()
    if hex_upper in NAMED_COLORS:
        return NAMED_COLORS[hex_upper]

    r, g, b = hex_to_rgb(hex_upper)
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    hue = h * 360.0

    if s < 0.1:
        if l < 0.2:
            return "Dark Gray"
        if l < 0.5:
            return "Gray"
        if l < 0.8:
            return "Light Gray"
        return "White"

    if l < 0.15:
        return "Dark"
    if l > 0.85:
        return "Light"

    for upper, family in _HUE_FAMILIES:
        if hue < upper:
            return f"{family} Tone"
    return "Red Tone"


def create_color_value(r: int, g: int, b: int,
                       name: Optional[str] = None,
                       color_id: Optional[str] = None) -> ColorValue:
    """
    Build a ColorValue, naming it from its hex when no name is given.

    Channels are rounded and clamped into [0, 255] first.
    """
    hex_color = rgb_to_hex(r, g, b)
    channels = hex_to_rgb(hex_color)
    return ColorValue(
        rgb=channels,
        name=name or get_color_name(hex_color),
        id=color_id,
    )
