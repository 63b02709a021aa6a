"""
PaletteKit Harmony Engine

This module implements the hue-rotation rules behind complementary,
analogous, triadic, tetradic and split-complementary harmonies. Every
rule rotates the hue by fixed offsets and keeps saturation and lightness
of the base color unchanged.
"""

import colorsys
from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from palettekit.schemas import ColorValue, HarmonySet
from palettekit.services.colors.conversion import clamp_channel, hex_to_rgb

# Hue offsets in degrees for each harmony category
HARMONY_OFFSETS: Dict[str, Tuple[int, ...]] = {
    "complementary": (180,),
    "analogous": (-30, 30),
    "triadic": (120, 240),
    "tetradic": (90, 180, 270),
    "split_complementary": (150, 210),
}


@dataclass
class HarmonyCandidate:
    """A harmony color with its generation metadata."""
    h: float  # Hue [0, 1)
    l: float  # Lightness [0, 1]
    s: float  # Saturation [0, 1]
    category: str
    generation_rule: str  # Human-readable generation rule

    @property
    def hex(self) -> str:
        return hls_to_hex(self.h, self.l, self.s)


def hex_to_hls(hex_color: str) -> Tuple[float, float, float]:
    """
    Convert hex color to HLS color space.

    Args:
        hex_color: Color in format #RRGGBB

    Returns:
        Tuple of (H, L, S) where H ∈ [0,1), L ∈ [0,1], S ∈ [0,1]
    """
    r, g, b = hex_to_rgb(hex_color)
    return colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)


def hls_to_hex(h: float, l: float, s: float) -> str:
    """
    Convert HLS color to hex format.

    Returns:
        Hex color string in format #RRGGBB (uppercase)
    """
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return f"#{clamp_channel(r * 255):02X}{clamp_channel(g * 255):02X}{clamp_channel(b * 255):02X}"


def rotate_hue(h: float, degrees: float) -> float:
    """
    Rotate hue by specified degrees.

    Args:
        h: Original hue [0, 1)
        degrees: Rotation in degrees (can be negative)

    Returns:
        Rotated hue [0, 1) with wraparound
    """
    return (h + degrees / 360.0) % 1.0


def generate_candidates(hex_color: str, category: str) -> List[HarmonyCandidate]:
    """
    Generate the harmony colors of one category.

    Args:
        hex_color: Base color
        category: Key of ``HARMONY_OFFSETS``

    Returns:
        One candidate per offset, in offset order
    """
    if category not in HARMONY_OFFSETS:
        raise ValueError(f"Unknown harmony category: {category}")

    base_h, base_l, base_s = hex_to_hls(hex_color)
    return [
        HarmonyCandidate(
            h=rotate_hue(base_h, degrees),
            l=base_l,
            s=base_s,
            category=category,
            generation_rule=f"h_rot:{degrees:+d}°; L=base; S=base",
        )
        for degrees in HARMONY_OFFSETS[category]
    ]


def _hex_of(color: Union[ColorValue, str]) -> str:
    return color if isinstance(color, str) else color.hex


def calculate_harmony_colors(color: Union[ColorValue, str]) -> HarmonySet:
    """
    Derive every harmony relationship of a base color.

    Args:
        color: Base ColorValue or hex string

    Returns:
        HarmonySet of hex strings
    """
    hex_color = _hex_of(color)
    hexes = {
        category: [candidate.hex for candidate in generate_candidates(hex_color, category)]
        for category in HARMONY_OFFSETS
    }
    return HarmonySet(
        complementary=hexes["complementary"][0],
        analogous=hexes["analogous"],
        triadic=hexes["triadic"],
        tetradic=hexes["tetradic"],
        split_complementary=hexes["split_complementary"],
    )


def get_complementary_color(color: Union[ColorValue, str]) -> str:
    """Hex of the color opposite on the hue wheel."""
    return generate_candidates(_hex_of(color), "complementary")[0].hex


def get_analogous_colors(color: Union[ColorValue, str], count: int = 5) -> List[str]:
    """
    A run of ``count`` hues spaced 30° apart, centered on the base color.

    The base color itself sits at index ``count // 2``.
    """
    h, l, s = hex_to_hls(_hex_of(color))
    center = count // 2
    return [hls_to_hex(rotate_hue(h, (i - center) * 30), l, s) for i in range(count)]
