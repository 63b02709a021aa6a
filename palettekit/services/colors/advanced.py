"""
Extended color profiles and palette-wide contrast evaluation.
"""
from typing import List, Optional, Sequence

from palettekit.schemas import (
    AdvancedColor,
    ColorValue,
    LabValues,
    LchValues,
    WCAGResult,
    WCAGSummary,
)
from palettekit.services.colors.accessibility import check_wcag_compliance
from palettekit.services.colors.conversion import rgb_to_hex, rgb_to_lab, rgb_to_lch
from palettekit.services.colors.distance import calculate_delta_e_2000
from palettekit.services.colors.naming import get_color_name

REFERENCE_BACKGROUND = "#FFFFFF"


def create_advanced_color(r: int, g: int, b: int,
                          base_color: Optional[str] = None) -> AdvancedColor:
    """
    Build a color profile with Lab, LCh, WCAG level against white and,
    when ``base_color`` is given, its CIEDE2000 distance to it.

    Args:
        r, g, b: Channels in [0, 255]
        base_color: Optional ``#RRGGBB`` reference

    Returns:
        AdvancedColor
    """
    hex_color = rgb_to_hex(r, g, b)
    wcag = check_wcag_compliance(hex_color, REFERENCE_BACKGROUND, include_suggestions=False)
    if wcag.aaa_level.normal:
        level = "AAA"
    elif wcag.aa_level.normal:
        level = "AA"
    else:
        level = "FAIL"

    return AdvancedColor(
        rgb=(r, g, b),
        name=get_color_name(hex_color),
        lab=LabValues(**rgb_to_lab(r, g, b)._asdict()),
        lch=LchValues(**rgb_to_lch(r, g, b)._asdict()),
        wcag=WCAGSummary(level=level, contrast_ratio=wcag.contrast_ratio),
        delta_e=calculate_delta_e_2000(hex_color, base_color) if base_color else None,
    )


def evaluate_palette_wcag(colors: Sequence[ColorValue]) -> List[WCAGResult]:
    """WCAG result for every unordered pair, earlier color as foreground."""
    return [
        check_wcag_compliance(colors[i].hex, colors[j].hex)
        for i in range(len(colors))
        for j in range(i + 1, len(colors))
    ]
