"""
Perceptual color distance.

CIEDE2000 and CIE94 via scikit-image on strictly parsed ``#RRGGBB`` input.
Inputs the strict parser rejects go through Pillow's lenient color parser
(CSS names, ``rgb()``, ``hsl()``, short hex) and a CIE76 Euclidean-Lab
distance; inputs neither parser accepts score the maximum difference.
Every result is tagged with the formula that produced it.
"""

import re
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from PIL import ImageColor
from skimage.color import deltaE_cie76, deltaE_ciede94, deltaE_ciede2000

from palettekit.schemas import DeltaEResult
from palettekit.services.colors.conversion import hex_to_rgb, rgb_array_to_lab

HEX_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")

# Reported for inputs that no parser understands
MAX_DELTA_E = 100.0


def parse_hex_strict(color: str) -> Optional[Tuple[int, int, int]]:
    """Parse ``#RRGGBB`` only; anything else returns None."""
    if not isinstance(color, str) or not HEX_RE.match(color):
        return None
    return hex_to_rgb(color)


def parse_color_lenient(color: str) -> Optional[Tuple[int, int, int]]:
    """Parse any CSS-style color Pillow understands; None when it cannot."""
    if not isinstance(color, str):
        return None
    try:
        parsed = ImageColor.getrgb(color.strip())
    except ValueError:
        return None
    return tuple(parsed[:3])


def _lab(rgb: Tuple[int, int, int]) -> np.ndarray:
    return rgb_array_to_lab(np.array([rgb]))


def _fallback(color1: str, color2: str, primary: str) -> DeltaEResult:
    rgb1 = parse_color_lenient(color1)
    rgb2 = parse_color_lenient(color2)
    if rgb1 is None or rgb2 is None:
        logger.warning(f"Unparseable colors for {primary}: {color1!r}, {color2!r}")
        return DeltaEResult(value=MAX_DELTA_E, method="invalid")

    logger.debug(f"Falling back to CIE76 for {color1!r}, {color2!r}")
    value = float(deltaE_cie76(_lab(rgb1), _lab(rgb2))[0])
    return DeltaEResult(value=round(value, 2), method="cie76")


def delta_e_2000(color1: str, color2: str) -> DeltaEResult:
    """
    CIEDE2000 difference between two colors.

    The inputs are put in a canonical order before computing, so the
    result is exactly symmetric.

    Args:
        color1: First color, ideally ``#RRGGBB``
        color2: Second color, ideally ``#RRGGBB``

    Returns:
        DeltaEResult tagged ``ciede2000``, or ``cie76``/``invalid`` on fallback
    """
    rgb1 = parse_hex_strict(color1)
    rgb2 = parse_hex_strict(color2)
    if rgb1 is None or rgb2 is None:
        return _fallback(color1, color2, "ciede2000")

    first, second = sorted((rgb1, rgb2))
    value = float(deltaE_ciede2000(_lab(first), _lab(second))[0])
    return DeltaEResult(value=round(value, 2), method="ciede2000")


def delta_e_94(color1: str, color2: str) -> DeltaEResult:
    """
    CIE94 (graphic arts weighting) difference between two colors.

    CIE94 is not symmetric: ``color1`` is the reference.
    """
    rgb1 = parse_hex_strict(color1)
    rgb2 = parse_hex_strict(color2)
    if rgb1 is None or rgb2 is None:
        return _fallback(color1, color2, "cie94")

    value = float(deltaE_ciede94(_lab(rgb1), _lab(rgb2))[0])
    return DeltaEResult(value=round(value, 2), method="cie94")


def delta_e_76(color1: str, color2: str) -> DeltaEResult:
    """Euclidean Lab difference; accepts any color Pillow can parse."""
    rgb1 = parse_color_lenient(color1)
    rgb2 = parse_color_lenient(color2)
    if rgb1 is None or rgb2 is None:
        return DeltaEResult(value=MAX_DELTA_E, method="invalid")
    value = float(deltaE_cie76(_lab(rgb1), _lab(rgb2))[0])
    return DeltaEResult(value=round(value, 2), method="cie76")


def calculate_delta_e_2000(color1: str, color2: str) -> float:
    """CIEDE2000 difference as a bare float (see ``delta_e_2000``)."""
    return delta_e_2000(color1, color2).value


def calculate_delta_e_94(color1: str, color2: str) -> float:
    """CIE94 difference as a bare float (see ``delta_e_94``)."""
    return delta_e_94(color1, color2).value


def pairwise_delta_e_2000(hex_colors: Sequence[str]) -> List[Tuple[int, int, float]]:
    """
    CIEDE2000 for every unordered pair of validated hex colors.

    Returns:
        List of (i, j, delta_e) with i < j, in row-major order
    """
    return [
        (i, j, calculate_delta_e_2000(hex_colors[i], hex_colors[j]))
        for i in range(len(hex_colors) - 1)
        for j in range(i + 1, len(hex_colors))
    ]
