"""
Color mixing service.

Linear RGB mixing of two colors, sequential pairwise mixing of many,
an exact simultaneous weighted blend, educational explanations of the
result, and a caller-owned session that rejects duplicate colors.
"""

from typing import List, Literal, Optional, Sequence

import numpy as np
from loguru import logger

from palettekit.exceptions import DuplicateColorError, MixingError
from palettekit.schemas import (
    ColorTheoryExample,
    ColorTheoryExplanation,
    ColorValue,
    EducationalMixingResult,
    MixedColor,
    MixingType,
)
from palettekit.services.colors.conversion import (
    clamp_channel,
    lab_array_to_rgb,
    rgb_array_to_lab,
)
from palettekit.services.colors.naming import get_color_name

# Mixing at most this many colors is explained as additive (light) mixing
ADDITIVE_MAX_COLORS = 3


def _label(color: ColorValue) -> str:
    return color.name or "Color"


def _normalized_ratios(colors: Sequence[ColorValue],
                       ratios: Optional[Sequence[float]]) -> List[float]:
    if len(colors) < 2:
        raise MixingError("at least 2 colors required")
    if ratios is None:
        return [1.0 / len(colors)] * len(colors)
    if len(ratios) != len(colors):
        raise MixingError(f"Expected {len(colors)} ratios, got {len(ratios)}")
    if any(weight < 0 for weight in ratios):
        raise MixingError("Ratios must be non-negative")
    total = float(sum(ratios))
    if total <= 0:
        raise MixingError("Ratios must not all be zero")
    return [weight / total for weight in ratios]


def mix_colors(color1: ColorValue, color2: ColorValue, ratio: float = 0.5) -> MixedColor:
    """
    Linearly interpolate two colors in RGB.

    Args:
        color1: First parent
        color2: Second parent
        ratio: Weight of ``color2``; 0 gives ``color1``, 1 gives ``color2``

    Returns:
        MixedColor recording both parents and ``[1 - ratio, ratio]``
    """
    if not 0.0 <= ratio <= 1.0:
        raise MixingError(f"ratio must be within [0, 1], got {ratio}")

    channels = [
        clamp_channel(a * (1.0 - ratio) + b * ratio)
        for a, b in zip(color1.rgb_tuple, color2.rgb_tuple)
    ]
    return MixedColor(
        rgb=channels,
        name=f"{_label(color1)} + {_label(color2)}",
        parent_colors=[color1.id, color2.id],
        ratio=[1.0 - ratio, ratio],
    )


def mix_multiple_colors(colors: Sequence[ColorValue],
                        ratios: Optional[Sequence[float]] = None) -> MixedColor:
    """
    Mix colors by folding pairwise blends from left to right.

    Each step mixes the running result with the next color at that
    color's share of all weights seen so far. Intermediate results are
    rounded to whole channels, so for three or more unequal weights the
    outcome is order-dependent and only approximates a weighted average;
    use ``blend_weighted`` for the exact simultaneous blend.

    Args:
        colors: At least two colors
        ratios: Non-negative weights, equal by default; normalized to sum to 1

    Returns:
        MixedColor with every parent id and the normalized weights

    Raises:
        MixingError: Fewer than two colors or invalid ratios
    """
    weights = _normalized_ratios(colors, ratios)

    running = colors[0]
    accumulated = weights[0]
    for color, weight in zip(colors[1:], weights[1:]):
        accumulated += weight
        step = weight / accumulated if accumulated > 0 else 0.5
        running = mix_colors(running, color, min(1.0, step))

    logger.debug(f"Mixed {len(colors)} colors into {running.hex}")
    return MixedColor(
        rgb=running.rgb,
        name=" + ".join(_label(c) for c in colors),
        parent_colors=[c.id for c in colors],
        ratio=weights,
    )


def blend_weighted(colors: Sequence[ColorValue],
                   ratios: Optional[Sequence[float]] = None,
                   space: Literal["rgb", "lab"] = "rgb") -> MixedColor:
    """
    Exact simultaneous weighted average of colors.

    Args:
        colors: At least two colors
        ratios: Non-negative weights, equal by default
        space: ``rgb`` for a linear channel average, ``lab`` for a
            perceptual average in CIE Lab

    Returns:
        MixedColor with every parent id and the normalized weights
    """
    weights = np.array(_normalized_ratios(colors, ratios))
    rgb = np.array([c.rgb_tuple for c in colors], dtype=np.float64)

    if space == "lab":
        lab = (rgb_array_to_lab(rgb) * weights[:, None]).sum(axis=0)
        blended = lab_array_to_rgb(lab[None, :])[0] * 255.0
    elif space == "rgb":
        blended = (rgb * weights[:, None]).sum(axis=0)
    else:
        raise MixingError(f"Unsupported blend space: {space}")

    return MixedColor(
        rgb=[clamp_channel(c) for c in blended],
        name=" + ".join(_label(c) for c in colors),
        parent_colors=[c.id for c in colors],
        ratio=weights.tolist(),
    )


def classify_mixing(color_count: int) -> MixingType:
    """
    Label a mix as additive or subtractive for explanatory text.

    Three or fewer colors read as light mixing, more as pigment mixing.
    This is a teaching heuristic, not a physical classification.
    """
    if color_count <= ADDITIVE_MAX_COLORS:
        return MixingType.ADDITIVE
    return MixingType.SUBTRACTIVE


def explain_mixing(colors: Sequence[ColorValue], result: ColorValue) -> ColorTheoryExplanation:
    """Build the theory text describing how ``colors`` became ``result``."""
    example = ColorTheoryExample(
        before=list(colors),
        after=result,
        explanation=f"{' + '.join(_label(c) for c in colors)} = {result.name or get_color_name(result.hex)}",
    )

    if classify_mixing(len(colors)) is MixingType.ADDITIVE:
        return ColorTheoryExplanation(
            title="Additive color mixing",
            description=("Combining the light primaries red, green and blue creates new colors. "
                         "Screens and displays work this way."),
            principles=[
                "Red (R) + Green (G) = Yellow",
                "Green (G) + Blue (B) = Cyan",
                "Blue (B) + Red (R) = Magenta",
                "Red + Green + Blue = White",
            ],
            examples=[example],
        )

    return ColorTheoryExplanation(
        title="Subtractive color mixing",
        description=("Like paint or ink, mixing more colors makes the result darker as each "
                     "pigment absorbs part of the light reflected from a surface."),
        principles=[
            "Cyan + Magenta = Blue-Violet",
            "Magenta + Yellow = Red",
            "Yellow + Cyan = Green",
            "Cyan + Magenta + Yellow = Black",
        ],
        examples=[example],
    )


def create_educational_mixing_result(colors: Sequence[ColorValue],
                                     result: ColorValue,
                                     ratios: Optional[Sequence[float]] = None) -> EducationalMixingResult:
    """
    Wrap a mix result with its theory, mixing type and applications.

    Args:
        colors: The mixed parents
        result: The mixed color
        ratios: Weights used; taken from ``result`` when it is a MixedColor

    Returns:
        EducationalMixingResult
    """
    if ratios is None and isinstance(result, MixedColor) and len(result.ratio) == len(colors):
        ratios = result.ratio
    weights = _normalized_ratios(colors, ratios)
    mixing_type = classify_mixing(len(colors))
    percentages = ":".join(str(round(w * 100)) for w in weights)

    if mixing_type is MixingType.ADDITIVE:
        explanation = ("Overlapping light wavelengths stimulate the eye's cone cells differently, "
                       f"so a new color is perceived. Mixing ratio is {percentages}%.")
        applications = ["TV and monitor screens", "Smartphone displays", "LED lighting", "Stage lighting"]
    else:
        explanation = ("Each pigment absorbs specific wavelengths and the reflected remainder is "
                       f"seen as a new color. Mixing ratio is {percentages}%.")
        applications = ["Paint and watercolor", "CMYK printing", "Dyes and pigments", "Cosmetics"]

    return EducationalMixingResult(
        rgb=result.rgb,
        name=result.name,
        id=result.id,
        parent_colors=[c.id for c in colors],
        ratio=weights,
        theory=explain_mixing(colors, result),
        mixing_type=mixing_type,
        scientific_explanation=explanation,
        real_world_applications=applications,
    )


class MixingSession:
    """
    Caller-owned mixing workspace.

    Collects colors to mix and the colors mixed so far. Adding a color
    whose hex is already selected, or producing a mix whose hex was
    already collected, raises DuplicateColorError.
    """

    def __init__(self):
        self._selected: List[ColorValue] = []
        self._mixed: List[MixedColor] = []

    @property
    def selected(self) -> List[ColorValue]:
        return list(self._selected)

    @property
    def mixed_colors(self) -> List[MixedColor]:
        return list(self._mixed)

    def add_color(self, color: ColorValue) -> None:
        """Select a color for the next mix."""
        if any(c.hex == color.hex for c in self._selected):
            raise DuplicateColorError(color.hex)
        self._selected.append(color)

    def remove_color(self, hex_color: str) -> None:
        """Deselect a color by hex."""
        self._selected = [c for c in self._selected if c.hex != hex_color.upper()]

    def mix(self, ratios: Optional[Sequence[float]] = None) -> MixedColor:
        """Mix the selected colors and collect the result."""
        result = mix_multiple_colors(self._selected, ratios)
        if any(c.hex == result.hex for c in self._mixed):
            raise DuplicateColorError(result.hex)
        self._mixed.append(result)
        return result

    def clear(self) -> None:
        """Drop the current selection; collected mixes are kept."""
        self._selected = []
