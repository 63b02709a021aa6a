"""
Accessibility evaluation.

WCAG 2.1 contrast classification with lighter/darker foreground
suggestions, and color-vision-deficiency simulation with a palette-level
distinguishability check.

Two simulation methods are available. ``heuristic`` shifts hue and drops
saturation only inside the hue band each deficiency affects; it is an
approximation, not a physiological model. ``machado`` applies the
Machado, Oliveira & Fernandes (2009) matrices in linear RGB.
"""

import colorsys
from typing import Callable, Dict, List, Optional, Sequence, Union

import numpy as np
from loguru import logger

from palettekit.config import config
from palettekit.schemas import (
    AccessibilityReport,
    ColorBlindnessResult,
    ColorValue,
    DeficiencyType,
    DistinguishabilityIssue,
    LevelResult,
    WCAGResult,
    WCAGSuggestions,
)
from palettekit.services.colors.conversion import (
    clamp_channel,
    darken_color,
    get_contrast_ratio,
    hex_to_rgb,
    lighten_color,
    relative_luminance_rgb,
    rgb_to_hex,
)
from palettekit.services.colors.distance import pairwise_delta_e_2000
from palettekit.services.colors.harmony import hls_to_hex

DEFICIENCY_LABELS = {
    DeficiencyType.PROTANOMALY: "Protanomaly",
    DeficiencyType.DEUTERANOMALY: "Deuteranomaly",
    DeficiencyType.TRITANOMALY: "Tritanomaly",
    DeficiencyType.MONOCHROMACY: "Monochromacy",
}

RECOMMENDATIONS = [
    "Increase the lightness difference between colors",
    "Combine colors with patterns or textures",
    "Use visual cues other than color, such as shape or size",
]

# Machado et al. (2009), severity 1.0
MACHADO_MATRICES = {
    DeficiencyType.PROTANOMALY: np.array([
        [0.152286, 1.052583, -0.204868],
        [0.114503, 0.786281, 0.099216],
        [-0.003882, -0.048116, 1.051998],
    ]),
    DeficiencyType.DEUTERANOMALY: np.array([
        [0.367322, 0.860646, -0.227968],
        [0.280085, 0.672501, 0.047413],
        [-0.011820, 0.042940, 0.968881],
    ]),
    DeficiencyType.TRITANOMALY: np.array([
        [1.255528, -0.076749, -0.178779],
        [-0.078411, 0.930809, 0.147602],
        [0.004733, 0.691367, 0.303900],
    ]),
}


# ============================================================================
# WCAG
# ============================================================================

def _suggest(foreground: str, background: str,
             adjust: Callable[[str, float], str],
             target: float, step: float, max_steps: int) -> Optional[str]:
    candidate = foreground
    for _ in range(max_steps):
        adjusted = adjust(candidate, step)
        if adjusted == candidate:
            # hit pure white or black
            return None
        candidate = adjusted
        if get_contrast_ratio(candidate, background) >= target:
            return candidate
    return None


def check_wcag_compliance(foreground: str, background: str,
                          include_suggestions: bool = True,
                          step: Optional[float] = None,
                          max_steps: Optional[int] = None) -> WCAGResult:
    """
    Classify a foreground/background pair against WCAG 2.1.

    Suggestions brighten or darken the foreground in fixed steps until
    it reaches the AA-normal ratio. A direction that cannot get there
    before reaching white or black, or within ``max_steps``, yields None.
    A pair that already passes suggests the foreground itself.

    Args:
        foreground: ``#RRGGBB`` text color
        background: ``#RRGGBB`` background color
        include_suggestions: Compute lighter/darker alternatives
        step: Lighten/darken amount per step, defaults to ``config.WCAG_SUGGESTION_STEP``
        max_steps: Iteration bound, defaults to ``config.WCAG_MAX_SUGGESTION_STEPS``

    Returns:
        WCAGResult with the ratio rounded to 2 decimals for display; the
        level flags and the already-passes check use the unrounded ratio
    """
    raw_ratio = get_contrast_ratio(foreground, background)
    ratio = round(raw_ratio, 2)

    suggestions = None
    if include_suggestions:
        target = config.WCAG_AA_NORMAL
        step = config.WCAG_SUGGESTION_STEP if step is None else step
        max_steps = config.WCAG_MAX_SUGGESTION_STEPS if max_steps is None else max_steps
        if raw_ratio >= target:
            suggestions = WCAGSuggestions(light_version=foreground, dark_version=foreground)
        else:
            suggestions = WCAGSuggestions(
                light_version=_suggest(foreground, background, lighten_color, target, step, max_steps),
                dark_version=_suggest(foreground, background, darken_color, target, step, max_steps),
            )

    return WCAGResult(
        foreground=foreground,
        background=background,
        contrast_ratio=ratio,
        aa_level=LevelResult(normal=raw_ratio >= config.WCAG_AA_NORMAL, large=raw_ratio >= config.WCAG_AA_LARGE),
        aaa_level=LevelResult(normal=raw_ratio >= config.WCAG_AAA_NORMAL, large=raw_ratio >= config.WCAG_AAA_LARGE),
        suggestions=suggestions,
    )


# ============================================================================
# COLOR VISION DEFICIENCY
# ============================================================================

def _heuristic(hex_color: str, kind: DeficiencyType) -> str:
    r, g, b = hex_to_rgb(hex_color)
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    hue = h * 360.0

    if kind is DeficiencyType.PROTANOMALY and 0 <= hue <= 60:
        return hls_to_hex(((hue + 30) % 360) / 360.0, l, s * 0.7)
    if kind is DeficiencyType.DEUTERANOMALY and 60 <= hue <= 180:
        return hls_to_hex((hue - 20) / 360.0, l, s * 0.6)
    if kind is DeficiencyType.TRITANOMALY and 180 <= hue <= 300:
        return hls_to_hex(((hue + 60) % 360) / 360.0, l, s * 0.8)
    return hex_color.upper()


def _monochrome(hex_color: str) -> str:
    gray = clamp_channel(relative_luminance_rgb(*hex_to_rgb(hex_color)) * 255.0)
    return rgb_to_hex(gray, gray, gray)


def _machado(hex_color: str, kind: DeficiencyType, severity: float) -> str:
    channels = np.array(hex_to_rgb(hex_color), dtype=np.float64) / 255.0
    linear = np.where(channels <= 0.04045, channels / 12.92, ((channels + 0.055) / 1.055) ** 2.4)

    matrix = (1.0 - severity) * np.eye(3) + severity * MACHADO_MATRICES[kind]
    simulated = np.clip(matrix @ linear, 0.0, 1.0)

    encoded = np.where(simulated <= 0.0031308, simulated * 12.92,
                       1.055 * simulated ** (1 / 2.4) - 0.055)
    return rgb_to_hex(*(encoded * 255.0))


def simulate_deficiency(hex_color: str, kind: Union[DeficiencyType, str],
                        method: str = "machado", severity: float = 1.0) -> str:
    """
    Simulate how one color appears under a color vision deficiency.

    Args:
        hex_color: ``#RRGGBB`` color
        kind: Deficiency to simulate
        method: ``machado`` or ``heuristic``
        severity: Machado severity in [0, 1]; ignored by the heuristic

    Returns:
        Simulated ``#RRGGBB`` color
    """
    kind = DeficiencyType(kind)
    if not config.validate_cvd_method(method):
        raise ValueError(f"Unsupported simulation method: {method}")
    if not 0.0 <= severity <= 1.0:
        raise ValueError(f"severity must be within [0, 1], got {severity}")

    if kind is DeficiencyType.MONOCHROMACY:
        return _monochrome(hex_color)
    if method == "heuristic":
        return _heuristic(hex_color, kind)
    return _machado(hex_color, kind, severity)


def evaluate_distinguishability(variants: Dict[DeficiencyType, List[ColorValue]],
                                threshold: Optional[float] = None) -> AccessibilityReport:
    """
    Flag color pairs that fall below ``threshold`` CIEDE2000 in any variant.

    Args:
        variants: Simulated palette per deficiency, index-aligned with the original
        threshold: Minimum distinguishable Delta E, defaults to ``config.DISTINGUISHABLE_DELTA_E``

    Returns:
        AccessibilityReport; accessible only if no variant has a conflict
    """
    threshold = config.DISTINGUISHABLE_DELTA_E if threshold is None else threshold
    issues: List[str] = []
    conflicts: List[DistinguishabilityIssue] = []

    for kind, palette in variants.items():
        label = DEFICIENCY_LABELS[kind]
        for i, j, delta_e in pairwise_delta_e_2000([c.hex for c in palette]):
            if delta_e < threshold:
                issues.append(f"{label}: colors {i + 1} and {j + 1} are hard to distinguish (ΔE: {delta_e})")
                conflicts.append(DistinguishabilityIssue(
                    deficiency=kind, first_index=i, second_index=j, delta_e=delta_e,
                ))

    return AccessibilityReport(
        is_accessible=not issues,
        issues=issues,
        conflicts=conflicts,
        recommendations=list(RECOMMENDATIONS) if issues else [],
    )


def simulate_color_blindness(colors: Sequence[ColorValue],
                             method: Optional[str] = None,
                             threshold: Optional[float] = None) -> ColorBlindnessResult:
    """
    Simulate a palette under every deficiency and check it stays distinguishable.

    Args:
        colors: Original palette
        method: ``heuristic`` or ``machado``, defaults to ``config.CVD_METHOD``
        threshold: Minimum distinguishable Delta E

    Returns:
        ColorBlindnessResult with one simulated palette per deficiency
    """
    method = method or config.CVD_METHOD
    variants: Dict[DeficiencyType, List[ColorValue]] = {}
    for kind, label in DEFICIENCY_LABELS.items():
        variants[kind] = [
            ColorValue.from_hex(
                simulate_deficiency(color.hex, kind, method=method),
                name=f"{color.name or 'Color'} ({label})",
                id=color.id,
            )
            for color in colors
        ]

    report = evaluate_distinguishability(variants, threshold)
    if not report.is_accessible:
        logger.debug(f"Palette of {len(colors)} colors has {len(report.conflicts)} "
                     f"distinguishability conflicts ({method})")

    return ColorBlindnessResult(
        original=list(colors),
        protanomaly=variants[DeficiencyType.PROTANOMALY],
        deuteranomaly=variants[DeficiencyType.DEUTERANOMALY],
        tritanomaly=variants[DeficiencyType.TRITANOMALY],
        monochromacy=variants[DeficiencyType.MONOCHROMACY],
        accessibility=report,
    )
