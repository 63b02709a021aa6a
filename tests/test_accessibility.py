"""
Unit tests for WCAG evaluation and color vision deficiency simulation.
"""

import pytest

from palettekit.schemas import ColorValue, DeficiencyType
from palettekit.services.colors import accessibility
from palettekit.services.colors.accessibility import (
    check_wcag_compliance,
    evaluate_distinguishability,
    simulate_color_blindness,
    simulate_deficiency,
)
from palettekit.services.colors.conversion import get_contrast_ratio, hex_to_rgb
from palettekit.services.colors.distance import calculate_delta_e_2000


def _palette(*hexes):
    return [ColorValue.from_hex(h, name=f"C{i}") for i, h in enumerate(hexes)]


class TestWCAGCompliance:
    """Test contrast classification and suggestions"""

    def test_black_on_white(self):
        result = check_wcag_compliance("#000000", "#FFFFFF")
        assert result.contrast_ratio == 21.0
        assert result.aa_level.normal and result.aa_level.large
        assert result.aaa_level.normal and result.aaa_level.large
        assert result.suggestions.light_version == "#000000"
        assert result.suggestions.dark_version == "#000000"

    def test_gray_just_below_aa(self):
        result = check_wcag_compliance("#777777", "#FFFFFF")
        assert result.contrast_ratio < 4.5
        assert not result.aa_level.normal
        assert result.aa_level.large
        assert not result.aaa_level.normal

    def test_ratio_rounding_up_to_threshold_still_fails(self, monkeypatch):
        """A ratio shown as 4.5 but below it fails AA and gets real suggestions"""
        monkeypatch.setattr(accessibility, "get_contrast_ratio", lambda fg, bg: 4.496)
        result = check_wcag_compliance("#767676", "#FFFFFF")
        assert result.contrast_ratio == 4.5
        assert not result.aa_level.normal
        assert result.aa_level.large
        assert result.suggestions.light_version != "#767676"
        assert result.suggestions.dark_version != "#767676"

    def test_unreachable_direction_is_none(self):
        """Lightening gray on white never reaches AA"""
        suggestions = check_wcag_compliance("#777777", "#FFFFFF").suggestions
        assert suggestions.light_version is None
        assert suggestions.dark_version is not None
        assert get_contrast_ratio(suggestions.dark_version, "#FFFFFF") >= 4.5

    def test_both_directions_on_mid_gray(self):
        suggestions = check_wcag_compliance("#808080", "#7F7F7F").suggestions
        for version in (suggestions.light_version, suggestions.dark_version):
            if version is not None:
                assert get_contrast_ratio(version, "#7F7F7F") >= 4.5

    def test_step_bound_terminates(self):
        suggestions = check_wcag_compliance("#777777", "#FFFFFF", max_steps=0).suggestions
        assert suggestions.dark_version is None
        assert suggestions.light_version is None

    def test_without_suggestions(self):
        assert check_wcag_compliance("#777777", "#FFFFFF", include_suggestions=False).suggestions is None

    def test_identical_colors(self):
        result = check_wcag_compliance("#336699", "#336699", include_suggestions=False)
        assert result.contrast_ratio == 1.0
        assert not result.aa_level.large


class TestSimulateDeficiency:
    """Test single-color simulation"""

    def test_monochromacy_is_gray(self):
        r, g, b = hex_to_rgb(simulate_deficiency("#FF0000", "monochromacy"))
        assert r == g == b == 54

    def test_heuristic_only_affects_its_band(self):
        # blue is outside the protanomaly band
        assert simulate_deficiency("#0000FF", DeficiencyType.PROTANOMALY, method="heuristic") == "#0000FF"
        assert simulate_deficiency("#FF0000", DeficiencyType.PROTANOMALY, method="heuristic") != "#FF0000"
        assert simulate_deficiency("#0000FF", DeficiencyType.TRITANOMALY, method="heuristic") != "#0000FF"

    def test_machado_keeps_neutrals(self):
        for kind in ("protanomaly", "deuteranomaly", "tritanomaly"):
            assert simulate_deficiency("#FFFFFF", kind) == "#FFFFFF"
            assert simulate_deficiency("#000000", kind) == "#000000"

    def test_machado_zero_severity_is_identity(self):
        assert simulate_deficiency("#1F4E79", "deuteranomaly", severity=0.0) == "#1F4E79"

    def test_machado_collapses_red_green(self):
        original = calculate_delta_e_2000("#FF0000", "#00FF00")
        simulated = calculate_delta_e_2000(simulate_deficiency("#FF0000", "deuteranomaly"),
                                           simulate_deficiency("#00FF00", "deuteranomaly"))
        assert simulated < original

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            simulate_deficiency("#FF0000", "achromatopsia")
        with pytest.raises(ValueError):
            simulate_deficiency("#FF0000", "protanomaly", method="brettel")
        with pytest.raises(ValueError):
            simulate_deficiency("#FF0000", "protanomaly", severity=1.5)


class TestSimulateColorBlindness:
    """Test palette-level simulation and distinguishability"""

    def test_near_identical_pair_conflicts_everywhere(self):
        result = simulate_color_blindness(_palette("#FF0000", "#FE0000"))
        assert not result.accessibility.is_accessible
        assert len(result.accessibility.conflicts) == 4
        assert result.accessibility.recommendations
        assert "colors 1 and 2 are hard to distinguish" in result.accessibility.issues[0]

    def test_monochromacy_only_conflict(self):
        result = simulate_color_blindness(_palette("#FF0000", "#7F7F7F"))
        kinds = {c.deficiency for c in result.accessibility.conflicts}
        assert kinds == {DeficiencyType.MONOCHROMACY}
        assert result.accessibility.issues[0].startswith("Monochromacy:")

    def test_black_and_white_accessible(self):
        result = simulate_color_blindness(_palette("#000000", "#FFFFFF"))
        assert result.accessibility.is_accessible
        assert result.accessibility.issues == []
        assert result.accessibility.recommendations == []

    def test_variants_aligned_with_original(self):
        colors = _palette("#FF0000", "#00FF00", "#0000FF")
        result = simulate_color_blindness(colors)
        for variant in (result.protanomaly, result.deuteranomaly, result.tritanomaly, result.monochromacy):
            assert len(variant) == 3
            assert [c.id for c in variant] == [c.id for c in colors]
        assert result.protanomaly[0].name == "C0 (Protanomaly)"

    def test_machado_method(self):
        result = simulate_color_blindness(_palette("#000000", "#FFFFFF"), method="machado")
        assert result.accessibility.is_accessible

    def test_threshold_override(self):
        palette = _palette("#000000", "#FFFFFF")
        assert not simulate_color_blindness(palette, threshold=101).accessibility.is_accessible

    def test_single_color_has_no_conflicts(self):
        assert simulate_color_blindness(_palette("#123456")).accessibility.is_accessible

    def test_evaluate_distinguishability_direct(self):
        variants = {DeficiencyType.PROTANOMALY: _palette("#000000", "#000000")}
        report = evaluate_distinguishability(variants)
        assert report.conflicts[0].first_index == 0
        assert report.conflicts[0].second_index == 1
        assert report.conflicts[0].delta_e == 0.0
