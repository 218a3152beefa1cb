"""Tests for color blindness simulation."""

import pytest

from themeforge.theme_engine.colorblindness import (
    ColorBlindness,
    all_simulations,
    check_color_blindness,
    check_theme_color_blindness,
    simulate_color_blindness,
    simulate_colors,
    simulate_theme,
)
from themeforge.theme_engine.errors import InvalidColorFormat
from themeforge.theme_engine.schema import ThemeDocument


class TestSimulation:
    """Test simulating single colors."""

    def test_protanopia_red(self):
        assert simulate_color_blindness("#ff0000", ColorBlindness.PROTANOPIA) == "#918e00"

    def test_achromatopsia_is_luma(self):
        assert simulate_color_blindness("#ff0000", "achromatopsia") == "#4c4c4c"

    @pytest.mark.parametrize("kind", list(ColorBlindness))
    @pytest.mark.parametrize("color", ["#000000", "#ffffff", "#777777"])
    def test_neutrals_unchanged(self, kind, color):
        assert simulate_color_blindness(color, kind) == color

    def test_all_simulations(self):
        simulations = all_simulations("#3b82f6")
        assert set(simulations) == set(ColorBlindness)
        assert simulations[ColorBlindness.PROTANOPIA] != "#3b82f6"

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            simulate_color_blindness("#ff0000", "colorless")

    def test_invalid_color(self):
        with pytest.raises(InvalidColorFormat):
            simulate_color_blindness("#ff00", ColorBlindness.TRITANOPIA)

    def test_non_hex_values_kept(self):
        simulated = simulate_colors({"primary": "#ff0000", "hover": "rgba(0, 0, 0, 0.05)"},
                                    ColorBlindness.ACHROMATOPSIA)
        assert simulated == {"primary": "#4c4c4c", "hover": "rgba(0, 0, 0, 0.05)"}

    def test_simulate_theme(self, theme_data):
        theme_data["colors"]["textMuted"] = "colors.textSecondary"
        theme = ThemeDocument.model_validate(theme_data)
        simulated = simulate_theme(theme, ColorBlindness.ACHROMATOPSIA)
        r, g, b = simulated.colors.primary[1:3], simulated.colors.primary[3:5], simulated.colors.primary[5:7]
        assert r == g == b
        assert simulated.colors.text_muted == simulated.colors.text_secondary
        assert simulated.meta == theme.meta
        assert theme.colors.primary == "#3b82f6"


class TestSafetyCheck:
    """Test detecting color pairs that collapse."""

    def test_pair_lost_to_tritanopia(self):
        report = check_color_blindness({"primary": "#0000ff", "secondary": "#818181"})
        assert not report.safe
        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.kind == ColorBlindness.TRITANOPIA
        assert issue.roles == ("primary", "secondary")
        assert "indistinguishable" in str(issue)

    def test_kinds_filter(self):
        report = check_color_blindness({"primary": "#0000ff", "secondary": "#818181"},
                                       [ColorBlindness.PROTANOPIA])
        assert report.safe

    def test_missing_and_non_hex_pairs_skipped(self):
        report = check_color_blindness({"primary": "#0000ff", "secondary": "colors.text"})
        assert report.safe
        assert report.issues == []

    def test_theme_is_safe(self, light_theme):
        assert check_theme_color_blindness(light_theme).safe
