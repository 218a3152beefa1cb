"""Tests for design-token exporters."""

import json

import pytest

from themeforge.theme_engine.exporters import (
    export_json,
    export_theme,
    export_w3c,
    spacing_values,
    theme_to_json,
    theme_to_w3c,
)
from themeforge.theme_engine.schema import ThemeDocument


class TestJsonExport:
    """Test the flat JSON token format."""

    def test_colors(self, light_theme):
        colors = theme_to_json(light_theme)["colors"]
        assert colors["primary"] == "#3b82f6"
        assert colors["primaryHover"] == "#3b82f6"
        assert colors["primaryActive"] == "#3b82f6"
        assert colors["success"] == "#22c55e"
        assert "hover" not in colors
        assert "warning" not in colors

    def test_references_resolved(self, theme_data):
        theme_data["colors"]["text"] = "colors.primary"
        tokens = theme_to_json(ThemeDocument.model_validate(theme_data))
        assert tokens["colors"]["text"] == "#3b82f6"

    def test_spacing_from_scale(self, light_theme):
        spacing = theme_to_json(light_theme)["spacing"]
        assert list(spacing) == [str(step) for step in range(11)]
        assert spacing["0"] == 0
        assert spacing["4"] == 16
        assert spacing["10"] == 64

    def test_explicit_spacing(self, theme_data):
        theme_data["spacing"] = {"baseUnit": 4, "values": {"1": 4, "2": 8}}
        assert spacing_values(ThemeDocument.model_validate(theme_data)) == {"1": 4, "2": 8}

    def test_spacing_from_base_unit(self, theme_data):
        theme_data["spacing"] = {"baseUnit": 8}
        assert spacing_values(ThemeDocument.model_validate(theme_data))["3"] == 24

    def test_typography(self, light_theme):
        typography = theme_to_json(light_theme)["typography"]
        assert typography["fontFamilyHeading"] == "Inter, sans-serif"
        assert "fontFamilyMono" not in typography
        assert typography["fontSize"] == {"xs": 10, "sm": 13, "base": 16, "lg": 20, "xl": 25, "2xl": 31}
        assert typography["fontWeight"]["bold"] == 700

    def test_borders_and_breakpoints(self, light_theme):
        tokens = theme_to_json(light_theme)
        assert tokens["borders"]["width"] == {"thin": 1, "default": 2, "thick": 4}
        assert tokens["borders"]["radius"]["pill"] == 9999
        assert tokens["borders"]["style"] == "solid"
        assert tokens["breakpoints"]["md"] == 768
        assert tokens["meta"]["name"] == "Test Theme"

    def test_text_is_json(self, light_theme):
        text = export_json(light_theme)
        assert text.endswith("\n")
        assert json.loads(text) == theme_to_json(light_theme)


class TestW3cExport:
    """Test the W3C Design Tokens format."""

    def test_color_tokens(self, light_theme):
        colors = theme_to_w3c(light_theme)["color"]
        assert colors["surface-secondary"]["$value"] == "#f9fafb"
        assert colors["surface-secondary"]["$type"] == "color"
        assert "$description" in colors["surface-secondary"]
        assert colors["primary-hover"]["$value"] == "#3b82f6"
        assert "success" not in colors

    def test_dimensions_in_px(self, light_theme):
        tokens = theme_to_w3c(light_theme)
        assert tokens["spacing"]["10"] == {
            "$value": "64px", "$type": "dimension", "$description": "Spacing 10",
        }
        assert tokens["border"]["width"]["default"]["$value"] == "2px"
        assert tokens["border"]["radius"]["subtle"]["$value"] == "8px"
        assert tokens["typography"]["font-size-base"]["$value"] == "16px"

    def test_typography_tokens(self, theme_data):
        theme_data["typography"]["fontFamilyMono"] = "JetBrains Mono, monospace"
        typography = theme_to_w3c(ThemeDocument.model_validate(theme_data))["typography"]
        assert typography["font-family-heading"]["$value"] == "Inter, sans-serif"
        assert typography["font-family-mono"]["$type"] == "fontFamily"
        assert typography["font-weight-semibold"]["$value"] == 600
        assert "font-weight-medium" not in typography

    def test_no_reference_strings(self, theme_data):
        theme_data["colors"]["border"] = "colors.borderStrong"
        text = export_w3c(ThemeDocument.model_validate(theme_data))
        assert "colors." not in text


class TestExportTheme:
    """Test format dispatch."""

    @pytest.mark.parametrize("fmt,key", [("json", "colors"), ("w3c", "color")])
    def test_formats(self, light_theme, fmt, key):
        assert key in json.loads(export_theme(light_theme, fmt))

    def test_unknown_format(self, light_theme):
        with pytest.raises(ValueError, match="Unknown export format"):
            export_theme(light_theme, "figma")
