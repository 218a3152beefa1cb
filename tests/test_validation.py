"""Tests for field-level theme validation."""

from themeforge.theme_engine.schema import ThemeDocument
from themeforge.theme_engine.validation import Severity, ValidationIssue, validate_theme


def _fields(result):
    return [issue.field for issue in result.errors]


class TestValidateTheme:
    """Test theme linting."""

    def test_valid_theme(self, light_theme):
        result = validate_theme(light_theme)
        assert result.valid
        assert result.errors == []

    def test_unresolved_color(self, theme_data):
        theme_data["colors"]["primary"] = "colors.missing"
        result = validate_theme(ThemeDocument.model_validate(theme_data))

        assert not result.valid
        assert "colors.primary" in _fields(result)

    def test_cyclic_color(self, theme_data):
        theme_data["colors"]["primary"] = "colors.secondary"
        theme_data["colors"]["secondary"] = "colors.primary"
        result = validate_theme(ThemeDocument.model_validate(theme_data))

        messages = [issue.message for issue in result.error_issues]
        assert any(message.startswith("Cyclic reference") for message in messages)

    def test_reference_to_hex_is_fine(self, theme_data):
        theme_data["colors"]["surfaceHover"] = "colors.surfaceSecondary"
        assert validate_theme(ThemeDocument.model_validate(theme_data)).valid

    def test_required_color_must_be_hex(self, theme_data):
        theme_data["colors"]["surface"] = "rgba(255, 255, 255, 1)"
        result = validate_theme(ThemeDocument.model_validate(theme_data))

        assert not result.valid
        issue = result.error_issues[0]
        assert issue.field == "colors.surface"
        assert issue.message == "Invalid hex color format: rgba(255, 255, 255, 1)"

    def test_component_reference(self, theme_data):
        theme_data["cards"]["basic"]["border"] = "colors.outline"
        result = validate_theme(ThemeDocument.model_validate(theme_data))
        assert _fields(result) == ["cards.basic.border"]

    def test_dark_component_reference(self, theme_data):
        theme_data["darkMode"] = {"enabled": True, "buttons": {"ghost": {"text": "colors.ink"}}}
        result = validate_theme(ThemeDocument.model_validate(theme_data))
        assert _fields(result) == ["darkMode.buttons.ghost.text"]

    def test_blank_metadata(self, theme_data):
        theme_data["meta"]["name"] = "  "
        theme_data["typography"]["fontFamily"] = ""
        result = validate_theme(ThemeDocument.model_validate(theme_data))

        assert not result.valid
        assert "meta.name" in _fields(result)
        assert "typography.fontFamily" in _fields(result)

    def test_range_warnings(self, theme_data):
        """Test that out-of-range scales warn without failing."""
        theme_data["typography"]["baseSize"] = 30
        theme_data["typography"]["scale"] = 2
        theme_data["spacing"]["baseUnit"] = 1
        theme_data["borders"]["default"] = 10

        result = validate_theme(ThemeDocument.model_validate(theme_data))
        assert result.valid
        assert len(result.warning_issues) == 4
        assert all(issue.severity == Severity.WARNING for issue in result.warning_issues)

    def test_issue_string(self):
        issue = ValidationIssue(field="colors.text", message="Color text is required")
        assert str(issue) == "colors.text: Color text is required"
        assert issue.severity == Severity.ERROR
