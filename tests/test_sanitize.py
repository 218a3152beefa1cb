"""Tests for sanitization of untrusted theme input."""

import json

import pytest

from themeforge.theme_engine.errors import (
    InvalidField,
    InvalidInput,
    InvalidJSON,
    InvalidSection,
    MissingSection,
    NonFiniteNumber,
    SanitizationError,
)
from themeforge.theme_engine.sanitize import (
    SanitizationOptions,
    deep_clone_sanitize,
    escape_for_display,
    is_theme_like,
    remove_dangerous_chars,
    sanitize_and_validate,
    sanitize_theme,
    sanitize_theme_from_json,
)
from themeforge.theme_engine.schema import ThemeDocument


class TestSanitizeTheme:
    """Test the raising sanitizer."""

    def test_valid_theme(self, theme_data):
        theme = sanitize_theme(theme_data)
        assert isinstance(theme, ThemeDocument)
        assert theme.meta.name == "Test Theme"

    def test_input_not_modified(self, theme_data):
        theme_data["typography"]["baseSize"] = "16"
        sanitize_theme(theme_data)
        assert theme_data["typography"]["baseSize"] == "16"

    def test_dangerous_keys_dropped(self, theme_data):
        """Test that prototype-pollution keys disappear at any depth."""
        theme_data["__proto__"] = {"polluted": True}
        theme_data["colors"]["constructor"] = "#000000"
        theme_data["colors"]["prototype"] = "#000000"
        theme_data["meta"]["__class__"] = "x"

        theme = sanitize_theme(theme_data)
        colors = theme.colors.as_dict()
        assert "constructor" not in colors
        assert "prototype" not in colors

    def test_unknown_top_level_keys_dropped(self, theme_data):
        theme_data["script"] = "alert(1)"
        theme = sanitize_theme(theme_data)
        assert "script" not in theme.to_tree()

    def test_numeric_strings_coerced(self, theme_data):
        theme_data["typography"]["baseSize"] = " 18 "
        theme_data["spacing"]["baseUnit"] = "4"
        theme_data["borders"]["default"] = "2.5"
        theme_data["zIndex"] = {"modal": "1300"}

        theme = sanitize_theme(theme_data)
        assert theme.typography.base_size == 18
        assert theme.spacing.base_unit == 4
        assert theme.borders.default_width == 2.5
        assert theme.z_index == {"modal": 1300}

    def test_bad_number(self, theme_data):
        theme_data["typography"]["baseSize"] = "large"
        with pytest.raises(InvalidField) as excinfo:
            sanitize_theme(theme_data)
        assert excinfo.value.path == "typography.baseSize"

    def test_boolean_is_not_a_number(self, theme_data):
        theme_data["spacing"]["baseUnit"] = True
        with pytest.raises(InvalidField):
            sanitize_theme(theme_data)

    def test_numbers_not_parsed_when_disabled(self, theme_data):
        theme_data["typography"]["baseSize"] = "16"
        with pytest.raises(InvalidField):
            sanitize_theme(theme_data, SanitizationOptions(parse_numbers=False))

    def test_non_finite_number(self, theme_data):
        theme_data["typography"]["scale"] = float("nan")
        with pytest.raises(NonFiniteNumber) as excinfo:
            sanitize_theme(theme_data)
        assert excinfo.value.path == "typography.scale"

    def test_non_finite_string(self, theme_data):
        theme_data["typography"]["scale"] = "inf"
        with pytest.raises(NonFiniteNumber):
            sanitize_theme(theme_data)

    @pytest.mark.parametrize("text", ["1_000", "0x10", "1e", "--4", "4px"])
    def test_loose_numeric_strings_rejected(self, theme_data, text):
        theme_data["spacing"]["baseUnit"] = text
        with pytest.raises(InvalidField) as excinfo:
            sanitize_theme(theme_data)
        assert excinfo.value.path == "spacing.baseUnit"

    @pytest.mark.parametrize("text,expected", [
        ("12", 12), ("+8", 8), (".5", 0.5), ("1.", 1.0), ("1e1", 10.0),
    ])
    def test_json_style_numeric_strings(self, theme_data, text, expected):
        theme_data["spacing"]["baseUnit"] = text
        assert sanitize_theme(theme_data).spacing.base_unit == expected

    def test_missing_section(self, theme_data):
        del theme_data["borders"]
        with pytest.raises(MissingSection) as excinfo:
            sanitize_theme(theme_data)
        assert excinfo.value.path == "borders"

    def test_section_not_an_object(self, theme_data):
        theme_data["colors"] = "red"
        with pytest.raises(InvalidSection):
            sanitize_theme(theme_data)

    def test_optional_section_not_an_object(self, theme_data):
        theme_data["shadows"] = "none"
        theme = sanitize_theme(theme_data)
        assert theme.shadows is None

    @pytest.mark.parametrize("value", [None, [1, 2], "theme", 42])
    def test_not_an_object(self, value):
        with pytest.raises(InvalidInput):
            sanitize_theme(value)

    def test_schema_errors_become_invalid_field(self, theme_data):
        theme_data["colors"]["primary"] = "#12"
        with pytest.raises(InvalidField) as excinfo:
            sanitize_theme(theme_data)
        assert excinfo.value.path.startswith("colors")

    def test_errors_are_value_errors(self, theme_data):
        del theme_data["meta"]
        with pytest.raises(ValueError):
            sanitize_theme(theme_data)

    def test_strings_trimmed_and_capped(self, theme_data):
        """Test trimming and the longer description allowance."""
        theme_data["meta"]["name"] = "  " + "n" * 2000
        theme_data["meta"]["description"] = "d" * 6000

        theme = sanitize_theme(theme_data)
        assert len(theme.meta.name) == 1000
        assert len(theme.meta.description) == 5000

    def test_custom_string_limit(self, theme_data):
        theme_data["meta"]["author"] = "a" * 50
        theme = sanitize_theme(theme_data, SanitizationOptions(max_string_length=20))
        assert theme.meta.author == "a" * 20

    def test_nullish_removed(self, theme_data):
        theme_data["meta"]["author"] = None
        theme_data["colors"]["secondary"] = None
        theme = sanitize_theme(theme_data)
        assert theme.meta.author is None
        assert "secondary" not in theme.colors.as_dict()

    def test_max_depth(self, theme_data):
        with pytest.raises(InvalidField):
            sanitize_theme(theme_data, SanitizationOptions(max_depth=2))

    def test_integer_keys_stringified(self, theme_data):
        theme_data["spacing"]["values"] = {1: "4", 2: 8}
        theme = sanitize_theme(theme_data)
        assert theme.spacing.values == {"1": 4, "2": 8}


class TestJsonInput:
    """Test JSON entry points."""

    def test_from_json(self, theme_data):
        theme = sanitize_theme_from_json(json.dumps(theme_data))
        assert theme.colors.primary == "#3b82f6"

    def test_invalid_json(self):
        with pytest.raises(InvalidJSON):
            sanitize_theme_from_json("{not json")

    def test_non_text(self):
        with pytest.raises(InvalidInput):
            sanitize_theme_from_json({"meta": {}})

    def test_deep_clone(self, light_theme):
        clone = deep_clone_sanitize(light_theme)
        assert clone is not light_theme
        assert clone.to_tree() == light_theme.to_tree()


class TestSanitizeAndValidate:
    """Test the collecting variant."""

    def test_success(self, theme_data):
        result = sanitize_and_validate(theme_data)
        assert result.success
        assert result.theme is not None
        assert result.errors == []

    def test_collects_every_problem(self, theme_data):
        """Test that all problems are reported, not just the first."""
        del theme_data["borders"]
        theme_data["colors"] = "red"
        theme_data["typography"]["baseSize"] = "large"

        result = sanitize_and_validate(theme_data)
        assert not result.success
        assert result.theme is None
        assert len(result.errors) == 3
        assert any(error.startswith("borders:") for error in result.errors)

    def test_never_raises(self):
        result = sanitize_and_validate("not a theme")
        assert not result.success
        assert len(result.errors) == 1

    def test_validation_errors_included(self, theme_data):
        theme_data["colors"]["primary"] = "colors.missing"
        result = sanitize_and_validate(theme_data)
        assert not result.success
        assert any(error.startswith("colors.primary:") for error in result.errors)


class TestHelpers:
    """Test small sanitization helpers."""

    def test_is_theme_like(self, theme_data):
        assert is_theme_like(theme_data)
        del theme_data["meta"]["version"]
        assert not is_theme_like(theme_data)
        assert not is_theme_like([])

    def test_remove_dangerous_chars(self):
        assert remove_dangerous_chars("a\x00b\tc\x7fd\n") == "ab\tcd\n"

    def test_escape_for_display(self):
        assert escape_for_display("<b>'x' & \"y\"</b>") == (
            "&lt;b&gt;&#x27;x&#x27; &amp; &quot;y&quot;&lt;&#x2F;b&gt;"
        )

    def test_error_message_includes_path(self):
        error = SanitizationError("bad", "colors.primary")
        assert str(error) == "colors.primary: bad"
