"""Tests for WCAG contrast checks."""

import pytest

from themeforge.theme_engine.contrast import (
    ContrastLevel,
    accessible_text_color,
    check_contrast,
    contrast_description,
    contrast_level,
    contrast_matrix,
    contrast_ratio,
    meets_minimum_contrast,
    relative_luminance,
    suggest_contrast_fix,
)
from themeforge.theme_engine.errors import InvalidColorFormat


class TestContrastRatio:
    """Test luminance and contrast ratio."""

    def test_luminance_extremes(self):
        assert relative_luminance("#000000") == 0.0
        assert relative_luminance("#ffffff") == pytest.approx(1.0)

    def test_black_on_white(self):
        """Test the maximum ratio is exactly 21."""
        assert contrast_ratio("#000000", "#ffffff") == 21.0

    def test_symmetric(self):
        assert contrast_ratio("#3b82f6", "#121212") == contrast_ratio("#121212", "#3b82f6")

    def test_same_color(self):
        assert contrast_ratio("#777777", "#777777") == 1.0

    def test_mid_gray(self):
        assert contrast_ratio("#777777", "#ffffff") == pytest.approx(4.48, abs=0.01)

    def test_invalid_color(self):
        with pytest.raises(InvalidColorFormat):
            contrast_ratio("red", "#ffffff")


class TestCheckContrast:
    """Test WCAG threshold flags."""

    def test_all_pass(self):
        result = check_contrast("#000000", "#ffffff")
        assert result.ratio == 21.0
        assert result.aa and result.aaa and result.aa_large and result.aaa_large

    def test_large_text_only(self):
        """Test a pair just under the AA text threshold."""
        result = check_contrast("#777777", "#ffffff")
        assert not result.aa
        assert not result.aaa
        assert result.aa_large
        assert not result.aaa_large

    def test_meets_minimum(self):
        assert not meets_minimum_contrast("#777777", "#ffffff")
        assert meets_minimum_contrast("#777777", "#ffffff", large_text=True)
        assert meets_minimum_contrast("#000000", "#ffffff", ContrastLevel.AAA)
        assert not meets_minimum_contrast("#000000", "#ffffff", ContrastLevel.FAIL)

    @pytest.mark.parametrize("ratio,level", [
        (21, ContrastLevel.ENHANCED),
        (8, ContrastLevel.AAA),
        (5, ContrastLevel.AA),
        (3.5, ContrastLevel.AA_LARGE),
        (2, ContrastLevel.FAIL),
    ])
    def test_contrast_level(self, ratio, level):
        assert contrast_level(ratio) == level

    def test_description(self):
        assert contrast_description(21).startswith("Excellent")
        assert contrast_description(4.6).startswith("Acceptable")
        assert contrast_description(1.5).startswith("Fails")


class TestHelpers:
    """Test contrast helpers."""

    def test_accessible_text_color(self):
        assert accessible_text_color("#ffffff") == "#000000"
        assert accessible_text_color("#000000") == "#ffffff"

    def test_suggest_fix(self):
        assert suggest_contrast_fix("#000000", "#ffffff") is None
        assert "Lighten" in suggest_contrast_fix("#333333", "#222222")
        assert "Darken" in suggest_contrast_fix("#eeeeee", "#ffffff")

    def test_matrix(self):
        matrix = contrast_matrix(["#000000", "#ffffff"])
        assert len(matrix) == 4
        assert matrix[("#000000", "#ffffff")].ratio == 21.0
        assert matrix[("#ffffff", "#ffffff")].ratio == 1.0
