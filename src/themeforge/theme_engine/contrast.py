"""WCAG 2.1 contrast calculation.

This module computes relative luminance and contrast ratios and exposes the
standard thresholds. Pass/fail policy is left to callers such as the
dark-mode synthesizer and theme validation.
"""

from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Tuple

from .colors import hex_to_rgb

AA_TEXT = 4.5
AAA_TEXT = 7.0
UI_MINIMUM = 3.0
AA_LARGE_TEXT = 3.0
AAA_LARGE_TEXT = 4.5
ENHANCED_TEXT = 10.0


class ContrastLevel(str, Enum):
    """WCAG conformance levels"""
    AAA = "AAA"
    AA = "AA"
    AA_LARGE = "AA_LARGE"
    ENHANCED = "ENHANCED"
    FAIL = "FAIL"


class ContrastResult(NamedTuple):
    """Contrast ratio with pass/fail flags for each WCAG threshold."""
    ratio: float
    aa: bool
    aaa: bool
    aa_large: bool
    aaa_large: bool


def _linearize(channel: int) -> float:
    normalized = channel / 255.0
    if normalized <= 0.03928:
        return normalized / 12.92
    return ((normalized + 0.055) / 1.055) ** 2.4


def relative_luminance(color: str) -> float:
    """Calculate relative luminance of a hex color.

    Uses the WCAG formula over linearized sRGB channels.

    Returns:
        Relative luminance 0.0-1.0

    Raises:
        InvalidColorFormat: If color is not a 6-digit hex color
    """
    r, g, b = hex_to_rgb(color)
    return 0.2126 * _linearize(r) + 0.7152 * _linearize(g) + 0.0722 * _linearize(b)


def contrast_ratio(color1: str, color2: str) -> float:
    """Calculate WCAG contrast ratio between two colors.

    Symmetric in its arguments. The result is rounded to 6 decimals so that
    white on black is exactly 21.

    Returns:
        Contrast ratio 1.0-21.0 (higher is more contrast)
    """
    lum1 = relative_luminance(color1)
    lum2 = relative_luminance(color2)

    # Lighter color in numerator
    if lum1 < lum2:
        lum1, lum2 = lum2, lum1

    return round((lum1 + 0.05) / (lum2 + 0.05), 6)


def check_contrast(foreground: str, background: str) -> ContrastResult:
    """Check a color pair against every WCAG threshold."""
    ratio = contrast_ratio(foreground, background)
    return ContrastResult(
        ratio=round(ratio, 2),
        aa=ratio >= AA_TEXT,
        aaa=ratio >= AAA_TEXT,
        aa_large=ratio >= AA_LARGE_TEXT,
        aaa_large=ratio >= AAA_LARGE_TEXT,
    )


def contrast_level(ratio: float) -> ContrastLevel:
    """Highest level a ratio reaches for normal-size text."""
    if ratio >= ENHANCED_TEXT:
        return ContrastLevel.ENHANCED
    if ratio >= AAA_TEXT:
        return ContrastLevel.AAA
    if ratio >= AA_TEXT:
        return ContrastLevel.AA
    if ratio >= AA_LARGE_TEXT:
        return ContrastLevel.AA_LARGE
    return ContrastLevel.FAIL


def contrast_description(ratio: float) -> str:
    """Human-readable verdict for a contrast ratio."""
    if ratio >= 15:
        return "Excellent contrast - exceptional accessibility"
    if ratio >= 7:
        return "Good contrast - WCAG AAA compliant"
    if ratio >= 4.5:
        return "Acceptable contrast - WCAG AA compliant"
    if ratio >= 3:
        return "Poor contrast - only suitable for large text"
    return "Fails WCAG standards - insufficient contrast"


def meets_minimum_contrast(foreground: str, background: str,
                           level: ContrastLevel = ContrastLevel.AA,
                           large_text: bool = False) -> bool:
    """Check if a color pair meets a WCAG level.

    Args:
        foreground: Foreground hex color
        background: Background hex color
        level: Level to check against
        large_text: Use the relaxed large-text thresholds

    Returns:
        True if contrast meets the level; always False for FAIL and AA_LARGE
        is treated as the large-text AA floor
    """
    ratio = contrast_ratio(foreground, background)

    if level == ContrastLevel.AAA:
        return ratio >= (AAA_LARGE_TEXT if large_text else AAA_TEXT)
    if level == ContrastLevel.AA:
        return ratio >= (AA_LARGE_TEXT if large_text else AA_TEXT)
    if level == ContrastLevel.AA_LARGE:
        return ratio >= AA_LARGE_TEXT
    if level == ContrastLevel.ENHANCED:
        return ratio >= ENHANCED_TEXT
    return False


def accessible_text_color(background: str, dark_text: str = "#000000",
                          light_text: str = "#ffffff", minimum: float = AA_TEXT) -> str:
    """Pick a text color for a background.

    Prefers dark_text when it meets the minimum, then light_text, and falls
    back to whichever has the higher contrast.
    """
    dark_ratio = contrast_ratio(dark_text, background)
    light_ratio = contrast_ratio(light_text, background)

    if dark_ratio >= minimum:
        return dark_text
    if light_ratio >= minimum:
        return light_text
    return light_text if light_ratio > dark_ratio else dark_text


def suggest_contrast_fix(foreground: str, background: str, target: float = AA_TEXT):
    """Advice string for a failing pair, None if the target is already met."""
    if contrast_ratio(foreground, background) >= target:
        return None
    if relative_luminance(background) < 0.5:
        return "Lighten the foreground color or use white for better contrast"
    return "Darken the foreground color or use black for better contrast"


def contrast_matrix(colors: Iterable[str]) -> Dict[Tuple[str, str], ContrastResult]:
    """Check every ordered foreground/background pair of a color list."""
    palette: List[str] = list(colors)
    return {
        (fg, bg): check_contrast(fg, bg)
        for fg in palette
        for bg in palette
    }
