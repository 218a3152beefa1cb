"""Color manipulation in HSL space.

Every function takes a hex color and returns a new normalized hex color.
Saturation and lightness adjustments clamp to [0, 100]; hue rotation wraps.
"""

from typing import List, NamedTuple

from .colors import (
    Number,
    hex_to_hsl,
    hex_to_rgb,
    hsl_to_hex,
    normalize_hex,
    rgb_to_hex,
    round_half_up,
)
from .errors import ColorOutOfRange

PALETTE_LIGHTEST = 95.0
PALETTE_DARKEST = 5.0


class PaletteShade(NamedTuple):
    """One step of a generated palette."""
    shade: int
    color: str


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def adjust_lightness(color: str, delta: Number) -> str:
    """Shift lightness by delta percentage points, clamped to [0, 100]."""
    h, s, l = hex_to_hsl(color)
    return hsl_to_hex(h, s, clamp(l + delta))


def adjust_saturation(color: str, delta: Number) -> str:
    """Shift saturation by delta percentage points, clamped to [0, 100]."""
    h, s, l = hex_to_hsl(color)
    return hsl_to_hex(h, clamp(s + delta), l)


def adjust_hue(color: str, degrees: Number) -> str:
    """Rotate the hue by degrees, wrapping around the color wheel."""
    h, s, l = hex_to_hsl(color)
    return hsl_to_hex((h + degrees) % 360.0, s, l)


def lighten(color: str, amount: Number) -> str:
    return adjust_lightness(color, amount)


def darken(color: str, amount: Number) -> str:
    return adjust_lightness(color, -amount)


def saturate(color: str, amount: Number) -> str:
    return adjust_saturation(color, amount)


def desaturate(color: str, amount: Number) -> str:
    return adjust_saturation(color, -amount)


def grayscale(color: str) -> str:
    """Drop saturation to zero, keeping lightness."""
    h, _, l = hex_to_hsl(color)
    return hsl_to_hex(h, 0, l)


def invert(color: str) -> str:
    """Complement each RGB channel against 255."""
    r, g, b = hex_to_rgb(color)
    return rgb_to_hex(255 - r, 255 - g, 255 - b)


def is_light(color: str) -> bool:
    """True when HSL lightness is strictly above 50."""
    return hex_to_hsl(color).l > 50


def is_dark(color: str) -> bool:
    return not is_light(color)


def mix(color_a: str, color_b: str, weight: Number = 50) -> str:
    """Linearly interpolate two colors in RGB space.

    Args:
        color_a: First color
        color_b: Second color
        weight: Percentage of color_a in the result (100 gives color_a)

    Raises:
        ColorOutOfRange: If weight is outside [0, 100]
    """
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not 0 <= weight <= 100:
        raise ColorOutOfRange(f"Mix weight must be within 0-100, got {weight!r}")

    a = hex_to_rgb(color_a)
    b = hex_to_rgb(color_b)
    if weight == 100:
        return normalize_hex(color_a)
    if weight == 0:
        return normalize_hex(color_b)

    w = weight / 100.0
    return rgb_to_hex(*(ca * w + cb * (1.0 - w) for ca, cb in zip(a, b)))


def complementary(color: str) -> str:
    """The color opposite on the hue wheel."""
    return adjust_hue(color, 180)


def generate_palette(base: str, steps: int = 10) -> List[PaletteShade]:
    """Generate a tonal palette from a base color.

    Lightness runs from 95 (lightest) down to 5 (darkest) in equal steps,
    keeping the base hue and saturation. Shades are tagged on a 0-900 scale.

    Args:
        base: Base hex color
        steps: Number of shades, at least 2

    Returns:
        Shades ordered lightest to darkest

    Raises:
        ValueError: If steps is less than 2
    """
    if isinstance(steps, bool) or not isinstance(steps, int) or steps < 2:
        raise ValueError(f"Palette needs at least 2 steps, got {steps!r}")

    h, s, _ = hex_to_hsl(base)
    span = PALETTE_LIGHTEST - PALETTE_DARKEST
    palette = []
    for i in range(steps):
        lightness = PALETTE_LIGHTEST - span * i / (steps - 1)
        palette.append(PaletteShade(
            shade=round_half_up((i + 1) * 900 / steps),
            color=hsl_to_hex(h, s, lightness),
        ))
    return palette
