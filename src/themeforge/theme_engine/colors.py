"""Color space conversion between hex, RGB and HSL.

HSL components are kept as unrounded floats so that a hex color survives a
trip through HSL and back. Only the final RGB channels are rounded, half up.
"""

import colorsys
import math
import re
from typing import NamedTuple, Union

from .errors import ColorOutOfRange, InvalidColorFormat

Number = Union[int, float]

HEX_PATTERN = re.compile(r'^#?([0-9a-fA-F]{6})$')


class RGB(NamedTuple):
    """RGB channels, each an int in [0, 255]."""
    r: int
    g: int
    b: int


class HSL(NamedTuple):
    """Hue in degrees [0, 360), saturation and lightness in percent [0, 100]."""
    h: float
    s: float
    l: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positive values."""
    return int(math.floor(value + 0.5))


def is_hex_color(value) -> bool:
    """Return True if value is a 6-digit hex color, with or without '#'."""
    return isinstance(value, str) and HEX_PATTERN.match(value) is not None


def normalize_hex(value: str) -> str:
    """Return the canonical lower-case ``#rrggbb`` form of a hex color.

    Raises:
        InvalidColorFormat: If value is not a 6-digit hex color
    """
    if not isinstance(value, str):
        raise InvalidColorFormat(value)
    match = HEX_PATTERN.match(value.strip())
    if not match:
        raise InvalidColorFormat(value)
    return '#' + match.group(1).lower()


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert hex color to RGB channels.

    Args:
        hex_color: Hex color string (e.g., '#FF0000' or 'ff0000')

    Returns:
        RGB tuple with values 0-255

    Raises:
        InvalidColorFormat: If hex_color is not a valid 6-digit hex color
    """
    digits = normalize_hex(hex_color)[1:]
    return RGB(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def _check_channel(value: Number, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ColorOutOfRange(f"Channel {name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ColorOutOfRange(f"Channel {name} is not finite: {value}")
    rounded = round_half_up(value)
    if rounded < 0 or rounded > 255:
        raise ColorOutOfRange(f"Channel {name} out of range 0-255: {value}")
    return rounded


def rgb_to_hex(r: Number, g: Number, b: Number) -> str:
    """Convert RGB channels to a lower-case hex color.

    Channels are rounded half up before encoding.

    Raises:
        ColorOutOfRange: If any rounded channel falls outside 0-255
    """
    channels = (_check_channel(r, 'r'), _check_channel(g, 'g'), _check_channel(b, 'b'))
    return '#' + ''.join(f"{c:02x}" for c in channels)


def rgb_to_hsl(r: Number, g: Number, b: Number) -> HSL:
    """Convert RGB channels to HSL.

    Achromatic colors (r == g == b) get hue 0 and saturation 0.
    """
    for value, name in ((r, 'r'), (g, 'g'), (b, 'b')):
        _check_channel(value, name)

    hue, lightness, saturation = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    if saturation == 0.0:
        hue = 0.0

    return HSL((hue * 360.0) % 360.0, saturation * 100.0, lightness * 100.0)


def hsl_to_rgb(h: Number, s: Number, l: Number) -> RGB:
    """Convert HSL to RGB channels.

    Hue wraps modulo 360. Saturation and lightness are not clamped.

    Raises:
        ColorOutOfRange: If s or l is outside 0-100 or any input is not finite
    """
    for value, name in ((h, 'h'), (s, 's'), (l, 'l')):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ColorOutOfRange(f"HSL component {name} must be a finite number, got {value!r}")
    if not 0 <= s <= 100:
        raise ColorOutOfRange(f"Saturation out of range 0-100: {s}")
    if not 0 <= l <= 100:
        raise ColorOutOfRange(f"Lightness out of range 0-100: {l}")

    rf, gf, bf = colorsys.hls_to_rgb((h % 360.0) / 360.0, l / 100.0, s / 100.0)
    return RGB(round_half_up(rf * 255.0), round_half_up(gf * 255.0), round_half_up(bf * 255.0))


def hex_to_hsl(hex_color: str) -> HSL:
    """Convert a hex color to HSL."""
    return rgb_to_hsl(*hex_to_rgb(hex_color))


def hsl_to_hex(h: Number, s: Number, l: Number) -> str:
    """Convert HSL to a lower-case hex color."""
    return rgb_to_hex(*hsl_to_rgb(h, s, l))
