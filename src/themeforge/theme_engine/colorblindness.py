"""Color vision deficiency simulation.

Each deficiency is a 3x3 matrix applied to the sRGB channels of a hex
color. The matrices are the Brettel, Viénot and Mollon approximations; the
two achromatic kinds mix toward Rec. 601 luma.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Mapping, NamedTuple, Sequence, Tuple

from .colors import hex_to_rgb, is_hex_color, rgb_to_hex, round_half_up
from .contrast import contrast_ratio
from .resolver import TokenResolver
from .schema import ColorSet, ThemeDocument

logger = logging.getLogger(__name__)

Matrix = Tuple[Tuple[float, float, float], ...]


class ColorBlindness(str, Enum):
    """Kinds of color vision deficiency"""
    PROTANOPIA = "protanopia"
    DEUTERANOPIA = "deuteranopia"
    TRITANOPIA = "tritanopia"
    PROTANOMALY = "protanomaly"
    DEUTERANOMALY = "deuteranomaly"
    TRITANOMALY = "tritanomaly"
    ACHROMATOPSIA = "achromatopsia"
    ACHROMATOMALY = "achromatomaly"


MATRICES: Dict[ColorBlindness, Matrix] = {
    ColorBlindness.PROTANOPIA: ((0.567, 0.433, 0.0), (0.558, 0.442, 0.0), (0.0, 0.242, 0.758)),
    ColorBlindness.DEUTERANOPIA: ((0.625, 0.375, 0.0), (0.7, 0.3, 0.0), (0.0, 0.3, 0.7)),
    ColorBlindness.TRITANOPIA: ((0.95, 0.05, 0.0), (0.0, 0.433, 0.567), (0.0, 0.475, 0.525)),
    ColorBlindness.PROTANOMALY: ((0.817, 0.183, 0.0), (0.333, 0.667, 0.0), (0.0, 0.125, 0.875)),
    ColorBlindness.DEUTERANOMALY: ((0.8, 0.2, 0.0), (0.258, 0.742, 0.0), (0.0, 0.142, 0.858)),
    ColorBlindness.TRITANOMALY: ((0.967, 0.033, 0.0), (0.0, 0.733, 0.267), (0.0, 0.183, 0.817)),
}

LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Share of the original color kept by achromatomaly
ACHROMATOMALY_RETAINED = 0.4

DEFAULT_KINDS = (
    ColorBlindness.PROTANOPIA,
    ColorBlindness.DEUTERANOPIA,
    ColorBlindness.TRITANOPIA,
)

# Role pairs that must stay distinguishable
CRITICAL_PAIRS = (
    ('primary', 'secondary'),
    ('success', 'error'),
    ('success', 'warning'),
    ('error', 'warning'),
)

# A pair is lost when it drops below this ratio after starting above the next
INDISTINGUISHABLE_RATIO = 1.5
DISTINCT_RATIO = 2.0


class ColorBlindnessIssue(NamedTuple):
    kind: ColorBlindness
    roles: Tuple[str, str]

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.roles[0]} and {self.roles[1]} become indistinguishable"


class ColorBlindnessReport(NamedTuple):
    safe: bool
    issues: List[ColorBlindnessIssue]


def _channel(value: float) -> int:
    return max(0, min(255, round_half_up(value)))


def simulate_color_blindness(color: str, kind: ColorBlindness) -> str:
    """Color as perceived with the given deficiency.

    Raises:
        InvalidColorFormat: If color is not a hex color
        ValueError: If kind is not a known deficiency
    """
    kind = ColorBlindness(kind)
    rgb = hex_to_rgb(color)

    if kind in (ColorBlindness.ACHROMATOPSIA, ColorBlindness.ACHROMATOMALY):
        gray = round_half_up(sum(w * c for w, c in zip(LUMA_WEIGHTS, rgb)))
        if kind == ColorBlindness.ACHROMATOPSIA:
            return rgb_to_hex(gray, gray, gray)
        kept = ACHROMATOMALY_RETAINED
        return rgb_to_hex(*(_channel(c * kept + gray * (1 - kept)) for c in rgb))

    matrix = MATRICES[kind]
    return rgb_to_hex(*(_channel(sum(w * c for w, c in zip(row, rgb))) for row in matrix))


def all_simulations(color: str) -> Dict[ColorBlindness, str]:
    """Simulate every kind of deficiency for one color."""
    return {kind: simulate_color_blindness(color, kind) for kind in ColorBlindness}


def simulate_colors(colors: Mapping[str, str], kind: ColorBlindness) -> Dict[str, str]:
    """Simulate a role mapping; values that are not hex colors are kept as-is."""
    return {
        role: simulate_color_blindness(value, kind) if is_hex_color(value) else value
        for role, value in colors.items()
    }


def simulate_theme(theme: ThemeDocument, kind: ColorBlindness) -> ThemeDocument:
    """Document whose light colors look as they would with the deficiency.

    References are resolved first, so every hex role is simulated.
    """
    tree = theme.to_tree()
    resolved = TokenResolver(tree).resolve_mapping(tree['colors'])
    colors = ColorSet.model_validate(simulate_colors(resolved, kind))
    return theme.model_copy(update={'colors': colors})


def check_color_blindness(colors: Mapping[str, str],
                          kinds: Sequence[ColorBlindness] = DEFAULT_KINDS) -> ColorBlindnessReport:
    """Find critical role pairs that collapse under each deficiency.

    Args:
        colors: Resolved role mapping; roles that are absent or not hex are skipped
        kinds: Deficiencies to check

    Returns:
        ColorBlindnessReport listing every lost pair
    """
    issues: List[ColorBlindnessIssue] = []
    pairs = [
        (first, second) for first, second in CRITICAL_PAIRS
        if is_hex_color(colors.get(first)) and is_hex_color(colors.get(second))
    ]

    for kind in kinds:
        kind = ColorBlindness(kind)
        for first, second in pairs:
            before = contrast_ratio(colors[first], colors[second])
            after = contrast_ratio(
                simulate_color_blindness(colors[first], kind),
                simulate_color_blindness(colors[second], kind),
            )
            if after < INDISTINGUISHABLE_RATIO and before > DISTINCT_RATIO:
                issues.append(ColorBlindnessIssue(kind, (first, second)))

    if issues:
        logger.debug(f"{len(issues)} color blindness issue(s) found")
    return ColorBlindnessReport(safe=not issues, issues=issues)


def check_theme_color_blindness(theme: ThemeDocument,
                                kinds: Iterable[ColorBlindness] = DEFAULT_KINDS) -> ColorBlindnessReport:
    """Check a document's resolved light colors."""
    tree = theme.to_tree()
    colors = TokenResolver(tree).resolve_mapping(tree['colors'])
    return check_color_blindness(colors, tuple(kinds))
