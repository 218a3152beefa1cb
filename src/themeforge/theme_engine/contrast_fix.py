"""Automatic contrast correction.

Moves a foreground color along its lightness axis, keeping hue and
saturation, until it reaches a target WCAG ratio against a background.
"""

import logging
from typing import Dict, List, NamedTuple, Optional

from .colors import hex_to_hsl, hsl_to_hex, is_hex_color, normalize_hex
from .contrast import AA_TEXT, AAA_TEXT, UI_MINIMUM, ContrastLevel, contrast_ratio, relative_luminance
from .errors import ThemeError
from .resolver import TokenResolver
from .schema import ColorSet, ThemeDocument

logger = logging.getLogger(__name__)

SEARCH_ITERATIONS = 20
DEFAULT_MAX_ADJUSTMENT = 50.0

# Luminance at which black and white text contrast equally
LUMINANCE_PIVOT = 0.179

TEXT_ROLES = ('text', 'textSecondary', 'textMuted')
UI_ROLES = ('primary', 'border', 'success', 'error', 'warning')


class ContrastFix(NamedTuple):
    """Outcome of fixing one foreground against a background."""
    original: str
    color: str
    success: bool
    adjustment: float
    ratio: float


def _search(h: float, s: float, start: float, end: float,
            background: str, target: float) -> Optional[float]:
    """Lightness between start and end closest to start that meets target."""
    if contrast_ratio(hsl_to_hex(h, s, end), background) < target:
        return None

    near, far = start, end
    for _ in range(SEARCH_ITERATIONS):
        mid = (near + far) / 2
        if contrast_ratio(hsl_to_hex(h, s, mid), background) >= target:
            far = mid
        else:
            near = mid
    return far


def find_contrast_fix(foreground: str, background: str, target: float = AA_TEXT,
                      max_adjustment: float = DEFAULT_MAX_ADJUSTMENT) -> ContrastFix:
    """Find the smallest lightness change that brings a pair to target.

    Lightens the foreground on dark backgrounds and darkens it on light ones,
    trying the other direction when the preferred one cannot reach target.

    Args:
        foreground: Foreground hex color
        background: Background hex color
        target: Contrast ratio to reach
        max_adjustment: Largest lightness change, in points, counted as success

    Returns:
        ContrastFix; ``color`` is the foreground unchanged when nothing works

    Raises:
        InvalidColorFormat: If either color is not a hex color
    """
    foreground = normalize_hex(foreground)
    background = normalize_hex(background)

    current = contrast_ratio(foreground, background)
    if current >= target:
        return ContrastFix(foreground, foreground, True, 0.0, current)

    h, s, l = hex_to_hsl(foreground)
    lighten_first = relative_luminance(background) < LUMINANCE_PIVOT
    ends = (100.0, 0.0) if lighten_first else (0.0, 100.0)

    for end in ends:
        lightness = _search(h, s, l, end, background, target)
        if lightness is None:
            continue
        fixed = hsl_to_hex(h, s, lightness)
        adjustment = abs(lightness - l)
        ratio = contrast_ratio(fixed, background)
        return ContrastFix(foreground, fixed, adjustment <= max_adjustment, adjustment, ratio)

    logger.debug(f"No lightness of {foreground} reaches {target}:1 on {background}")
    return ContrastFix(foreground, foreground, False, 0.0, current)


def fix_contrast(foreground: str, background: str, target: float = AA_TEXT,
                 max_adjustment: float = DEFAULT_MAX_ADJUSTMENT) -> str:
    """Foreground color adjusted to reach target, or unchanged if it cannot."""
    fix = find_contrast_fix(foreground, background, target, max_adjustment)
    return fix.color if fix.success else fix.original


def _targets(level: ContrastLevel):
    if level == ContrastLevel.AAA:
        return AAA_TEXT, AA_TEXT
    return AA_TEXT, UI_MINIMUM


def _fixable_roles(colors: Dict[str, str]) -> List[str]:
    roles = [role for role in TEXT_ROLES + UI_ROLES if role in colors]
    return [role for role in roles if is_hex_color(colors[role])]


def preview_contrast_fixes(theme: ThemeDocument,
                           level: ContrastLevel = ContrastLevel.AA) -> Dict[str, ContrastFix]:
    """Fixes that would change a color, keyed by role.

    Text roles are held to the text target and the rest to the UI target,
    all against ``surface``. Roles that are not hex colors are skipped.
    """
    tree = theme.to_tree()
    colors = TokenResolver(tree).resolve_mapping(tree['colors'])
    surface = colors.get('surface')
    if not is_hex_color(surface):
        raise ThemeError(f"Surface {surface!r} is not a hex color, contrast cannot be fixed")

    text_target, ui_target = _targets(level)
    fixes: Dict[str, ContrastFix] = {}
    for role in _fixable_roles(colors):
        target = text_target if role in TEXT_ROLES else ui_target
        fix = find_contrast_fix(colors[role], surface, target)
        if fix.success and fix.adjustment > 0:
            fixes[role] = fix
    return fixes


def fix_theme_contrast(theme: ThemeDocument,
                       level: ContrastLevel = ContrastLevel.AA) -> ThemeDocument:
    """New document with every fixable role brought to its target.

    Fixed roles become literal hex colors; references elsewhere are kept.

    Raises:
        ThemeError: If the surface is not a hex color
    """
    fixes = preview_contrast_fixes(theme, level)
    if not fixes:
        return theme

    for role, fix in fixes.items():
        logger.info(f"Adjusted {role}: {fix.original} -> {fix.color} ({fix.ratio:.2f}:1)")

    colors = ColorSet.model_validate({
        **theme.colors.as_dict(),
        **{role: fix.color for role, fix in fixes.items()},
    })
    return theme.model_copy(update={'colors': colors})
