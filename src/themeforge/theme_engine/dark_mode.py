"""Dark-mode color synthesis.

Light-mode colors are classified by role and moved into dark-mode lightness
bands: backgrounds drop to a low target set by the intensity tier, text moves
up into a light band, borders sit between the two. Brand colors are kept or
nudged, semantic and accent colors are nudged only when present. A bounded
refinement pass then widens the text/surface and primary/surface gaps until
the requested contrast is met or the attempt budget runs out.
"""

import logging
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .colors import hex_to_hsl, hsl_to_hex, is_hex_color
from .contrast import AA_TEXT, AAA_TEXT, UI_MINIMUM, contrast_ratio, relative_luminance
from .errors import ColorError, InvalidColorFormat
from .manipulation import clamp
from .resolver import TokenResolver
from .schema import ColorSet, DarkModeBlock, ThemeDocument

logger = logging.getLogger(__name__)

MAX_CONTRAST_ATTEMPTS = 10
CONTRAST_STEP = 5.0

# Foreground band: darker light-mode text ends up brighter
FOREGROUND_FLOOR = 55.0
FOREGROUND_CEILING = 95.0
FOREGROUND_SPREAD = 0.4

BRAND_TARGET_LIGHTNESS = 60.0
BRAND_PULL = 0.5

BACKGROUND_DESATURATION = 10.0
FOREGROUND_DESATURATION = 5.0
BORDER_DESATURATION = 10.0
SURFACE_HOVER_OFFSET = 4.0


class DarkModeIntensity(str, Enum):
    """How dark the synthesized backgrounds get"""
    SUBTLE = "subtle"
    MODERATE = "moderate"
    INTENSE = "intense"


BACKGROUND_LIGHTNESS = {
    DarkModeIntensity.SUBTLE: {'surface': 10.0, 'surfaceSecondary': 15.0},
    DarkModeIntensity.MODERATE: {'surface': 7.0, 'surfaceSecondary': 12.0},
    DarkModeIntensity.INTENSE: {'surface': 5.0, 'surfaceSecondary': 8.0},
}

BACKGROUND_ROLES = ('surface', 'surfaceSecondary', 'surfaceHover')

FOREGROUND_ROLES = ('text', 'textSecondary', 'textMuted', 'textTertiary')

# Position of each border between the surface target and the foreground floor
BORDER_POSITIONS = {
    'borderSubtle': 0.2,
    'border': 0.3,
    'borderStrong': 0.45,
}

BRAND_ROLES = (
    'primary', 'primaryHover', 'primaryActive', 'primaryLight',
    'secondary', 'secondaryHover', 'secondaryActive',
)

ACCENT_ROLES = (
    'success', 'warning', 'error', 'info',
    'accent', 'accentHover', 'accentActive',
    'link', 'linkHover', 'linkActive',
    'focus',
)

# Roles the contrast pass and the audit depend on
CONTRAST_ROLES = ('surface', 'text', 'primary')

ColorInput = Union[ColorSet, Mapping[str, str]]


class DarkModeOptions(BaseModel):
    """Tuning knobs for dark-mode synthesis"""

    model_config = ConfigDict(frozen=True)

    intensity: DarkModeIntensity = DarkModeIntensity.MODERATE
    preserve_brand_colors: bool = True
    saturation_adjustment: float = Field(-5, ge=-100, le=100)
    ensure_contrast: bool = True
    min_text_contrast: float = Field(AA_TEXT, ge=1, le=21)
    min_ui_contrast: float = Field(UI_MINIMUM, ge=1, le=21)


class ContrastEnforcement(BaseModel):
    """Outcome of the refinement loop for one foreground/background pair"""

    model_config = ConfigDict(frozen=True)

    foreground: str
    background: str
    target: float
    ratio: float
    attempts: int
    met: bool

    @property
    def pair(self) -> str:
        return f"{self.foreground}/{self.background}"


class DarkModeSynthesis(BaseModel):
    """Synthesized dark colors plus the contrast enforcement record"""

    model_config = ConfigDict(frozen=True)

    colors: Dict[str, str]
    enforcement: List[ContrastEnforcement] = Field(default_factory=list)

    @property
    def shortfalls(self) -> List[ContrastEnforcement]:
        return [entry for entry in self.enforcement if not entry.met]


class ContrastReportEntry(BaseModel):
    """Light versus dark contrast for one role pair"""

    model_config = ConfigDict(frozen=True)

    name: str
    light_ratio: float
    dark_ratio: float

    @computed_field
    @property
    def improved(self) -> bool:
        return self.dark_ratio >= AA_TEXT or self.dark_ratio > self.light_ratio


class DarkModePreview(BaseModel):
    """Side-effect free look at what synthesis would produce"""

    model_config = ConfigDict(frozen=True)

    light: Dict[str, str]
    dark: Dict[str, str]
    contrast_report: List[ContrastReportEntry]
    enforcement: List[ContrastEnforcement] = Field(default_factory=list)


class DarkModeValidation(BaseModel):
    """Contrast audit of a finished dark color set"""

    model_config = ConfigDict(frozen=True)

    valid: bool
    issues: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


def _resolved_colors(colors: ColorInput) -> Dict[str, str]:
    """Flat role->value mapping with references inside the color set resolved."""
    if isinstance(colors, ColorSet):
        mapping = colors.as_dict()
    else:
        mapping = {key: value for key, value in colors.items() if value is not None}
    return TokenResolver({'colors': mapping}).resolve_mapping(mapping)


def _shift(color: str, lightness: float, saturation_delta: float) -> str:
    h, s, _ = hex_to_hsl(color)
    return hsl_to_hex(h, clamp(s + saturation_delta), clamp(lightness))


def _accent_transform(color: str, options: DarkModeOptions) -> str:
    h, s, l = hex_to_hsl(color)
    new_l = l + (BRAND_TARGET_LIGHTNESS - l) * BRAND_PULL
    return hsl_to_hex(h, clamp(s + options.saturation_adjustment), clamp(new_l))


def _transform_role(role: str, color: str, options: DarkModeOptions) -> Optional[str]:
    """Dark value for one classified role, None for roles that inherit."""
    bands = BACKGROUND_LIGHTNESS[options.intensity]
    delta = options.saturation_adjustment

    if role in BACKGROUND_ROLES:
        if role == 'surfaceHover':
            target = bands['surfaceSecondary'] + SURFACE_HOVER_OFFSET
        else:
            target = bands[role]
        return _shift(color, target, delta - BACKGROUND_DESATURATION)

    if role in FOREGROUND_ROLES:
        lightness = hex_to_hsl(color).l
        target = min(FOREGROUND_CEILING, FOREGROUND_FLOOR + (100.0 - lightness) * FOREGROUND_SPREAD)
        return _shift(color, target, delta - FOREGROUND_DESATURATION)

    if role in BORDER_POSITIONS:
        surface_l = bands['surface']
        target = surface_l + (FOREGROUND_FLOOR - surface_l) * BORDER_POSITIONS[role]
        return _shift(color, target, delta - BORDER_DESATURATION)

    if role in BRAND_ROLES:
        if options.preserve_brand_colors:
            return color
        return _accent_transform(color, options)

    if role in ACCENT_ROLES:
        return _accent_transform(color, options)

    return None


def _seed_colors(light: Mapping[str, str], options: DarkModeOptions) -> Dict[str, str]:
    dark: Dict[str, str] = {}
    for role, value in light.items():
        if not is_hex_color(value):
            logger.debug(f"Leaving non-hex color {role}={value} to inherit")
            continue
        transformed = _transform_role(role, value, options)
        if transformed is not None:
            dark[role] = transformed
    return dark


def _step_away(color: str, other: str, allow_lighter: bool = True) -> Optional[str]:
    """Move color CONTRAST_STEP lightness points away from other, None when pinned.

    With ``allow_lighter`` off a color that would have to get lighter stays put.
    """
    h, s, l = hex_to_hsl(color)
    direction = 1.0 if relative_luminance(color) >= relative_luminance(other) else -1.0
    if direction > 0 and not allow_lighter:
        return None
    new_l = clamp(l + direction * CONTRAST_STEP)
    if new_l == l:
        return None
    return hsl_to_hex(h, s, new_l)


def _enforce_pair(colors: Dict[str, str], foreground: str, background: str,
                  target: float, move_background: bool) -> ContrastEnforcement:
    fg = colors[foreground]
    bg = colors[background]
    ratio = contrast_ratio(fg, bg)
    attempts = 0

    for _ in range(MAX_CONTRAST_ATTEMPTS):
        if ratio >= target:
            break
        if move_background:
            # A dark surface is only ever pushed darker
            moved = _step_away(bg, fg, allow_lighter=False)
            if moved is None:
                break
            bg = moved
        else:
            moved = _step_away(fg, bg)
            if moved is None:
                break
            fg = moved
        attempts += 1
        ratio = contrast_ratio(fg, bg)

    colors[foreground] = fg
    colors[background] = bg

    met = ratio >= target
    if not met:
        logger.warning(
            f"Contrast for {foreground} on {background} is {ratio:.2f}:1 "
            f"after {attempts} attempts (target {target}:1)"
        )
    return ContrastEnforcement(
        foreground=foreground,
        background=background,
        target=target,
        ratio=ratio,
        attempts=attempts,
        met=met,
    )


def synthesize_dark_colors(colors: ColorInput,
                           options: Optional[DarkModeOptions] = None) -> DarkModeSynthesis:
    """Synthesize dark-mode colors from a light color set.

    Args:
        colors: Light color set; references within the set are resolved first
        options: Synthesis options, defaults when omitted

    Returns:
        Only the roles that were synthesized, plus the enforcement records

    Raises:
        InvalidColorFormat: If surface, text or primary is not a hex color
    """
    options = options or DarkModeOptions()
    light = _resolved_colors(colors)
    for role in CONTRAST_ROLES:
        if role not in light:
            raise ColorError(f"Color set has no '{role}' color")
        if not is_hex_color(light[role]):
            raise InvalidColorFormat(light[role])
    dark = _seed_colors(light, options)

    enforcement: List[ContrastEnforcement] = []
    if options.ensure_contrast:
        # Primary first: darkening the surface only ever helps the text pair
        enforcement.append(_enforce_pair(
            dark, 'primary', 'surface', options.min_ui_contrast,
            move_background=options.preserve_brand_colors,
        ))
        enforcement.append(_enforce_pair(
            dark, 'text', 'surface', options.min_text_contrast,
            move_background=False,
        ))

    return DarkModeSynthesis(colors=dark, enforcement=enforcement)


def generate_dark_mode_colors(colors: ColorInput,
                              options: Optional[DarkModeOptions] = None) -> ColorSet:
    """Full dark color set: synthesized roles over the light values."""
    light = _resolved_colors(colors)
    synthesis = synthesize_dark_colors(light, options)
    return ColorSet.model_validate({**light, **synthesis.colors})


def generate_dark_mode(theme: ThemeDocument,
                       options: Optional[DarkModeOptions] = None) -> ThemeDocument:
    """Derive a dark-mode variant of a theme.

    The result keeps every light field, renames the theme and carries the
    synthesized colors in an enabled ``darkMode`` block. Existing dark button
    and card overrides are kept.
    """
    resolver = TokenResolver(theme)
    light = resolver.resolve_mapping(theme.colors.as_dict())
    synthesis = synthesize_dark_colors(light, options)

    existing = theme.dark_mode or DarkModeBlock()
    dark_block = DarkModeBlock(
        enabled=True,
        colors=synthesis.colors,
        buttons=existing.buttons,
        cards=existing.cards,
    )
    meta = theme.meta.model_copy(update={
        'name': f"{theme.meta.name} (Dark)",
        'description': f"Dark mode variant of {theme.meta.name}",
    })

    logger.debug(f"Generated dark mode for {theme.meta.name} with {len(synthesis.colors)} colors")
    return theme.model_copy(update={'meta': meta, 'dark_mode': dark_block})


def _report_pairs(light: Mapping[str, str], dark: Mapping[str, str]) -> List[ContrastReportEntry]:
    pairs: List[Tuple[str, str]] = [
        ("Text on Surface", 'text'),
        ("Primary on Surface", 'primary'),
        ("Border on Surface", 'border'),
    ]
    entries = []
    for name, role in pairs:
        colors = (light.get(role), light.get('surface'), dark.get(role), dark.get('surface'))
        if not all(is_hex_color(color) for color in colors):
            logger.debug(f"Skipping {name} in contrast report, {role} is not a hex color")
            continue
        entries.append(ContrastReportEntry(
            name=name,
            light_ratio=contrast_ratio(light[role], light['surface']),
            dark_ratio=contrast_ratio(dark[role], dark['surface']),
        ))
    return entries


def preview_dark_mode(theme: Union[ThemeDocument, ColorInput],
                      options: Optional[DarkModeOptions] = None) -> DarkModePreview:
    """Compute light and dark color sets with a contrast report, changing nothing."""
    if isinstance(theme, ThemeDocument):
        light = TokenResolver(theme).resolve_mapping(theme.colors.as_dict())
    else:
        light = _resolved_colors(theme)

    synthesis = synthesize_dark_colors(light, options)
    dark = {**light, **synthesis.colors}

    return DarkModePreview(
        light=light,
        dark=dark,
        contrast_report=_report_pairs(light, dark),
        enforcement=synthesis.enforcement,
    )


def get_suggested_options(brand_color: str) -> DarkModeOptions:
    """Suggest synthesis options for a brand color.

    Dark brand colors get the subtle tier. Highly saturated ones get a larger
    saturation cut so they do not vibrate against dark backgrounds.
    """
    _, s, l = hex_to_hsl(brand_color)

    if s > 80:
        saturation_adjustment = -10
    elif s > 60:
        saturation_adjustment = -5
    else:
        saturation_adjustment = 0

    intensity = DarkModeIntensity.SUBTLE if l < 30 else DarkModeIntensity.MODERATE

    return DarkModeOptions(
        intensity=intensity,
        preserve_brand_colors=True,
        saturation_adjustment=saturation_adjustment,
        ensure_contrast=True,
        min_text_contrast=AA_TEXT,
        min_ui_contrast=UI_MINIMUM,
    )


def validate_dark_mode(colors: ColorInput) -> DarkModeValidation:
    """Audit a finished dark color set.

    Text below AA is an issue and below AAA a warning. Primary below the UI
    floor is an issue. A border below the UI floor is a warning. Pairs with a
    color that is not hex are skipped with a warning.
    """
    resolved = _resolved_colors(colors)
    for role in CONTRAST_ROLES:
        if role not in resolved:
            raise ColorError(f"Color set has no '{role}' color")
    issues: List[str] = []
    warnings: List[str] = []

    def ratio_on_surface(role: str) -> Optional[float]:
        for name in (role, 'surface'):
            if not is_hex_color(resolved[name]):
                warning = f"{name} is not a hex color, contrast not checked"
                if warning not in warnings:
                    warnings.append(warning)
                return None
        return contrast_ratio(resolved[role], resolved['surface'])

    text_ratio = ratio_on_surface('text')
    if text_ratio is not None:
        if text_ratio < AA_TEXT:
            issues.append(f"Text contrast is too low: {text_ratio:.2f}:1 (minimum: 4.5:1)")
        elif text_ratio < AAA_TEXT:
            warnings.append(f"Text contrast meets AA but not AAA: {text_ratio:.2f}:1")

    primary_ratio = ratio_on_surface('primary')
    if primary_ratio is not None and primary_ratio < UI_MINIMUM:
        issues.append(f"Primary color contrast is too low: {primary_ratio:.2f}:1 (minimum: 3:1)")

    if 'border' in resolved:
        border_ratio = ratio_on_surface('border')
        if border_ratio is not None and border_ratio < UI_MINIMUM:
            warnings.append(f"Border may be too subtle: {border_ratio:.2f}:1 (minimum: 3:1)")

    return DarkModeValidation(valid=not issues, issues=issues, warnings=warnings)
