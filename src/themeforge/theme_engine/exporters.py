"""Design-token exporters.

Serializes a theme document to flat JSON or to the W3C Design Tokens
format. Color references are resolved before export, so neither format
carries a reference string.
"""

import json
from typing import Any, Callable, Dict, Mapping

from .colors import round_half_up
from .css import camel_to_kebab
from .resolver import TokenResolver
from .schema import ThemeDocument

SPACING_STEPS = range(11)

JSON_FONT_SIZES = (('xs', -2), ('sm', -1), ('base', 0), ('lg', 1), ('xl', 2), ('2xl', 3))

DEFAULT_BREAKPOINTS = {'xs': 320, 'sm': 640, 'md': 768, 'lg': 1024, 'xl': 1280, '2xl': 1536}

W3C_COLOR_ROLES = (
    'primary', 'primaryHover', 'primaryActive', 'secondary',
    'surface', 'surfaceSecondary', 'surfaceHover',
    'text', 'textSecondary', 'textMuted',
    'border', 'borderStrong', 'borderSubtle',
)

JSON_COLOR_ROLES = W3C_COLOR_ROLES[:4] + ('secondaryHover', 'secondaryActive') + W3C_COLOR_ROLES[4:] + (
    'success', 'warning', 'error', 'info',
)


def _resolved_colors(theme: ThemeDocument) -> Dict[str, Any]:
    tree = theme.to_tree()
    colors = TokenResolver(tree).resolve_mapping(tree['colors'])
    colors.setdefault('primaryHover', colors['primary'])
    colors.setdefault('primaryActive', colors['primary'])
    return colors


def spacing_values(theme: ThemeDocument) -> Dict[str, Any]:
    """Explicit spacing values, or steps 0-10 from the scale and base unit."""
    spacing = theme.spacing
    if spacing.values:
        return dict(spacing.values)
    scale = spacing.scale or []
    values: Dict[str, Any] = {}
    for step in SPACING_STEPS:
        scaled = scale[step] if step < len(scale) else None
        values[str(step)] = scaled if scaled else spacing.base_unit * step
    return values


def _dumps(data: Mapping[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def theme_to_json(theme: ThemeDocument) -> Dict[str, Any]:
    """Flat key-value token tree with references resolved."""
    tree = theme.to_tree()
    colors = _resolved_colors(theme)
    typography = theme.typography
    base, scale = typography.base_size, typography.scale
    borders = tree['borders']

    type_tokens: Dict[str, Any] = {
        'fontFamily': typography.font_family,
        'fontFamilyHeading': typography.font_family_heading or typography.font_family,
    }
    if typography.font_family_mono:
        type_tokens['fontFamilyMono'] = typography.font_family_mono
    type_tokens.update({
        'baseSize': base,
        'scale': scale,
        'fontSize': {
            name: base if exponent == 0 else round_half_up(base * scale ** exponent)
            for name, exponent in JSON_FONT_SIZES
        },
        'fontWeight': tree['typography']['weights'],
        'lineHeight': tree['typography']['lineHeights'],
    })

    return {
        'meta': tree['meta'],
        'colors': {role: colors[role] for role in JSON_COLOR_ROLES if role in colors},
        'spacing': spacing_values(theme),
        'typography': type_tokens,
        'borders': {
            'width': {key: borders[key] for key in ('thin', 'default', 'thick')},
            'radius': {
                'subtle': borders['radiusSubtle'],
                'relaxed': borders['radiusRelaxed'],
                'pill': borders['radiusPill'],
            },
            'style': borders['defaultStyle'],
        },
        'breakpoints': tree.get('breakpoints') or dict(DEFAULT_BREAKPOINTS),
    }


def _token(value: Any, kind: str, description: str) -> Dict[str, Any]:
    return {'$value': value, '$type': kind, '$description': description}


def _px(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}px"


def theme_to_w3c(theme: ThemeDocument) -> Dict[str, Any]:
    """Token tree in the W3C Design Tokens format.

    Colors are ``color`` tokens under kebab-case names; spacing, font
    sizes and border measures are ``dimension`` tokens in px.
    """
    colors = _resolved_colors(theme)
    typography = theme.typography
    borders = theme.borders

    color_tokens = {
        camel_to_kebab(role): _token(colors[role], 'color', f"{camel_to_kebab(role).replace('-', ' ')} color")
        for role in W3C_COLOR_ROLES
        if role in colors
    }

    spacing_tokens = {
        key: _token(_px(value), 'dimension', f"Spacing {key}")
        for key, value in spacing_values(theme).items()
    }

    type_tokens = {
        'font-family': _token(typography.font_family, 'fontFamily', "Body font family"),
        'font-family-heading': _token(
            typography.font_family_heading or typography.font_family, 'fontFamily', "Heading font family"),
    }
    if typography.font_family_mono:
        type_tokens['font-family-mono'] = _token(typography.font_family_mono, 'fontFamily', "Monospace font family")
    type_tokens['font-size-base'] = _token(_px(typography.base_size), 'dimension', "Base font size")
    for name in ('regular', 'semibold', 'bold'):
        weight = getattr(typography.weights, name)
        type_tokens[f'font-weight-{name}'] = _token(weight, 'fontWeight', f"{name.capitalize()} font weight")

    border_tokens = {
        'width': {
            'thin': _token(_px(borders.thin), 'dimension', "Thin border width"),
            'default': _token(_px(borders.default_width), 'dimension', "Default border width"),
            'thick': _token(_px(borders.thick), 'dimension', "Thick border width"),
        },
        'radius': {
            'subtle': _token(_px(borders.radius_subtle), 'dimension', "Subtle border radius"),
            'relaxed': _token(_px(borders.radius_relaxed), 'dimension', "Relaxed border radius"),
            'pill': _token(_px(borders.radius_pill), 'dimension', "Pill border radius"),
        },
    }

    return {
        'color': color_tokens,
        'spacing': spacing_tokens,
        'typography': type_tokens,
        'border': border_tokens,
    }


def export_json(theme: ThemeDocument) -> str:
    return _dumps(theme_to_json(theme))


def export_w3c(theme: ThemeDocument) -> str:
    return _dumps(theme_to_w3c(theme))


EXPORTERS: Dict[str, Callable[[ThemeDocument], str]] = {
    'json': export_json,
    'w3c': export_w3c,
}


def export_theme(theme: ThemeDocument, format: str) -> str:
    """Serialize a document in a named token format.

    Raises:
        ValueError: If the format is unknown
    """
    try:
        exporter = EXPORTERS[format]
    except KeyError:
        raise ValueError(f"Unknown export format {format!r}; choose from {', '.join(EXPORTERS)}") from None
    return exporter(theme)
