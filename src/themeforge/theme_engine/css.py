"""CSS custom property generation.

Serializes a theme document into ``--theme-*`` variables under a selector
scope. Every value passes through the token resolver, so the output never
contains a reference string. Mapping sections are emitted in a canonical
order, which makes the output a pure function of the document's content.
When dark mode is enabled, a dark rule block and a ``prefers-color-scheme``
fallback carry only the declarations whose value differs from light mode.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .colors import round_half_up
from .resolver import TokenResolver
from .schema import ColorSet, ThemeDocument
from .utils import deep_merge_dict

Declaration = Tuple[str, str]

PREFIX = "--theme"

COLOR_ORDER = tuple(field.alias or name for name, field in ColorSet.model_fields.items())
FONT_SIZE_ORDER = ('xs2', 'xs', 'sm', 'base', 'lg', 'xl', '2xl', '3xl', '4xl', '5xl', '6xl')
SIZE_ORDER = ('none', 'xs', 'sm', 'base', 'md', 'lg', 'xl', '2xl', '3xl', 'full')
Z_INDEX_ORDER = ('base', 'dropdown', 'sticky', 'fixed', 'modal', 'popover', 'tooltip', 'toast')
BREAKPOINT_ORDER = ('xs', 'sm', 'md', 'lg', 'xl', '2xl')
BUTTON_VARIANT_ORDER = (
    'primary', 'secondary', 'outline', 'ghost', 'text', 'pill',
    'border-emphasis', 'danger', 'success', 'warning', 'info', 'neutral',
)
CARD_VARIANT_ORDER = ('basic', 'highlighted', 'outlined', 'interactive', 'ghost', 'elevated')

BUTTON_PROPERTIES = (
    ('background', 'bg'),
    ('text', 'text'),
    ('border', 'border'),
    ('backgroundHover', 'bg-hover'),
    ('textHover', 'text-hover'),
    ('borderHover', 'border-hover'),
    ('backgroundActive', 'bg-active'),
    ('textActive', 'text-active'),
    ('borderActive', 'border-active'),
)
CARD_PROPERTIES = (
    ('background', 'bg'),
    ('border', 'border'),
    ('backgroundHover', 'bg-hover'),
    ('borderHover', 'border-hover'),
    ('borderStyle', 'border-style'),
    ('borderWidth', 'border-width'),
)

# Spacing steps generated when no explicit values are given
DEFAULT_SPACING_STEPS = (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 12)

# Exponent of the type scale for each generated font size
FONT_SIZE_EXPONENTS = (
    ('xs', -2), ('sm', -1), ('base', 0), ('lg', 1), ('xl', 2),
    ('2xl', 3), ('3xl', 4), ('4xl', 5), ('5xl', 6), ('6xl', 7),
)


def camel_to_kebab(name: str) -> str:
    """``surfaceSecondary`` -> ``surface-secondary``"""
    return re.sub(r'([a-z0-9])([A-Z])', r'\1-\2', name).lower()


def _natural_key(key: str):
    return [
        (0, int(part), '') if part.isdigit() else (1, 0, part)
        for part in re.split(r'(\d+)', str(key))
        if part
    ]


def _ordered_items(mapping: Mapping[str, Any], known: Sequence[str] = ()) -> List[Tuple[str, Any]]:
    """Known keys in their listed order, then the rest in natural order."""
    ordered = [(key, mapping[key]) for key in known if key in mapping]
    rest = sorted((key for key in mapping if key not in known), key=_natural_key)
    ordered.extend((key, mapping[key]) for key in rest)
    return ordered


def format_number(value: Any) -> str:
    """Integral floats print without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _px(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{format_number(value)}px"
    return str(value)


def _plain(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


def _var(*parts: Any) -> str:
    return "-".join([PREFIX] + [str(part) for part in parts])


class _DeclarationBuilder:
    """Builds resolved declarations for one document tree."""

    def __init__(self, tree: Mapping[str, Any]):
        self.tree = tree
        self.resolver = TokenResolver(tree)

    def resolve(self, value: Any) -> Any:
        return self.resolver.resolve_value(value)

    def colors(self) -> List[Declaration]:
        colors = dict(self.resolver.resolve_mapping(self.tree.get('colors', {})))
        colors.setdefault('primaryHover', colors.get('primary'))
        colors.setdefault('primaryActive', colors.get('primary'))

        declarations = []
        for role, value in _ordered_items(colors, COLOR_ORDER):
            if value is None:
                continue
            declarations.append((_var(camel_to_kebab(role)), _plain(value)))
            if role == 'error':
                declarations.append((_var('danger'), _plain(value)))
        return declarations

    def spacing(self) -> List[Declaration]:
        spacing = self.tree.get('spacing', {})
        values = spacing.get('values')
        if not values:
            base_unit = self.resolve(spacing.get('baseUnit', 4))
            scale = spacing.get('scale') or []
            values = {}
            for step in DEFAULT_SPACING_STEPS:
                scaled = self.resolve(scale[step]) if step < len(scale) else None
                values[str(step)] = scaled if scaled else base_unit * step
        return [
            (_var('spacing', key), _px(self.resolve(value)))
            for key, value in _ordered_items(values)
        ]

    def _font_sizes(self, typography: Mapping[str, Any]) -> Dict[str, Any]:
        sizes = typography.get('sizes')
        if sizes:
            return dict(sizes)
        base = self.resolve(typography.get('baseSize', 16))
        scale = self.resolve(typography.get('scale', 1.25))
        generated: Dict[str, Any] = {}
        for name, exponent in FONT_SIZE_EXPONENTS:
            generated[name] = base if exponent == 0 else round_half_up(base * scale ** exponent)
        return generated

    def typography(self) -> List[Declaration]:
        typography = self.tree.get('typography', {})
        family = self.resolve(typography.get('fontFamily'))
        declarations = [
            (_var('font-family'), _plain(family)),
            (_var('font-family-heading'), _plain(self.resolve(typography.get('fontFamilyHeading') or family))),
        ]
        if typography.get('fontFamilyMono'):
            declarations.append((_var('font-family-mono'), _plain(self.resolve(typography['fontFamilyMono']))))

        for key, value in _ordered_items(self._font_sizes(typography), FONT_SIZE_ORDER):
            declarations.append((_var('font-size', key), _px(self.resolve(value))))

        weights = typography.get('weights', {})
        for key, value in _ordered_items(weights, ('regular', 'medium', 'semibold', 'bold')):
            declarations.append((_var('font-weight', key), _plain(self.resolve(value))))
        if 'regular' in weights:
            declarations.append((_var('font-weight-normal'), _plain(self.resolve(weights['regular']))))

        line_heights = typography.get('lineHeights', {})
        for key, value in _ordered_items(line_heights, ('tight', 'snug', 'normal', 'relaxed')):
            declarations.append((_var('line-height', key), _plain(self.resolve(value))))
        return declarations

    def borders(self) -> List[Declaration]:
        borders = self.tree.get('borders', {})
        entries = [
            ('border-thin', 'thin', _px),
            ('border-width', 'default', _px),
            ('border-thick', 'thick', _px),
            ('radius-subtle', 'radiusSubtle', _px),
            ('radius-base', 'radiusSubtle', _px),
            ('radius-relaxed', 'radiusRelaxed', _px),
            ('radius-medium', 'radiusRelaxed', _px),
            ('radius-pill', 'radiusPill', _px),
            ('radius-liquid', 'radiusLiquid', _px),
            ('border-style', 'defaultStyle', _plain),
        ]
        return [
            (_var(name), render(self.resolve(borders[key])))
            for name, key, render in entries
            if borders.get(key) is not None
        ]

    def _flat_section(self, section: str, name: str, known: Sequence[str], render) -> List[Declaration]:
        values = self.tree.get(section) or {}
        return [
            (_var(name, key), render(self.resolve(value)))
            for key, value in _ordered_items(values, known)
        ]

    def radii(self) -> List[Declaration]:
        return self._flat_section('radii', 'radii', SIZE_ORDER, _px)

    def shadows(self) -> List[Declaration]:
        return self._flat_section('shadows', 'shadow', SIZE_ORDER, _plain)

    def z_index(self) -> List[Declaration]:
        return self._flat_section('zIndex', 'z-index', Z_INDEX_ORDER, _plain)

    def breakpoints(self) -> List[Declaration]:
        return self._flat_section('breakpoints', 'breakpoint', BREAKPOINT_ORDER, _px)

    def _variants(self, variants: Optional[Mapping[str, Any]], component: str,
                  known: Sequence[str], properties: Iterable[Tuple[str, str]]) -> List[Declaration]:
        declarations = []
        properties = tuple(properties)
        for variant, style in _ordered_items(variants or {}, known):
            if not style:
                continue
            for prop, suffix in properties:
                if style.get(prop) is None:
                    continue
                render = _px if suffix == 'border-width' else _plain
                declarations.append((
                    _var(component, camel_to_kebab(variant), suffix),
                    render(self.resolve(style[prop])),
                ))
        return declarations

    def buttons(self) -> List[Declaration]:
        return self._variants(self.tree.get('buttons'), 'button', BUTTON_VARIANT_ORDER, BUTTON_PROPERTIES)

    def cards(self) -> List[Declaration]:
        return self._variants(self.tree.get('cards'), 'card', CARD_VARIANT_ORDER, CARD_PROPERTIES)

    def sections(self) -> List[Tuple[str, List[Declaration]]]:
        return [
            ("Colors", self.colors()),
            ("Spacing", self.spacing()),
            ("Typography", self.typography()),
            ("Borders", self.borders()),
            ("Radii", self.radii()),
            ("Shadows", self.shadows()),
            ("Z-Index", self.z_index()),
            ("Breakpoints", self.breakpoints()),
            ("Buttons", self.buttons()),
            ("Cards", self.cards()),
        ]

    def themed(self) -> List[Declaration]:
        """Declarations dark mode can override."""
        return self.colors() + self.buttons() + self.cards()


def dark_tree(tree: Mapping[str, Any]) -> Dict[str, Any]:
    """Document tree as it looks in dark mode: dark colors and components merged over light."""
    dark = tree.get('darkMode', {})
    merged = dict(tree)
    merged['colors'] = {**tree.get('colors', {}), **dark.get('colors', {})}
    merged['buttons'] = deep_merge_dict(tree.get('buttons') or {}, dark.get('buttons') or {})
    merged['cards'] = deep_merge_dict(tree.get('cards') or {}, dark.get('cards') or {})
    return merged


def _render_declarations(declarations: Iterable[Declaration], indent: str) -> List[str]:
    return [f"{indent}{name}: {value};" for name, value in declarations]


def _comment_safe(text: Any) -> str:
    return str(text).replace("*/", "* /")


def dark_mode_overrides(theme: ThemeDocument) -> List[Declaration]:
    """Declarations whose dark value differs from the light one."""
    tree = theme.to_tree()
    light = dict(_DeclarationBuilder(tree).themed())
    return [
        (name, value)
        for name, value in _DeclarationBuilder(dark_tree(tree)).themed()
        if light.get(name) != value
    ]


def generate_css(theme: ThemeDocument, scope: str = ":root") -> str:
    """Generate CSS custom properties for a theme.

    Args:
        theme: Theme document to serialize
        scope: Selector the variables are declared under

    Returns:
        CSS text ending in a newline

    Raises:
        UnresolvedToken: If a value references a missing token
        CyclicReference: If a value's reference chain loops
    """
    tree = theme.to_tree()
    builder = _DeclarationBuilder(tree)

    lines = [
        "/**",
        f" * {_comment_safe(theme.meta.name)} - Theme Variables",
        " * Generated by themeforge",
        f" * Version: {_comment_safe(theme.meta.version)}",
        " */",
        "",
        f"{scope} {{",
    ]

    blocks = []
    for title, declarations in builder.sections():
        if not declarations:
            continue
        blocks.append([f"  /* === {title} === */"] + _render_declarations(declarations, "  "))
    for index, block in enumerate(blocks):
        if index:
            lines.append("")
        lines.extend(block)
    lines.append("}")

    if theme.dark_mode_enabled:
        overrides = dark_mode_overrides(theme)
        lines.extend([
            "",
            "/* === Dark Mode === */",
            f'{scope}[data-theme="dark"], {scope}.dark {{',
            *_render_declarations(overrides, "  "),
            "}",
            "",
            "@media (prefers-color-scheme: dark) {",
            f'  {scope}:not([data-theme="light"]) {{',
            *_render_declarations(overrides, "    "),
            "  }",
            "}",
        ])

    return "\n".join(lines) + "\n"
