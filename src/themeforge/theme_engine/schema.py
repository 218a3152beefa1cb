"""Theme document schema for the themeforge engine.

This module defines the Pydantic models that validate and structure theme
documents: metadata, color sets, typography, spacing, borders, component
variant styles and the dark-mode override block. Models are frozen;
transformations build new documents with ``model_copy``.

Field names are snake_case in Python and camelCase in the JSON form, which is
also the form token references walk (``"colors.surfaceSecondary"``).
"""

from typing import Dict, Any, Optional, List, Union, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum
import re

from .colors import is_hex_color, normalize_hex
from .resolver import is_token_reference

Number = Union[int, float]

CSS_COLOR_FUNCTION = re.compile(r'^(rgba?|hsla?)\([^()]*\)$', re.IGNORECASE)
SHORT_HEX = re.compile(r'^#?[0-9a-fA-F]{3}$')
COLOR_KEYWORDS = {'transparent', 'currentcolor', 'inherit'}

REQUIRED_COLOR_ROLES = (
    'primary',
    'surface',
    'surfaceSecondary',
    'surfaceHover',
    'text',
    'textSecondary',
    'textMuted',
    'border',
    'borderStrong',
    'borderSubtle',
)


def normalize_color_value(value: Any) -> str:
    """Normalize a single color value.

    Hex literals become ``#rrggbb`` lower-case. Token references, CSS color
    functions and color keywords are returned unchanged.

    Raises:
        ValueError: If value is not an acceptable color value
    """
    if not isinstance(value, str):
        raise ValueError(f"Color value must be a string, got {type(value).__name__}")
    text = value.strip()
    if is_hex_color(text):
        return normalize_hex(text)
    if SHORT_HEX.match(text):
        raise ValueError(f"3-digit hex colors are not supported: {value!r}")
    if CSS_COLOR_FUNCTION.match(text) or text.lower() in COLOR_KEYWORDS:
        return text
    if is_token_reference(text):
        return text
    raise ValueError(f"Invalid color value: {value!r}")


def _normalize_color_mapping(data: Any) -> Any:
    if isinstance(data, dict):
        return {
            key: normalize_color_value(value)
            for key, value in data.items()
            if value is not None
        }
    return data


class BorderStyle(str, Enum):
    """CSS border style options"""
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


class ThemeModel(BaseModel):
    """Base for all theme models: frozen, alias-aware."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ThemeMeta(ThemeModel):
    """Theme metadata"""
    name: str = Field(..., description="Theme name")
    version: str = Field(..., description="Theme version")
    description: Optional[str] = Field(None, description="Theme description")
    author: Optional[str] = Field(None, description="Theme author")
    tags: List[str] = Field(default_factory=list, description="Search tags")

    @field_validator('version', mode='before')
    @classmethod
    def coerce_version(cls, v):
        """Accept numeric versions from YAML (e.g. ``1.0``)"""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ColorSet(ThemeModel):
    """Semantic color roles for a theme.

    Custom roles beyond the named ones are accepted and kept.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='allow')

    # Brand
    primary: str = Field(..., description="Primary brand color")
    primary_hover: Optional[str] = Field(None, alias="primaryHover")
    primary_active: Optional[str] = Field(None, alias="primaryActive")
    primary_light: Optional[str] = Field(None, alias="primaryLight")
    secondary: Optional[str] = Field(None, description="Secondary brand color")
    secondary_hover: Optional[str] = Field(None, alias="secondaryHover")
    secondary_active: Optional[str] = Field(None, alias="secondaryActive")

    # Surfaces
    surface: str = Field(..., description="Main background color")
    surface_secondary: str = Field(..., alias="surfaceSecondary", description="Secondary surface")
    surface_hover: str = Field(..., alias="surfaceHover", description="Hovered surface")

    # Text
    text: str = Field(..., description="Primary text color")
    text_secondary: str = Field(..., alias="textSecondary")
    text_muted: str = Field(..., alias="textMuted")
    text_tertiary: Optional[str] = Field(None, alias="textTertiary")
    text_inverted: Optional[str] = Field(None, alias="textInverted")

    # Borders
    border: str = Field(..., description="Default border color")
    border_strong: str = Field(..., alias="borderStrong")
    border_subtle: str = Field(..., alias="borderSubtle")

    # Semantic status
    success: Optional[str] = None
    warning: Optional[str] = None
    error: Optional[str] = None
    info: Optional[str] = None

    # Accent and links
    accent: Optional[str] = None
    accent_hover: Optional[str] = Field(None, alias="accentHover")
    accent_active: Optional[str] = Field(None, alias="accentActive")
    link: Optional[str] = None
    link_hover: Optional[str] = Field(None, alias="linkHover")
    link_active: Optional[str] = Field(None, alias="linkActive")

    # Interaction, overlays, neutrals
    focus: Optional[str] = None
    hover: Optional[str] = None
    overlay: Optional[str] = None
    backdrop: Optional[str] = None
    neutral: Optional[str] = None
    neutral_hover: Optional[str] = Field(None, alias="neutralHover")
    neutral_active: Optional[str] = Field(None, alias="neutralActive")

    @model_validator(mode='before')
    @classmethod
    def normalize_colors(cls, data):
        """Normalize hex literals and reject malformed color values"""
        return _normalize_color_mapping(data)

    def as_dict(self) -> Dict[str, str]:
        """Role name (camelCase) to color value, absent roles omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def get(self, role: str, default: Optional[str] = None) -> Optional[str]:
        return self.as_dict().get(role, default)


class FontWeights(ThemeModel):
    """Font weight scale"""
    regular: Number = 400
    medium: Number = 500
    semibold: Number = 600
    bold: Number = 700


class LineHeights(ThemeModel):
    """Line height scale"""
    tight: Number = 1.2
    snug: Number = 1.375
    normal: Number = 1.5
    relaxed: Number = 1.75


class Typography(ThemeModel):
    """Typography configuration"""
    font_family: str = Field(..., alias="fontFamily", description="Body font stack")
    font_family_heading: Optional[str] = Field(None, alias="fontFamilyHeading")
    font_family_mono: Optional[str] = Field(None, alias="fontFamilyMono")
    base_size: Number = Field(16, alias="baseSize", description="Base font size in px")
    scale: Number = Field(1.25, description="Modular type scale ratio")
    sizes: Optional[Dict[str, Number]] = Field(None, description="Explicit font sizes in px")
    weights: FontWeights = Field(default_factory=FontWeights)
    line_heights: LineHeights = Field(default_factory=LineHeights, alias="lineHeights")


class Spacing(ThemeModel):
    """Spacing configuration"""
    base_unit: Number = Field(4, alias="baseUnit", description="Base spacing unit in px")
    scale: Optional[List[Number]] = Field(None, description="Spacing scale in px, indexed by step")
    values: Optional[Dict[str, Number]] = Field(None, description="Explicit spacing values in px")

    @field_validator('values', mode='before')
    @classmethod
    def stringify_keys(cls, v):
        """Spacing steps may arrive as ints from YAML"""
        if isinstance(v, dict):
            return {str(key): value for key, value in v.items()}
        return v


class Borders(ThemeModel):
    """Border widths, radii and style"""
    thin: Number = 1
    default_width: Number = Field(..., alias="default", description="Default border width in px")
    thick: Number = 4
    radius_subtle: Number = Field(8, alias="radiusSubtle")
    radius_relaxed: Number = Field(12, alias="radiusRelaxed")
    radius_pill: Number = Field(9999, alias="radiusPill")
    radius_liquid: Optional[Number] = Field(None, alias="radiusLiquid")
    default_style: BorderStyle = Field(BorderStyle.SOLID, alias="defaultStyle")


class ButtonVariantStyle(ThemeModel):
    """Per-variant button colors; values may be token references"""
    background: Optional[str] = None
    text: Optional[str] = None
    border: Optional[str] = None
    background_hover: Optional[str] = Field(None, alias="backgroundHover")
    text_hover: Optional[str] = Field(None, alias="textHover")
    border_hover: Optional[str] = Field(None, alias="borderHover")
    background_active: Optional[str] = Field(None, alias="backgroundActive")
    text_active: Optional[str] = Field(None, alias="textActive")
    border_active: Optional[str] = Field(None, alias="borderActive")


class CardVariantStyle(ThemeModel):
    """Per-variant card styling; values may be token references"""
    background: Optional[str] = None
    border: Optional[str] = None
    background_hover: Optional[str] = Field(None, alias="backgroundHover")
    border_hover: Optional[str] = Field(None, alias="borderHover")
    border_style: Optional[BorderStyle] = Field(None, alias="borderStyle")
    border_width: Optional[str] = Field(None, alias="borderWidth")

    @field_validator('border_width', mode='before')
    @classmethod
    def coerce_border_width(cls, v):
        """Allow bare numbers, emitted as px"""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return f"{v}px"
        return v


class DarkModeBlock(ThemeModel):
    """Dark-mode overrides applied on top of the light document"""
    enabled: bool = False
    colors: Dict[str, str] = Field(default_factory=dict)
    buttons: Dict[str, ButtonVariantStyle] = Field(default_factory=dict)
    cards: Dict[str, CardVariantStyle] = Field(default_factory=dict)

    @field_validator('colors', mode='before')
    @classmethod
    def normalize_colors(cls, v):
        """Same normalization as the light color set"""
        if v is None:
            return {}
        return _normalize_color_mapping(v)


class ThemeDocument(ThemeModel):
    """A complete theme document"""
    meta: ThemeMeta
    colors: ColorSet
    typography: Typography
    spacing: Spacing
    borders: Borders
    radii: Optional[Dict[str, Union[Number, str]]] = None
    shadows: Optional[Dict[str, str]] = None
    z_index: Optional[Dict[str, Number]] = Field(None, alias="zIndex")
    buttons: Optional[Dict[str, ButtonVariantStyle]] = None
    cards: Optional[Dict[str, CardVariantStyle]] = None
    breakpoints: Optional[Dict[str, Number]] = None
    dark_mode: Optional[DarkModeBlock] = Field(None, alias="darkMode")

    def to_tree(self) -> Dict[str, Any]:
        """Plain JSON-shaped tree with camelCase keys, absent fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode='json')

    @property
    def dark_mode_enabled(self) -> bool:
        return self.dark_mode is not None and self.dark_mode.enabled

