"""themeforge theme engine package.

This package turns declarative theme documents into CSS custom properties.
It covers color conversion and manipulation, WCAG contrast checks, token
reference resolution, dark-mode synthesis, color blindness simulation,
design-token export, sanitization of untrusted input and a registry of
preset and user themes.
"""

from .colors import (
    HSL,
    RGB,
    hex_to_hsl,
    hex_to_rgb,
    hsl_to_hex,
    hsl_to_rgb,
    is_hex_color,
    normalize_hex,
    rgb_to_hex,
    rgb_to_hsl,
)
from .colorblindness import (
    ColorBlindness,
    ColorBlindnessReport,
    all_simulations,
    check_color_blindness,
    check_theme_color_blindness,
    simulate_color_blindness,
    simulate_theme,
)
from .contrast import (
    AA_TEXT,
    AAA_TEXT,
    UI_MINIMUM,
    ContrastLevel,
    ContrastResult,
    check_contrast,
    contrast_ratio,
    meets_minimum_contrast,
    relative_luminance,
)
from .contrast_fix import (
    ContrastFix,
    find_contrast_fix,
    fix_contrast,
    fix_theme_contrast,
    preview_contrast_fixes,
)
from .css import dark_mode_overrides, generate_css
from .dark_mode import (
    DarkModeIntensity,
    DarkModeOptions,
    DarkModePreview,
    DarkModeSynthesis,
    DarkModeValidation,
    generate_dark_mode,
    generate_dark_mode_colors,
    get_suggested_options,
    preview_dark_mode,
    synthesize_dark_colors,
    validate_dark_mode,
)
from .engine import ThemeEngine
from .exporters import export_json, export_theme, export_w3c
from .errors import (
    ColorError,
    ColorOutOfRange,
    CyclicReference,
    InvalidColorFormat,
    InvalidField,
    InvalidInput,
    InvalidJSON,
    InvalidSection,
    MissingSection,
    NonFiniteNumber,
    SanitizationError,
    ThemeError,
    ThemeNotFound,
    TokenError,
    UnresolvedToken,
)
from .manipulation import (
    adjust_hue,
    adjust_lightness,
    adjust_saturation,
    complementary,
    darken,
    desaturate,
    generate_palette,
    grayscale,
    invert,
    lighten,
    mix,
    saturate,
)
from .registry import ThemeRegistry
from .resolver import (
    TokenResolver,
    find_token_for_value,
    is_token_reference,
    resolve_token,
    resolve_value,
)
from .sanitize import (
    SanitizationOptions,
    SanitizeResult,
    sanitize_and_validate,
    sanitize_theme,
    sanitize_theme_from_json,
)
from .schema import ColorSet, ThemeDocument, ThemeMeta
from .validation import ValidationIssue, ValidationResult, validate_theme

__all__ = [
    # Main classes
    "ThemeEngine",
    "ThemeRegistry",
    "TokenResolver",

    # Schema models
    "ThemeDocument",
    "ThemeMeta",
    "ColorSet",

    # Colors
    "RGB",
    "HSL",
    "hex_to_rgb",
    "rgb_to_hex",
    "rgb_to_hsl",
    "hsl_to_rgb",
    "hex_to_hsl",
    "hsl_to_hex",
    "is_hex_color",
    "normalize_hex",
    "adjust_lightness",
    "adjust_saturation",
    "adjust_hue",
    "lighten",
    "darken",
    "saturate",
    "desaturate",
    "grayscale",
    "invert",
    "mix",
    "complementary",
    "generate_palette",

    # Contrast
    "AA_TEXT",
    "AAA_TEXT",
    "UI_MINIMUM",
    "ContrastLevel",
    "ContrastResult",
    "relative_luminance",
    "contrast_ratio",
    "check_contrast",
    "meets_minimum_contrast",
    "ContrastFix",
    "find_contrast_fix",
    "fix_contrast",
    "fix_theme_contrast",
    "preview_contrast_fixes",

    # Color blindness
    "ColorBlindness",
    "ColorBlindnessReport",
    "simulate_color_blindness",
    "all_simulations",
    "simulate_theme",
    "check_color_blindness",
    "check_theme_color_blindness",

    # Tokens
    "is_token_reference",
    "resolve_token",
    "resolve_value",
    "find_token_for_value",

    # Dark mode
    "DarkModeIntensity",
    "DarkModeOptions",
    "DarkModePreview",
    "DarkModeSynthesis",
    "DarkModeValidation",
    "synthesize_dark_colors",
    "generate_dark_mode_colors",
    "generate_dark_mode",
    "preview_dark_mode",
    "get_suggested_options",
    "validate_dark_mode",

    # CSS
    "generate_css",
    "dark_mode_overrides",

    # Token export
    "export_json",
    "export_w3c",
    "export_theme",

    # Sanitization and validation
    "SanitizationOptions",
    "SanitizeResult",
    "sanitize_theme",
    "sanitize_theme_from_json",
    "sanitize_and_validate",
    "ValidationIssue",
    "ValidationResult",
    "validate_theme",

    # Errors
    "ThemeError",
    "ColorError",
    "InvalidColorFormat",
    "ColorOutOfRange",
    "TokenError",
    "UnresolvedToken",
    "CyclicReference",
    "ThemeNotFound",
    "SanitizationError",
    "InvalidInput",
    "MissingSection",
    "InvalidSection",
    "InvalidField",
    "NonFiniteNumber",
    "InvalidJSON",
]
