"""Theme engine facade.

ThemeEngine ties the registry, sanitizer, dark-mode synthesizer and CSS
generator together behind one object configured from ``EngineConfig``.
Generated CSS is memoized by a content digest of the theme document.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .css import dark_tree, generate_css
from .dark_mode import (
    DarkModeOptions,
    DarkModePreview,
    generate_dark_mode,
    preview_dark_mode,
    validate_dark_mode,
)
from .errors import ThemeError
from .registry import ThemeRegistry
from .resolver import TokenResolver
from .sanitize import sanitize_theme_from_json
from .schema import ThemeDocument
from .utils import content_digest
from .validation import Severity, validate_theme

if TYPE_CHECKING:
    from ..config import EngineConfig

logger = logging.getLogger(__name__)

THEME_FILE_SUFFIXES = ('.yaml', '.yml', '.json')


class ThemeEngine:
    """Load, transform and render themes."""

    def __init__(self, config: Optional["EngineConfig"] = None):
        """Initialize the engine.

        Args:
            config: Engine configuration; defaults when omitted
        """
        if config is None:
            from ..config import EngineConfig
            config = EngineConfig()

        self.config = config
        self.registry = ThemeRegistry(
            config.data_dir,
            sanitization_options=config.sanitization_options(),
        )
        self._css_cache: Dict[str, str] = {}

    @classmethod
    def from_config(cls, config: Optional["EngineConfig"] = None) -> "ThemeEngine":
        """Build an engine from the given or the globally loaded configuration."""
        if config is None:
            from ..config import get_config
            config = get_config()
        return cls(config)

    # Loading

    def load_theme(self, name_or_path: Union[str, Path]) -> ThemeDocument:
        """Load a theme by registry name or from a YAML/JSON file path.

        Raises:
            ThemeNotFound: If neither a theme nor a file matches
            SanitizationError: If the theme is malformed
        """
        path = Path(name_or_path)
        looks_like_file = path.suffix.lower() in THEME_FILE_SUFFIXES or len(path.parts) > 1
        if looks_like_file and not self.registry.theme_exists(str(name_or_path)):
            logger.debug(f"Loading theme from file: {path}")
            return self.registry.load_theme_file(path)
        return self.registry.load_theme_definition(str(name_or_path))

    def import_theme(self, json_text: str) -> ThemeDocument:
        """Sanitize a theme from untrusted JSON text."""
        return sanitize_theme_from_json(json_text, self.config.sanitization_options())

    def list_themes(self) -> List[Dict[str, Any]]:
        return self.registry.list_available_themes()

    def theme_exists(self, theme_name: str) -> bool:
        return self.registry.theme_exists(theme_name)

    def get_theme_info(self, theme_name: str) -> Dict[str, Any]:
        return self.registry.get_theme_info(theme_name)

    # Rendering

    def generate_css(self, theme: ThemeDocument, scope: Optional[str] = None) -> str:
        """Render CSS custom properties, memoized per document and scope."""
        scope = scope or self.config.css_scope
        key = content_digest(theme.to_tree(), scope)

        if key in self._css_cache:
            logger.debug(f"CSS cache hit for {theme.meta.name} ({key[:12]})")
            return self._css_cache[key]

        css = generate_css(theme, scope)
        self._css_cache[key] = css
        logger.debug(f"Generated CSS for {theme.meta.name} ({len(css)} bytes)")
        return css

    # Dark mode

    def dark_mode_options(self, **overrides) -> DarkModeOptions:
        """Dark-mode options from config defaults; None overrides are ignored."""
        return self.config.dark_mode_options(**overrides)

    def generate_dark_mode(self, theme: ThemeDocument,
                           options: Optional[DarkModeOptions] = None) -> ThemeDocument:
        return generate_dark_mode(theme, options or self.dark_mode_options())

    def preview_dark_mode(self, theme: ThemeDocument,
                          options: Optional[DarkModeOptions] = None) -> DarkModePreview:
        return preview_dark_mode(theme, options or self.dark_mode_options())

    # Validation

    def validate(self, theme: ThemeDocument) -> List[str]:
        """Validation findings, with dark-mode contrast issues when enabled.

        Returns:
            Human-readable findings; warnings are prefixed with ``warning:``
        """
        findings: List[str] = []

        result = validate_theme(theme)
        for issue in result.errors:
            prefix = "warning: " if issue.severity == Severity.WARNING else ""
            findings.append(f"{prefix}{issue}")

        if theme.dark_mode_enabled and result.valid:
            # Same merged tree the dark CSS block is rendered from
            tree = dark_tree(theme.to_tree())
            try:
                dark = TokenResolver(tree).resolve_mapping(tree['colors'])
                audit = validate_dark_mode(dark)
            except ThemeError as e:
                findings.append(f"darkMode: {e}")
            else:
                findings.extend(f"darkMode: {issue}" for issue in audit.issues)
                findings.extend(f"warning: darkMode: {warning}" for warning in audit.warnings)

        return findings

    def clear_cache(self) -> None:
        """Drop memoized CSS and rescan themes."""
        self._css_cache.clear()
        self.registry.clear_cache()

    @property
    def cache_size(self) -> int:
        return len(self._css_cache)
