"""Theme registry for managing built-in presets and user themes.

This module provides the ThemeRegistry class for discovering, loading, and
caching theme documents. Presets ship with the package as YAML; user themes
live in ``<data_dir>/themes`` as YAML or JSON. Every file passes through the
sanitizer, and a theme may ``extends`` another one by name.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import CyclicReference, InvalidInput, InvalidJSON, ThemeError, ThemeNotFound
from .sanitize import SanitizationOptions, sanitize_theme
from .schema import ThemeDocument
from .utils import deep_merge_dict
from .validation import validate_theme

logger = logging.getLogger(__name__)

THEME_SUFFIXES = ('.yaml', '.yml', '.json')

# Base meta fields a child theme never inherits
IDENTITY_FIELDS = ('name', 'description', 'author', 'tags')

# User theme names become file names inside the themes directory
USER_THEME_NAME = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_.-]*$')


def theme_slug(name: str) -> str:
    """File-name friendly form of a theme name."""
    return re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-') or 'theme'


def check_user_theme_name(name: str) -> str:
    """Return name if it is safe to use as a user theme file name.

    Raises:
        InvalidInput: If the name is empty, hidden or contains a path separator
    """
    if not isinstance(name, str) or not USER_THEME_NAME.fullmatch(name):
        raise InvalidInput(f"Invalid theme name {name!r}: use letters, digits, '.', '_' or '-'")
    return name


class ThemeRegistry:
    """Registry for built-in presets and user themes."""

    def __init__(self, data_dir: Optional[Path] = None,
                 sanitization_options: Optional[SanitizationOptions] = None):
        """Initialize the theme registry.

        Args:
            data_dir: Directory holding the ``themes`` folder; ``~/.themeforge`` by default
            sanitization_options: Options for sanitizing theme files
        """
        self.package_dir = Path(__file__).parent.parent
        self.builtin_themes_dir = self.package_dir / "presets"

        if data_dir:
            self.user_themes_dir = Path(data_dir).expanduser() / "themes"
        else:
            self.user_themes_dir = Path.home() / ".themeforge" / "themes"

        self.sanitization_options = sanitization_options or SanitizationOptions()

        self._theme_cache: Dict[str, ThemeDocument] = {}
        self._builtin_themes: Dict[str, Path] = {}
        self._user_themes: Dict[str, Path] = {}

        self._scan_builtin_themes()
        self._scan_user_themes()

    def _scan_builtin_themes(self) -> None:
        """Scan for built-in preset files."""
        self._builtin_themes.clear()

        if not self.builtin_themes_dir.exists():
            logger.warning(f"Built-in themes directory not found: {self.builtin_themes_dir}")
            return

        for theme_file in sorted(self.builtin_themes_dir.glob("*.yaml")):
            self._builtin_themes[theme_file.stem] = theme_file
            logger.debug(f"Found built-in theme: {theme_file.stem}")

    def _scan_user_themes(self) -> None:
        """Scan for user theme files; YAML wins over JSON for the same name."""
        self._user_themes.clear()

        if not self.user_themes_dir.exists():
            return

        for suffix in reversed(THEME_SUFFIXES):
            for theme_file in sorted(self.user_themes_dir.glob(f"*{suffix}")):
                self._user_themes[theme_file.stem] = theme_file
        for name in sorted(self._user_themes):
            logger.debug(f"Found user theme: {name}")

    def _theme_type(self, theme_name: str) -> str:
        return 'user' if theme_name in self._user_themes else 'builtin'

    def list_available_themes(self) -> List[Dict[str, Any]]:
        """List all available themes with metadata.

        A user theme with the same name as a preset shadows it.

        Returns:
            List of theme info dictionaries sorted by name
        """
        themes = []

        for theme_name in sorted(set(self._builtin_themes) | set(self._user_themes)):
            theme_type = self._theme_type(theme_name)
            try:
                theme = self.load_theme_definition(theme_name)
            except ThemeError as e:
                logger.error(f"Error loading theme {theme_name}: {e}")
                themes.append({
                    'name': theme_name,
                    'display_name': theme_name,
                    'description': f"Error loading theme: {e}",
                    'type': theme_type,
                    'error': True,
                })
                continue

            themes.append({
                'name': theme_name,
                'display_name': theme.meta.name,
                'description': theme.meta.description,
                'author': theme.meta.author,
                'version': theme.meta.version,
                'type': theme_type,
                'dark_mode': theme.dark_mode_enabled,
            })

        return themes

    def theme_exists(self, theme_name: str) -> bool:
        """Check if a theme exists."""
        return theme_name in self._builtin_themes or theme_name in self._user_themes

    def get_default_theme_name(self) -> str:
        """Name of the default preset, or the first available theme."""
        if 'default' in self._builtin_themes:
            return 'default'
        if self._builtin_themes:
            return sorted(self._builtin_themes)[0]
        return 'default'

    def load_theme_definition(self, theme_name: str) -> ThemeDocument:
        """Load a theme by name.

        Args:
            theme_name: Name of the preset or user theme

        Returns:
            Sanitized ThemeDocument with inheritance applied

        Raises:
            ThemeNotFound: If no theme has that name
            CyclicReference: If the ``extends`` chain loops
            SanitizationError: If the theme file is malformed
        """
        if theme_name in self._theme_cache:
            return self._theme_cache[theme_name]

        data = self._load_raw(theme_name, [])
        theme = sanitize_theme(data, self.sanitization_options)

        self._theme_cache[theme_name] = theme
        return theme

    def load_theme_file(self, file_path: Path) -> ThemeDocument:
        """Load a theme from an arbitrary YAML or JSON file.

        ``extends`` in the file refers to themes known to this registry.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ThemeNotFound(str(file_path))

        data = self._read_file(file_path)
        data = self._resolve_inheritance(data, file_path.stem, [f"{file_path}"])
        return sanitize_theme(data, self.sanitization_options)

    def _theme_path(self, theme_name: str) -> Path:
        if theme_name in self._user_themes:
            return self._user_themes[theme_name]
        if theme_name in self._builtin_themes:
            return self._builtin_themes[theme_name]
        raise ThemeNotFound(theme_name)

    def _load_raw(self, theme_name: str, chain: List[str]) -> Dict[str, Any]:
        """Raw theme data with the ``extends`` chain merged in."""
        if theme_name in chain:
            raise CyclicReference(chain + [theme_name])

        data = self._read_file(self._theme_path(theme_name))
        return self._resolve_inheritance(data, theme_name, chain + [theme_name])

    def _resolve_inheritance(self, data: Dict[str, Any], theme_name: str,
                             chain: List[str]) -> Dict[str, Any]:
        base_name = data.pop('extends', None)
        if base_name:
            if not isinstance(base_name, str):
                raise InvalidInput(f"'extends' must be a theme name, got {base_name!r}")
            base_data = self._load_raw(base_name, chain)

            # Child keeps its own identity
            base_meta = dict(base_data.get('meta') or {})
            for key in IDENTITY_FIELDS:
                base_meta.pop(key, None)
            base_data['meta'] = base_meta

            data = deep_merge_dict(base_data, data)
            logger.debug(f"Theme {theme_name} extends {base_name}")

        meta = data.get('meta')
        if isinstance(meta, dict) and not meta.get('name'):
            data['meta'] = {**meta, 'name': theme_name.replace('_', ' ').replace('-', ' ').title()}

        return data

    def _read_file(self, file_path: Path) -> Dict[str, Any]:
        if file_path.suffix.lower() == '.json':
            data = self._load_json_file(file_path)
        else:
            data = self._load_yaml_file(file_path)
        if not isinstance(data, dict):
            raise InvalidInput(f"Theme file {file_path} must contain an object")
        return data

    def _load_yaml_file(self, file_path: Path) -> Any:
        """Load YAML file safely."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidInput(f"Invalid YAML in {file_path}: {e}") from e
        except OSError as e:
            raise InvalidInput(f"Error reading {file_path}: {e}") from e

    def _load_json_file(self, file_path: Path) -> Any:
        """Load JSON file safely."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidJSON(f"Invalid JSON in {file_path}: {e}") from e
        except OSError as e:
            raise InvalidInput(f"Error reading {file_path}: {e}") from e

    def save_user_theme(self, theme: ThemeDocument, name: Optional[str] = None,
                        overwrite: bool = False) -> Path:
        """Save a theme as a user theme YAML file.

        Args:
            theme: Theme document to save
            name: File name without suffix; derived from ``meta.name`` when omitted
            overwrite: Whether to overwrite an existing user theme

        Returns:
            Path of the written file

        Raises:
            FileExistsError: If the theme exists and overwrite is False
            InvalidInput: If the name could point outside the themes directory
        """
        theme_name = check_user_theme_name(name or theme_slug(theme.meta.name))
        theme_path = self.user_themes_dir / f"{theme_name}.yaml"

        if theme_name in self._user_themes and not overwrite:
            raise FileExistsError(f"Theme '{theme_name}' already exists")

        self.user_themes_dir.mkdir(parents=True, exist_ok=True)
        with open(theme_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(theme.to_tree(), f, default_flow_style=False,
                           sort_keys=False, allow_unicode=True, indent=2)

        # Replace a .json or .yml file of the same name
        stale = self._user_themes.get(theme_name)
        if stale is not None and stale != theme_path and stale.exists():
            stale.unlink()

        self._user_themes[theme_name] = theme_path
        self._theme_cache.clear()

        logger.info(f"Saved user theme: {theme_name}")
        return theme_path

    def delete_user_theme(self, theme_name: str) -> bool:
        """Delete a user theme.

        Returns:
            True if theme was deleted, False if not found

        Raises:
            InvalidInput: If the name could point outside the themes directory
        """
        check_user_theme_name(theme_name)
        deleted = False

        for suffix in THEME_SUFFIXES:
            path = self.user_themes_dir / f"{theme_name}{suffix}"
            if path.exists():
                path.unlink()
                deleted = True

        if deleted:
            self._user_themes.pop(theme_name, None)
            self._theme_cache.clear()
            logger.info(f"Deleted user theme: {theme_name}")

        return deleted

    def get_theme_info(self, theme_name: str) -> Dict[str, Any]:
        """Get detailed information about a theme.

        Load failures are reported in the ``error`` key instead of raised.
        """
        theme_type = self._theme_type(theme_name)
        try:
            theme = self.load_theme_definition(theme_name)
        except ThemeError as e:
            return {'name': theme_name, 'error': str(e), 'type': theme_type}

        result = validate_theme(theme)
        return {
            'name': theme_name,
            'display_name': theme.meta.name,
            'description': theme.meta.description,
            'version': theme.meta.version,
            'author': theme.meta.author,
            'tags': list(theme.meta.tags),
            'type': theme_type,
            'path': str(self._theme_path(theme_name)),
            'dark_mode': theme.dark_mode_enabled,
            'colors': theme.colors.as_dict(),
            'validation_issues': [str(issue) for issue in result.errors],
        }

    def clear_cache(self) -> None:
        """Clear the theme cache and rescan."""
        self._theme_cache.clear()
        self._scan_builtin_themes()
        self._scan_user_themes()
