"""Sanitization of untrusted theme input.

Theme documents imported from JSON, pasted configuration or user theme files
pass through here before anything else touches them. The sanitizer rebuilds
the input as plain dicts and lists, drops prototype-pollution keys, trims and
caps strings, coerces numeric fields and finally validates the result against
the ThemeDocument schema.

``sanitize_theme`` raises on the first problem. ``sanitize_and_validate``
collects every problem and never raises.
"""

import json
import logging
import math
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import (
    InvalidField,
    InvalidInput,
    InvalidJSON,
    InvalidSection,
    MissingSection,
    NonFiniteNumber,
    SanitizationError,
    ThemeError,
)
from .schema import ThemeDocument
from .validation import Severity, validate_theme

logger = logging.getLogger(__name__)

DANGEROUS_KEYS = frozenset({'__proto__', 'constructor', 'prototype'})

REQUIRED_SECTIONS = ('meta', 'colors', 'typography', 'spacing', 'borders')
OPTIONAL_SECTIONS = ('radii', 'shadows', 'zIndex', 'buttons', 'cards', 'breakpoints', 'darkMode')

# Paths holding numbers; '*' matches any key or list index
NUMERIC_FIELDS: Tuple[Tuple[str, ...], ...] = (
    ('typography', 'baseSize'),
    ('typography', 'scale'),
    ('typography', 'sizes', '*'),
    ('typography', 'weights', '*'),
    ('typography', 'lineHeights', '*'),
    ('spacing', 'baseUnit'),
    ('spacing', 'scale', '*'),
    ('spacing', 'values', '*'),
    ('borders', 'thin'),
    ('borders', 'default'),
    ('borders', 'thick'),
    ('borders', 'radiusSubtle'),
    ('borders', 'radiusRelaxed'),
    ('borders', 'radiusPill'),
    ('borders', 'radiusLiquid'),
    ('zIndex', '*'),
    ('breakpoints', '*'),
)

DESCRIPTION_PATH = ('meta', 'description')
DESCRIPTION_LENGTH_FACTOR = 5

# Numeric strings as JSON writes them; no underscores, hex or padding words
INTEGER_PATTERN = re.compile(r'^[+-]?\d+$', re.ASCII)
DECIMAL_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$', re.ASCII)
NON_FINITE_PATTERN = re.compile(r'^[+-]?(inf|infinity|nan)$', re.IGNORECASE)

_SKIP = object()

Path = Tuple[str, ...]


class SanitizationOptions(BaseModel):
    """Options controlling how untrusted input is cleaned"""

    model_config = ConfigDict(frozen=True)

    trim_strings: bool = True
    parse_numbers: bool = True
    remove_nullish: bool = True
    max_string_length: int = Field(1000, ge=1)
    max_depth: int = Field(10, ge=1)


class SanitizeResult(BaseModel):
    """Outcome of ``sanitize_and_validate``"""

    model_config = ConfigDict(frozen=True)

    success: bool
    theme: Optional[ThemeDocument] = None
    errors: List[str] = Field(default_factory=list)


def _dotted(path: Iterable[Any]) -> str:
    return '.'.join(str(part) for part in path)


def _type_name(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, (list, tuple)):
        return 'array'
    if isinstance(value, Mapping):
        return 'object'
    return type(value).__name__


class _Sanitizer:
    """One sanitization run; raises or collects depending on ``collect``."""

    def __init__(self, options: Optional[SanitizationOptions] = None, collect: bool = False):
        self.options = options or SanitizationOptions()
        self.collect = collect
        self.errors: List[SanitizationError] = []

    def _fail(self, error: SanitizationError):
        if not self.collect:
            raise error
        self.errors.append(error)
        return _SKIP

    # Structure

    def clone(self, value: Any, path: Path = (), depth: int = 0) -> Any:
        """Rebuild value from plain dicts, lists and scalars."""
        if isinstance(value, Mapping):
            if depth >= self.options.max_depth:
                return self._fail(InvalidField(
                    f"Nesting exceeds maximum depth of {self.options.max_depth}", _dotted(path)))
            result = {}
            for key, item in value.items():
                if isinstance(key, int) and not isinstance(key, bool):
                    key = str(key)
                if not isinstance(key, str):
                    self._fail(InvalidField(f"Object keys must be strings, got {_type_name(key)}", _dotted(path)))
                    continue
                if key in DANGEROUS_KEYS or key.startswith('__'):
                    logger.debug(f"Dropping unsafe key '{key}' at '{_dotted(path)}'")
                    continue
                cloned = self.clone(item, path + (key,), depth + 1)
                if cloned is not _SKIP:
                    result[key] = cloned
            return result

        if isinstance(value, (list, tuple)):
            if depth >= self.options.max_depth:
                return self._fail(InvalidField(
                    f"Nesting exceeds maximum depth of {self.options.max_depth}", _dotted(path)))
            items = []
            for index, item in enumerate(value):
                cloned = self.clone(item, path + (str(index),), depth + 1)
                if cloned is not _SKIP:
                    items.append(cloned)
            return items

        if value is None:
            return _SKIP if self.options.remove_nullish else None

        if isinstance(value, bool) or isinstance(value, int):
            return value

        if isinstance(value, float):
            if not math.isfinite(value):
                return self._fail(NonFiniteNumber(f"Number must be finite, got {value}", _dotted(path)))
            return value

        if isinstance(value, str):
            return self._string(value, path)

        return self._fail(InvalidField(f"Unsupported value of type {_type_name(value)}", _dotted(path)))

    def _string(self, value: str, path: Path) -> str:
        if self.options.trim_strings:
            value = value.strip()
        limit = self.options.max_string_length
        if path == DESCRIPTION_PATH:
            limit *= DESCRIPTION_LENGTH_FACTOR
        if len(value) > limit:
            logger.debug(f"Truncating '{_dotted(path)}' to {limit} characters")
            value = value[:limit]
        return value

    # Numbers

    def _number(self, value: Any, path: Path) -> Any:
        if isinstance(value, bool):
            return self._fail(InvalidField("Expected a number, got boolean", _dotted(path)))
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            if not self.options.parse_numbers:
                return self._fail(InvalidField("Expected a number, got string", _dotted(path)))
            text = value.strip()
            if INTEGER_PATTERN.match(text):
                return int(text)
            if DECIMAL_PATTERN.match(text):
                parsed = float(text)
            elif NON_FINITE_PATTERN.match(text):
                parsed = math.inf
            else:
                return self._fail(InvalidField(f"Cannot parse {value!r} as a number", _dotted(path)))
            if not math.isfinite(parsed):
                return self._fail(NonFiniteNumber(f"Number must be finite, got {value!r}", _dotted(path)))
            return parsed
        return self._fail(InvalidField(f"Expected a number, got {_type_name(value)}", _dotted(path)))

    def _coerce(self, node: Any, pattern: Sequence[str], path: Path) -> None:
        head, rest = pattern[0], pattern[1:]
        if isinstance(node, dict):
            keys: List[Union[str, int]] = list(node) if head == '*' else ([head] if head in node else [])
        elif isinstance(node, list) and head == '*':
            keys = list(range(len(node)))
        else:
            return

        for key in keys:
            child_path = path + (str(key),)
            if rest:
                self._coerce(node[key], rest, child_path)
                continue
            coerced = self._number(node[key], child_path)
            if coerced is not _SKIP:
                node[key] = coerced

    # Entry point

    def run(self, value: Any) -> Optional[ThemeDocument]:
        if not isinstance(value, Mapping):
            self._fail(InvalidInput(f"Theme must be an object, got {_type_name(value)}"))
            return None

        cloned = self.clone(value)
        if cloned is _SKIP:
            return None

        tree = {}
        for section in REQUIRED_SECTIONS:
            if section not in cloned:
                self._fail(MissingSection(section))
            elif not isinstance(cloned[section], dict):
                self._fail(InvalidSection(section, _type_name(cloned[section])))
            else:
                tree[section] = cloned[section]

        for section in OPTIONAL_SECTIONS:
            if section not in cloned:
                continue
            if isinstance(cloned[section], dict):
                tree[section] = cloned[section]
            else:
                logger.warning(f"Ignoring section '{section}': expected an object, "
                               f"got {_type_name(cloned[section])}")

        for key in cloned:
            if key not in tree and key not in REQUIRED_SECTIONS and key not in OPTIONAL_SECTIONS:
                logger.debug(f"Dropping unknown top-level key '{key}'")

        for pattern in NUMERIC_FIELDS:
            self._coerce(tree, pattern, ())

        if self.errors:
            return None

        try:
            return ThemeDocument.model_validate(tree)
        except ValidationError as e:
            for detail in e.errors():
                error = InvalidField(detail['msg'], _dotted(detail['loc']))
                if not self.collect:
                    raise error from e
                self.errors.append(error)
            return None


def sanitize_theme(value: Any, options: Optional[SanitizationOptions] = None) -> ThemeDocument:
    """Sanitize untrusted input into a ThemeDocument.

    Args:
        value: Parsed input, expected to be a mapping
        options: Sanitization options, defaults when omitted

    Returns:
        Validated ThemeDocument built from plain containers

    Raises:
        InvalidInput: If value is not a mapping
        MissingSection: If a required section is absent
        InvalidSection: If a required section is not a mapping
        NonFiniteNumber: If a number is NaN or infinite
        InvalidField: If a field has the wrong type or fails validation
    """
    return _Sanitizer(options).run(value)


def sanitize_theme_from_json(text: str, options: Optional[SanitizationOptions] = None) -> ThemeDocument:
    """Parse JSON text and sanitize the result.

    Raises:
        InvalidJSON: If text is not valid JSON
    """
    if not isinstance(text, (str, bytes, bytearray)):
        raise InvalidInput(f"JSON input must be text, got {_type_name(text)}")
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidJSON(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    except UnicodeDecodeError as e:
        raise InvalidJSON(f"Invalid JSON: {e}") from e
    return sanitize_theme(parsed, options)


def deep_clone_sanitize(theme: Union[ThemeDocument, Mapping[str, Any]]) -> ThemeDocument:
    """Clone a theme through JSON and sanitize it again.

    Strings are not trimmed and numeric strings are not parsed; the input is
    assumed to be clean already.
    """
    tree = theme.to_tree() if isinstance(theme, ThemeDocument) else theme
    try:
        text = json.dumps(tree)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Theme is not JSON serializable: {e}") from e
    return sanitize_theme(
        json.loads(text),
        SanitizationOptions(trim_strings=False, parse_numbers=False),
    )


def is_theme_like(value: Any) -> bool:
    """Cheap structural check: worth handing to the sanitizer at all?"""
    if not isinstance(value, Mapping):
        return False
    if any(section not in value for section in REQUIRED_SECTIONS):
        return False
    meta = value.get('meta')
    if not isinstance(meta, Mapping) or not meta.get('name') or not meta.get('version'):
        return False
    return isinstance(value.get('colors'), Mapping)


def sanitize_and_validate(value: Any, options: Optional[SanitizationOptions] = None) -> SanitizeResult:
    """Sanitize and lint without raising.

    Every sanitizer problem is collected; if the document builds, theme
    validation errors (not warnings) are added.
    """
    sanitizer = _Sanitizer(options, collect=True)
    try:
        theme = sanitizer.run(value)
    except ThemeError as e:
        return SanitizeResult(success=False, errors=[str(e)])

    errors = [str(error) for error in sanitizer.errors]
    if theme is None:
        return SanitizeResult(success=False, errors=errors)

    result = validate_theme(theme)
    errors.extend(str(issue) for issue in result.errors if issue.severity == Severity.ERROR)
    if errors:
        return SanitizeResult(success=False, errors=errors)
    return SanitizeResult(success=True, theme=theme)


def remove_dangerous_chars(text: str) -> str:
    """Strip C0 control characters and DEL, keeping tab, newline and carriage return."""
    return ''.join(
        char for char in text
        if char in '\t\n\r' or (ord(char) > 31 and ord(char) != 127)
    )


def escape_for_display(text: str) -> str:
    """HTML-escape a string for display."""
    return (
        text.replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
        .replace('"', '&quot;')
        .replace("'", '&#x27;')
        .replace('/', '&#x2F;')
    )
