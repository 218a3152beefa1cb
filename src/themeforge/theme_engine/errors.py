"""Exception hierarchy for the theme engine.

Every error raised by the engine derives from ``ThemeError``. Color and
sanitization failures also derive from ``ValueError`` and token lookups from
``LookupError`` so callers can catch them with the builtin types.
"""

from typing import List, Optional, Sequence


class ThemeError(Exception):
    """Base class for all theme engine errors."""


class ColorError(ThemeError, ValueError):
    """A color value could not be parsed or converted."""


class InvalidColorFormat(ColorError):
    """Input is not a 6-digit hex color."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid hex color: {value!r}")


class ColorOutOfRange(ColorError):
    """A channel or component is outside its legal range."""


class TokenError(ThemeError, LookupError):
    """A token reference could not be resolved."""


class UnresolvedToken(TokenError):
    """A path segment of a token reference does not exist."""

    def __init__(self, path: str, segment: Optional[str] = None):
        self.path = path
        self.segment = segment
        if segment is not None and segment != path:
            message = f"Unresolved token '{path}' (missing segment '{segment}')"
        else:
            message = f"Unresolved token '{path}'"
        super().__init__(message)


class CyclicReference(TokenError):
    """A chain of references loops back onto itself."""

    def __init__(self, chain: Sequence[str]):
        self.chain: List[str] = list(chain)
        super().__init__(f"Cyclic reference: {' -> '.join(self.chain)}")


class ThemeNotFound(ThemeError, LookupError):
    """No preset or user theme exists under the given name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Theme '{name}' not found")


class SanitizationError(ThemeError, ValueError):
    """Untrusted theme input was rejected.

    ``path`` is the dotted location of the offending value, empty for the
    document root.
    """

    def __init__(self, message: str, path: str = ""):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}" if path else message)


class InvalidInput(SanitizationError):
    """Input is not a mapping."""


class MissingSection(SanitizationError):
    """A required top-level section is absent."""

    def __init__(self, section: str):
        self.section = section
        super().__init__(f"Missing required section '{section}'", section)


class InvalidSection(SanitizationError):
    """A required top-level section is not a mapping."""

    def __init__(self, section: str, actual: str):
        self.section = section
        super().__init__(f"Section '{section}' must be an object, got {actual}", section)


class InvalidField(SanitizationError):
    """A field has the wrong type or fails model validation."""


class NonFiniteNumber(SanitizationError):
    """NaN or an infinity appeared in a numeric position."""


class InvalidJSON(SanitizationError):
    """Theme text is not valid JSON."""
