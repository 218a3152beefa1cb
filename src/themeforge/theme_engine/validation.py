"""Field-level theme linting.

Unlike the sanitizer, which rejects structurally broken input, these checks
run on a well-formed document and report problems an author should fix:
missing metadata, required colors that do not resolve to hex literals,
dangling references in component styles and out-of-range scale values.
"""

from enum import Enum
from typing import Any, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .colors import is_hex_color
from .errors import TokenError
from .resolver import TokenResolver, is_token_reference
from .schema import REQUIRED_COLOR_ROLES, ThemeDocument

# (field, low, high, message)
RANGE_CHECKS: Tuple[Tuple[str, float, float, str], ...] = (
    ('typography.baseSize', 12, 24, "Base size should be between 12px and 24px"),
    ('typography.scale', 1.1, 1.5, "Scale ratio should be between 1.1 and 1.5"),
    ('spacing.baseUnit', 2, 8, "Base unit should be between 2px and 8px"),
    ('borders.default', 1, 8, "Border width should be between 1px and 8px"),
)


class Severity(str, Enum):
    """Validation finding severity"""
    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """One validation finding"""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str
    severity: Severity = Severity.ERROR

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationResult(BaseModel):
    """All findings for a theme; valid when there are no errors"""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)

    @property
    def error_issues(self) -> List[ValidationIssue]:
        return [issue for issue in self.errors if issue.severity == Severity.ERROR]

    @property
    def warning_issues(self) -> List[ValidationIssue]:
        return [issue for issue in self.errors if issue.severity == Severity.WARNING]


def _check_meta(theme: ThemeDocument) -> Iterable[ValidationIssue]:
    if not theme.meta.name.strip():
        yield ValidationIssue(field="meta.name", message="Theme name is required")
    if not theme.meta.version.strip():
        yield ValidationIssue(field="meta.version", message="Theme version is required")


def _check_colors(theme: ThemeDocument, resolver: TokenResolver) -> Iterable[ValidationIssue]:
    colors = theme.colors.as_dict()
    for role in REQUIRED_COLOR_ROLES:
        field = f"colors.{role}"
        value = colors.get(role)
        if not value:
            yield ValidationIssue(field=field, message=f"Color {role} is required")
            continue
        try:
            resolved = resolver.resolve_value(value)
        except TokenError as e:
            yield ValidationIssue(field=field, message=str(e))
            continue
        if not is_hex_color(resolved):
            yield ValidationIssue(field=field, message=f"Invalid hex color format: {resolved}")


def _check_references(theme: ThemeDocument, resolver: TokenResolver) -> Iterable[ValidationIssue]:
    tree = theme.to_tree()
    sections = [
        ('buttons', tree.get('buttons') or {}),
        ('cards', tree.get('cards') or {}),
        ('darkMode.buttons', tree.get('darkMode', {}).get('buttons') or {}),
        ('darkMode.cards', tree.get('darkMode', {}).get('cards') or {}),
    ]
    for prefix, variants in sections:
        for variant, style in variants.items():
            for prop, value in style.items():
                if not is_token_reference(value):
                    continue
                try:
                    resolver.resolve(value)
                except TokenError as e:
                    yield ValidationIssue(field=f"{prefix}.{variant}.{prop}", message=str(e))


def _lookup_number(tree: Any, path: str):
    node = tree
    for segment in path.split('.'):
        if not isinstance(node, dict) or segment not in node:
            return None
        node = node[segment]
    return node


def _check_ranges(theme: ThemeDocument) -> Iterable[ValidationIssue]:
    tree = theme.to_tree()
    for field, low, high, message in RANGE_CHECKS:
        value = _lookup_number(tree, field)
        if isinstance(value, (int, float)) and not low <= value <= high:
            yield ValidationIssue(field=field, message=message, severity=Severity.WARNING)


def validate_theme(theme: ThemeDocument) -> ValidationResult:
    """Lint a theme document.

    Args:
        theme: Document to check

    Returns:
        ValidationResult; ``valid`` is False only for error-severity findings
    """
    resolver = TokenResolver(theme)
    issues: List[ValidationIssue] = []
    issues.extend(_check_meta(theme))
    issues.extend(_check_colors(theme, resolver))
    if not theme.typography.font_family.strip():
        issues.append(ValidationIssue(field="typography.fontFamily", message="Font family is required"))
    issues.extend(_check_references(theme, resolver))
    issues.extend(_check_ranges(theme))

    valid = not any(issue.severity == Severity.ERROR for issue in issues)
    return ValidationResult(valid=valid, errors=issues)
