"""Token reference resolution.

A token reference is a dot path into the same theme document, such as
``"colors.primary"`` or ``"spacing.scale.3"``. References may point at other
references; chains are followed iteratively and a revisited path is reported
as a cycle instead of recursing forever.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .errors import CyclicReference, UnresolvedToken

TOKEN_REFERENCE_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_-]*(?:\.[A-Za-z0-9_-]+)+$')
LITERAL_PREFIXES = ('#', 'rgb', 'hsl')

# Common literals that are never mapped back to a token
UNMAPPED_LITERALS = {'transparent', '#ffffff'}


def is_token_reference(value: Any) -> bool:
    """Return True if value is a dot-path reference rather than a literal.

    Hex colors and CSS color functions are literals even though some of
    them contain dots.
    """
    if not isinstance(value, str):
        return False
    if value.lower().startswith(LITERAL_PREFIXES):
        return False
    return TOKEN_REFERENCE_PATTERN.match(value) is not None


def _as_tree(document: Any) -> Mapping[str, Any]:
    to_tree = getattr(document, 'to_tree', None)
    if callable(to_tree):
        return to_tree()
    if isinstance(document, Mapping):
        return document
    raise TypeError(f"Cannot resolve tokens against {type(document).__name__}")


def _lookup(tree: Mapping[str, Any], path: str) -> Any:
    node: Any = tree
    for segment in path.split('.'):
        if isinstance(node, Mapping):
            if segment in node:
                node = node[segment]
            elif segment.isdigit() and int(segment) in node:
                node = node[int(segment)]
            else:
                raise UnresolvedToken(path, segment)
        elif isinstance(node, Sequence) and not isinstance(node, str):
            if not segment.isdigit() or int(segment) >= len(node):
                raise UnresolvedToken(path, segment)
            node = node[int(segment)]
        else:
            raise UnresolvedToken(path, segment)
    return node


class TokenResolver:
    """Resolves token references against one theme document."""

    def __init__(self, document: Any):
        """Bind the resolver to a document.

        Args:
            document: A ThemeDocument or a plain JSON-shaped mapping
        """
        self.tree = _as_tree(document)

    def resolve(self, path: str) -> Any:
        """Follow a reference chain to its terminal value.

        Args:
            path: Dot path to start from

        Returns:
            The first value on the chain that is not itself a reference

        Raises:
            UnresolvedToken: If a segment along the chain does not exist
            CyclicReference: If the chain revisits a path
        """
        chain: List[str] = [path]
        seen = {path}
        current = path
        while True:
            value = _lookup(self.tree, current)
            if not is_token_reference(value):
                return value
            if value in seen:
                raise CyclicReference(chain + [value])
            seen.add(value)
            chain.append(value)
            current = value

    def resolve_value(self, value: Any) -> Any:
        """Resolve value if it is a reference, otherwise return it unchanged."""
        if is_token_reference(value):
            return self.resolve(value)
        return value

    def resolve_mapping(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Resolve every value of a flat mapping, skipping None."""
        return {
            key: self.resolve_value(value)
            for key, value in values.items()
            if value is not None
        }


def resolve_token(document: Any, path: str) -> Any:
    """Resolve a reference path against a document."""
    return TokenResolver(document).resolve(path)


def resolve_value(document: Any, value: Any) -> Any:
    """Resolve value against a document if it is a reference."""
    return TokenResolver(document).resolve_value(value)


def find_token_for_value(document: Any, value: Union[str, int, float]) -> Optional[str]:
    """Reverse lookup: find the token path holding a literal value.

    Colors are searched first, then explicit spacing values for numbers.

    Returns:
        The dot path, or None if no token holds the value
    """
    if isinstance(value, str):
        if value.lower() in UNMAPPED_LITERALS:
            return None
        needle: Any = value.lower()
    else:
        needle = value

    tree = _as_tree(document)
    for role, color in tree.get('colors', {}).items():
        if isinstance(color, str) and color.lower() == needle:
            return f"colors.{role}"

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        spacing_values = tree.get('spacing', {}).get('values') or {}
        for step, amount in spacing_values.items():
            if amount == value:
                return f"spacing.values.{step}"

    return None


def resolve_variant_tokens(variants: Optional[Mapping[str, Any]],
                           document: Any) -> Dict[str, Dict[str, Any]]:
    """Resolve every property of button or card variant styles.

    Args:
        variants: Variant name to style (model or mapping)
        document: Document the references point into

    Returns:
        Variant name to a mapping of camelCase property to concrete value
    """
    if not variants:
        return {}

    resolver = TokenResolver(document)
    resolved: Dict[str, Dict[str, Any]] = {}
    for variant, style in variants.items():
        if style is None:
            continue
        if hasattr(style, 'model_dump'):
            style = style.model_dump(by_alias=True, exclude_none=True, mode='json')
        resolved[variant] = resolver.resolve_mapping(style)
    return resolved
