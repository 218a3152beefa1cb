"""Utility functions for theme engine operations.

This module provides dictionary merging for theme inheritance and dark-mode
overrides, plus content digests used as cache keys.
"""

import hashlib
import json
from typing import Any, Dict, Optional


def deep_merge_dict(base: Dict[Any, Any], overlay: Dict[Any, Any]) -> Dict[Any, Any]:
    """Deep merge two dictionaries, with overlay taking precedence.

    Args:
        base: Base dictionary
        overlay: Overlay dictionary (takes precedence)

    Returns:
        New merged dictionary; neither input is modified
    """
    result = base.copy()

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_dict(result[key], value)
        else:
            result[key] = value

    return result


def canonical_json(data: Any) -> str:
    """Serialize data with sorted keys and no insignificant whitespace."""
    return json.dumps(data, sort_keys=True, separators=(',', ':'), ensure_ascii=False)


def content_digest(data: Any, salt: Optional[str] = None) -> str:
    """SHA-256 hex digest of the canonical JSON form of data.

    Args:
        data: JSON-serializable value
        salt: Optional extra string mixed into the digest (e.g. a CSS scope)

    Returns:
        Hex digest; deep-equal inputs give the same digest
    """
    digest = hashlib.sha256(canonical_json(data).encode('utf-8'))
    if salt is not None:
        digest.update(b'\x00')
        digest.update(salt.encode('utf-8'))
    return digest.hexdigest()
