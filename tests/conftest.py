"""Pytest configuration and shared fixtures."""

import copy
import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from themeforge.config import Config  # noqa: E402
from themeforge.theme_engine.schema import ThemeDocument  # noqa: E402


LIGHT_THEME = {
    "meta": {
        "name": "Test Theme",
        "version": "1.0.0",
        "description": "Light theme used across the test suite",
        "author": "tests",
    },
    "colors": {
        "primary": "#3b82f6",
        "secondary": "#8b5cf6",
        "surface": "#ffffff",
        "surfaceSecondary": "#f9fafb",
        "surfaceHover": "#f3f4f6",
        "text": "#111827",
        "textSecondary": "#4b5563",
        "textMuted": "#6b7280",
        "border": "#e5e7eb",
        "borderStrong": "#d1d5db",
        "borderSubtle": "#f3f4f6",
        "success": "#22c55e",
        "error": "#ef4444",
        "hover": "rgba(0, 0, 0, 0.05)",
        "neutral": "#737373",
    },
    "typography": {
        "fontFamily": "Inter, sans-serif",
        "baseSize": 16,
        "scale": 1.25,
    },
    "spacing": {
        "baseUnit": 4,
        "scale": [0, 4, 8, 12, 16, 20, 24, 32, 40, 48, 64, 96],
    },
    "borders": {
        "thin": 1,
        "default": 2,
        "thick": 4,
    },
    "buttons": {
        "primary": {
            "background": "colors.primary",
            "text": "#ffffff",
            "border": "colors.primary",
        },
        "ghost": {
            "background": "transparent",
            "text": "colors.text",
        },
    },
    "cards": {
        "basic": {
            "background": "colors.surface",
            "border": "colors.border",
            "borderWidth": "borders.default",
        },
    },
}

DARK_COLORS = {
    "primary": "#60a5fa",
    "surface": "#0f172a",
    "surfaceSecondary": "#1e293b",
    "surfaceHover": "#334155",
    "text": "#f8fafc",
    "textSecondary": "#cbd5e1",
    "textMuted": "#94a3b8",
    "border": "#64748b",
    "borderStrong": "#94a3b8",
    "borderSubtle": "#475569",
}


@pytest.fixture
def theme_data():
    """A fresh, mutable copy of a complete light theme."""
    return copy.deepcopy(LIGHT_THEME)


@pytest.fixture
def light_theme(theme_data):
    return ThemeDocument.model_validate(theme_data)


@pytest.fixture
def dark_enabled_theme(theme_data):
    """Light theme with an explicit, enabled dark-mode block."""
    theme_data["darkMode"] = {"enabled": True, "colors": dict(DARK_COLORS)}
    return ThemeDocument.model_validate(theme_data)


@pytest.fixture
def themeforge_home(tmp_path, monkeypatch):
    """Point the data directory at a temporary path and drop cached config."""
    home = tmp_path / "home"
    monkeypatch.setenv("THEMEFORGE_HOME", str(home))
    Config.reset()
    yield home
    Config.reset()
