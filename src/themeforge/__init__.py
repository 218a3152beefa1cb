"""themeforge - theme token resolution and dark-mode synthesis."""

__version__ = "0.1.0"
__author__ = "themeforge contributors"

from .theme_engine import ThemeDocument, ThemeEngine

__all__ = ["ThemeDocument", "ThemeEngine", "__version__"]
