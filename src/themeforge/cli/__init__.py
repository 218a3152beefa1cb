"""Command-line interface package for themeforge."""

__all__ = ["main"]


def main(*args, **kwargs):
    """Entry point that defers heavy imports until needed."""
    from .theme_cmds import cli

    return cli(*args, **kwargs)
