"""Theme CLI commands.

This module provides the ``themeforge`` command group: listing themes,
rendering CSS, synthesizing dark mode, validating documents, exporting
design tokens and a few color utilities.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import get_config, load_config
from ..theme_engine import (
    AA_TEXT,
    DarkModeIntensity,
    ThemeDocument,
    ThemeEngine,
    ThemeError,
    check_contrast,
    check_theme_color_blindness,
    export_theme,
    find_contrast_fix,
    generate_palette,
)
from ..theme_engine.contrast import contrast_description, contrast_level
from ..theme_engine.exporters import EXPORTERS

INTENSITY_CHOICES = click.Choice([level.value for level in DarkModeIntensity])


def get_console() -> Console:
    return Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _engine(ctx: click.Context) -> ThemeEngine:
    return ctx.obj['engine']


def _fail(message: str, error: Exception) -> None:
    get_console().print(f"[red]{message}: {error}[/red]")
    sys.exit(1)


def _write_theme(theme: ThemeDocument, output: Path) -> None:
    tree = theme.to_tree()
    if output.suffix.lower() == '.json':
        text = json.dumps(tree, indent=2, ensure_ascii=False) + "\n"
    else:
        text = yaml.safe_dump(tree, default_flow_style=False, sort_keys=False, allow_unicode=True)
    output.write_text(text, encoding='utf-8')


@click.group()
@click.option("--config", type=click.Path(), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx, config, verbose):
    """themeforge - theme tokens, CSS variables and dark mode."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    try:
        engine_config = load_config(Path(config)) if config else get_config()
        _setup_logging("DEBUG" if verbose else engine_config.log_level)
        ctx.obj['engine'] = ThemeEngine.from_config(engine_config)
    except (ValueError, OSError) as e:
        _fail("Configuration error", e)


@cli.command(name="list")
@click.pass_context
def list_themes(ctx):
    """List all available themes."""
    try:
        themes = _engine(ctx).list_themes()
    except ThemeError as e:
        _fail("Error listing themes", e)

    table = Table(title="Available Themes", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan", min_width=12)
    table.add_column("Type", style="blue", width=8)
    table.add_column("Version", width=8)
    table.add_column("Dark", width=5)
    table.add_column("Description")

    for theme_info in themes:
        if theme_info.get('error'):
            table.add_row(theme_info['name'], theme_info['type'], "", "",
                          f"[red]{theme_info['description']}[/red]")
            continue
        table.add_row(
            theme_info['name'],
            theme_info['type'],
            theme_info.get('version') or "",
            "yes" if theme_info.get('dark_mode') else "no",
            theme_info.get('description') or "",
        )

    console = get_console()
    console.print(table)


@cli.command()
@click.argument("name")
@click.pass_context
def info(ctx, name: str):
    """Show details and validation findings for a theme."""
    engine = _engine(ctx)
    if not engine.theme_exists(name):
        get_console().print(f"[red]Theme '{name}' not found[/red]")
        sys.exit(1)

    details = engine.get_theme_info(name)
    if 'error' in details:
        get_console().print(f"[red]Error loading theme '{name}': {details['error']}[/red]")
        sys.exit(1)

    console = get_console()
    lines = [
        f"[bold]{details['display_name']}[/bold] v{details['version']} ({details['type']})",
        details.get('description') or "",
        f"Author: {details.get('author') or 'unknown'}",
        f"File: {details['path']}",
        f"Dark mode: {'enabled' if details['dark_mode'] else 'disabled'}",
    ]
    console.print(Panel("\n".join(lines), title=f"[cyan]{name}[/cyan]", border_style="blue"))

    colors = Table(show_header=True, header_style="bold")
    colors.add_column("Role", style="cyan")
    colors.add_column("Value")
    for role, value in details['colors'].items():
        colors.add_row(role, value)
    console.print(colors)

    for issue in details['validation_issues']:
        console.print(f"[yellow]• {issue}[/yellow]")


@cli.command()
@click.argument("source")
@click.option("--scope", help="CSS selector the variables are declared on")
@click.option("--dark", is_flag=True, help="Synthesize dark mode before rendering")
@click.option("--intensity", type=INTENSITY_CHOICES, help="Dark-mode intensity")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write CSS to a file")
@click.pass_context
def css(ctx, source: str, scope: Optional[str], dark: bool, intensity: Optional[str],
        output: Optional[str]):
    """Render a theme as CSS custom properties.

    SOURCE is a theme name or a path to a YAML/JSON theme file.
    """
    engine = _engine(ctx)
    try:
        theme = engine.load_theme(source)
        if dark:
            theme = engine.generate_dark_mode(theme, engine.dark_mode_options(intensity=intensity))
        stylesheet = engine.generate_css(theme, scope)
    except ThemeError as e:
        _fail("Error generating CSS", e)

    if output:
        Path(output).write_text(stylesheet, encoding='utf-8')
        get_console().print(f"[green]✓ Wrote CSS to {output}[/green]")
    else:
        # CSS selectors contain square brackets; bypass rich markup
        click.echo(stylesheet, nl=False)


@cli.command()
@click.argument("source")
@click.option("--intensity", type=INTENSITY_CHOICES, help="Dark-mode intensity")
@click.option("--adjust-brand", is_flag=True, help="Move brand colors instead of preserving them")
@click.option("--saturation", type=float, help="Saturation adjustment, -100 to 100")
@click.option("--no-contrast", is_flag=True, help="Skip contrast enforcement")
@click.option("--output", "-o", type=click.Path(dir_okay=False),
              help="Write the dark theme to a YAML or JSON file")
@click.pass_context
def dark(ctx, source: str, intensity: Optional[str], adjust_brand: bool,
         saturation: Optional[float], no_contrast: bool, output: Optional[str]):
    """Synthesize a dark-mode variant of a theme."""
    engine = _engine(ctx)
    overrides = {
        'intensity': intensity,
        'saturation_adjustment': saturation,
    }
    if adjust_brand:
        overrides['preserve_brand_colors'] = False
    if no_contrast:
        overrides['ensure_contrast'] = False

    try:
        theme = engine.load_theme(source)
        options = engine.dark_mode_options(**overrides)
        preview = engine.preview_dark_mode(theme, options)
        dark_theme = engine.generate_dark_mode(theme, options)
    except (ThemeError, ValueError) as e:
        _fail("Error generating dark mode", e)

    console = get_console()

    colors = Table(title=f"{theme.meta.name}: dark mode", show_header=True, header_style="bold")
    colors.add_column("Role", style="cyan")
    colors.add_column("Light")
    colors.add_column("Dark")
    for role, value in dark_theme.dark_mode.colors.items():
        light = preview.light.get(role, "")
        colors.add_row(role, f"[on {light}]  [/] {light}", f"[on {value}]  [/] {value}")
    console.print(colors)

    report = Table(title="Contrast", show_header=True, header_style="bold")
    report.add_column("Pair")
    report.add_column("Light", justify="right")
    report.add_column("Dark", justify="right")
    report.add_column("Improved")
    for entry in preview.contrast_report:
        report.add_row(
            entry.name,
            f"{entry.light_ratio:.2f}:1",
            f"{entry.dark_ratio:.2f}:1",
            "[green]yes[/green]" if entry.improved else "[yellow]no[/yellow]",
        )
    console.print(report)

    for entry in preview.enforcement:
        if not entry.met:
            console.print(
                f"[yellow]⚠ {entry.pair} reached {entry.ratio:.2f}:1 "
                f"(target {entry.target}:1) after {entry.attempts} attempts[/yellow]"
            )

    if output:
        _write_theme(dark_theme, Path(output))
        console.print(f"[green]✓ Wrote dark theme to {output}[/green]")


@cli.command()
@click.argument("source")
@click.pass_context
def validate(ctx, source: str):
    """Validate a theme and report problems."""
    engine = _engine(ctx)
    try:
        theme = engine.load_theme(source)
    except ThemeError as e:
        _fail("Invalid theme", e)

    findings = engine.validate(theme)
    errors = [finding for finding in findings if not finding.startswith("warning: ")]
    warnings = [finding[len("warning: "):] for finding in findings if finding.startswith("warning: ")]

    console = get_console()
    for error in errors:
        console.print(f"[red]✗ {error}[/red]")
    for warning in warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")

    if errors:
        console.print(f"[red]{theme.meta.name}: {len(errors)} error(s)[/red]")
        sys.exit(1)
    console.print(f"[green]✓ {theme.meta.name} is valid[/green]")


@cli.command()
@click.argument("source")
@click.option("--name", help="User theme name; derived from the theme name by default")
@click.option("--overwrite", is_flag=True, help="Replace an existing user theme")
@click.pass_context
def install(ctx, source: str, name: Optional[str], overwrite: bool):
    """Save a theme file as a user theme."""
    engine = _engine(ctx)
    try:
        theme = engine.load_theme(source)
        path = engine.registry.save_user_theme(theme, name=name, overwrite=overwrite)
    except (ThemeError, FileExistsError, OSError) as e:
        _fail("Error installing theme", e)
    get_console().print(f"[green]✓ Installed {theme.meta.name} to {path}[/green]")


@cli.command()
@click.argument("name")
@click.pass_context
def remove(ctx, name: str):
    """Delete a user theme."""
    try:
        deleted = _engine(ctx).registry.delete_user_theme(name)
    except ThemeError as e:
        _fail("Error removing theme", e)
    if not deleted:
        get_console().print(f"[red]User theme '{name}' not found[/red]")
        sys.exit(1)
    get_console().print(f"[green]✓ Removed {name}[/green]")


@cli.command()
@click.argument("foreground")
@click.argument("background")
def contrast(foreground: str, background: str):
    """Check WCAG contrast between two hex colors."""
    try:
        result = check_contrast(foreground, background)
    except ThemeError as e:
        _fail("Error checking contrast", e)

    def mark(passed: bool) -> str:
        return "[green]pass[/green]" if passed else "[red]fail[/red]"

    table = Table(show_header=True, header_style="bold")
    table.add_column("Level")
    table.add_column("Normal text")
    table.add_column("Large text")
    table.add_row("AA", mark(result.aa), mark(result.aa_large))
    table.add_row("AAA", mark(result.aaa), mark(result.aaa_large))

    console = get_console()
    console.print(f"Contrast ratio: [bold]{result.ratio:.2f}:1[/bold] ({contrast_level(result.ratio).value})")
    console.print(contrast_description(result.ratio))
    console.print(table)


@cli.command()
@click.argument("color")
@click.option("--steps", default=10, show_default=True, type=click.IntRange(min=2),
              help="Number of shades")
def palette(color: str, steps: int):
    """Generate a lightness palette from a base color."""
    try:
        shades = generate_palette(color, steps)
    except (ThemeError, ValueError) as e:
        _fail("Error generating palette", e)

    table = Table(title=f"Palette for {color}", show_header=True, header_style="bold")
    table.add_column("Shade", justify="right")
    table.add_column("Swatch")
    table.add_column("Hex", style="cyan")
    for shade in shades:
        table.add_row(str(shade.shade), f"[on {shade.color}]      [/]", shade.color)
    get_console().print(table)



@cli.command()
@click.argument("source")
@click.option("--format", "fmt", type=click.Choice(sorted(EXPORTERS)), default="json",
              show_default=True, help="Token format")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write tokens to a file")
@click.pass_context
def export(ctx, source: str, fmt: str, output: Optional[str]):
    """Export a theme as design tokens."""
    try:
        theme = _engine(ctx).load_theme(source)
        text = export_theme(theme, fmt)
    except ThemeError as e:
        _fail("Error exporting theme", e)

    if output:
        Path(output).write_text(text, encoding='utf-8')
        get_console().print(f"[green]✓ Wrote {fmt} tokens to {output}[/green]")
    else:
        click.echo(text, nl=False)


@cli.command()
@click.argument("source")
@click.pass_context
def colorblind(ctx, source: str):
    """Check that key color pairs survive common color blindness."""
    try:
        theme = _engine(ctx).load_theme(source)
        report = check_theme_color_blindness(theme)
    except ThemeError as e:
        _fail("Error checking theme", e)

    console = get_console()
    for issue in report.issues:
        console.print(f"[yellow]⚠ {issue}[/yellow]")
    if report.safe:
        console.print(f"[green]✓ {theme.meta.name} keeps its key colors distinct[/green]")
    else:
        console.print("Add icons, patterns or labels; do not rely on color alone")


@cli.command(name="fix-contrast")
@click.argument("foreground")
@click.argument("background")
@click.option("--target", default=AA_TEXT, show_default=True, type=click.FloatRange(1, 21),
              help="Contrast ratio to reach")
def fix_contrast_cmd(foreground: str, background: str, target: float):
    """Adjust a foreground color until it reaches a contrast ratio."""
    try:
        fix = find_contrast_fix(foreground, background, target)
    except ThemeError as e:
        _fail("Error fixing contrast", e)

    console = get_console()
    if fix.adjustment == 0 and fix.success:
        console.print(f"{fix.original} already reaches {fix.ratio:.2f}:1")
    elif fix.success:
        console.print(f"[green]{fix.original} -> {fix.color}[/green] ({fix.ratio:.2f}:1)")
    else:
        console.print(f"[red]No lightness of {fix.original} reaches {target}:1 within range[/red]")
        sys.exit(1)
    click.echo(fix.color)
