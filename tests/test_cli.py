"""Tests for the themeforge command line."""

import json

import pytest
import yaml
from click.testing import CliRunner

from themeforge.cli.theme_cmds import cli


@pytest.fixture
def runner(themeforge_home):
    return CliRunner()


@pytest.fixture
def theme_file(tmp_path, theme_data):
    path = tmp_path / "custom.yaml"
    path.write_text(yaml.safe_dump(theme_data), encoding="utf-8")
    return path


class TestThemeCommands:
    """Test theme-level commands."""

    def test_list(self, runner):
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0
        assert "Available Themes" in result.output
        assert "midnight" in result.output

    def test_css_to_stdout(self, runner):
        result = runner.invoke(cli, ["css", "default"])
        assert result.exit_code == 0
        assert result.stdout.startswith("/**")
        assert "--theme-primary: #ef4444;" in result.stdout

    def test_css_scope_and_dark(self, runner, theme_file):
        result = runner.invoke(cli, ["css", str(theme_file), "--scope", ".app", "--dark"])
        assert result.exit_code == 0
        assert '.app[data-theme="dark"], .app.dark {' in result.stdout
        assert "--theme-surface: #121212;" in result.stdout

    def test_css_to_file(self, runner, tmp_path):
        output = tmp_path / "theme.css"
        result = runner.invoke(cli, ["css", "harbor", "-o", str(output)])

        assert result.exit_code == 0
        assert "Wrote CSS" in result.output
        assert "prefers-color-scheme: dark" in output.read_text(encoding="utf-8")

    def test_css_unknown_theme(self, runner):
        result = runner.invoke(cli, ["css", "nope"])
        assert result.exit_code == 1
        assert "Error generating CSS" in result.output

    def test_dark(self, runner, theme_file, tmp_path):
        output = tmp_path / "dark.json"
        result = runner.invoke(cli, ["dark", str(theme_file), "--intensity", "intense", "-o", str(output)])

        assert result.exit_code == 0
        assert "Contrast" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["meta"]["name"] == "Test Theme (Dark)"
        assert data["darkMode"]["colors"]["surface"] == "#0d0d0d"

    def test_dark_rejects_bad_intensity(self, runner):
        result = runner.invoke(cli, ["dark", "default", "--intensity", "pitch"])
        assert result.exit_code == 2

    def test_validate_ok(self, runner):
        result = runner.invoke(cli, ["validate", "default"])
        assert result.exit_code == 0
        assert "Default is valid" in result.output

    def test_validate_errors(self, runner, tmp_path, theme_data):
        theme_data["colors"]["primary"] = "colors.missing"
        path = tmp_path / "broken.json"
        path.write_text(json.dumps(theme_data), encoding="utf-8")

        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "error(s)" in result.output

    def test_info(self, runner):
        result = runner.invoke(cli, ["info", "midnight"])
        assert result.exit_code == 0
        assert "Midnight" in result.output
        assert "primary" in result.output

    def test_info_missing(self, runner):
        result = runner.invoke(cli, ["info", "nope"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_install_and_remove(self, runner, theme_file, themeforge_home):
        """Test the user theme lifecycle through the CLI."""
        result = runner.invoke(cli, ["install", str(theme_file), "--name", "mine"])
        assert result.exit_code == 0
        assert (themeforge_home / "themes" / "mine.yaml").exists()

        result = runner.invoke(cli, ["install", str(theme_file), "--name", "mine"])
        assert result.exit_code == 1

        result = runner.invoke(cli, ["install", str(theme_file), "--name", "mine", "--overwrite"])
        assert result.exit_code == 0

        result = runner.invoke(cli, ["list"])
        assert "mine" in result.output

        result = runner.invoke(cli, ["remove", "mine"])
        assert result.exit_code == 0
        assert not (themeforge_home / "themes" / "mine.yaml").exists()

        result = runner.invoke(cli, ["remove", "mine"])
        assert result.exit_code == 1

    @pytest.mark.parametrize("name", ["../../x", "a/b"])
    def test_remove_rejects_paths(self, runner, name):
        result = runner.invoke(cli, ["remove", name])
        assert result.exit_code == 1
        assert "Invalid theme name" in result.output

    def test_install_rejects_paths(self, runner, theme_file):
        result = runner.invoke(cli, ["install", str(theme_file), "--name", "../escape"])
        assert result.exit_code == 1
        assert "Invalid theme name" in result.output

    def test_export_json(self, runner, theme_file):
        result = runner.invoke(cli, ["export", str(theme_file)])
        assert result.exit_code == 0
        tokens = json.loads(result.stdout)
        assert tokens["colors"]["primary"] == "#3b82f6"

    def test_export_w3c_to_file(self, runner, theme_file, tmp_path):
        output = tmp_path / "tokens.json"
        result = runner.invoke(cli, ["export", str(theme_file), "--format", "w3c", "-o", str(output)])
        assert result.exit_code == 0
        tokens = json.loads(output.read_text(encoding="utf-8"))
        assert tokens["color"]["primary"]["$type"] == "color"

    def test_export_rejects_unknown_format(self, runner, theme_file):
        result = runner.invoke(cli, ["export", str(theme_file), "--format", "figma"])
        assert result.exit_code == 2

    def test_colorblind_safe(self, runner, theme_file):
        result = runner.invoke(cli, ["colorblind", str(theme_file)])
        assert result.exit_code == 0
        assert "keeps its key colors distinct" in result.output

    def test_colorblind_issue(self, runner, tmp_path, theme_data):
        theme_data["colors"].update({"primary": "#0000ff", "secondary": "#818181"})
        path = tmp_path / "muddy.yaml"
        path.write_text(yaml.safe_dump(theme_data), encoding="utf-8")

        result = runner.invoke(cli, ["colorblind", str(path)])
        assert result.exit_code == 0
        assert "tritanopia" in result.output
        assert "do not rely on color alone" in result.output


class TestColorCommands:
    """Test color utility commands."""

    def test_contrast(self, runner):
        result = runner.invoke(cli, ["contrast", "#000000", "#ffffff"])
        assert result.exit_code == 0
        assert "Contrast ratio: 21.00:1 (ENHANCED)" in result.output

    def test_contrast_invalid_color(self, runner):
        result = runner.invoke(cli, ["contrast", "black", "#ffffff"])
        assert result.exit_code == 1
        assert "Error checking contrast" in result.output

    def test_palette(self, runner):
        result = runner.invoke(cli, ["palette", "#3b82f6", "--steps", "3"])
        assert result.exit_code == 0
        assert "900" in result.output

    def test_palette_needs_two_steps(self, runner):
        result = runner.invoke(cli, ["palette", "#3b82f6", "--steps", "1"])
        assert result.exit_code == 2

    def test_fix_contrast(self, runner):
        result = runner.invoke(cli, ["fix-contrast", "#888888", "#ffffff"])
        assert result.exit_code == 0
        assert result.output.strip().endswith("#767676")

    def test_fix_contrast_already_passing(self, runner):
        result = runner.invoke(cli, ["fix-contrast", "#000000", "#ffffff"])
        assert result.exit_code == 0
        assert "already reaches" in result.output

    def test_fix_contrast_unreachable(self, runner):
        result = runner.invoke(cli, ["fix-contrast", "#777777", "#777777", "--target", "21"])
        assert result.exit_code == 1


def test_unreadable_config_falls_back_to_defaults(tmp_path, themeforge_home):
    path = tmp_path / "config.yaml"
    path.write_text("- not\n- a mapping\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(path), "list"])
    assert result.exit_code == 0
