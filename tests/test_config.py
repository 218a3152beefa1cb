"""Tests for configuration management."""

import logging
from pathlib import Path

import pytest

from themeforge.config import Config, EngineConfig, get_config, load_config, save_config
from themeforge.theme_engine.dark_mode import DarkModeIntensity


class TestEngineConfig:
    """Test the EngineConfig dataclass."""

    def test_defaults(self, themeforge_home):
        config = EngineConfig()

        assert config.data_dir == str(themeforge_home)
        assert config.css_scope == ":root"
        assert config.dark_intensity == "moderate"
        assert config.min_text_contrast == 4.5
        assert config.log_level == "WARNING"
        assert config.get_config_path() == themeforge_home / "config.yaml"
        assert config.get_themes_dir() == themeforge_home / "themes"

    def test_home_expanded(self):
        config = EngineConfig(data_dir="~/themes-home")
        assert not config.data_dir.startswith("~")

    def test_normalization(self, tmp_path):
        config = EngineConfig(
            data_dir=str(tmp_path),
            dark_intensity=DarkModeIntensity.SUBTLE,
            log_level="debug",
        )
        assert config.dark_intensity == "subtle"
        assert config.log_level == "DEBUG"

    def test_yaml_round_trip(self, tmp_path):
        config = EngineConfig(data_dir=str(tmp_path), css_scope=".app", min_text_contrast=7)
        restored = EngineConfig.from_yaml(config.to_yaml())
        assert restored == config

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            config = EngineConfig.from_yaml(f"data_dir: {tmp_path}\ncolour: blue\n")

        assert config.data_dir == str(tmp_path)
        assert "colour" in caplog.text

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            EngineConfig.from_yaml("- a\n- b\n")

    def test_option_builders(self, tmp_path):
        config = EngineConfig(data_dir=str(tmp_path), max_depth=4, saturation_adjustment=-20)

        assert config.sanitization_options().max_depth == 4
        options = config.dark_mode_options(ensure_contrast=False)
        assert options.saturation_adjustment == -20
        assert not options.ensure_contrast


class TestConfigManager:
    """Test loading and saving through Config."""

    def test_missing_file_gives_defaults(self, themeforge_home):
        config = load_config()

        assert config == EngineConfig()
        assert not themeforge_home.exists()

    def test_cached_instance(self, themeforge_home):
        assert get_config() is get_config()
        assert Config.load() is get_config()

    def test_save_and_load(self, themeforge_home):
        config = EngineConfig(css_scope="body", dark_intensity="intense")
        path = save_config(config)

        assert path == themeforge_home / "config.yaml"
        assert path.exists()

        loaded = Config.reload()
        assert loaded.css_scope == "body"
        assert loaded.dark_intensity == "intense"

    def test_explicit_path(self, tmp_path, themeforge_home):
        path = tmp_path / "custom.yaml"
        path.write_text("css_scope: '#root'\n", encoding="utf-8")

        assert load_config(Path(path)).css_scope == "#root"

    def test_broken_file_falls_back(self, themeforge_home, caplog):
        themeforge_home.mkdir()
        (themeforge_home / "config.yaml").write_text("css_scope: [broken\n", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            config = load_config()

        assert config.css_scope == ":root"
        assert "Failed to load config" in caplog.text

    def test_reset(self, themeforge_home):
        first = get_config()
        Config.reset()
        assert get_config() is not first
