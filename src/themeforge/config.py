"""Configuration management for themeforge."""

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from .theme_engine.dark_mode import DarkModeIntensity, DarkModeOptions
from .theme_engine.sanitize import SanitizationOptions

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "THEMEFORGE_HOME"


def _default_data_dir() -> str:
    return os.environ.get(HOME_ENV_VAR, "~/.themeforge")


@dataclass
class EngineConfig:
    """Global configuration for the theme engine and CLI."""

    # Storage
    data_dir: str = field(default_factory=_default_data_dir)

    # CSS output
    css_scope: str = ":root"

    # Dark mode defaults
    dark_intensity: str = DarkModeIntensity.MODERATE.value
    preserve_brand_colors: bool = True
    saturation_adjustment: float = -5
    ensure_contrast: bool = True
    min_text_contrast: float = 4.5
    min_ui_contrast: float = 3.0

    # Sanitization limits
    max_string_length: int = 1000
    max_depth: int = 10

    log_level: str = "WARNING"

    def __post_init__(self):
        """Post-initialization setup."""
        self.data_dir = os.path.expanduser(str(self.data_dir))
        if isinstance(self.dark_intensity, DarkModeIntensity):
            self.dark_intensity = self.dark_intensity.value
        self.log_level = str(self.log_level).upper()

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        return yaml.safe_dump(asdict(self), default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "EngineConfig":
        """Deserialize config from YAML; unknown keys are ignored."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning(f"Ignoring unknown configuration key: {key}")

        return cls(**{key: value for key, value in data.items() if key in known})

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"

    def get_themes_dir(self) -> Path:
        """Get the user themes directory path."""
        return Path(self.data_dir) / "themes"

    def dark_mode_options(self, **overrides) -> DarkModeOptions:
        """Dark-mode options from these defaults, with keyword overrides."""
        values = {
            'intensity': self.dark_intensity,
            'preserve_brand_colors': self.preserve_brand_colors,
            'saturation_adjustment': self.saturation_adjustment,
            'ensure_contrast': self.ensure_contrast,
            'min_text_contrast': self.min_text_contrast,
            'min_ui_contrast': self.min_ui_contrast,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return DarkModeOptions(**values)

    def sanitization_options(self) -> SanitizationOptions:
        return SanitizationOptions(
            max_string_length=self.max_string_length,
            max_depth=self.max_depth,
        )


class Config:
    """Configuration manager for themeforge."""

    _instance: Optional[EngineConfig] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> EngineConfig:
        """Load configuration from file, or defaults when there is none.

        Without an explicit path the cached instance is returned if present.
        """
        if cls._instance is not None and config_path is None:
            return cls._instance

        config = EngineConfig()

        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    yaml_content = f.read()
                config = EngineConfig.from_yaml(yaml_content)
                logger.debug(f"Loaded configuration from {config_path}")
            except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {config_path}: {e}")
                logger.warning("Using default configuration.")
        else:
            logger.debug(f"No configuration at {config_path}, using defaults")

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: EngineConfig, config_path: Optional[Path] = None) -> Path:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write(config.to_yaml())
        logger.info(f"Configuration saved to {config_path}")
        return config_path

    @classmethod
    def get(cls) -> EngineConfig:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls) -> EngineConfig:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load()

    @classmethod
    def reset(cls) -> None:
        """Forget the cached configuration."""
        cls._instance = None


def get_config() -> EngineConfig:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> EngineConfig:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: EngineConfig, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file."""
    return Config.save(config, config_path)
