"""Simple YAML configuration loader for BicaraBaca."""

import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from .settings import DictationSettings, SpeechSettings, ExportSettings

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "dictation": {
        "locale": "id-ID",
        "restart_delay_seconds": 0.1,
        "max_restarts": None,
        "fatal_error_codes": ["language-not-supported", "bad-grammar"],
    },
    "speech": {
        "rate": 0.9,
        "pitch": 1.0,
        "volume": 1.0,
        "provider_hints": ["google"],
        "style_hints": ["female", "male", "natural", "neural", "wavenet"],
    },
    "export": {
        "directory": "exports",
    },
    "logging": {
        "level": "INFO",
        "file_path": "logs/bicarabaca.log",
        "console_output": True,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict):
            if value is None:
                # Empty section in YAML, keep the defaults
                continue
            if not isinstance(value, dict):
                raise ValueError(f"Configuration section '{key}' must be a mapping")
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class BicaraBacaConfig:
    """BicaraBaca configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, built-in defaults
                        are used and relative paths resolve against the
                        current directory.
        """
        self.config_file = Path(config_path) if config_path else None

        if self.config_file is not None and not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        if self.config_file is not None:
            logger.info(f"Loading configuration from: {self.config_file}")
        else:
            logger.info("No configuration file given, using defaults")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file over the defaults."""
        if self.config_file is None:
            config = copy.deepcopy(DEFAULT_CONFIG)
            self._resolve_paths(config, Path.cwd())
            return config

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ValueError(f"Failed to load configuration: {e}")

        if not loaded:
            raise ValueError("Configuration file is empty")
        if not isinstance(loaded, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")

        config = _merge(DEFAULT_CONFIG, loaded)

        # Resolve relative paths
        self._resolve_paths(config, self.config_file.parent)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any], config_dir: Path) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        export_dir = config['export'].get('directory')
        if export_dir and not os.path.isabs(export_dir):
            config['export']['directory'] = str(config_dir / export_dir)

        log_path = config['logging'].get('file_path')
        if log_path and not os.path.isabs(log_path):
            config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'dictation.locale').

        Args:
            key_path: Dot-separated key path (e.g., 'speech.rate')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'dictation.locale')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        # Navigate to the parent dictionary
        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        # Set the final value
        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def dictation_settings(self) -> DictationSettings:
        """Validated dictation settings - raises ValueError on bad values."""
        return DictationSettings.from_section(self.get('dictation', {}))

    def speech_settings(self) -> SpeechSettings:
        """Validated speech synthesis settings.

        The synthesis locale always follows ``dictation.locale``.
        """
        section = dict(self.get('speech', {}))
        section['locale'] = self.get('dictation.locale', 'id-ID')
        return SpeechSettings.from_section(section)

    def export_settings(self) -> ExportSettings:
        return ExportSettings.from_section(self.get('export', {}))

    def get_export_directory(self) -> str:
        """Get export directory path."""
        export_dir = self.get('export.directory', 'exports')
        return str(Path(export_dir).absolute())
