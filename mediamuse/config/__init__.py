"""Simple YAML configuration loader for MediaMuse."""

import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "gemini": {
        "api_key_env": "GEMINI_API_KEY",
        "timeout_ms": 300_000,
        "edit_model": "gemini-2.5-flash-image",
        "text_model": "gemini-2.5-flash",
    },
    "audio": {
        "sample_rate": 16000,
        "chunk_size": 1024,
        "channels": 1,
    },
    "logging": {
        "level": "INFO",
        "file_path": "data/logs/mediamuse.log",
        "console_output": True,
    },
}


class MediaMuseConfig:
    """MediaMuse configuration loader.

    Values from the YAML file are merged over ``DEFAULT_CONFIG``. The object is
    built once at startup and handed to the components that need it.
    """

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, built-in defaults
                         are used.
        """
        self.config_file = Path(config_path) if config_path else None

        if self.config_file is None:
            logger.info("No configuration file given, using defaults")
            self.config = copy.deepcopy(DEFAULT_CONFIG)
            return

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}") from e

        if not loaded:
            raise ValueError("Configuration file is empty")
        if not isinstance(loaded, dict):
            raise ValueError("Configuration file must contain a mapping")

        config = _merge(copy.deepcopy(DEFAULT_CONFIG), loaded)
        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths relative to the config file location."""
        config_dir = self.config_file.parent

        log_path = config.get('logging', {}).get('file_path')
        if log_path and not os.path.isabs(log_path):
            config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'gemini.text_model').

        Args:
            key_path: Dot-separated key path
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
        """Set configuration value using dot notation."""
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set")

    def get_api_key(self) -> str:
        """Get the Gemini API key - CRASHES if not found.

        Looks at ``gemini.api_key`` first, then at the environment variable named
        by ``gemini.api_key_env`` (a ``.env`` file is honoured).
        """
        api_key = self.get('gemini.api_key')
        if api_key:
            return api_key

        load_dotenv()
        env_name = self.get('gemini.api_key_env', 'GEMINI_API_KEY')
        api_key = os.environ.get(env_name)
        if not api_key:
            raise ValueError(f"Gemini API key not configured: set gemini.api_key or {env_name}")
        return api_key

    @property
    def edit_model(self) -> str:
        return self.get('gemini.edit_model')

    @property
    def text_model(self) -> str:
        return self.get('gemini.text_model')

    @property
    def timeout_ms(self) -> int:
        return int(self.get('gemini.timeout_ms'))


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base
