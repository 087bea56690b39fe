"""
Configuration Loader

Handles loading configuration from an optional YAML file, merging
environment variable and command-line overrides, and validating the
result.

Author: Collection Sync Project
License: MIT
"""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ConfigurationError
from .schema import Config

CONFIG_PATH_ENV = "COLLECTION_SYNC_CONFIG"


class ConfigLoader:
    """
    Configuration loader.

    Loads configuration from a YAML file, merges environment variables and
    explicit overrides (in that order of increasing precedence), and
    validates the structure.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_path: Path to the configuration file. If None, uses
                COLLECTION_SYNC_CONFIG; with neither, defaults apply.
        """
        # Load environment variables from .env if present
        load_dotenv()

        self.config_path = config_path or os.getenv(CONFIG_PATH_ENV)
        self._config: Optional[Config] = None

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> Config:
        """
        Load and validate configuration.

        Args:
            overrides: Nested settings that take precedence over file and
                environment (e.g. parsed command-line arguments)

        Returns:
            Validated Config object

        Raises:
            ConfigurationError: If the file cannot be read or parsed, or
                validation fails
        """
        config_data = self._load_yaml()
        config_data = self._merge_env_vars(config_data)
        if overrides:
            config_data = _deep_merge(config_data, overrides)

        try:
            self._config = Config(**config_data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        return self._config

    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load YAML configuration file.

        Returns:
            Dictionary with configuration data
        """
        if not self.config_path:
            return {}

        config_file = Path(self.config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML config: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_file}")
        return data

    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge environment variables into configuration.

        Environment variables override config file values.

        Args:
            config_data: Configuration dictionary from file

        Returns:
            Merged configuration dictionary
        """
        # Logging settings
        if os.getenv("COLLECTION_SYNC_LOG_LEVEL"):
            config_data.setdefault("logging", {})["level"] = os.getenv("COLLECTION_SYNC_LOG_LEVEL")
        if os.getenv("COLLECTION_SYNC_LOG_FILE"):
            config_data.setdefault("logging", {})["log_file_path"] = os.getenv("COLLECTION_SYNC_LOG_FILE")
            config_data["logging"]["log_to_file"] = True
        if os.getenv("COLLECTION_SYNC_JSON_LOGS"):
            config_data.setdefault("logging", {})["json_format"] = _env_flag("COLLECTION_SYNC_JSON_LOGS")

        # Sync settings
        if os.getenv("COLLECTION_SYNC_DRY_RUN"):
            config_data.setdefault("sync", {})["dry_run"] = _env_flag("COLLECTION_SYNC_DRY_RUN")
        if os.getenv("COLLECTION_SYNC_VERIFY_COPIES"):
            config_data.setdefault("sync", {})["verify_copies"] = _env_flag("COLLECTION_SYNC_VERIFY_COPIES")

        return config_data

    @property
    def config(self) -> Optional[Config]:
        """Get the current configuration object."""
        return self._config


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Config:
    """
    Convenience function to load configuration.

    Args:
        config_path: Optional path to config file
        overrides: Optional settings overriding file and environment

    Returns:
        Loaded and validated Config object
    """
    loader = ConfigLoader(config_path)
    return loader.load(overrides)
