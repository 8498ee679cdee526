"""
Configuration loading utilities
"""

import json
import logging
import os
from typing import Any, Dict, Optional
from .settings import ConfigFile, Settings
from locale_sync.utils.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'i18n-config.json'

# Global settings instance
_settings: Optional[Settings] = None


def load_config_file(path: str) -> ConfigFile:
    """
    Load a JSON configuration file

    Raises:
        FileNotFoundError: the file does not exist
        ConfigError: the file is not a valid configuration object
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"configuration file {path} does not exist")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Failed to read configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} is not a JSON object")

    return ConfigFile.from_dict(data)


def save_config_file(config: ConfigFile, path: str):
    """Write a configuration file, creating its directory if needed"""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
        f.write('\n')
    logger.info(f"Configuration saved to {path}")


def create_default_config(path: str = DEFAULT_CONFIG_PATH, force: bool = False, **values: Any) -> bool:
    """
    Create a default configuration file

    Args:
        path: Destination path
        force: Overwrite an existing file
        **values: ConfigFile fields to set on top of the defaults

    Returns:
        True if the file was written, False if it already existed
    """
    if os.path.exists(path) and not force:
        logger.info(f"Configuration file {path} already exists, not overwriting")
        return False

    config = ConfigFile(**{k: v for k, v in values.items() if v})
    save_config_file(config, path)
    return True


def load_settings(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """Load and return application settings"""
    global _settings

    if _settings is None:
        try:
            config_file = None
            if config_path:
                try:
                    config_file = load_config_file(config_path)
                except FileNotFoundError:
                    logger.warning(f"Configuration file not found, creating default at {config_path}")
                    create_default_config(config_path)
                    config_file = ConfigFile()
            _settings = Settings.from_sources(config_file, overrides)
            logger.info("Configuration loaded successfully")
        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise

    return _settings


def reload_settings(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """Reload settings from environment and configuration file"""
    global _settings
    _settings = None
    return load_settings(config_path, overrides)
