"""
Configuration module for locale-sync
"""

from .settings import Settings, TranslatorSettings, SyncSettings, ConfigFile
from .load_config import (
    load_settings, reload_settings,
    load_config_file, save_config_file, create_default_config
)

__all__ = [
    'Settings', 'TranslatorSettings', 'SyncSettings', 'ConfigFile',
    'load_settings', 'reload_settings',
    'load_config_file', 'save_config_file', 'create_default_config'
]
