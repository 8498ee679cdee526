"""
Configuration settings with validation
"""

import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional
from dotenv import load_dotenv

from locale_sync.utils.errors import ConfigError
from locale_sync.utils.validators import InputValidator, MODE_MISSING

# Load environment variables
load_dotenv()


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [x.strip() for x in value.split(',') if x.strip()]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"Invalid {name} value '{raw}'. Must be an integer.")


@dataclass
class TranslatorSettings:
    """Translation service configuration"""
    api_keys: List[str]
    base_url: Optional[str] = None
    model: str = 'gpt-3.5-turbo'
    timeout: float = 60.0
    temperature: float = 0.1
    max_tokens: int = 1024
    batch_max_tokens: int = 2048
    max_attempts: int = 3
    backoff_base: float = 1.0

    def __post_init__(self):
        if isinstance(self.api_keys, str):
            self.api_keys = _split_list(self.api_keys)

        ok, message = InputValidator.validate_api_keys(self.api_keys)
        if not ok:
            raise ConfigError(message)

        self.api_keys = [key.strip() for key in self.api_keys]

        if self.timeout <= 0:
            raise ConfigError("Timeout must be positive")

        if self.max_attempts < 1:
            raise ConfigError("max_attempts must be at least 1")

        if self.backoff_base < 0:
            raise ConfigError("backoff_base cannot be negative")


@dataclass
class SyncSettings:
    """Synchronization run configuration"""
    root_dir: str = ''
    source_lang: str = 'en'
    target_langs: List[str] = field(default_factory=list)
    include_files: List[str] = field(default_factory=lambda: ['*.json'])
    exclude_files: List[str] = field(default_factory=list)
    mode: str = MODE_MISSING
    batch_size: int = 0
    override_file: Optional[str] = None
    failed_keys_dir: Optional[str] = None
    log_dir: Optional[str] = 'translation_logs'
    log_level: str = 'INFO'

    def __post_init__(self):
        for validate, value in (
            (InputValidator.validate_language_code, self.source_lang),
            (InputValidator.validate_mode, self.mode),
            (InputValidator.validate_batch_size, self.batch_size),
        ):
            ok, message = validate(value)
            if not ok:
                raise ConfigError(message)

        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self.log_level.upper() not in valid_levels:
            raise ConfigError(f"Log level must be one of: {', '.join(valid_levels)}")

        self.log_level = self.log_level.upper()


@dataclass
class Settings:
    """Main configuration settings"""
    translator: TranslatorSettings
    sync: SyncSettings

    @classmethod
    def from_sources(
        cls,
        config_file: Optional['ConfigFile'] = None,
        overrides: Optional[Dict[str, Any]] = None
    ) -> 'Settings':
        """
        Layer settings: environment < configuration file < explicit overrides

        Args:
            config_file: Parsed JSON configuration file, if any
            overrides: Values given explicitly (e.g. command line flags); None entries are ignored
        """
        overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

        api_keys = _split_list(os.getenv('OPENAI_API_KEYS')) or _split_list(os.getenv('OPENAI_API_KEY'))
        if not api_keys and config_file and config_file.api_key:
            api_keys = [config_file.api_key]

        sync_values: Dict[str, Any] = {
            'root_dir': os.getenv('LOCALE_ROOT', ''),
            'source_lang': os.getenv('SOURCE_LANG', 'en'),
            'target_langs': _split_list(os.getenv('TARGET_LANGS')),
            'mode': os.getenv('TRANSLATION_MODE', MODE_MISSING),
            'batch_size': _int_env('BATCH_SIZE', 0),
            'override_file': os.getenv('OVERRIDE_FILE') or None,
            'log_level': os.getenv('LOG_LEVEL', 'INFO'),
        }
        if config_file is not None:
            sync_values.update({
                'source_lang': config_file.source_lang,
                'target_langs': list(config_file.target_langs),
                'include_files': list(config_file.include_files),
                'exclude_files': list(config_file.exclude_files),
                'mode': config_file.mode,
                'batch_size': config_file.batch_size,
            })
        sync_fields = {f.name for f in fields(SyncSettings)}
        sync_values.update({k: v for k, v in overrides.items() if k in sync_fields})

        try:
            timeout = float(os.getenv('OPENAI_TIMEOUT', '60'))
        except ValueError:
            raise ConfigError("Invalid OPENAI_TIMEOUT format. Use a number of seconds.")

        translator_values: Dict[str, Any] = {
            'api_keys': overrides.get('api_keys', api_keys),
            'base_url': os.getenv('OPENAI_BASE_URL'),
            'timeout': timeout,
            'model': overrides.get('model', os.getenv('OPENAI_MODEL', 'gpt-3.5-turbo')),
        }

        return cls(
            translator=TranslatorSettings(**translator_values),
            sync=SyncSettings(**sync_values)
        )


@dataclass
class ConfigFile:
    """Contents of the JSON configuration file"""
    source_lang: str = 'en'
    target_langs: List[str] = field(default_factory=list)
    include_files: List[str] = field(default_factory=lambda: ['*.json'])
    exclude_files: List[str] = field(default_factory=list)
    api_key: str = ''
    batch_size: int = 5
    mode: str = MODE_MISSING

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the on-disk camelCase form"""
        return {
            'sourceLang': self.source_lang,
            'targetLangs': self.target_langs,
            'includeFiles': self.include_files,
            'excludeFiles': self.exclude_files,
            'apiKey': self.api_key,
            'batchSize': self.batch_size,
            'mode': self.mode
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConfigFile':
        """Create from the on-disk form, filling defaults for missing fields"""
        return cls(
            source_lang=data.get('sourceLang') or 'en',
            target_langs=list(data.get('targetLangs') or []),
            include_files=list(data.get('includeFiles') or ['*.json']),
            exclude_files=list(data.get('excludeFiles') or []),
            api_key=data.get('apiKey') or '',
            batch_size=int(data.get('batchSize', 0) or 0),
            mode=data.get('mode') or MODE_MISSING
        )
