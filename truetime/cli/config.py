"""
Configuration management for truetime CLI.

Handles:
- .truetime INI file reading/writing
- TRUETIME_* environment variables
- Settings resolution (command-line option -> environment -> file -> default)
"""

import os
from dataclasses import dataclass
from typing import Optional, Dict, Any

from truetime.utils.constants import (
    CONFIG_FILE_NAME, ENV_PREFIX, NTP_PORT,
    DEFAULT_NTP_HOST, DEFAULT_ROOT_DELAY_MAX, DEFAULT_ROOT_DISPERSION_MAX,
    DEFAULT_SERVER_RESPONSE_DELAY_MAX, DEFAULT_TIMEOUT_MS, DEFAULT_RETRY_COUNT,
)
from truetime.utils.exceptions import ValidationError


# ============================================================================
# Global Options (set by CLI callback)
# ============================================================================

class GlobalOptions:
    """Global CLI options storage."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = None
            cls._instance._verbose = False
        return cls._instance

    @property
    def config(self) -> Optional[str]:
        return self._config

    @property
    def verbose(self) -> bool:
        return self._verbose

    def set(self, config: str = None, verbose: bool = False):
        """Set global options."""
        self._config = config
        self._verbose = verbose


# Singleton instance
GLOBAL_OPTIONS = GlobalOptions()


# ============================================================================
# Settings
# ============================================================================

@dataclass
class SyncSettings:
    """Effective settings for one sync."""
    host: str = DEFAULT_NTP_HOST
    port: int = NTP_PORT
    timeout: int = DEFAULT_TIMEOUT_MS
    root_delay_max: float = DEFAULT_ROOT_DELAY_MAX
    root_dispersion_max: float = DEFAULT_ROOT_DISPERSION_MAX
    server_response_delay_max: float = DEFAULT_SERVER_RESPONSE_DELAY_MAX
    retries: int = DEFAULT_RETRY_COUNT
    cache_file: Optional[str] = None


# Setting name -> converter
_SETTING_TYPES = {
    'host': str,
    'port': int,
    'timeout': int,
    'root_delay_max': float,
    'root_dispersion_max': float,
    'server_response_delay_max': float,
    'retries': int,
    'cache_file': str,
}


# ============================================================================
# Config File Management
# ============================================================================

class ConfigManager:
    """
    Manages .truetime configuration file (INI format).

    File format:
        [DEFAULT]
        HOST=time.google.com
        TIMEOUT=5000
        ROOT_DELAY_MAX=100
        ROOT_DISPERSION_MAX=100
        SERVER_RESPONSE_DELAY_MAX=750
        RETRIES=2
    """

    @staticmethod
    def find_config_file(start: str = None) -> Optional[str]:
        """Find .truetime file by searching up from the given (or current) directory.

        Handles symlinks properly on all platforms.
        """
        current = os.path.realpath(start or os.getcwd())

        visited = set()
        while current not in visited:
            visited.add(current)
            config_path = os.path.join(current, CONFIG_FILE_NAME)
            if os.path.isfile(config_path):
                return config_path
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        return None

    @staticmethod
    def read(config_path: str) -> Dict[str, str]:
        """
        Read INI-style .truetime file.

        Returns:
            dict of lower-cased setting names to raw string values from
            the [DEFAULT] section, e.g. {'host': 'time.google.com'}
        """
        result = {}

        if not config_path or not os.path.exists(config_path):
            return result

        with open(config_path, 'r', encoding='utf-8') as f:
            content = f.read()

        current_section = None

        for line in content.splitlines():
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith('#') or line.startswith(';'):
                continue

            # Section header
            if line.startswith('[') and line.endswith(']'):
                current_section = line[1:-1].strip().upper()
                continue

            # Key=Value pairs
            if '=' in line and current_section == 'DEFAULT':
                key, value = line.split('=', 1)
                key = key.strip().lower()
                if key in _SETTING_TYPES:
                    result[key] = value.strip()

        return result

    @staticmethod
    def write(config_path: str, values: Dict[str, Any]):
        """Write INI-style .truetime file with a single [DEFAULT] section."""
        lines = ['[DEFAULT]']
        for key in _SETTING_TYPES:
            if values.get(key) is not None:
                lines.append(f"{key.upper()}={values[key]}")
        lines.append('')

        directory = os.path.dirname(config_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(lines))

    @staticmethod
    def read_env(environ: Dict[str, str] = None) -> Dict[str, str]:
        """Collect TRUETIME_<SETTING> environment variables."""
        environ = os.environ if environ is None else environ
        result = {}
        for key in _SETTING_TYPES:
            value = environ.get(ENV_PREFIX + key.upper())
            if value:
                result[key] = value
        return result


# ============================================================================
# Settings Resolution
# ============================================================================

def _convert(key: str, value: Any, source: str) -> Any:
    try:
        return _SETTING_TYPES[key](value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {key.upper()} in {source}: {value!r}") from e


def resolve_settings(options: Dict[str, Any] = None, config_path: str = None,
                     environ: Dict[str, str] = None) -> SyncSettings:
    """
    Resolve settings based on priority:
    1. Command-line options (values that are not None)
    2. TRUETIME_* environment variables
    3. .truetime [DEFAULT] section
    4. Built-in defaults
    """
    if config_path is None:
        config_path = ConfigManager.find_config_file()

    layers = [
        (ConfigManager.read(config_path), config_path or CONFIG_FILE_NAME),
        (ConfigManager.read_env(environ), "environment"),
        ({k: v for k, v in (options or {}).items() if v is not None and k in _SETTING_TYPES}, "options"),
    ]

    settings = SyncSettings()
    for values, source in layers:
        for key, value in values.items():
            setattr(settings, key, _convert(key, value, source))

    if settings.retries < 0:
        raise ValidationError(f"RETRIES must not be negative: {settings.retries}")
    return settings
