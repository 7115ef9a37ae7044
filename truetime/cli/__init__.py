from .config import (
    GLOBAL_OPTIONS, SyncSettings,
    ConfigManager, resolve_settings,
)
from .app import app, main

__all__ = [
    'GLOBAL_OPTIONS', 'SyncSettings',
    'ConfigManager', 'resolve_settings',
    'app', 'main'
]
