import os
from typing import Any, Dict

import typer

from truetime.utils.exceptions import TrueTimeException, ValidationError
from ..config import GLOBAL_OPTIONS, SyncSettings, resolve_settings
from ..helpers import OutputHelper


def _load_settings(options: Dict[str, Any] = None) -> SyncSettings:
    """Resolve settings honoring the global --config option."""
    config_path = GLOBAL_OPTIONS.config
    if config_path and not os.path.isfile(config_path):
        raise ValidationError(f"Settings file not found: {config_path}")
    return resolve_settings(options, config_path=config_path)


def _exit_with_error(error: TrueTimeException, context: str = "Error"):
    """Render a truetime error and leave with the matching exit code."""
    if not OutputHelper.handle_error(error, context):
        raise error
    raise typer.Exit(2 if isinstance(error, ValidationError) else 1)


__all__ = [
    '_load_settings',
    '_exit_with_error',
    'OutputHelper',
]
