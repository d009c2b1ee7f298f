"""I/O utilities (configuration, logging)."""

from .logs import setup_logging
from .settings import (
    DEFAULT_SETTINGS_PATH,
    AppSettings,
    find_project_root,
    load_app_settings,
    load_settings,
)

__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "AppSettings",
    "find_project_root",
    "load_app_settings",
    "load_settings",
    "setup_logging",
]
