"""Configuration entrypoint (re-exported from split modules)."""

from .config_loader import (
    SettingsStore,
    get_config,
    load_config,
    reset_config,
    set_config,
)
from .config_settings import SyncConfig

__all__ = [
    "SettingsStore",
    "SyncConfig",
    "get_config",
    "load_config",
    "reset_config",
    "set_config",
]
