"""
rdconfig - configuration store for a remote-desktop client.

Persists device identity, network settings, per-peer session settings,
local UI state, display defaults and cached address books as TOML files
(and encrypted blobs) in a per-user config directory.

Usage:
    import rdconfig

    store = rdconfig.get_store()
    device_id = store.identity.get_id()
"""

import threading
from typing import Optional

# Installs ConfigLogger before any submodule creates its logger
from .logging_config import get_logger, setup_logging
from .config_store import ConfigStore
from .options.resolver import SettingsRegistry

__version__ = "1.0.0"

_default_store: Optional[ConfigStore] = None
_default_store_lock = threading.Lock()


def get_store() -> ConfigStore:
    """Process-wide default store, created on first use."""
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            _default_store = ConfigStore()
            _default_store.settings.init_default_settings()
        return _default_store


def set_store(store: Optional[ConfigStore]) -> None:
    """Replace (or with None, reset) the process-wide default store."""
    global _default_store
    with _default_store_lock:
        _default_store = store


__all__ = [
    'ConfigStore',
    'SettingsRegistry',
    'get_store',
    'set_store',
    'get_logger',
    'setup_logging',
    '__version__',
]
