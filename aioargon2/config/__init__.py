"""
aioargon2 - Configuration
=========================
Hashing configuration and the store that guards it.

Usage:
    from aioargon2.config import Config, ConfigStore

    store = ConfigStore()
    store.set(Config.new())
"""

from .models import Config, ConfigSnapshot, Version, parse_algorithm
from .store import ConfigStore, ReadWriteLock, get_config_store, set_config

__all__ = [
    # Models
    "Config",
    "ConfigSnapshot",
    "Version",
    "parse_algorithm",
    # Store
    "ConfigStore",
    "ReadWriteLock",
    "get_config_store",
    "set_config",
]
