"""
Storage Layer.

This package handles all data persistence: the mod registry and its JSON
file, the configuration file, and the shell history.
"""

from .config_manager import ConfigManager
from .history import CommandHistory
from .registry import ModRegistry
from .registry_store import RegistryStore

__all__ = ["CommandHistory", "ConfigManager", "ModRegistry", "RegistryStore"]
