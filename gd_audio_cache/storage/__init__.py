"""
Storage Layer.

This package handles all data persistence: the configuration file and the
on-disk audio cache.
"""

from .cache import AssetStore
from .config_manager import ConfigManager

__all__ = ["AssetStore", "ConfigManager"]
