"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the core
data structures used throughout the application, such as configuration, asset
references and refresh statistics.
"""

from .audio import AssetReference, AudioKind, LevelAssets, Record, SongInfo
from .config import ProxyConfig
from .stats import RefreshStats

__all__ = [
    "AssetReference",
    "AudioKind",
    "LevelAssets",
    "ProxyConfig",
    "Record",
    "RefreshStats",
    "SongInfo",
]
