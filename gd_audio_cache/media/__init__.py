"""
Media Layer.

This package is responsible for fetching audio files from their CDNs.
"""

from .downloader import Downloader, close_connection_pool, get_connection_pool

__all__ = ["Downloader", "close_connection_pool", "get_connection_pool"]
