"""
HTTP Layer.

This package serves the cached audio over HTTP.
"""

from .server import create_app, run_server

__all__ = ["create_app", "run_server"]
