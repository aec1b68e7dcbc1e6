"""
Platform API Layer.

This package handles all communication with the Geometry Dash servers and the
parsing of their delimited text responses.
"""

from .client import LevelListType, UpstreamClient
from .records import parse_record, parse_record_list, split_ids

__all__ = [
    "LevelListType",
    "UpstreamClient",
    "parse_record",
    "parse_record_list",
    "split_ids",
]
