"""
gd-audio-cache: a caching proxy for Geometry Dash songs and sound effects.
"""

__version__ = "1.0.0"
