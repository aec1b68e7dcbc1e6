"""
Command-line Layer.

This package defines the Typer application and its Rich console output.
"""
