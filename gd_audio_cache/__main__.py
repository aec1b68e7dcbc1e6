"""
Main entry point for the gd-audio-cache application.
This module handles top-level setup, exception handling, and CLI invocation.
"""

import asyncio
import logging
import sys

import typer
from rich.console import Console

from gd_audio_cache.cli.app import app
from gd_audio_cache.cli.formatters import format_error_with_suggestions
from gd_audio_cache.exceptions import AudioCacheError


def main() -> None:
    """Main entry point function."""
    log = logging.getLogger("gd_audio_cache")
    console = Console()

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Stopped by user.[/yellow]")
        sys.exit(0)
    except AudioCacheError as e:
        console.print(f"\n{format_error_with_suggestions(e)}")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n{format_error_with_suggestions(e, {'type': 'Unexpected'})}")
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
