"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from gd_audio_cache import __version__
from gd_audio_cache.core.refresh import RefreshOrchestrator
from gd_audio_cache.exceptions import AudioCacheError
from gd_audio_cache.media.downloader import close_connection_pool
from gd_audio_cache.models.audio import AudioKind
from gd_audio_cache.models.config import ProxyConfig
from gd_audio_cache.storage.cache import AssetStore
from gd_audio_cache.storage.config_manager import ConfigManager
from gd_audio_cache.web.server import run_server

from .formatters import print_cache_table, print_config, print_summary_panel

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("gd_audio_cache")

app = typer.Typer(
    name="gd-audio-cache",
    help="A caching proxy for Geometry Dash songs and sound effects.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

DEFAULT_CONFIG_FILE = Path("config.ini")

ConfigOption = typer.Option(
    DEFAULT_CONFIG_FILE,
    "--config",
    "-c",
    envvar="GDAC_CONFIG",
    help="Path to the INI configuration file.",
)


def load_config(config_file: Path, **cli_options) -> ProxyConfig:
    """Loads the configuration, exiting with a readable error if it is invalid."""
    try:
        return ConfigManager(config_file).load_config(cli_options)
    except AudioCacheError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """Geometry Dash audio cache"""
    if version:
        console.print(f"[bold]gd-audio-cache[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    if verbose >= 1:
        logging.getLogger("gd_audio_cache").setLevel("DEBUG")

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def serve(
    config_file: Path = ConfigOption,
    host: str | None = typer.Option(None, "--host", help="Address to listen on."),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on."),
    initial_refresh: bool | None = typer.Option(
        None,
        "--initial-refresh/--no-initial-refresh",
        help="Refresh the cache as soon as the server starts.",
    ),
):
    """Serve the cache over HTTP and refresh it on schedule."""
    config = load_config(
        config_file, ip=host, port=port, refresh_on_startup=initial_refresh
    )
    run_server(config)


@app.command()
def refresh(
    config_file: Path = ConfigOption,
    pages: int | None = typer.Option(
        None, "--pages", "-n", help="Number of featured pages to cache."
    ),
):
    """Clear the cache and download everything once."""
    config = load_config(config_file, featured_pages=pages)

    async def _refresh_async():
        orchestrator = RefreshOrchestrator.from_config(config)
        try:
            return await orchestrator.run()
        finally:
            await orchestrator.close()
            await close_connection_pool()

    stats = asyncio.run(_refresh_async())
    print_summary_panel(stats)


@app.command()
def clear(
    config_file: Path = ConfigOption,
    force: bool = typer.Option(
        False, "--force", "-f", help="Bypass the confirmation prompt."
    ),
):
    """Delete every cached song and sound effect."""
    config = load_config(config_file)
    if not force and not typer.confirm("Delete every cached song and sound effect?"):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()

    store = AssetStore(config.songs_folder, config.sfx_folder)
    removed = asyncio.run(store.clear_all())
    console.print(f"[green]✓ Cache cleared ({removed} files removed).[/green]")


@app.command()
def status(config_file: Path = ConfigOption):
    """Show the effective configuration and what is cached."""
    config = load_config(config_file)
    print_config(config_file, config)

    store = AssetStore(config.songs_folder, config.sfx_folder)
    print_cache_table(
        {kind: store.count(kind) for kind in AudioKind},
        {kind: store.directory(kind) for kind in AudioKind},
    )


@app.command()
def init(
    config_file: Path = ConfigOption,
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing file without asking."
    ),
):
    """Write a configuration file filled with the default settings."""
    if (
        config_file.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    try:
        ConfigManager(config_file).save_new_config()
    except AudioCacheError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✓ Configuration saved to '{config_file}'[/bold green]")
