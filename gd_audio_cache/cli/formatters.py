"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gd_audio_cache.models.audio import AudioKind
from gd_audio_cache.models.config import ProxyConfig
from gd_audio_cache.models.stats import RefreshStats


def format_size(size_bytes: int) -> str:
    """Formats a byte count into a human readable string."""
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} GB"


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Check the values in your config.ini.",
            "• Environment variables (GDAC_*) override the file, check them too.",
            "• Run `gd-audio-cache init` to write a fresh default config.",
        ],
        "UpstreamError": [
            "• The Geometry Dash servers may be down or blocking your IP.",
            "• Try again in a few minutes.",
        ],
        "FilesystemError": [
            "• Check that the cache folders exist and are writable.",
        ],
        "RefreshInProgressError": [
            "• Wait for the running refresh to finish.",
        ],
        "OSError": [
            "• The port may already be in use. Try a different --port.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -v for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config: ProxyConfig):
    """Displays the effective configuration."""
    console = Console()
    content = "\n".join(
        f"{key} = {value}" for key, value in config.model_dump().items()
    )
    console.print(
        Panel(
            content,
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_cache_table(counts: dict[AudioKind, int], folders: dict[AudioKind, Path]):
    """Displays how many assets of each kind are cached."""
    console = Console()
    table = Table(title="Audio Cache", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Kind", style="cyan")
    table.add_column("Folder", style="dim")
    table.add_column("Files", justify="right", style="green")

    for kind, count in counts.items():
        table.add_row(kind.value, str(folders[kind]), str(count))
    console.print(table)


def print_summary_panel(stats: RefreshStats):
    """Displays the final summary of a refresh run."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(justify="right")

    table.add_row("Levels processed:", f"[green]{stats.levels_processed}[/green]")
    if stats.levels_failed:
        table.add_row("Levels failed:", f"[red]{stats.levels_failed}[/red]")
    table.add_row("Files cleared:", str(stats.files_cleared))
    table.add_row("Assets downloaded:", f"[green]{stats.assets_downloaded}[/green]")
    table.add_row("Skipped (cached):", str(stats.assets_skipped_cached))
    table.add_row("Skipped (unavailable):", str(stats.assets_skipped_unavailable))
    if stats.assets_failed:
        table.add_row("Failed:", f"[red]{stats.assets_failed}[/red]")
    table.add_row("Downloaded size:", format_size(stats.bytes_downloaded))
    table.add_row("Duration:", f"{stats.duration:.1f}s")

    border = "green" if not (stats.assets_failed or stats.levels_failed) else "yellow"
    console.print(
        Panel(table, title="[bold]Refresh Summary[/bold]", border_style=border, expand=False)
    )
