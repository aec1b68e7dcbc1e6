"""
A filesystem-backed store for downloaded audio, one directory per asset kind.
Files are named after the asset id and hold the raw audio bytes.
"""

import asyncio
import logging
from pathlib import Path

import aiofiles

from gd_audio_cache.exceptions import FilesystemError
from gd_audio_cache.models.audio import AudioKind

log = logging.getLogger(__name__)


class AssetStore:
    """
    Stores cached songs and sound effects on disk.

    There is no in-memory index: every query goes straight to the filesystem,
    so the HTTP layer always sees whatever a running refresh has written so far.
    """

    def __init__(self, songs_dir: Path, sfx_dir: Path):
        """
        Initializes the store, creating both directories if needed.

        Args:
            songs_dir: Directory holding cached songs.
            sfx_dir: Directory holding cached sound effects.
        """
        self._dirs = {
            AudioKind.SONG: Path(songs_dir),
            AudioKind.SFX: Path(sfx_dir),
        }
        for directory in self._dirs.values():
            directory.mkdir(parents=True, exist_ok=True)

    def directory(self, kind: AudioKind) -> Path:
        return self._dirs[kind]

    def path_for(self, kind: AudioKind, asset_id: int) -> Path:
        """Returns the file path for an asset. Ids must be non-negative integers."""
        if isinstance(asset_id, bool) or not isinstance(asset_id, int) or asset_id < 0:
            raise ValueError(f"Invalid asset id: {asset_id!r}")
        return self._dirs[kind] / str(asset_id)

    def exists(self, kind: AudioKind, asset_id: int) -> bool:
        path = self.path_for(kind, asset_id)
        try:
            return path.is_file()
        except OSError as e:
            # e.g. ENAMETOOLONG for ids with hundreds of digits
            raise FilesystemError(f"Failed to stat '{path}': {e}") from e

    async def write(self, kind: AudioKind, asset_id: int, data: bytes) -> None:
        """Writes (or overwrites) the cached bytes of an asset."""
        path = self.path_for(kind, asset_id)
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as e:
            raise FilesystemError(f"Failed to write '{path}': {e}") from e

    async def read_bytes(self, kind: AudioKind, asset_id: int) -> bytes:
        path = self.path_for(kind, asset_id)
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise FilesystemError(f"Failed to read '{path}': {e}") from e

    def count(self, kind: AudioKind) -> int:
        """Returns how many assets of a kind are currently cached."""
        return sum(1 for entry in self._dirs[kind].iterdir() if entry.is_file())

    def _clear_directory(self, directory: Path) -> int:
        removed = 0
        for entry in directory.iterdir():
            if not entry.is_file():
                continue
            try:
                entry.unlink()
                removed += 1
            except OSError as e:
                log.warning(
                    f"[yellow]Failed to remove cached file {entry}: {e}[/yellow]"
                )
        return removed

    async def clear_all(self) -> int:
        """
        Deletes every cached file of both kinds, keeping the directories.

        Returns:
            The number of files removed.
        """
        removed = 0
        for kind, directory in self._dirs.items():
            try:
                count = await asyncio.to_thread(self._clear_directory, directory)
            except OSError as e:
                log.error(
                    f"[red]Failed to clear {kind.value} cache at {directory}: {e}[/red]"
                )
                continue
            removed += count
        log.info(f"Cleared {removed} cached files.")
        return removed
