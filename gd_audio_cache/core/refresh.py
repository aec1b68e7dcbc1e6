"""
The refresh pipeline: clears the cache, works out which levels matter and
downloads every song and sound effect they use.
"""

import asyncio
import logging
from enum import Enum

from gd_audio_cache.api.client import LevelListType, UpstreamClient
from gd_audio_cache.exceptions import (
    DownloadFailure,
    FilesystemError,
    RefreshInProgressError,
)
from gd_audio_cache.media.downloader import Downloader
from gd_audio_cache.models.audio import AssetReference
from gd_audio_cache.models.config import ProxyConfig
from gd_audio_cache.models.stats import RefreshStats
from gd_audio_cache.storage.cache import AssetStore

from .collector import collect_level_assets

log = logging.getLogger(__name__)

# Daily, weekly and event levels, by platform convention.
SPECIAL_LEVEL_IDS = (-1, -2, -3)
LEVEL_ID_FIELD = 1


class RefreshState(Enum):
    """Phases of a refresh run."""

    IDLE = "idle"
    CLEARING = "clearing"
    ENUMERATING_LEVELS = "enumerating_levels"
    COLLECTING_ASSETS = "collecting_assets"
    DOWNLOADING = "downloading"


class RefreshOrchestrator:
    """
    Runs full clear-and-download cycles.

    Levels are processed one after another; the assets of a single level are
    resolved and downloaded concurrently. A failure for one level or asset is
    logged and skipped, never aborting the run. Only one run may be active at
    a time.
    """

    def __init__(
        self,
        client: UpstreamClient,
        store: AssetStore,
        downloader: Downloader,
        featured_pages: int = 2,
        use_ng_proxy: bool = False,
    ):
        self.client = client
        self.store = store
        self.downloader = downloader
        self.featured_pages = featured_pages
        self.use_ng_proxy = use_ng_proxy

        self.state = RefreshState.IDLE
        self.last_stats: RefreshStats | None = None
        self._run_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: ProxyConfig) -> "RefreshOrchestrator":
        """Builds an orchestrator and its collaborators from the configuration."""
        return cls(
            client=UpstreamClient(config.upstream_url, timeout=config.request_timeout),
            store=AssetStore(config.songs_folder, config.sfx_folder),
            downloader=Downloader(timeout=config.download_timeout),
            featured_pages=config.featured_pages,
            use_ng_proxy=config.use_ng_proxy,
        )

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    async def featured_level_ids(self, page: int) -> list[int]:
        """Returns the ids on one featured page, in listing order."""
        records = await self.client.list_levels(LevelListType.FEATURED, page)
        ids = []
        for record in records:
            try:
                ids.append(int(record[LEVEL_ID_FIELD]))
            except (KeyError, ValueError):
                log.debug(f"Skipping featured entry without a level id: {record}")
        return ids

    async def level_ids(self) -> list[int]:
        """
        Lists every level to cache: the special levels first, then each
        featured page in page order. A page that cannot be fetched is skipped.
        """
        ids = list(SPECIAL_LEVEL_IDS)
        for page in range(self.featured_pages):
            try:
                ids.extend(await self.featured_level_ids(page))
            except Exception as e:
                log.error(f"[red]Could not list featured page {page}: {e}[/red]")
        return ids

    async def run(self) -> RefreshStats:
        """
        Clears the cache and downloads the assets of every level of interest.

        Raises:
            RefreshInProgressError: If another run is still in progress.
        """
        if self._run_lock.locked():
            raise RefreshInProgressError("A refresh is already in progress.")

        async with self._run_lock:
            stats = RefreshStats()
            log.info("Refreshing audio cache...")
            try:
                self.state = RefreshState.CLEARING
                stats.files_cleared = await self.store.clear_all()

                self.state = RefreshState.ENUMERATING_LEVELS
                level_ids = await self.level_ids()
                log.info(
                    f"Caching assets of {len(level_ids)} levels "
                    f"({len(SPECIAL_LEVEL_IDS)} special, "
                    f"{self.featured_pages} featured pages)."
                )

                for level_id in level_ids:
                    await self._process_level(level_id, stats)
            finally:
                self.state = RefreshState.IDLE
                stats.finish()
                self.last_stats = stats

            log.info(
                f"[green]Refresh finished in {stats.duration:.1f}s: "
                f"{stats.assets_downloaded} downloaded, "
                f"{stats.assets_failed} failed.[/green]"
            )
            return stats

    async def _process_level(self, level_id: int, stats: RefreshStats) -> None:
        self.state = RefreshState.COLLECTING_ASSETS
        try:
            assets = await collect_level_assets(self.client, level_id, self.use_ng_proxy)
        except Exception as e:
            stats.levels_failed += 1
            log.error(f"[red]✗ Could not collect assets of level {level_id}: {e}[/red]")
            return

        stats.assets_failed += assets.failed

        # A level may list the same asset more than once.
        unique = {(ref.kind, ref.id): ref for ref in assets.references}

        self.state = RefreshState.DOWNLOADING
        await asyncio.gather(
            *(self._download_asset(ref, stats) for ref in unique.values())
        )
        stats.levels_processed += 1

    async def _download_asset(self, ref: AssetReference, stats: RefreshStats) -> None:
        if not ref.fetchable:
            stats.assets_skipped_unavailable += 1
            return
        try:
            if self.store.exists(ref.kind, ref.id):
                stats.assets_skipped_cached += 1
                return

            log.info(f"Downloading {ref.kind.value} {ref.id}")
            data = await self.downloader.fetch_bytes(ref.download_url)
            await self.store.write(ref.kind, ref.id, data)
        except DownloadFailure as e:
            stats.assets_failed += 1
            log.warning(f"[yellow]{e}. Skipping...[/yellow]")
            return
        except FilesystemError as e:
            stats.assets_failed += 1
            log.error(f"[red]{e}[/red]")
            return
        except Exception as e:
            stats.assets_failed += 1
            log.error(f"[red]✗ Unexpected error for {ref.kind.value} {ref.id}: {e!r}[/red]")
            return
        await stats.record_download(len(data))

    async def close(self) -> None:
        await self.client.close()
