"""
Dataclass for tracking the statistics of a single refresh run.
"""

import asyncio
import time
from dataclasses import dataclass, field


@dataclass
class RefreshStats:
    """Tracks what one clear-and-download cycle did."""

    files_cleared: int = 0
    levels_processed: int = 0
    levels_failed: int = 0
    assets_downloaded: int = 0
    assets_skipped_cached: int = 0
    assets_skipped_unavailable: int = 0
    assets_failed: int = 0
    bytes_downloaded: int = 0
    started_at: float = field(default_factory=time.monotonic, repr=False)
    finished_at: float | None = field(default=None, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def record_download(self, size: int) -> None:
        async with self._lock:
            self.assets_downloaded += 1
            self.bytes_downloaded += size

    def finish(self) -> None:
        self.finished_at = time.monotonic()

    @property
    def duration(self) -> float:
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at
