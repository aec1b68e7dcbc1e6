"""Fakes standing in for the network-facing collaborators."""

import asyncio

from gd_audio_cache.api.client import LevelListType
from gd_audio_cache.exceptions import DownloadFailure, UpstreamError
from gd_audio_cache.models.audio import Record, SongInfo


def custom_song() -> SongInfo:
    return SongInfo(available=True, fields={1: "0", 10: "CUSTOMURL"})


class FakeUpstream:
    """In-memory stand-in for UpstreamClient."""

    def __init__(
        self,
        levels: dict[int, Record | Exception] | None = None,
        pages: dict[int, list[Record] | Exception] | None = None,
        songs: dict[int, SongInfo | Exception] | None = None,
    ):
        self.levels = levels or {}
        self.pages = pages or {}
        self.songs = songs or {}
        self.level_calls: list[int] = []
        self.page_calls: list[tuple[LevelListType, int]] = []
        self.song_calls: list[int] = []
        self.closed = False

    async def list_levels(self, list_type: LevelListType, page: int) -> list[Record]:
        self.page_calls.append((list_type, page))
        result = self.pages.get(page, [])
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch_level(self, level_id: int) -> Record:
        self.level_calls.append(level_id)
        result = self.levels.get(level_id, {})
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch_song_info(self, song_id: int) -> SongInfo:
        self.song_calls.append(song_id)
        result = self.songs.get(song_id)
        if result is None:
            raise UpstreamError("-1", "getGJSongInfo")
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


class FakeDownloader:
    """Returns canned bytes per URL and records every request."""

    def __init__(self, failing: set[str] | None = None):
        self.failing = failing or set()
        self.requested: list[str] = []

    async def fetch_bytes(self, url: str) -> bytes:
        self.requested.append(url)
        if url in self.failing:
            raise DownloadFailure(url, 404, "Not Found")
        return f"audio:{url}".encode()


class CrashingDownloader(FakeDownloader):
    """Raises an unexpected error for the given URLs."""

    def __init__(self, crashing: set[str]):
        super().__init__()
        self.crashing = crashing

    async def fetch_bytes(self, url: str) -> bytes:
        if url in self.crashing:
            self.requested.append(url)
            raise RuntimeError(f"decoder blew up on {url}")
        return await super().fetch_bytes(url)


class BlockingDownloader(FakeDownloader):
    """Holds every download until ``release`` is set."""

    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def fetch_bytes(self, url: str) -> bytes:
        self.started.set()
        await self.release.wait()
        return await super().fetch_bytes(url)
