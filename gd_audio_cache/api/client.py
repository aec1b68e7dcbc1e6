"""
Async client for the Geometry Dash platform API (the "boomlings" database).

The API is POST based, form encoded and answers in plain text: records are
``#``-separated sections of ``|``-separated records whose fields are
delimiter-separated key/value pairs.
"""

import logging
import time
from enum import IntEnum
from typing import Any

import aiohttp

from gd_audio_cache.exceptions import UpstreamError
from gd_audio_cache.models.audio import Record, SongInfo
from gd_audio_cache.models.config import DEFAULT_UPSTREAM_URL

from .records import parse_record, parse_record_list

log = logging.getLogger(__name__)

SONG_NOT_AVAILABLE = "-2"
ERROR_PREFIX = "error code: "


class LevelListType(IntEnum):
    """Category codes accepted by the level listing endpoint."""

    SEARCH = 0
    MOST_DOWNLOADED = 1
    MOST_LIKED = 2
    TRENDING = 3
    RECENT = 4
    USER = 5
    FEATURED = 6
    MAGIC = 7
    MAP_PACK = 10
    AWARDED = 11
    FOLLOWED = 12
    FRIENDS = 13
    MOST_LIKED_WORLD = 15
    HALL_OF_FAME = 16
    FEATURED_WORLD = 17
    DAILY_SAFE = 21
    WEEKLY_SAFE = 22
    EVENT_SAFE = 23
    LIST = 25


class UpstreamClient:
    """
    Async client for the three platform endpoints the cache needs: level
    listings, single level downloads and song info lookups.
    """

    SECRET = "Wmfd2893gb7"

    def __init__(self, base_url: str = DEFAULT_UPSTREAM_URL, timeout: float = 30):
        """
        Initializes the API client.

        Args:
            base_url: Root of the database endpoints, without a trailing slash.
            timeout: Total timeout in seconds for a single request.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                # The platform rejects requests carrying a regular user agent.
                headers={"User-Agent": ""},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "UpstreamClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def api_call(self, endpoint: str, **params: Any) -> str:
        """
        POSTs to an endpoint and returns the raw response body.

        Raises:
            UpstreamError: If the server answers with an error code or a
            non-2xx status.
        """
        await self._initialize_session()

        data = {"secret": self.SECRET, **{k: str(v) for k, v in params.items()}}
        url = f"{self.base_url}/{endpoint}.php"
        start_time = time.monotonic()

        async with self._session.post(url, data=data) as r:
            text = (await r.text()).strip()
            duration_ms = (time.monotonic() - start_time) * 1000
            log.debug(f"{endpoint} answered {r.status} in {duration_ms:.0f} ms")

            if text.startswith(ERROR_PREFIX):
                raise UpstreamError.from_response(text, endpoint)
            if r.status >= 400:
                raise UpstreamError(f"HTTP {r.status}", endpoint)
            return text

    # Public API Methods
    async def list_levels(self, list_type: LevelListType, page: int) -> list[Record]:
        """Fetches one page of a level listing."""
        text = await self.api_call("getGJLevels21", type=int(list_type), page=page)
        return parse_record_list(text, "|", ":")

    async def fetch_level(self, level_id: int) -> Record:
        """
        Fetches the full metadata of one level. Ids -1, -2 and -3 address the
        current daily, weekly and event levels.
        """
        text = await self.api_call("downloadGJLevel22", levelID=level_id)
        return parse_record(text.split("#")[0], ":")

    async def fetch_song_info(self, song_id: int) -> SongInfo:
        text = await self.api_call("getGJSongInfo", songID=song_id)
        if text == SONG_NOT_AVAILABLE:
            return SongInfo(available=False)
        return SongInfo(available=True, fields=parse_record(text, "~|~"))
