"""
Handles the low-level downloading of audio files over HTTP.
"""

import asyncio
import logging

import aiohttp

from gd_audio_cache.exceptions import DownloadFailure

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool(timeout: float = 120) -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession for downloads.

    This function ensures that only one connection pool is created for the
    lifetime of the application run.

    Args:
        timeout: Total timeout in seconds for a single download.
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=16,
            ttl_dns_cache=600,  # 10 minutes
            enable_cleanup_closed=True,
        )
        _connection_pool = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=timeout, sock_connect=15),
        )
        log.debug("Created download connection pool.")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared downloader connection pool closed.")


class Downloader:
    """
    Fetches asset bytes with a bounded timeout. Transport failures are retried
    once; an HTTP error status is final.
    """

    def __init__(
        self, max_attempts: int = 2, base_delay: float = 1.5, timeout: float = 120
    ):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.timeout = timeout

    async def fetch_bytes(self, url: str) -> bytes:
        """
        Downloads a whole file into memory.

        Raises:
            DownloadFailure: On a non-2xx response or once all attempts failed.
        """
        last_exception: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                session = await get_connection_pool(self.timeout)
                # The pool is shared, so its own timeout may belong to another Downloader.
                async with session.get(
                    url,
                    allow_redirects=True,
                    timeout=aiohttp.ClientTimeout(total=self.timeout, sock_connect=15),
                ) as response:
                    if response.status >= 300:
                        body = await response.text(errors="replace")
                        raise DownloadFailure(url, response.status, body[:200])
                    return await response.read()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                log.debug(
                    f"Download attempt {attempt}/{self.max_attempts} for "
                    f"'{url}' failed: {e!r}."
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.base_delay * (2 ** (attempt - 1)))

        raise DownloadFailure(url, detail=repr(last_exception)) from last_exception
