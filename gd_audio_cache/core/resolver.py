"""
Turns an audio id into a downloadable AssetReference.
"""

import logging
from urllib.parse import unquote

from gd_audio_cache.api.client import UpstreamClient
from gd_audio_cache.exceptions import UpstreamError
from gd_audio_cache.models.audio import AssetReference, AudioKind

log = logging.getLogger(__name__)

SFX_URL = "https://geometrydashfiles.b-cdn.net/sfx/s{id}.ogg"
CUSTOM_SONG_URL = "https://geometrydashfiles.b-cdn.net/music/{id}.ogg"
CUSTOM_URL_MARKER = "CUSTOMURL"
SONG_URL_FIELD = 10

NEWGROUNDS_AUDIO_HOST = "audio.ngfiles.com"
NEWGROUNDS_PROXY_HOST = "ngproxy.dankmeme.dev"


def sfx_url(sfx_id: int) -> str:
    return SFX_URL.format(id=sfx_id)


def custom_song_url(song_id: int) -> str:
    return CUSTOM_SONG_URL.format(id=song_id)


def apply_ng_proxy(url: str) -> str:
    """Points a Newgrounds audio URL at the Newgrounds proxy host."""
    return url.replace(NEWGROUNDS_AUDIO_HOST, NEWGROUNDS_PROXY_HOST)


async def resolve_audio(
    client: UpstreamClient,
    audio_id: int,
    kind: AudioKind,
    use_ng_proxy: bool = False,
) -> AssetReference:
    """
    Resolves the download URL of a song or sound effect.

    Sound effects always live on the CDN. Songs are looked up through the
    platform: a song that is not available for use comes back with
    ``available=False`` and no URL; ``CUSTOMURL`` songs live on the CDN; any
    other song is downloaded from its (percent-encoded) URL in field 10.

    Raises:
        UpstreamError: If the song info lookup fails or carries no URL.
    """
    if kind is AudioKind.SFX:
        return AssetReference(id=audio_id, kind=kind, download_url=sfx_url(audio_id))

    log.debug(f"Getting song info for song {audio_id}")
    info = await client.fetch_song_info(audio_id)

    if not info.available:
        log.warning(f"[yellow]Song {audio_id} is not available for use.[/yellow]")
        return AssetReference(id=audio_id, kind=kind, available=False)

    raw_url = info.get(SONG_URL_FIELD)
    if not raw_url:
        raise UpstreamError(f"song {audio_id} has no download URL", "getGJSongInfo")

    if raw_url == CUSTOM_URL_MARKER:
        url = custom_song_url(audio_id)
    else:
        url = unquote(raw_url)

    if use_ng_proxy:
        url = apply_ng_proxy(url)

    return AssetReference(id=audio_id, kind=kind, download_url=url)
