"""
Collects the audio assets referenced by a level.
"""

import asyncio
import logging

from gd_audio_cache.api.client import UpstreamClient
from gd_audio_cache.api.records import split_ids
from gd_audio_cache.models.audio import AssetReference, AudioKind, LevelAssets, Record

from .resolver import resolve_audio

log = logging.getLogger(__name__)

# 35 is the main song and the only one 2.1 levels have; 52 and 53 are the
# 2.2 song and sfx lists.
LEGACY_SONG_FIELD = 35
SONG_LIST_FIELD = 52
SFX_LIST_FIELD = 53


def song_ids_of(level: Record) -> list[int]:
    if level.get(SONG_LIST_FIELD):
        return split_ids(level[SONG_LIST_FIELD])
    return split_ids(level.get(LEGACY_SONG_FIELD))


def sfx_ids_of(level: Record) -> list[int]:
    return split_ids(level.get(SFX_LIST_FIELD))


async def _resolve_all(
    client: UpstreamClient, ids: list[int], kind: AudioKind, use_ng_proxy: bool
) -> tuple[list[AssetReference], int]:
    """Resolves ids concurrently; a failing id is logged and left out."""
    results = await asyncio.gather(
        *(resolve_audio(client, audio_id, kind, use_ng_proxy) for audio_id in ids),
        return_exceptions=True,
    )

    references = []
    failed = 0
    for audio_id, result in zip(ids, results):
        if isinstance(result, Exception):
            failed += 1
            log.warning(
                f"[yellow]Could not resolve {kind.value} {audio_id}: {result}[/yellow]"
            )
        else:
            references.append(result)
    return references, failed


async def collect_level_assets(
    client: UpstreamClient, level_id: int, use_ng_proxy: bool = False
) -> LevelAssets:
    """
    Fetches a level and resolves every song and sound effect it uses.

    Raises:
        UpstreamError: If the level itself cannot be fetched.
    """
    log.info(f"Downloading data for level {level_id}")
    level = await client.fetch_level(level_id)

    (songs, failed_songs), (sfx, failed_sfx) = await asyncio.gather(
        _resolve_all(client, song_ids_of(level), AudioKind.SONG, use_ng_proxy),
        _resolve_all(client, sfx_ids_of(level), AudioKind.SFX, use_ng_proxy),
    )

    return LevelAssets(
        level_id=level_id, songs=songs, sfx=sfx, failed=failed_songs + failed_sfx
    )
