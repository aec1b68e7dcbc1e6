"""Tests for turning audio ids into download URLs."""

import pytest

from gd_audio_cache.core.resolver import resolve_audio
from gd_audio_cache.exceptions import UpstreamError
from gd_audio_cache.models.audio import AudioKind, SongInfo

from .fakes import FakeUpstream

NG_URL = "https%3A%2F%2Faudio.ngfiles.com%2F803000%2F803223_Supernova.mp3"


def song(url: str | None, extra: dict[int, str] | None = None) -> SongInfo:
    fields = {1: "803223", 2: "Supernova", **(extra or {})}
    if url is not None:
        fields[10] = url
    return SongInfo(available=True, fields=fields)


class TestSoundEffects:
    """Test sfx resolution."""

    async def test_sfx_uses_cdn_without_lookup(self) -> None:
        upstream = FakeUpstream()
        ref = await resolve_audio(upstream, 30, AudioKind.SFX)
        assert ref.download_url == "https://geometrydashfiles.b-cdn.net/sfx/s30.ogg"
        assert ref.available is True
        assert upstream.song_calls == []

    async def test_sfx_ignores_proxy_mode(self) -> None:
        ref = await resolve_audio(FakeUpstream(), 5, AudioKind.SFX, use_ng_proxy=True)
        assert ref.download_url == "https://geometrydashfiles.b-cdn.net/sfx/s5.ogg"


class TestSongs:
    """Test song resolution."""

    async def test_unavailable_song(self) -> None:
        """Test that an unavailable song gets no URL and is not fetchable."""
        upstream = FakeUpstream(songs={7: SongInfo(available=False)})
        ref = await resolve_audio(upstream, 7, AudioKind.SONG)
        assert ref.available is False
        assert ref.download_url is None
        assert ref.fetchable is False

    @pytest.mark.parametrize("other", [{}, {2: "Anything", 5: "9.1"}])
    async def test_custom_url_song(self, other) -> None:
        """Test that CUSTOMURL songs always map to the CDN, whatever else is set."""
        upstream = FakeUpstream(songs={10000042: song("CUSTOMURL", other)})
        ref = await resolve_audio(upstream, 10000042, AudioKind.SONG)
        assert ref.download_url == (
            "https://geometrydashfiles.b-cdn.net/music/10000042.ogg"
        )

    async def test_url_is_percent_decoded(self) -> None:
        upstream = FakeUpstream(songs={803223: song(NG_URL)})
        ref = await resolve_audio(upstream, 803223, AudioKind.SONG)
        assert ref.download_url == (
            "https://audio.ngfiles.com/803000/803223_Supernova.mp3"
        )

    async def test_proxy_mode_rewrites_newgrounds_host(self) -> None:
        upstream = FakeUpstream(songs={803223: song(NG_URL)})
        ref = await resolve_audio(upstream, 803223, AudioKind.SONG, use_ng_proxy=True)
        assert ref.download_url == (
            "https://ngproxy.dankmeme.dev/803000/803223_Supernova.mp3"
        )

    async def test_proxy_mode_leaves_other_hosts(self) -> None:
        upstream = FakeUpstream(songs={1: song("CUSTOMURL")})
        ref = await resolve_audio(upstream, 1, AudioKind.SONG, use_ng_proxy=True)
        assert ref.download_url == "https://geometrydashfiles.b-cdn.net/music/1.ogg"

    async def test_missing_url_field_raises(self) -> None:
        upstream = FakeUpstream(songs={3: song(None)})
        with pytest.raises(UpstreamError):
            await resolve_audio(upstream, 3, AudioKind.SONG)

    async def test_lookup_error_propagates(self) -> None:
        upstream = FakeUpstream(songs={3: UpstreamError("1005")})
        with pytest.raises(UpstreamError):
            await resolve_audio(upstream, 3, AudioKind.SONG)
