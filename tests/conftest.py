"""Shared fixtures for the test suite."""

from pathlib import Path

import pytest

from gd_audio_cache.core.refresh import RefreshOrchestrator
from gd_audio_cache.storage.cache import AssetStore

from .fakes import FakeDownloader, FakeUpstream, custom_song


@pytest.fixture
def store(tmp_path: Path) -> AssetStore:
    return AssetStore(tmp_path / "songs", tmp_path / "sfx")


@pytest.fixture
def single_level_upstream() -> FakeUpstream:
    """One featured page holding one level with two songs and one sfx."""
    return FakeUpstream(
        pages={0: [{1: "500", 2: "Test Level"}]},
        levels={500: {1: "500", 52: "10,20", 53: "30"}},
        songs={10: custom_song(), 20: custom_song()},
    )


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def orchestrator(single_level_upstream, store, downloader) -> RefreshOrchestrator:
    return RefreshOrchestrator(
        single_level_upstream, store, downloader, featured_pages=1
    )
