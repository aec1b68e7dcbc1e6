"""Tests for the cron-driven refresh trigger."""

import asyncio
from datetime import datetime

from gd_audio_cache.core.scheduler import RefreshScheduler
from gd_audio_cache.exceptions import RefreshInProgressError


class RecordingOrchestrator:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.runs = 0

    async def run(self):
        self.runs += 1
        if self.error:
            raise self.error


def test_next_fire_time_every_two_hours() -> None:
    scheduler = RefreshScheduler(RecordingOrchestrator(), "0 */2 * * *")
    assert scheduler.next_fire_time(datetime(2025, 5, 14, 13, 30)) == datetime(
        2025, 5, 14, 14, 0
    )
    assert scheduler.next_fire_time(datetime(2025, 5, 14, 22, 0)) == datetime(
        2025, 5, 15, 0, 0
    )


async def test_trigger_runs_refresh() -> None:
    orchestrator = RecordingOrchestrator()
    await RefreshScheduler(orchestrator, "* * * * *").trigger()
    assert orchestrator.runs == 1


async def test_trigger_swallows_errors(caplog) -> None:
    orchestrator = RecordingOrchestrator(RuntimeError("boom"))
    await RefreshScheduler(orchestrator, "* * * * *").trigger()
    assert "Scheduled refresh failed" in caplog.text


async def test_trigger_skips_when_running() -> None:
    orchestrator = RecordingOrchestrator(RefreshInProgressError("busy"))
    await RefreshScheduler(orchestrator, "* * * * *").trigger()
    assert orchestrator.runs == 1


async def test_run_soon_and_stop() -> None:
    orchestrator = RecordingOrchestrator()
    scheduler = RefreshScheduler(orchestrator, "0 0 1 1 *")

    await scheduler.run_soon()
    scheduler.start()
    await asyncio.sleep(0)
    await scheduler.stop()

    assert orchestrator.runs == 1
