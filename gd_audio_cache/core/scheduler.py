"""
Cron-driven background trigger for refresh runs.
"""

import asyncio
import logging
from contextlib import suppress
from datetime import datetime

from croniter import croniter

from gd_audio_cache.exceptions import RefreshInProgressError

from .refresh import RefreshOrchestrator

log = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Fires ``orchestrator.run()`` on a cron schedule, in local time.

    A trigger that lands while a run is still going is skipped. Errors from a
    run are logged and the schedule carries on.
    """

    def __init__(self, orchestrator: RefreshOrchestrator, cron_expression: str):
        self.orchestrator = orchestrator
        self.cron_expression = cron_expression
        self._task: asyncio.Task | None = None
        self._pending: asyncio.Task | None = None

    def next_fire_time(self, now: datetime | None = None) -> datetime:
        base = now or datetime.now()
        return croniter(self.cron_expression, base).get_next(datetime)

    async def trigger(self) -> None:
        """Runs one refresh, swallowing and logging any failure."""
        try:
            await self.orchestrator.run()
        except RefreshInProgressError:
            log.info("Scheduled refresh skipped, a refresh is already running.")
        except Exception:
            log.exception("Scheduled refresh failed")

    def run_soon(self) -> asyncio.Task:
        """Fires a refresh in the background right away, e.g. at startup."""
        self._pending = asyncio.create_task(self.trigger())
        return self._pending

    def start(self) -> None:
        """Starts the background scheduling task."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._schedule_loop())
            log.debug(f"Started refresh scheduler ({self.cron_expression}).")

    async def _schedule_loop(self) -> None:
        while True:
            now = datetime.now()
            fire_at = self.next_fire_time(now)
            delay = max((fire_at - now).total_seconds(), 0)
            log.debug(f"Next refresh scheduled at {fire_at:%Y-%m-%d %H:%M}.")
            await asyncio.sleep(delay)
            await self.trigger()

    async def stop(self) -> None:
        """Stops the schedule and any refresh it started in the background."""
        for task in (self._task, self._pending):
            if task and not task.done():
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
        log.debug("Stopped refresh scheduler.")
