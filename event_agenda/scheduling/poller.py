"""Poll scheduler: re-run discovery every N minutes while enabled.

Reconfiguring always replaces the schedule: the old periodic task is
cancelled and, if still enabled with a positive interval, a new one starts.
Each tick runs the callback in its own task so a slow or failing discovery
does not delay the next tick. A tick that finds the previous call still in
flight is skipped, not queued.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)


TickCallback = Callable[[], Awaitable[Any]]


class PollScheduler:
    """Periodic discovery trigger backed by an asyncio task."""

    def __init__(
        self,
        callback: TickCallback,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._callback = callback
        self._loop = loop
        self._enabled = False
        self._interval_minutes: float = 0
        self._periodic: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()
        self.tick_count = 0
        self.skipped_ticks = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def interval_minutes(self) -> float:
        return self._interval_minutes

    @property
    def is_running(self) -> bool:
        """True while a periodic schedule is installed."""
        return self._periodic is not None and not self._periodic.done()

    def configure(self, enabled: bool, interval_minutes: float) -> None:
        """Replace the current schedule.

        Args:
            enabled: Whether polling is on.
            interval_minutes: Cadence; values <= 0 disable polling.
        """
        self._cancel_periodic()
        self._enabled = enabled
        self._interval_minutes = interval_minutes

        if not enabled or interval_minutes <= 0:
            logger.info("Polling disabled")
            return

        loop = self._loop or asyncio.get_running_loop()
        self._periodic = loop.create_task(self._run(interval_minutes * 60))
        logger.info(f"Polling every {interval_minutes:g} minute(s)")

    def cancel(self) -> None:
        """Cancel the periodic task and any in-flight tick without waiting."""
        self._cancel_periodic()
        for task in list(self._in_flight):
            task.cancel()

    async def stop(self) -> None:
        """Cancel everything and wait for the tasks to finish unwinding."""
        pending = [t for t in [self._periodic, *self._in_flight] if t is not None]
        self.cancel()
        self._enabled = False
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._in_flight.clear()

    def _cancel_periodic(self) -> None:
        if self._periodic is not None:
            self._periodic.cancel()
            self._periodic = None

    async def _run(self, interval_seconds: float) -> None:
        try:
            while True:
                await asyncio.sleep(interval_seconds)
                self._tick()
        except asyncio.CancelledError:
            logger.debug("Poll loop cancelled")
            raise

    def _tick(self) -> None:
        if self._in_flight:
            self.skipped_ticks += 1
            logger.info("Previous discovery still running; poll tick skipped")
            return

        self.tick_count += 1
        task = asyncio.get_running_loop().create_task(self._invoke())
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _invoke(self) -> None:
        try:
            await self._callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Scheduled discovery failed")
