"""Periodically refreshed local time-of-day for the displayed location."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from weather_dashboard.config import CLOCK_TICK_SECONDS
from weather_dashboard.dashboard.presentation import PLACEHOLDER, local_time

logger = logging.getLogger(__name__)


class LocalClock:
    """Keeps ``value`` at the current HH:MM for a UTC offset.

    The refresh runs as an asyncio task; ``stop()`` cancels it, and the
    clock is replaced whenever a new snapshot is displayed.
    """

    def __init__(
        self,
        tz_offset: Optional[int],
        interval: float = CLOCK_TICK_SECONDS,
        on_tick: Optional[Callable[[str], None]] = None,
        now: Optional[Callable[[], datetime]] = None
    ):
        self.tz_offset = tz_offset
        self.interval = interval
        self.on_tick = on_tick
        self._now = now
        self.value = PLACEHOLDER
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def refresh(self) -> str:
        self.value = local_time(self.tz_offset, self._now() if self._now else None)
        if self.on_tick:
            self.on_tick(self.value)
        return self.value

    def start(self) -> None:
        """Render immediately, then keep refreshing every interval.

        Offsets that are not numbers leave the placeholder and start no task.
        """
        self.stop()
        self.refresh()
        if self.value == PLACEHOLDER:
            return
        self._task = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.refresh()

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def aclose(self) -> None:
        """Cancel the refresh task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Local clock stopped")

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
