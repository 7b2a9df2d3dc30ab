"""
Periodic watering reminder job.

Runs NotificationService.check_and_create_watering_notifications every
``interval`` seconds on its own asyncio task, independent of request
handling. Started and stopped from the FastAPI lifespan in planter/main.py.

- stop() halts future ticks; a tick already running is awaited, not cancelled
- ticks never overlap: a tick that finds the previous one still running is
  skipped
- a failing tick is logged and the loop keeps going
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from planter.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class WateringNotificationsJob:
    """Background ticker for watering reminders."""

    def __init__(self, service_factory: Callable[[], NotificationService], interval: float):
        self.service_factory = service_factory
        self.interval = interval
        self._stop_event = asyncio.Event()
        self._tick_lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            logger.warning("Watering notifications job already running")
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self._run(), name="watering-notifications")
        logger.info(f"Watering notifications job started (interval={self.interval}s)")

    async def stop(self) -> None:
        """Signal the loop to exit and wait for it, letting a running tick finish."""
        self._stop_event.set()

        if self._task is not None:
            await self._task
            self._task = None

        logger.info("Watering notifications job stopped")

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                await self.tick()

    async def tick(self) -> bool:
        """
        Run one sweep unless another is in progress.

        Returns:
            True if the sweep ran, False if it was skipped
        """
        if self._tick_lock.locked():
            logger.warning("Previous watering check still running, skipping tick")
            return False

        async with self._tick_lock:
            try:
                service = self.service_factory()
                await service.check_and_create_watering_notifications(datetime.now(timezone.utc))
            except Exception as e:
                logger.error(f"Error checking watering notifications: {e}", exc_info=True)

        return True
