"""
Tests for the periodic watering notifications job.

Covers start/stop, non-overlapping ticks, and error isolation.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from planter.jobs.watering_notifications import WateringNotificationsJob


def _service(side_effect=None):
    service = MagicMock()
    service.check_and_create_watering_notifications = AsyncMock(return_value=0, side_effect=side_effect)
    return service


class TestWateringNotificationsJob:
    """Tests for WateringNotificationsJob."""

    @pytest.mark.asyncio
    async def test_runs_ticks_until_stopped(self):
        service = _service()
        job = WateringNotificationsJob(lambda: service, interval=0.01)

        job.start()
        await asyncio.sleep(0.05)
        await job.stop()

        calls = service.check_and_create_watering_notifications.await_count
        assert calls >= 1
        await asyncio.sleep(0.03)
        assert service.check_and_create_watering_notifications.await_count == calls
        assert not job.running

    @pytest.mark.asyncio
    async def test_stop_before_first_tick_runs_nothing(self):
        service = _service()
        job = WateringNotificationsJob(lambda: service, interval=3600)

        job.start()
        await job.stop()

        service.check_and_create_watering_notifications.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stop_waits_for_running_tick(self):
        started = asyncio.Event()
        finished = []

        async def slow_check(now):
            started.set()
            await asyncio.sleep(0.05)
            finished.append(now)
            return 1

        service = _service(side_effect=slow_check)
        job = WateringNotificationsJob(lambda: service, interval=0.01)

        job.start()
        await asyncio.wait_for(started.wait(), timeout=1)
        await job.stop()

        assert len(finished) == 1

    @pytest.mark.asyncio
    async def test_overlapping_tick_is_skipped(self):
        release = asyncio.Event()

        async def blocking_check(now):
            await release.wait()
            return 0

        service = _service(side_effect=blocking_check)
        job = WateringNotificationsJob(lambda: service, interval=3600)

        first = asyncio.create_task(job.tick())
        await asyncio.sleep(0)
        skipped = await job.tick()
        release.set()
        ran = await first

        assert skipped is False
        assert ran is True
        assert service.check_and_create_watering_notifications.await_count == 1

    @pytest.mark.asyncio
    async def test_tick_errors_do_not_stop_the_loop(self):
        service = _service(side_effect=Exception("database unavailable"))
        job = WateringNotificationsJob(lambda: service, interval=0.01)

        job.start()
        await asyncio.sleep(0.1)
        assert job.running
        await job.stop()

        assert service.check_and_create_watering_notifications.await_count >= 2
