"""
Tests for the weekly refresh scheduler.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

from svbot.core.config import PARIS_TZ
from svbot.mappings.scheduler import WeeklyRefreshScheduler


def _paris(*args) -> datetime:
    return datetime(*args, tzinfo=PARIS_TZ)


class TestNextRun:
    def setup_method(self):
        self.scheduler = WeeklyRefreshScheduler(AsyncMock())

    def test_midweek_goes_to_coming_sunday(self):
        # Wednesday 2026-10-14
        assert self.scheduler.next_run(_paris(2026, 10, 14, 18, 30)) == _paris(2026, 10, 18, 3, 0)

    def test_sunday_before_three_is_same_day(self):
        assert self.scheduler.next_run(_paris(2026, 10, 18, 2, 59)) == _paris(2026, 10, 18, 3, 0)

    def test_exactly_at_three_is_next_week(self):
        assert self.scheduler.next_run(_paris(2026, 10, 18, 3, 0)) == _paris(2026, 10, 25, 3, 0)

    def test_sunday_afternoon_is_next_week(self):
        assert self.scheduler.next_run(_paris(2026, 10, 18, 15, 0)) == _paris(2026, 10, 25, 3, 0)

    def test_utc_input_is_converted(self):
        # 2026-10-18 00:30 UTC is 02:30 in Paris (CEST)
        now = datetime(2026, 10, 18, 0, 30, tzinfo=timezone.utc)

        assert self.scheduler.next_run(now) == _paris(2026, 10, 18, 3, 0)

    def test_result_is_in_paris_time(self):
        result = self.scheduler.next_run(_paris(2026, 1, 7, 12, 0))

        assert result.weekday() == 6
        assert (result.hour, result.minute) == (3, 0)
        assert result.tzinfo == PARIS_TZ

    def test_custom_schedule(self):
        scheduler = WeeklyRefreshScheduler(AsyncMock(), weekday=0, hour=9, minute=15)

        assert scheduler.next_run(_paris(2026, 10, 18, 12, 0)) == _paris(2026, 10, 19, 9, 15)


class ImmediateScheduler(WeeklyRefreshScheduler):
    """Scheduler whose next occurrence is always a few milliseconds away."""

    def next_run(self, now=None):
        now = now or datetime.now(self.tz)
        return now + timedelta(milliseconds=5)


class TestLifecycle:
    def test_start_and_stop(self):
        scheduler = WeeklyRefreshScheduler(AsyncMock())

        async def run():
            await scheduler.start()
            assert scheduler.is_running
            await scheduler.stop()

        asyncio.run(run())

        assert not scheduler.is_running

    def test_fires_callback(self):
        callback = AsyncMock()
        scheduler = ImmediateScheduler(callback)

        async def run():
            await scheduler.start()
            await asyncio.sleep(0.05)
            await scheduler.stop()

        asyncio.run(run())

        assert callback.await_count >= 1

    def test_callback_error_does_not_kill_the_loop(self):
        callback = AsyncMock(side_effect=RuntimeError("boom"))
        scheduler = ImmediateScheduler(callback, error_retry_seconds=0)

        async def run():
            await scheduler.start()
            await asyncio.sleep(0.05)
            assert scheduler._task is not None and not scheduler._task.done()
            await scheduler.stop()

        asyncio.run(run())

        assert callback.await_count >= 2

    def test_double_start_keeps_one_task(self):
        scheduler = WeeklyRefreshScheduler(AsyncMock())

        async def run():
            await scheduler.start()
            task = scheduler._task
            await scheduler.start()
            assert scheduler._task is task
            await scheduler.stop()

        asyncio.run(run())

    def test_early_wake_up_fires_once(self):
        # Wall clock stuck just before Sunday 03:00, as after an early wake-up
        class FrozenDatetime(datetime):
            @classmethod
            def now(cls, tz=None):
                return cls(2026, 10, 18, 2, 59, 59, 999000, tzinfo=PARIS_TZ)

        callback = AsyncMock()
        scheduler = WeeklyRefreshScheduler(callback)

        async def run():
            await scheduler.start()
            await asyncio.sleep(0.05)
            await scheduler.stop()

        with patch("svbot.mappings.scheduler.datetime", FrozenDatetime):
            asyncio.run(run())

        assert callback.await_count == 1
