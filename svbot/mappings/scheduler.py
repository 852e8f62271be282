"""
Soccerverse Bot - Weekly Mapping Refresh Scheduler
==================================================

Fires a forced mapping refresh every Sunday at 03:00 Europe/Paris.

The scheduler only knows when to fire; what a refresh does lives in
MappingRefresher, so the refresh policy can be exercised directly.

Author: Soccerverse Bot
"""

import asyncio
from datetime import datetime, timedelta, tzinfo
from typing import Awaitable, Callable, Optional

from svbot.core.config import (
    PARIS_TZ,
    SCHEDULER_ERROR_RETRY,
    WEEKLY_REFRESH_HOUR,
    WEEKLY_REFRESH_MINUTE,
    WEEKLY_REFRESH_WEEKDAY,
)
from svbot.core.logger import logger


WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


# =============================================================================
# Weekly Refresh Scheduler
# =============================================================================

class WeeklyRefreshScheduler:
    """Cancellable background task calling a coroutine once a week."""

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        weekday: int = WEEKLY_REFRESH_WEEKDAY,
        hour: int = WEEKLY_REFRESH_HOUR,
        minute: int = WEEKLY_REFRESH_MINUTE,
        tz: tzinfo = PARIS_TZ,
        error_retry_seconds: int = SCHEDULER_ERROR_RETRY,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            callback: Async function to run at each occurrence
            weekday: Day of week (Monday == 0, Sunday == 6)
            hour: Local hour of the occurrence
            minute: Local minute of the occurrence
            tz: Timezone the schedule is expressed in
            error_retry_seconds: Wait before looping again after an unexpected error
        """
        self.callback = callback
        self.weekday = weekday
        self.hour = hour
        self.minute = minute
        self.tz = tz
        self.error_retry_seconds = error_retry_seconds

        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def schedule_label(self) -> str:
        return f"{WEEKDAY_NAMES[self.weekday]} {self.hour:02d}:{self.minute:02d} {self.tz}"

    def next_run(self, now: Optional[datetime] = None) -> datetime:
        """
        Next occurrence strictly after now, in the scheduler timezone.

        Args:
            now: Reference time (aware); defaults to the current time
        """
        now = (now or datetime.now(self.tz)).astimezone(self.tz)
        days_ahead = (self.weekday - now.weekday()) % 7
        candidate_date = now.date() + timedelta(days=days_ahead)
        candidate = datetime(
            candidate_date.year, candidate_date.month, candidate_date.day,
            self.hour, self.minute, tzinfo=self.tz,
        )
        if candidate <= now:
            candidate_date += timedelta(days=7)
            candidate = datetime(
                candidate_date.year, candidate_date.month, candidate_date.day,
                self.hour, self.minute, tzinfo=self.tz,
            )
        return candidate

    async def start(self) -> None:
        """Start the scheduler."""
        if self._running:
            logger.warning("Mapping refresh scheduler already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._scheduler_loop(), name="mapping-weekly-refresh")
        logger.info("⏰ Mapping Refresh Scheduler Started", [
            ("Schedule", f"weekly, {self.schedule_label}"),
            ("Next Run", self.next_run().strftime("%Y-%m-%d %H:%M %Z")),
        ])

    async def stop(self) -> None:
        """Stop the scheduler."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("🛑 Mapping refresh scheduler stopped")

    async def _scheduler_loop(self) -> None:
        last_target: Optional[datetime] = None
        while self._running:
            try:
                now = datetime.now(self.tz)
                # An early wake-up must not fire the same occurrence twice
                target_time = self.next_run(max(now, last_target) if last_target else now)
                last_target = target_time
                # Same-tzinfo subtraction ignores DST offsets
                wait_seconds = max(0.0, target_time.timestamp() - now.timestamp())

                logger.info("⏰ Next Mapping Refresh Scheduled", [
                    ("Time", target_time.strftime("%Y-%m-%d %H:%M %Z")),
                    ("Wait", f"{wait_seconds / 3600:.1f} hours"),
                ])

                await asyncio.sleep(wait_seconds)

                if self._running:
                    await self.callback()

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Error In Mapping Refresh Scheduler", [
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)),
                ])
                await asyncio.sleep(self.error_retry_seconds)


__all__ = ["WeeklyRefreshScheduler"]
