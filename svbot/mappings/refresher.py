"""
Soccerverse Bot - Mapping Refresher
===================================

Owns the refresh policy and the persisted snapshot for the name tables.

State machine:
    UNINITIALIZED --load ok--> READY(last_update=T)
    UNINITIALIZED --load failed--> READY(None) --> forced refresh
    READY --stale or forced--> REFRESHING --ok--> READY(now)
                                          --failed--> READY(previous)

DESIGN: Only one refresh runs at a time. The in-flight refresh is a single
asyncio.Task that every concurrent caller awaits through asyncio.shield,
so a second request never starts a second download or snapshot write, and
a caller that gives up waiting does not cancel the shared refresh.

Author: Soccerverse Bot
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from svbot.core.config import MAPPING_REFRESH_INTERVAL, PARIS_TZ, SNAPSHOT_FORMAT_VERSION
from svbot.core.logger import logger
from svbot.mappings.errors import LoadFailure, MappingError, PersistenceFailure
from svbot.mappings.snapshot import SnapshotFile, SnapshotMeta
from svbot.mappings.source import RemoteDataSource
from svbot.mappings.store import MappingStore


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# State & Stats
# =============================================================================

class RefreshState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    REFRESHING = "refreshing"


@dataclass(frozen=True)
class MappingStats:
    """Snapshot of table sizes and refresh bookkeeping."""
    counts: dict[str, int]
    last_update: Optional[datetime]
    next_scheduled_update: Optional[datetime]
    state: RefreshState
    refresh_in_progress: bool
    last_error: Optional[str]


# =============================================================================
# Mapping Refresher
# =============================================================================

class MappingRefresher:
    """Keeps a MappingStore fresh from the remote data pack."""

    def __init__(
        self,
        store: MappingStore,
        source: RemoteDataSource,
        snapshot: SnapshotFile,
        clock: Callable[[], datetime] = utc_now,
        refresh_interval: timedelta = MAPPING_REFRESH_INTERVAL,
        format_version: str = SNAPSHOT_FORMAT_VERSION,
    ) -> None:
        """
        Initialize the refresher.

        Args:
            store: Store whose tables are rebuilt on refresh
            source: Remote data pack source
            snapshot: Snapshot file (this refresher is its only writer)
            clock: Returns the current aware datetime
            refresh_interval: Age after which data is considered stale
            format_version: Version string written into snapshot meta
        """
        self.store = store
        self.source = source
        self.snapshot = snapshot
        self.refresh_interval = refresh_interval
        self.format_version = format_version
        self._clock = clock

        self._state: RefreshState = RefreshState.UNINITIALIZED
        self._last_update: Optional[datetime] = None
        self._last_error: Optional[str] = None
        self._inflight: Optional[asyncio.Task] = None
        # Bumped each time a refresh promotes new tables
        self._generation = 0

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> RefreshState:
        return self._state

    @property
    def last_update(self) -> Optional[datetime]:
        return self._last_update

    @property
    def refresh_in_progress(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    async def load_persisted_snapshot(self) -> bool:
        """
        Load tables from the snapshot file.

        Returns:
            True if tables are available, from the snapshot or from a refresh
            that finished while it was being read; False if the snapshot was
            missing or invalid

        A snapshot read that completes after a refresh promoted newer
        tables is discarded.
        """
        generation = self._generation
        try:
            loaded = await asyncio.to_thread(self.snapshot.load)
        except LoadFailure as e:
            logger.warning("No Usable Mapping Snapshot", [
                ("Path", str(self.snapshot.path)),
                ("Reason", str(e)),
                ("Action", "Downloading data pack"),
            ])
            self._mark_ready()
            return self._generation != generation

        if self._generation != generation:
            logger.info("Mapping Snapshot Superseded", [
                ("Path", str(self.snapshot.path)),
                ("Snapshot Date", self._format_date(loaded.last_update)),
                ("Serving", "Refreshed tables"),
            ])
            return True

        self.store.rebuild_from(loaded.document)
        self._last_update = loaded.last_update
        self._mark_ready()

        logger.success("Mapping Snapshot Loaded", [
            ("Path", str(self.snapshot.path)),
            ("Last Update", self._format_date(loaded.last_update)),
            ("Version", loaded.version or "Unknown"),
        ])
        return True

    async def initialize(self) -> None:
        """Load the snapshot, then download if it was unusable or stale."""
        if await self.load_persisted_snapshot():
            await self.check_and_refresh_if_stale()
        else:
            await self._refresh_logged("Initial Download")

    # -------------------------------------------------------------------------
    # Refresh Policy
    # -------------------------------------------------------------------------

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        if self._last_update is None:
            return True
        now = now or self._clock()
        return now - self._last_update > self.refresh_interval

    def next_scheduled_update(self) -> Optional[datetime]:
        if self._last_update is None:
            return None
        return self._last_update + self.refresh_interval

    async def check_and_refresh_if_stale(self) -> bool:
        """
        Refresh only if the data is older than the refresh interval.

        Fetch failures are logged and swallowed.

        Returns:
            True if a refresh ran and succeeded
        """
        if not self.is_stale():
            logger.info("Mapping Data Up To Date", [
                ("Last Update", self._format_date(self._last_update)),
                ("Next Update", self._format_date(self.next_scheduled_update())),
            ])
            return False
        return await self._refresh_logged("Stale Data")

    async def scheduled_refresh(self) -> None:
        """Weekly trigger: always refresh, never raise."""
        await self._refresh_logged("Weekly Schedule")

    async def force_refresh(self) -> MappingStats:
        """
        Download the data pack now regardless of age.

        Concurrent calls share the same in-flight refresh.

        Returns:
            Stats after the refresh

        Raises:
            TransportFailure, MalformedDocument: Fetch failed, previous data kept
            PersistenceFailure: Tables updated in memory but snapshot not written
        """
        task = self._inflight
        if task is None or task.done():
            task = asyncio.create_task(self._run_refresh(), name="mapping-refresh")
            task.add_done_callback(self._on_refresh_done)
            self._inflight = task
        else:
            logger.info("Mapping Refresh Already Running", [
                ("Action", "Waiting for in-flight refresh"),
            ])
        await asyncio.shield(task)
        return self.get_stats()

    async def wait_idle(self, timeout: Optional[float] = None) -> None:
        """
        Wait for an in-flight refresh to finish.

        Its outcome is already logged by the refresh itself. A refresh still
        running after timeout seconds is cancelled.
        """
        task = self._inflight
        if task is None or task.done():
            return
        done, _ = await asyncio.wait({task}, timeout=timeout)
        if not done:
            task.cancel()
            await asyncio.wait({task})

    async def _refresh_logged(self, reason: str) -> bool:
        """Run a forced refresh, logging instead of raising on failure."""
        logger.info("🔄 Mapping Refresh Triggered", [
            ("Reason", reason),
        ])
        try:
            await self.force_refresh()
            return True
        except MappingError as e:
            logger.error_tree("Mapping Refresh Failed", e, [
                ("Reason", reason),
                ("Serving", "Previous tables"),
            ])
        except Exception as e:
            logger.exception("Unexpected Mapping Refresh Error", [
                ("Reason", reason),
                ("Error Type", type(e).__name__),
                ("Error", str(e)),
            ])
        return False

    async def _run_refresh(self) -> None:
        self._state = RefreshState.REFRESHING
        try:
            document = await self.source.fetch()

            # Built off to the side and swapped in whole
            self.store.rebuild_from(document)
            self._generation += 1
            now = self._clock()
            self._last_update = now
            self._last_error = None

            meta = SnapshotMeta(last_update=now, source=self.source.url, version=self.format_version)
            try:
                await asyncio.to_thread(self.snapshot.save, document, meta)
            except PersistenceFailure as e:
                logger.error_tree("Mapping Snapshot Not Saved", e, [
                    ("In Memory", "Updated"),
                    ("On Restart", "Previous snapshot will be loaded"),
                ])
                raise
        except Exception as e:
            self._last_error = f"{type(e).__name__}: {e}"
            raise
        finally:
            self._state = RefreshState.READY

        logger.success("Mapping Refresh Complete", [
            ("Last Update", self._format_date(now)),
            ("Next Update", self._format_date(self.next_scheduled_update())),
        ])

    def _mark_ready(self) -> None:
        if not self.refresh_in_progress:
            self._state = RefreshState.READY

    def _on_refresh_done(self, task: asyncio.Task) -> None:
        # Retrieve the exception so an abandoned refresh never warns at shutdown
        if not task.cancelled():
            task.exception()

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------

    def get_stats(self) -> MappingStats:
        return MappingStats(
            counts=self.store.counts(),
            last_update=self._last_update,
            next_scheduled_update=self.next_scheduled_update(),
            state=self._state,
            refresh_in_progress=self.refresh_in_progress,
            last_error=self._last_error,
        )

    @staticmethod
    def _format_date(value: Optional[datetime]) -> str:
        if value is None:
            return "Never"
        return value.astimezone(PARIS_TZ).strftime("%Y-%m-%d %H:%M %Z")


__all__ = ["MappingRefresher", "MappingStats", "RefreshState", "utc_now"]
