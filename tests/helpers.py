"""
Test helpers: fake clock, mocked data source and pack builders.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock

from svbot.mappings.refresher import MappingRefresher
from svbot.mappings.snapshot import SnapshotFile, SnapshotMeta
from svbot.mappings.source import RemoteDataSource
from svbot.mappings.store import MappingStore


DATA_PACK_URL = "https://example.test/sv/pack.json"

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def make_pack(**sections: Any) -> dict[str, Any]:
    return {"PackData": dict(sections)}


class FakeClock:
    """Controllable clock for refresh policy tests."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


def write_snapshot(snapshot: SnapshotFile, pack: dict[str, Any], last_update: datetime) -> None:
    snapshot.save(pack, SnapshotMeta(last_update=last_update, source=DATA_PACK_URL, version="3.0"))


def make_source(
    document: Any = None,
    delay: float = 0.0,
    error: Optional[BaseException] = None,
) -> AsyncMock:
    """AsyncMock RemoteDataSource whose fetch returns document (or raises error)."""
    source = AsyncMock(spec=RemoteDataSource)
    source.url = DATA_PACK_URL

    async def fetch() -> Any:
        if delay:
            await asyncio.sleep(delay)
        if error is not None:
            raise error
        return document

    source.fetch.side_effect = fetch
    return source


def make_refresher(source, snapshot, clock, store: Optional[MappingStore] = None) -> MappingRefresher:
    return MappingRefresher(
        store=store or MappingStore(),
        source=source,
        snapshot=snapshot,
        clock=clock,
    )
