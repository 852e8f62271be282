"""
Soccerverse Bot - Name Mappings Package
=======================================

Downloads the third-party data pack, decodes it into name tables, keeps
them fresh and serves synchronous name resolution.

Author: Soccerverse Bot
"""

from svbot.mappings.errors import (
    LoadFailure,
    MalformedDocument,
    MappingError,
    PersistenceFailure,
    TransportFailure,
)
from svbot.mappings.facade import NameResolutionFacade
from svbot.mappings.refresher import MappingRefresher, MappingStats, RefreshState
from svbot.mappings.scheduler import WeeklyRefreshScheduler
from svbot.mappings.snapshot import SnapshotFile, SnapshotMeta
from svbot.mappings.source import RemoteDataSource
from svbot.mappings.store import ClubMatch, MappingStore, MappingTables

__all__ = [
    "ClubMatch",
    "LoadFailure",
    "MalformedDocument",
    "MappingError",
    "MappingRefresher",
    "MappingStats",
    "MappingStore",
    "MappingTables",
    "NameResolutionFacade",
    "PersistenceFailure",
    "RefreshState",
    "RemoteDataSource",
    "SnapshotFile",
    "SnapshotMeta",
    "TransportFailure",
    "WeeklyRefreshScheduler",
]
