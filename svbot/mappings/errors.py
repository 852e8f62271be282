"""
Soccerverse Bot - Mapping Errors
================================

Failure taxonomy for the name mapping subsystem.

Author: Soccerverse Bot
"""

from typing import Optional


class MappingError(Exception):
    """Base class for every mapping refresh/load failure."""
    pass


class TransportFailure(MappingError):
    """Network error, timeout or non-2xx response while fetching the data pack."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class MalformedDocument(MappingError):
    """Fetched body is not a data pack (bad JSON or no PackData object)."""
    pass


class PersistenceFailure(MappingError):
    """Snapshot could not be written. In-memory tables are already updated."""
    pass


class LoadFailure(MappingError):
    """Persisted snapshot is missing, unreadable or structurally invalid."""
    pass


__all__ = [
    "MappingError",
    "TransportFailure",
    "MalformedDocument",
    "PersistenceFailure",
    "LoadFailure",
]
