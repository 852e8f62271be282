"""
Soccerverse Bot - Mapping Snapshot File
=======================================

Durable copy of the last successfully fetched data pack.

The file is the raw fetched document with an injected meta object:
    {
        "PackData": {...},
        "meta": {"lastUpdate": "2026-10-18T01:00:00+00:00",
                 "source": "https://...", "version": "3.0"}
    }

Author: Soccerverse Bot
"""

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from svbot.core.logger import logger
from svbot.mappings.errors import LoadFailure, PersistenceFailure


# =============================================================================
# Snapshot Metadata
# =============================================================================

@dataclass(frozen=True)
class SnapshotMeta:
    last_update: datetime
    source: str
    version: str

    def to_json(self) -> dict[str, str]:
        return {
            "lastUpdate": self.last_update.isoformat(),
            "source": self.source,
            "version": self.version,
        }


@dataclass(frozen=True)
class LoadedSnapshot:
    document: dict[str, Any]
    last_update: Optional[datetime]
    source: Optional[str]
    version: Optional[str]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (Z suffix accepted); naive values are UTC."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# Snapshot File
# =============================================================================

class SnapshotFile:
    """Single-writer JSON snapshot on disk."""

    def __init__(self, path: Path) -> None:
        self.path: Path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> LoadedSnapshot:
        """
        Read and validate the persisted snapshot.

        Raises:
            LoadFailure: File missing/unreadable, bad JSON, or no PackData object
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except FileNotFoundError as e:
            raise LoadFailure(f"No snapshot at {self.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise LoadFailure(f"Cannot read snapshot: {e}") from e
        except json.JSONDecodeError as e:
            raise LoadFailure(f"Corrupt snapshot JSON: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("PackData"), dict):
            raise LoadFailure("Snapshot has no PackData object")

        meta = document.get("meta") if isinstance(document.get("meta"), dict) else {}
        last_update = parse_timestamp(meta.get("lastUpdate"))
        if meta.get("lastUpdate") and last_update is None:
            logger.warning("Snapshot Timestamp Unreadable", [
                ("Value", str(meta.get("lastUpdate"))[:50]),
                ("Effect", "Data treated as stale"),
            ])

        return LoadedSnapshot(
            document=document,
            last_update=last_update,
            source=meta.get("source"),
            version=meta.get("version"),
        )

    def save(self, document: dict[str, Any], meta: SnapshotMeta) -> None:
        """
        Write the document plus meta, replacing the previous snapshot atomically.

        Raises:
            PersistenceFailure: Directory/file could not be written
        """
        payload = dict(document)
        payload["meta"] = meta.to_json()

        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
            tmp_name = None
            size_kb = self.path.stat().st_size / 1024
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceFailure(f"Cannot write snapshot {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

        logger.tree("Mapping Snapshot Saved", [
            ("Path", str(self.path)),
            ("Size", f"{size_kb:.1f} KB"),
            ("Last Update", meta.last_update.isoformat()),
        ], emoji="💾")


__all__ = ["SnapshotFile", "SnapshotMeta", "LoadedSnapshot", "parse_timestamp"]
