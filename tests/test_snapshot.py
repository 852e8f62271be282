"""
Tests for the persisted mapping snapshot file.
"""

import json
import os
from datetime import timedelta, timezone
from unittest.mock import patch

import pytest

from svbot.mappings.errors import LoadFailure, PersistenceFailure
from svbot.mappings.snapshot import SnapshotFile, SnapshotMeta, parse_timestamp
from svbot.mappings.store import MappingStore
from tests.helpers import DATA_PACK_URL, NOW, write_snapshot


class TestSave:
    def test_writes_document_with_meta(self, snapshot_file, sample_pack):
        write_snapshot(snapshot_file, sample_pack, NOW)

        on_disk = json.loads(snapshot_file.path.read_text(encoding="utf-8"))
        assert on_disk["PackData"] == sample_pack["PackData"]
        assert on_disk["meta"] == {
            "lastUpdate": NOW.isoformat(),
            "source": DATA_PACK_URL,
            "version": "3.0",
        }

    def test_does_not_mutate_the_fetched_document(self, snapshot_file, sample_pack):
        write_snapshot(snapshot_file, sample_pack, NOW)

        assert "meta" not in sample_pack

    def test_overwrites_existing_meta(self, snapshot_file, sample_pack):
        sample_pack["meta"] = {"lastUpdate": "stale", "version": "1.0"}

        write_snapshot(snapshot_file, sample_pack, NOW)

        assert snapshot_file.load().version == "3.0"

    def test_non_ascii_names_are_kept_readable(self, snapshot_file, sample_pack):
        write_snapshot(snapshot_file, sample_pack, NOW)

        assert "Stade de Genève" in snapshot_file.path.read_text(encoding="utf-8")

    def test_failed_replace_keeps_previous_snapshot(self, snapshot_file, sample_pack, updated_pack):
        write_snapshot(snapshot_file, sample_pack, NOW)

        with patch("svbot.mappings.snapshot.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceFailure):
                write_snapshot(snapshot_file, updated_pack, NOW + timedelta(days=7))

        loaded = snapshot_file.load()
        assert loaded.last_update == NOW
        assert loaded.document["PackData"] == sample_pack["PackData"]
        assert os.listdir(snapshot_file.path.parent) == [snapshot_file.path.name]

    def test_unwritable_directory(self, tmp_path, sample_pack):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        snapshot = SnapshotFile(blocker / "soccerverse_data.json")

        with pytest.raises(PersistenceFailure):
            write_snapshot(snapshot, sample_pack, NOW)


class TestLoad:
    def test_round_trip_rebuilds_identical_tables(self, snapshot_file, sample_pack):
        original = MappingStore()
        original.rebuild_from(sample_pack)
        write_snapshot(snapshot_file, sample_pack, NOW)

        loaded = snapshot_file.load()
        reloaded = MappingStore()
        reloaded.rebuild_from(loaded.document)

        assert reloaded.tables == original.tables
        assert loaded.last_update == NOW
        assert loaded.source == DATA_PACK_URL

    def test_missing_file(self, snapshot_file):
        assert not snapshot_file.exists()
        with pytest.raises(LoadFailure):
            snapshot_file.load()

    def test_corrupt_json(self, snapshot_file):
        snapshot_file.path.parent.mkdir(parents=True)
        snapshot_file.path.write_text("{not json", encoding="utf-8")

        with pytest.raises(LoadFailure):
            snapshot_file.load()

    def test_missing_pack_data(self, snapshot_file):
        snapshot_file.path.parent.mkdir(parents=True)
        snapshot_file.path.write_text(json.dumps({"meta": {}}), encoding="utf-8")

        with pytest.raises(LoadFailure):
            snapshot_file.load()

    def test_missing_meta_means_unknown_age(self, snapshot_file, sample_pack):
        snapshot_file.path.parent.mkdir(parents=True)
        snapshot_file.path.write_text(json.dumps(sample_pack), encoding="utf-8")

        loaded = snapshot_file.load()

        assert loaded.last_update is None
        assert loaded.version is None

    def test_unreadable_timestamp_means_unknown_age(self, snapshot_file, sample_pack):
        snapshot_file.path.parent.mkdir(parents=True)
        sample_pack["meta"] = {"lastUpdate": "last sunday", "version": "3.0"}
        snapshot_file.path.write_text(json.dumps(sample_pack), encoding="utf-8")

        assert snapshot_file.load().last_update is None


class TestParseTimestamp:
    def test_z_suffix(self):
        assert parse_timestamp("2026-10-18T12:00:00.000Z") == NOW

    def test_naive_is_utc(self):
        assert parse_timestamp("2026-10-18T12:00:00").tzinfo == timezone.utc

    def test_invalid(self):
        assert parse_timestamp("") is None
        assert parse_timestamp(1234) is None
        assert parse_timestamp("yesterday") is None


class TestSnapshotMeta:
    def test_to_json_keys(self):
        meta = SnapshotMeta(last_update=NOW, source=DATA_PACK_URL, version="3.0")

        assert set(meta.to_json()) == {"lastUpdate", "source", "version"}
