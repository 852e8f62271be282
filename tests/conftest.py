"""
Shared fixtures for the Soccerverse bot test suite.
"""

from typing import Any

import pytest

from svbot.mappings.snapshot import SnapshotFile
from tests.helpers import FakeClock, make_pack


@pytest.fixture
def sample_pack() -> dict[str, Any]:
    return make_pack(
        ClubData={"C": [
            {"id": "2180", "n": "FC Test"},
            {"id": "17", "n": "Manchester United"},
            {"id": 42, "n": "Servette FC"},
        ]},
        PlayerData={"P": [
            {"id": "9001", "f": "Lionel", "s": "Messi"},
            {"id": "9002", "s": "Ronaldinho"},
        ]},
        LeagueData={"L": [
            {"c": "CHE", "d": 1, "n": "Super League"},
            {"c": "CHE", "d": 2, "n": "Challenge League"},
            {"c": "ENG", "d": "1", "n": "Premier League"},
        ]},
        StadiumData={"S": [
            {"id": "5", "n": "Stade de Genève"},
        ]},
        CupData={"C": [
            {"id": "CHE_CUP", "n": "Coupe de Suisse"},
            {"id": 7, "n": "Coupe des Champions"},
        ]},
    )


@pytest.fixture
def updated_pack() -> dict[str, Any]:
    return make_pack(
        ClubData={"C": [
            {"id": "2180", "n": "FC Test Renamed"},
            {"id": "3000", "n": "New Club"},
        ]},
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def snapshot_file(tmp_path) -> SnapshotFile:
    return SnapshotFile(tmp_path / "mappings" / "soccerverse_data.json")
