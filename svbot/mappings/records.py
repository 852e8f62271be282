"""
Soccerverse Bot - Data Pack Record Decoding
===========================================

Decodes the loosely-typed data pack sub-tables into typed records.

Every raw entry becomes exactly one variant: a typed record for the
sub-table, or Malformed with the reason it was rejected. Malformed
entries are counted and dropped; they never abort the table.

Raw shapes:
    ClubData.C     [{"id": "2180", "n": "FC Test"}, ...]
    PlayerData.P   [{"id": "12", "f": "Jean", "s": "Dupont"}, ...]
    LeagueData.L   [{"c": "CHE", "d": 1, "n": "Super League"}, ...]
    StadiumData.S  [{"id": "7", "n": "Stade Test"}, ...]
    CupData.C      [{"id": "CUP_A", "n": "Coupe Test"}, ...]

Author: Soccerverse Bot
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union


# =============================================================================
# Record Variants
# =============================================================================

@dataclass(frozen=True)
class ClubRecord:
    club_id: int
    name: str


@dataclass(frozen=True)
class PlayerRecord:
    player_id: int
    name: str


@dataclass(frozen=True)
class LeagueRecord:
    country_code: str
    division: int
    name: str

    @property
    def key(self) -> str:
        return league_key(self.country_code, self.division)


@dataclass(frozen=True)
class StadiumRecord:
    stadium_id: int
    name: str


@dataclass(frozen=True)
class CupRecord:
    cup_id: str
    name: str


@dataclass(frozen=True)
class Malformed:
    reason: str


Record = Union[ClubRecord, PlayerRecord, LeagueRecord, StadiumRecord, CupRecord]


def league_key(country_code: str, division: int) -> str:
    """Composite league key as stored in the pack, e.g. CHE_1."""
    return f"{country_code}_{division}"


# =============================================================================
# Field Parsing
# =============================================================================

def parse_int_id(value: Any) -> Optional[int]:
    """
    Parse a numeric identifier that may arrive as text.

    Returns:
        The integer, or None for bools, blanks and non-numeric text
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


# =============================================================================
# Per-Table Decoders
# =============================================================================

def decode_club(raw: Any) -> Union[ClubRecord, Malformed]:
    if not isinstance(raw, dict):
        return Malformed("not an object")
    club_id = parse_int_id(raw.get("id"))
    if club_id is None:
        return Malformed("missing or non-numeric id")
    name = _text(raw.get("n"))
    if name is None:
        return Malformed("missing name")
    return ClubRecord(club_id, name)


def decode_player(raw: Any) -> Union[PlayerRecord, Malformed]:
    if not isinstance(raw, dict):
        return Malformed("not an object")
    player_id = parse_int_id(raw.get("id"))
    if player_id is None:
        return Malformed("missing or non-numeric id")
    first = raw.get("f") if isinstance(raw.get("f"), str) else ""
    last = raw.get("s") if isinstance(raw.get("s"), str) else ""
    name = f"{first} {last}".strip()
    if not name:
        return Malformed("missing name")
    return PlayerRecord(player_id, name)


def decode_league(raw: Any) -> Union[LeagueRecord, Malformed]:
    if not isinstance(raw, dict):
        return Malformed("not an object")
    country_code = _text(raw.get("c"))
    if country_code is None:
        return Malformed("missing country code")
    division = parse_int_id(raw.get("d"))
    if division is None or division < 0:
        return Malformed("missing or invalid division")
    name = _text(raw.get("n"))
    if name is None:
        return Malformed("missing name")
    return LeagueRecord(country_code, division, name)


def decode_stadium(raw: Any) -> Union[StadiumRecord, Malformed]:
    if not isinstance(raw, dict):
        return Malformed("not an object")
    stadium_id = parse_int_id(raw.get("id"))
    if stadium_id is None:
        return Malformed("missing or non-numeric id")
    name = _text(raw.get("n"))
    if name is None:
        return Malformed("missing name")
    return StadiumRecord(stadium_id, name)


def decode_cup(raw: Any) -> Union[CupRecord, Malformed]:
    if not isinstance(raw, dict):
        return Malformed("not an object")
    raw_id = raw.get("id")
    if isinstance(raw_id, int) and not isinstance(raw_id, bool):
        raw_id = str(raw_id)
    cup_id = _text(raw_id)
    if cup_id is None:
        return Malformed("missing id")
    name = _text(raw.get("n"))
    if name is None:
        return Malformed("missing name")
    return CupRecord(cup_id, name)


# =============================================================================
# Table Specifications
# =============================================================================

@dataclass(frozen=True)
class TableSpec:
    """Where a sub-table lives in PackData and how to decode/key it."""
    kind: str
    section: str
    list_key: str
    decode: Callable[[Any], Union[Record, Malformed]]
    key_of: Callable[[Any], Union[int, str]]


TABLE_SPECS: dict[str, TableSpec] = {
    "clubs": TableSpec("clubs", "ClubData", "C", decode_club, lambda r: r.club_id),
    "players": TableSpec("players", "PlayerData", "P", decode_player, lambda r: r.player_id),
    "leagues": TableSpec("leagues", "LeagueData", "L", decode_league, lambda r: r.key),
    "stadiums": TableSpec("stadiums", "StadiumData", "S", decode_stadium, lambda r: r.stadium_id),
    "cups": TableSpec("cups", "CupData", "C", decode_cup, lambda r: r.cup_id),
}


@dataclass
class DecodedTable:
    """Result of decoding one sub-table."""
    kind: str
    entries: dict = field(default_factory=dict)
    skipped: int = 0
    present: bool = False


def decode_table(kind: str, pack_data: Any) -> DecodedTable:
    """
    Decode one sub-table out of a PackData object.

    An absent or structurally invalid sub-table yields an empty table with
    present=False. Later duplicates of a key replace earlier ones.

    Args:
        kind: One of clubs, players, leagues, stadiums, cups
        pack_data: The PackData object from the raw document

    Returns:
        DecodedTable with id -> display name entries
    """
    spec = TABLE_SPECS[kind]
    result = DecodedTable(kind=kind)

    section = pack_data.get(spec.section) if isinstance(pack_data, dict) else None
    rows = section.get(spec.list_key) if isinstance(section, dict) else None
    if not isinstance(rows, list):
        return result

    result.present = True
    for raw in rows:
        record = spec.decode(raw)
        if isinstance(record, Malformed):
            result.skipped += 1
            continue
        result.entries[spec.key_of(record)] = record.name

    return result


__all__ = [
    "ClubRecord",
    "PlayerRecord",
    "LeagueRecord",
    "StadiumRecord",
    "CupRecord",
    "Malformed",
    "Record",
    "TableSpec",
    "TABLE_SPECS",
    "DecodedTable",
    "decode_table",
    "league_key",
    "parse_int_id",
]
