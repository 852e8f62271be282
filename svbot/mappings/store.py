"""
Soccerverse Bot - Mapping Store
===============================

In-memory name tables for clubs, players, leagues, stadiums and cups.

DESIGN: All five tables live in one immutable MappingTables bundle.
rebuild_from() decodes a data pack into a brand new bundle and swaps it
in with a single assignment, so a reader always sees every table from
the same pack. Lookups never perform I/O.

Author: Soccerverse Bot
"""

from dataclasses import dataclass, field
from itertools import islice
from types import MappingProxyType
from typing import Any, Iterator, Mapping, NamedTuple, Union

from svbot.core.logger import logger
from svbot.mappings.records import TABLE_SPECS, decode_table, league_key, parse_int_id


TABLE_KINDS: tuple[str, ...] = tuple(TABLE_SPECS)


# =============================================================================
# Table Bundle
# =============================================================================

@dataclass(frozen=True)
class MappingTables:
    """One consistent generation of all five name tables."""
    clubs: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))
    players: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))
    leagues: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    stadiums: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))
    cups: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def counts(self) -> dict[str, int]:
        return {kind: len(getattr(self, kind)) for kind in TABLE_KINDS}


class ClubMatch(NamedTuple):
    id: int
    name: str


# =============================================================================
# Mapping Store
# =============================================================================

class MappingStore:
    """
    Synchronous name resolution over the current table bundle.

    Every resolver is total: unknown or unparsable identifiers produce the
    documented French fallback string instead of raising.
    """

    def __init__(self) -> None:
        self._tables: MappingTables = MappingTables()

    # -------------------------------------------------------------------------
    # Rebuild
    # -------------------------------------------------------------------------

    @staticmethod
    def build_tables(pack_data: Any) -> tuple[MappingTables, dict[str, int]]:
        """
        Decode a PackData object into a fresh bundle without touching live state.

        Returns:
            (tables, skipped-per-table)
        """
        entries: dict[str, Mapping] = {}
        skipped: dict[str, int] = {}
        for kind in TABLE_KINDS:
            decoded = decode_table(kind, pack_data)
            entries[kind] = MappingProxyType(decoded.entries)
            skipped[kind] = decoded.skipped
            if not decoded.present:
                logger.debug("Mapping Sub-Table Missing", [
                    ("Table", kind),
                    ("Result", "Empty table"),
                ])
        return MappingTables(**entries), skipped

    def promote(self, tables: MappingTables) -> None:
        """Make a fully built bundle the live one."""
        self._tables = tables

    def rebuild_from(self, raw_pack: Any) -> dict[str, int]:
        """
        Replace all five tables from a raw data pack document.

        Accepts either the full document ({"PackData": {...}}) or the
        PackData object itself. Missing sub-tables become empty tables.

        Returns:
            Per-table entry counts after the rebuild
        """
        pack_data = raw_pack.get("PackData", raw_pack) if isinstance(raw_pack, dict) else None
        tables, skipped = self.build_tables(pack_data)
        self.promote(tables)

        counts = tables.counts()
        total_skipped = sum(skipped.values())
        logger.tree("Mapping Tables Rebuilt", [
            ("Clubs", counts["clubs"]),
            ("Players", counts["players"]),
            ("Leagues", counts["leagues"]),
            ("Stadiums", counts["stadiums"]),
            ("Cups", counts["cups"]),
            ("Skipped Records", total_skipped),
        ], emoji="🗺️")
        if total_skipped:
            logger.debug("Malformed Mapping Records Skipped", [
                (kind.capitalize(), count) for kind, count in skipped.items() if count
            ])
        return counts

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def tables(self) -> MappingTables:
        return self._tables

    def counts(self) -> dict[str, int]:
        return self._tables.counts()

    # -------------------------------------------------------------------------
    # Resolvers
    # -------------------------------------------------------------------------

    def resolve_club_name(self, club_id: Union[int, str]) -> str:
        name = self._lookup_int(self._tables.clubs, club_id)
        return name if name is not None else f"Club #{club_id}"

    def resolve_player_name(self, player_id: Union[int, str]) -> str:
        name = self._lookup_int(self._tables.players, player_id)
        return name if name is not None else f"Joueur #{player_id}"

    def resolve_league_name(self, country_code: str, division_index: Union[int, str, None]) -> str:
        """
        Resolve a league from its country and 0-based division index.

        The pack numbers divisions from 1, so division_index 0 reads key CHE_1.
        An index that is not an integer falls back to "Ligue {country} D?".
        """
        index = parse_int_id(division_index)
        if index is None:
            return f"Ligue {country_code} D?"
        division = index + 1
        name = self._tables.leagues.get(league_key(country_code, division))
        return name if name is not None else f"Ligue {country_code} D{division}"

    def resolve_league_name_by_id(self, league_id: Union[int, str]) -> str:
        """Leagues are only keyed by country/division; a bare id never resolves."""
        return f"Ligue #{league_id}"

    def resolve_stadium_name(self, stadium_id: Union[int, str]) -> str:
        name = self._lookup_int(self._tables.stadiums, stadium_id)
        return name if name is not None else f"Stade #{stadium_id}"

    def resolve_cup_name(self, cup_id: Union[int, str]) -> str:
        name = self._tables.cups.get(str(cup_id))
        return name if name is not None else f"Coupe #{cup_id}"

    @staticmethod
    def _lookup_int(table: Mapping[int, str], raw_id: Union[int, str]) -> Union[str, None]:
        key = parse_int_id(raw_id)
        if key is None:
            return None
        return table.get(key)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def iter_clubs_matching(self, term: str) -> Iterator[ClubMatch]:
        """Lazily yield clubs whose name contains term (case-insensitive)."""
        needle = term.casefold()
        for club_id, name in self._tables.clubs.items():
            if needle in name.casefold():
                yield ClubMatch(club_id, name)

    def search_clubs_by_name(self, term: str, limit: int = 10) -> list[ClubMatch]:
        """
        Case-insensitive substring search in table order.

        Stops scanning as soon as limit matches have been found.
        """
        if limit <= 0:
            return []
        return list(islice(self.iter_clubs_matching(term), limit))


__all__ = ["MappingStore", "MappingTables", "ClubMatch", "TABLE_KINDS"]
