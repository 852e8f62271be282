"""
Soccerverse Bot - Name Resolution Facade
========================================

Read-only entry point for presentation code: name lookups from the
MappingStore plus the display formatting helpers. Never triggers a refresh.

Author: Soccerverse Bot
"""

from typing import Any, Mapping, Union

from svbot.mappings.store import ClubMatch, MappingStore
from svbot.utils import formatting


class NameResolutionFacade:
    """Name lookups and formatting helpers bound to one MappingStore."""

    format_money = staticmethod(formatting.format_money)
    format_count = staticmethod(formatting.format_count)
    format_percentage_change = staticmethod(formatting.format_percentage_change)
    format_delta = staticmethod(formatting.format_delta)
    format_country_name = staticmethod(formatting.format_country_name)
    format_relative_time = staticmethod(formatting.format_relative_time)
    format_match_date = staticmethod(formatting.format_match_date)
    format_form = staticmethod(formatting.format_form)
    format_match_result = staticmethod(formatting.format_match_result)
    competition_type = staticmethod(formatting.competition_type)

    def __init__(self, store: MappingStore) -> None:
        self._store = store

    # -------------------------------------------------------------------------
    # Names
    # -------------------------------------------------------------------------

    def resolve_club_name(self, club_id: Union[int, str]) -> str:
        return self._store.resolve_club_name(club_id)

    def resolve_player_name(self, player_id: Union[int, str]) -> str:
        return self._store.resolve_player_name(player_id)

    def resolve_league_name(self, country_code: str, division_index: int) -> str:
        return self._store.resolve_league_name(country_code, division_index)

    def resolve_league_name_by_id(self, league_id: Union[int, str]) -> str:
        return self._store.resolve_league_name_by_id(league_id)

    def resolve_stadium_name(self, stadium_id: Union[int, str]) -> str:
        return self._store.resolve_stadium_name(stadium_id)

    def resolve_cup_name(self, cup_id: Union[int, str]) -> str:
        return self._store.resolve_cup_name(cup_id)

    def search_clubs_by_name(self, term: str, limit: int = 10) -> list[ClubMatch]:
        return self._store.search_clubs_by_name(term, limit)

    # -------------------------------------------------------------------------
    # Enrichment
    # -------------------------------------------------------------------------

    def enrich_match(self, match: Mapping[str, Any]) -> dict[str, Any]:
        """
        Copy a raw fixture and add display names for its ids.

        Args:
            match: Fixture with home_club, away_club, stadium_id, country_id, comp_type

        Returns:
            New dict with *_name, country_name and competition_type added
        """
        enriched = dict(match)
        enriched["home_club_name"] = self.resolve_club_name(match.get("home_club"))
        enriched["away_club_name"] = self.resolve_club_name(match.get("away_club"))
        enriched["stadium_name"] = self.resolve_stadium_name(match.get("stadium_id"))
        enriched["country_name"] = self.format_country_name(match.get("country_id"))
        enriched["competition_type"] = self.competition_type(match.get("comp_type"))
        return enriched


__all__ = ["NameResolutionFacade"]
