"""
Soccerverse Bot - Display Formatting Helpers
============================================

Pure formatting functions for club profiles, schedules and matches.
User-facing strings are French, like the rest of the bot's output.

Author: Soccerverse Bot
"""

import math
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from svbot.core.config import PARIS_TZ


Number = Union[int, float]

# In-game money is stored in 1/10000 dollar units
MONEY_SCALE = 10_000

SECONDS_PER_HOUR = 3600

COUNTRY_NAMES: dict[str, str] = {
    "CHE": "🇨🇭 Suisse",
    "FRA": "🇫🇷 France",
    "ENG": "🏴󠁧󠁢󠁥󠁮󠁧󠁿 Angleterre",
    "ESP": "🇪🇸 Espagne",
    "ITA": "🇮🇹 Italie",
    "GER": "🇩🇪 Allemagne",
    "BRA": "🇧🇷 Brésil",
    "ARG": "🇦🇷 Argentine",
    "USA": "🇺🇸 États-Unis",
    "CAN": "🇨🇦 Canada",
    "MEX": "🇲🇽 Mexique",
    "NED": "🇳🇱 Pays-Bas",
    "BEL": "🇧🇪 Belgique",
    "POR": "🇵🇹 Portugal",
    "ALB": "🇦🇱 Albanie",
    "AFR": "🌍 Afrique",
}

FORM_GLYPHS: dict[str, str] = {
    "W": "🟢",
    "D": "🟡",
    "L": "🔴",
}


# =============================================================================
# Numbers & Money
# =============================================================================

def format_count(value: Optional[Number], unknown: str = "Inconnu") -> str:
    """Group thousands (12,345) or return the unknown placeholder."""
    if value is None:
        return unknown
    return f"{value:,}"


def format_money(amount: Optional[Number]) -> str:
    """
    Format an in-game money amount as dollars with a K/M/B suffix.

    The amount is divided by 10,000 and rounded up.

    Examples:
        >>> format_money(25_000_000)
        '2.5K$'
        >>> format_money(0)
        '0$'
    """
    if not amount:
        return "0$"

    dollars = math.ceil(amount / MONEY_SCALE)
    magnitude = abs(dollars)

    if magnitude >= 1_000_000_000:
        return f"{dollars / 1_000_000_000:.1f}B$"
    if magnitude >= 1_000_000:
        return f"{dollars / 1_000_000:.1f}M$"
    if magnitude >= 1_000:
        return f"{dollars / 1_000:.1f}K$"
    return f"{dollars:,}$"


def format_percentage_change(current: Number, start: Optional[Number]) -> str:
    """Relative change since start as +x.x% / -x.x% / 0%, N/A without a start."""
    if not start:
        return "N/A"

    change = (current - start) / start * 100
    if change > 0:
        return f"+{change:.1f}%"
    if change < 0:
        return f"{change:.1f}%"
    return "0%"


def format_delta(current: Number, start: Optional[Number]) -> str:
    """Absolute change since start, e.g. (+1,200), (-35) or (=)."""
    if not start:
        return ""

    diff = current - start
    if diff > 0:
        return f"(+{diff:,})"
    if diff < 0:
        return f"({diff:,})"
    return "(=)"


# =============================================================================
# Countries & Competitions
# =============================================================================

def format_country_name(country_code: str) -> str:
    return COUNTRY_NAMES.get(country_code, f"🌍 {country_code}")


def competition_type(comp_type: Optional[int]) -> str:
    if comp_type == 0:
        return "🏆 Championnat"
    if comp_type == 1:
        return "🏅 Coupe"
    return "⚽ Match"


# =============================================================================
# Dates
# =============================================================================

def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _format_date(unix: Number) -> str:
    return datetime.fromtimestamp(unix, PARIS_TZ).strftime("%d/%m/%Y")


def format_relative_time(unix: Optional[Number], now: Optional[datetime] = None) -> str:
    """
    Describe a past unix timestamp relative to now.

    Under a week it reads "Il y a 5h" / "Il y a 3j"; older dates are
    shown as dd/mm/YYYY in Paris time.
    """
    if not unix:
        return "Jamais"

    diff_hours = math.floor((_now(now).timestamp() - unix) / SECONDS_PER_HOUR)
    diff_days = math.floor(diff_hours / 24)

    if diff_hours < 1:
        return "Il y a moins d'1h"
    if diff_hours < 24:
        return f"Il y a {diff_hours}h"
    if diff_days < 7:
        return f"Il y a {diff_days}j"
    return _format_date(unix)


def format_match_date(unix: Number, now: Optional[datetime] = None) -> str:
    """Like format_relative_time, but future kick-offs read "Dans 5h" / "Dans 3j"."""
    diff_seconds = _now(now).timestamp() - unix

    if diff_seconds < 0:
        future_hours = math.floor(-diff_seconds / SECONDS_PER_HOUR)
        future_days = math.floor(future_hours / 24)
        if future_hours < 24:
            return f"Dans {future_hours}h"
        if future_days < 7:
            return f"Dans {future_days}j"
        return _format_date(unix)

    return format_relative_time(unix, now) if unix else "Il y a moins d'1h"


# =============================================================================
# Form & Results
# =============================================================================

def format_form(form: Optional[str]) -> str:
    """Turn a W/D/L form string into coloured glyphs, oldest first."""
    if not form:
        return "Aucune"
    return "".join(FORM_GLYPHS.get(char, "⚪") for char in form)


def _as_int(value: Any) -> Optional[int]:
    """Integer from an int or digit string, None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return None


def format_match_result(match: Mapping[str, Any], club_id: Union[int, str]) -> str:
    """Result from the given club's perspective: V(ictoire), D(éfaite), N(ul)."""
    if match.get("played") != 1:
        return "⏳ À venir"

    club = _as_int(club_id)
    is_home = club is not None and _as_int(match.get("home_club")) == club
    # Missing scores count as 0
    home_goals = _as_int(match.get("home_goals")) or 0
    away_goals = _as_int(match.get("away_goals")) or 0
    club_goals = home_goals if is_home else away_goals
    opponent_goals = away_goals if is_home else home_goals

    if club_goals > opponent_goals:
        return "🟢 V"
    if club_goals < opponent_goals:
        return "🔴 D"
    return "🟡 N"


__all__ = [
    "COUNTRY_NAMES",
    "format_count",
    "format_money",
    "format_percentage_change",
    "format_delta",
    "format_country_name",
    "competition_type",
    "format_relative_time",
    "format_match_date",
    "format_form",
    "format_match_result",
]
