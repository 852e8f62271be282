"""
Soccerverse Bot - Slash Commands Package
========================================

Available Commands:
- /update - Force a name mapping refresh (Administrator only)
- /mappings - Show name mapping table sizes and refresh status
- /clubsearch - Find club ids by name

Author: Soccerverse Bot
"""

from svbot.commands.update import MappingCog
from svbot.commands.clubsearch import ClubSearchCog

__all__ = [
    "MappingCog",
    "ClubSearchCog",
]
