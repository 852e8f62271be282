"""
Soccerverse Bot - Club Search Command
=====================================

Commands:
- /clubsearch - Find club ids by (partial) name from the local mappings

Author: Soccerverse Bot
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from svbot.core.colors import EmbedColors
from svbot.core.config import CLUB_SEARCH_LIMIT
from svbot.core.logger import logger
from svbot.mappings.store import ClubMatch
from svbot.utils.helpers import set_footer, truncate

if TYPE_CHECKING:
    from svbot.bot import SoccerverseBot


def build_search_embed(term: str, matches: list[ClubMatch]) -> discord.Embed:
    if not matches:
        embed = discord.Embed(
            title="🔍 Aucun club trouvé",
            description=f"Aucun club ne correspond à « {truncate(term, 100)} ».",
            color=EmbedColors.WARNING,
        )
        return set_footer(embed)

    lines = [f"`{match.id}` • {match.name}" for match in matches]
    embed = discord.Embed(
        title=f"🔍 Clubs correspondant à « {truncate(term, 100)} »",
        description="\n".join(lines),
        color=EmbedColors.INFO,
    )
    if len(matches) >= CLUB_SEARCH_LIMIT:
        embed.add_field(
            name="💡 Astuce",
            value=f"Seuls les {CLUB_SEARCH_LIMIT} premiers résultats sont affichés. Affinez votre recherche.",
            inline=False,
        )
    return set_footer(embed)


class ClubSearchCog(commands.Cog):
    """Club name search over the local mappings."""

    def __init__(self, bot: "SoccerverseBot") -> None:
        self.bot = bot

        logger.tree("Club Search Cog Loaded", [
            ("Commands", "/clubsearch"),
            ("Max Results", str(CLUB_SEARCH_LIMIT)),
        ], emoji="🔍")

    @app_commands.command(
        name="clubsearch",
        description="Rechercher un club par son nom",
    )
    @app_commands.describe(terme="Nom ou partie du nom du club")
    async def clubsearch_command(self, interaction: discord.Interaction, terme: str) -> None:
        matches = self.bot.names.search_clubs_by_name(terme, CLUB_SEARCH_LIMIT)

        logger.info("🔍 Club Search", [
            ("User", f"{interaction.user.name} ({interaction.user.display_name})"),
            ("Term", terme[:50]),
            ("Results", str(len(matches))),
        ])

        await interaction.response.send_message(embed=build_search_embed(terme, matches), ephemeral=True)


async def setup(bot: "SoccerverseBot") -> None:
    await bot.add_cog(ClubSearchCog(bot))


__all__ = ["ClubSearchCog", "build_search_embed"]
