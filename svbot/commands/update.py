"""
Soccerverse Bot - Mapping Commands
==================================

Slash commands for the name mapping cache.

Commands:
- /update - Force a data pack download (Administrator only)
- /mappings - Show table sizes and refresh status

Author: Soccerverse Bot
"""

import asyncio
from datetime import datetime
from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from svbot.core.colors import EmbedColors
from svbot.core.config import (
    ADMIN_REFRESH_TIMEOUT,
    DISCORD_EMBED_FIELD_VALUE_LIMIT,
    ERROR_PREVIEW_LENGTH,
    PARIS_TZ,
)
from svbot.core.logger import logger
from svbot.mappings.errors import MappingError, PersistenceFailure
from svbot.mappings.refresher import MappingStats
from svbot.utils.helpers import send_error_response, set_footer, truncate

if TYPE_CHECKING:
    from svbot.bot import SoccerverseBot


TABLE_LABELS: dict[str, str] = {
    "clubs": "Clubs",
    "players": "Joueurs",
    "leagues": "Ligues",
    "stadiums": "Stades",
    "cups": "Coupes",
}

NEXT_UPDATE_FALLBACK = "Dimanche prochain 3h00"


# =============================================================================
# Embed Builders
# =============================================================================

def _format_datetime(value: Optional[datetime], fallback: str = "Jamais") -> str:
    if value is None:
        return fallback
    return value.astimezone(PARIS_TZ).strftime("%d/%m/%Y %H:%M")


def format_count_changes(before: dict[str, int], after: dict[str, int]) -> str:
    """One "**Clubs :** 10 → 12" line per table."""
    return "\n".join(
        f"**{label} :** {before.get(kind, 0):,} → {after.get(kind, 0):,}"
        for kind, label in TABLE_LABELS.items()
    )


def build_update_success_embed(before: dict[str, int], stats: MappingStats) -> discord.Embed:
    embed = discord.Embed(
        title="✅ Mise à jour réussie !",
        description="Le data pack Soccerverse a été mis à jour avec succès.",
        color=EmbedColors.SUCCESS,
    )
    embed.add_field(name="📊 Statistiques", value=format_count_changes(before, stats.counts), inline=True)
    embed.add_field(name="📅 Dernière mise à jour", value=_format_datetime(stats.last_update), inline=True)
    embed.add_field(
        name="🔄 Prochaine mise à jour automatique",
        value=_format_datetime(stats.next_scheduled_update, NEXT_UPDATE_FALLBACK),
        inline=True,
    )
    return set_footer(embed)


def build_update_error_embed(error: BaseException) -> discord.Embed:
    if isinstance(error, TimeoutError):
        details = "Le téléchargement a dépassé le délai imparti."
    else:
        details = str(error) or "Erreur inconnue"

    embed = discord.Embed(
        title="❌ Erreur de mise à jour",
        description="Une erreur est survenue lors de la mise à jour des mappings.",
        color=EmbedColors.ERROR,
    )
    embed.add_field(name="🔧 Détails de l'erreur", value=truncate(details, DISCORD_EMBED_FIELD_VALUE_LIMIT), inline=False)
    embed.add_field(
        name="💡 Solution",
        value="Les mappings actuels restent disponibles. Réessayez dans quelques minutes.",
        inline=False,
    )
    return set_footer(embed)


def build_not_saved_embed(before: dict[str, int], stats: MappingStats) -> discord.Embed:
    embed = discord.Embed(
        title="⚠️ Mise à jour partielle",
        description=(
            "Les noms sont à jour, mais la sauvegarde sur disque a échoué. "
            "Au prochain redémarrage, l'ancienne sauvegarde sera rechargée."
        ),
        color=EmbedColors.WARNING,
    )
    embed.add_field(name="📊 Statistiques", value=format_count_changes(before, stats.counts), inline=True)
    return set_footer(embed)


def build_stats_embed(stats: MappingStats) -> discord.Embed:
    embed = discord.Embed(
        title="🗂️ Mappings Soccerverse",
        color=EmbedColors.INFO,
    )
    embed.add_field(
        name="📊 Tables",
        value="\n".join(
            f"**{label} :** {stats.counts.get(kind, 0):,}" for kind, label in TABLE_LABELS.items()
        ),
        inline=True,
    )
    embed.add_field(name="📅 Dernière mise à jour", value=_format_datetime(stats.last_update), inline=True)
    embed.add_field(
        name="🔄 Prochaine mise à jour",
        value=_format_datetime(stats.next_scheduled_update, NEXT_UPDATE_FALLBACK),
        inline=True,
    )
    if stats.refresh_in_progress:
        embed.add_field(name="⏳ Statut", value="Mise à jour en cours...", inline=False)
    if stats.last_error:
        embed.add_field(name="⚠️ Dernière erreur", value=truncate(stats.last_error, DISCORD_EMBED_FIELD_VALUE_LIMIT), inline=False)
    return set_footer(embed)


def is_administrator(user: discord.abc.User) -> bool:
    return isinstance(user, discord.Member) and user.guild_permissions.administrator


# =============================================================================
# Mapping Cog
# =============================================================================

class MappingCog(commands.Cog):
    """Administrator refresh and status commands for name mappings."""

    def __init__(self, bot: "SoccerverseBot") -> None:
        self.bot = bot

        logger.tree("Mapping Cog Loaded", [
            ("Commands", "/update, /mappings"),
            ("Refresh Timeout", f"{ADMIN_REFRESH_TIMEOUT:.0f}s"),
        ], emoji="🗂️")

    @app_commands.command(
        name="update",
        description="Mettre à jour les mappings de noms (admin seulement)",
    )
    @app_commands.default_permissions(administrator=True)
    async def update_command(self, interaction: discord.Interaction) -> None:
        """Force a data pack download and report the new table sizes."""
        if not is_administrator(interaction.user):
            embed = discord.Embed(
                title="❌ Permission refusée",
                description="Cette commande est réservée aux administrateurs du serveur.",
                color=EmbedColors.ERROR,
            )
            await interaction.response.send_message(embed=set_footer(embed), ephemeral=True)

            logger.warning("Unauthorized Update Attempt", [
                ("User", f"{interaction.user.name} ({interaction.user.display_name})"),
                ("ID", str(interaction.user.id)),
            ])
            return

        await interaction.response.defer(thinking=True)

        refresher = self.bot.mapping_refresher
        before = refresher.get_stats().counts

        logger.info("🔄 Manual Mapping Update", [
            ("User", f"{interaction.user.name} ({interaction.user.display_name})"),
            ("ID", str(interaction.user.id)),
        ])

        try:
            async with asyncio.timeout(ADMIN_REFRESH_TIMEOUT):
                stats = await refresher.force_refresh()
        except PersistenceFailure:
            await interaction.followup.send(embed=build_not_saved_embed(before, refresher.get_stats()))
            return
        except (MappingError, TimeoutError) as e:
            logger.warning("Manual Mapping Update Failed", [
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:ERROR_PREVIEW_LENGTH] or "Timed out"),
            ])
            await send_error_response(interaction, embed=build_update_error_embed(e), ephemeral=False)
            return

        await interaction.followup.send(embed=build_update_success_embed(before, stats))

    @app_commands.command(
        name="mappings",
        description="Afficher l'état des mappings de noms",
    )
    async def mappings_command(self, interaction: discord.Interaction) -> None:
        stats = self.bot.mapping_refresher.get_stats()
        await interaction.response.send_message(embed=build_stats_embed(stats), ephemeral=True)


async def setup(bot: "SoccerverseBot") -> None:
    await bot.add_cog(MappingCog(bot))


__all__ = [
    "MappingCog",
    "build_stats_embed",
    "build_update_error_embed",
    "build_update_success_embed",
    "format_count_changes",
    "is_administrator",
]
