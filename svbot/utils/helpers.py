"""
Soccerverse Bot - Discord Helpers
=================================

Small shared helpers for embeds and interaction replies.

Author: Soccerverse Bot
"""

import discord

from svbot.core.config import EMBED_FOOTER_TEXT
from svbot.core.logger import logger


# =============================================================================
# Text Helpers
# =============================================================================

def truncate(text: str, max_length: int, ellipsis: str = "...") -> str:
    """
    Truncate text to a maximum length with optional ellipsis.

    Args:
        text: The text to truncate
        max_length: Maximum length (including ellipsis if added)
        ellipsis: String to append if truncated (default: "...")

    Returns:
        Truncated text with ellipsis if it exceeded max_length
    """
    if not text or len(text) <= max_length:
        return text
    return text[:max_length - len(ellipsis)] + ellipsis


# =============================================================================
# Embed Helpers
# =============================================================================

def set_footer(embed: discord.Embed) -> discord.Embed:
    """Set the standard footer on an embed."""
    embed.set_footer(text=EMBED_FOOTER_TEXT)
    return embed


# =============================================================================
# Error Response Helper
# =============================================================================

async def send_error_response(
    interaction: discord.Interaction,
    message: str = "Une erreur est survenue.",
    ephemeral: bool = True,
    embed: discord.Embed | None = None,
) -> None:
    """
    Send an error response to the user.

    Handles both deferred and non-deferred interactions.

    Args:
        interaction: The Discord interaction
        message: Error message to display (ignored when embed is given)
        ephemeral: Whether to make the message ephemeral
        embed: Optional embed to send instead of plain text
    """
    payload = {"embed": embed} if embed is not None else {"content": message}
    try:
        if interaction.response.is_done():
            await interaction.followup.send(ephemeral=ephemeral, **payload)
        else:
            await interaction.response.send_message(ephemeral=ephemeral, **payload)
    except discord.HTTPException:
        logger.warning("Failed to send error response", [
            ("Message", message[:50]),
        ])


__all__ = [
    "truncate",
    "set_footer",
    "send_error_response",
]
