"""
Soccerverse Bot - Centralized Colors
====================================

Embed colors used across commands.

Author: Soccerverse Bot
"""

import discord


COLOR_SUCCESS = 0x4CAF50    # Green
COLOR_INFO = 0x2196F3       # Blue
COLOR_WARNING = 0xFFA500    # Orange
COLOR_ERROR = 0xFF6B6B      # Coral red


class EmbedColors:
    """Standardized color palette for Discord embeds."""
    SUCCESS = discord.Color(COLOR_SUCCESS)
    INFO = discord.Color(COLOR_INFO)
    WARNING = discord.Color(COLOR_WARNING)
    ERROR = discord.Color(COLOR_ERROR)


__all__ = [
    "COLOR_SUCCESS",
    "COLOR_INFO",
    "COLOR_WARNING",
    "COLOR_ERROR",
    "EmbedColors",
]
