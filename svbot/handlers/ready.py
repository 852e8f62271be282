"""
Soccerverse Bot - Ready Handler
===============================

Command sync and mapping service startup.

Author: Soccerverse Bot
"""

import asyncio
from typing import TYPE_CHECKING, Awaitable, Callable, List

import discord

from svbot.core.config import load_sync_guild_id
from svbot.core.logger import logger

if TYPE_CHECKING:
    from svbot.bot import SoccerverseBot


# Default timeout for service initialization (seconds)
SERVICE_INIT_TIMEOUT: float = 30.0


# =============================================================================
# Ready Handler
# =============================================================================

async def _safe_init(
    name: str,
    init_func: Callable[["SoccerverseBot"], Awaitable[None]],
    bot: "SoccerverseBot",
    timeout: float = SERVICE_INIT_TIMEOUT
) -> bool:
    """
    Initialize a service with a timeout, logging instead of raising.

    Returns:
        True if initialization succeeded, False otherwise
    """
    try:
        async with asyncio.timeout(timeout):
            await init_func(bot)
        return True
    except TimeoutError:
        logger.error("Timeout Initializing Service", [
            ("Service", name),
            ("Timeout", f"{timeout}s"),
            ("Status", "Skipped - continuing startup"),
        ])
        return False
    except Exception as e:
        logger.error("Failed To Initialize Service", [
            ("Service", name),
            ("Error Type", type(e).__name__),
            ("Error", str(e)),
            ("Status", "Skipped - continuing startup"),
        ])
        return False


async def on_ready_handler(bot: "SoccerverseBot") -> None:
    """
    Sync commands, start loading mappings and arm the weekly refresh.

    Mapping initialization runs as a tracked background task: until it
    finishes, resolvers answer with fallback names.
    """
    init_results: List[tuple[str, bool]] = []

    logger.tree(
        f"Bot Ready: {bot.user.name}",
        [
            ("Bot ID", str(bot.user.id)),
            ("Guilds", str(len(bot.guilds))),
        ],
        emoji="✅",
    )

    try:
        async with asyncio.timeout(30.0):
            await _sync_commands(bot)
    except TimeoutError:
        logger.error("Timeout syncing commands - continuing startup")

    init_results.append(("Mapping Initialization", await _safe_init("Mapping Initialization", _init_mappings, bot)))
    init_results.append(("Weekly Refresh Scheduler", await _safe_init("Weekly Refresh Scheduler", _init_refresh_scheduler, bot)))

    succeeded = sum(1 for _, ok in init_results if ok)
    failed = len(init_results) - succeeded

    if failed > 0:
        failed_services = [name for name, ok in init_results if not ok]
        logger.warning("Startup Completed With Errors", [
            ("Services OK", str(succeeded)),
            ("Services Failed", str(failed)),
            ("Failed", ", ".join(failed_services)),
        ])
    else:
        logger.tree("All Services Initialized", [
            ("Services", str(succeeded)),
            ("Status", "All OK"),
        ], emoji="✅")


# =============================================================================
# Service Initialization
# =============================================================================

async def _init_mappings(bot: "SoccerverseBot") -> None:
    """Load the snapshot and refresh if stale, without blocking startup."""
    bot.track_task(
        asyncio.create_task(bot.mapping_refresher.initialize(), name="mapping-initialize")
    )
    logger.info("🗂️ Mapping Initialization Started", [
        ("Snapshot", str(bot.mapping_refresher.snapshot.path)),
        ("Source", bot.mapping_refresher.source.url),
    ])


async def _init_refresh_scheduler(bot: "SoccerverseBot") -> None:
    await bot.refresh_scheduler.start()


async def _sync_commands(bot: "SoccerverseBot") -> None:
    """Sync slash commands to the configured guild, or globally.

    Guild sync is instant; global sync can take up to an hour to appear.
    """
    guild_id = load_sync_guild_id()
    try:
        if guild_id:
            guild = discord.Object(id=guild_id)
            bot.tree.copy_global_to(guild=guild)
            synced = await bot.tree.sync(guild=guild)
            target = f"Guild {guild_id}"
        else:
            synced = await bot.tree.sync()
            target = "Global"

        logger.tree("Synced Commands", [
            ("Target", target),
            ("Commands", str(len(synced))),
        ], emoji="⚡")
    except discord.HTTPException as e:
        logger.error("⚡ Failed To Sync Commands", [
            ("Error", str(e)),
        ])


__all__ = ["on_ready_handler"]
