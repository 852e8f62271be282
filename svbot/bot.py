"""
Soccerverse Bot - Main Bot Class
================================

Discord client wiring the name mapping services to slash commands.

ARCHITECTURE OVERVIEW:
======================

┌─────────────────────────────────────────────────────────────────┐
│                        BOT LAYER (bot.py)                        │
│  - Discord client setup and event routing                       │
│  - Service construction and lifecycle management                │
└─────────────────────────────────────────────────────────────────┘
                              │
        ┌─────────────────────┼─────────────────────┐
        ▼                     ▼                     ▼
┌───────────────┐    ┌─────────────────────┐  ┌───────────────┐
│   HANDLERS    │    │      MAPPINGS       │  │   COMMANDS    │
│ - ready.py    │    │ - refresher (cache) │  │ - update.py   │
│ - shutdown.py │    │ - store (tables)    │  │ - clubsearch  │
└───────────────┘    │ - scheduler (weekly)│  └───────────────┘
                     │ - facade (names)    │
                     └─────────────────────┘

Mapping data flow:
    WeeklyRefreshScheduler -> MappingRefresher -> RemoteDataSource (fetch)
        -> MappingStore (rebuild) -> SnapshotFile (persist)
    NameResolutionFacade reads MappingStore only.

Author: Soccerverse Bot
"""

import asyncio
from typing import Optional

import discord
from discord.ext import commands

from svbot.core.config import SNAPSHOT_FILENAME, load_data_pack_url, load_mappings_dir
from svbot.core.logger import logger
from svbot.handlers.ready import on_ready_handler
from svbot.handlers.shutdown import shutdown_handler
from svbot.mappings import (
    MappingRefresher,
    MappingStore,
    NameResolutionFacade,
    RemoteDataSource,
    SnapshotFile,
    WeeklyRefreshScheduler,
)


EXTENSIONS = (
    "svbot.commands.update",
    "svbot.commands.clubsearch",
)


# =============================================================================
# SoccerverseBot Class
# =============================================================================

class SoccerverseBot(commands.Bot):
    """
    Slash-command bot holding the mapping services.

    Services are built in setup_hook and started in on_ready; on_ready
    is guarded because Discord fires it again after reconnects.
    """

    def __init__(self) -> None:
        intents = discord.Intents.default()
        intents.guilds = True

        super().__init__(
            command_prefix="!",  # Not used - bot uses slash commands only
            intents=intents,
            help_command=None,
        )

        self.mapping_store: Optional[MappingStore] = None
        self.data_source: Optional[RemoteDataSource] = None
        self.mapping_refresher: Optional[MappingRefresher] = None
        self.refresh_scheduler: Optional[WeeklyRefreshScheduler] = None
        self.names: Optional[NameResolutionFacade] = None

        self.background_tasks: set[asyncio.Task] = set()
        self._ready_initialized: bool = False

    def track_task(self, task: asyncio.Task) -> asyncio.Task:
        """Keep a reference to a background task until it finishes."""
        self.background_tasks.add(task)
        task.add_done_callback(self.background_tasks.discard)
        return task

    # =========================================================================
    # Event Handlers
    # =========================================================================

    async def setup_hook(self) -> None:
        """Build mapping services and load command cogs."""
        snapshot_path = load_mappings_dir() / SNAPSHOT_FILENAME

        self.mapping_store = MappingStore()
        self.data_source = RemoteDataSource(load_data_pack_url())
        self.mapping_refresher = MappingRefresher(
            store=self.mapping_store,
            source=self.data_source,
            snapshot=SnapshotFile(snapshot_path),
        )
        self.refresh_scheduler = WeeklyRefreshScheduler(self.mapping_refresher.scheduled_refresh)
        self.names = NameResolutionFacade(self.mapping_store)

        for extension in EXTENSIONS:
            await self.load_extension(extension)

        logger.tree("Bot Setup Complete", [
            ("Data Pack", self.data_source.url),
            ("Snapshot", str(snapshot_path)),
            ("Extensions", str(len(EXTENSIONS))),
        ], emoji="🛠️")

    async def on_ready(self) -> None:
        if self._ready_initialized:
            logger.info("🔄 Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True
        await on_ready_handler(self)

    async def on_resumed(self) -> None:
        logger.info("Bot Connection Resumed")

    async def close(self) -> None:
        """Cleanup when bot is shutting down."""
        await shutdown_handler(self)
        await super().close()


__all__ = ["SoccerverseBot"]
