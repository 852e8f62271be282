"""
Soccerverse Bot - Shutdown Handler
==================================

Graceful shutdown and cleanup logic.

Author: Soccerverse Bot
"""

import asyncio
from typing import TYPE_CHECKING, Any, List, Tuple

from svbot.core.logger import logger

if TYPE_CHECKING:
    from svbot.bot import SoccerverseBot


SHUTDOWN_TIMEOUT = 10.0  # Maximum seconds to wait for cleanup tasks
REFRESH_DRAIN_TIMEOUT = 5.0  # In-flight refresh is cancelled after this


# =============================================================================
# Shutdown Handler
# =============================================================================

async def _safe_cleanup(name: str, cleanup_coro: Any) -> bool:
    """
    Execute a cleanup coroutine with error handling.

    Returns:
        True if cleanup succeeded, False otherwise
    """
    try:
        await cleanup_coro
        logger.debug("Cleanup Complete", [
            ("Task", name),
        ])
        return True
    except asyncio.CancelledError:
        logger.debug("Cleanup Cancelled", [
            ("Task", name),
        ])
        return True
    except TimeoutError:
        logger.warning("Cleanup Timed Out", [
            ("Task", name),
        ])
        return False
    except Exception as e:
        logger.warning("Cleanup Failed", [
            ("Task", name),
            ("Error Type", type(e).__name__),
            ("Error", str(e)),
        ])
        return False


async def shutdown_handler(bot: "SoccerverseBot") -> None:
    """
    Stop the scheduler, cancel background work and close the HTTP session.

    Each cleanup runs independently so one failure doesn't block the
    others, and the whole pass is bounded by SHUTDOWN_TIMEOUT.
    """
    logger.info("Shutting Down Soccerverse Bot", [
        ("Timeout", f"{SHUTDOWN_TIMEOUT}s"),
    ])

    cleanup_tasks: List[Tuple[str, Any]] = []

    # 1. Stop weekly refresh scheduler
    scheduler = getattr(bot, "refresh_scheduler", None)
    if scheduler and scheduler.is_running:
        cleanup_tasks.append(("Weekly Refresh Scheduler", scheduler.stop()))

    # 2. Cancel tracked background tasks (startup mapping load)
    for task in list(bot.background_tasks):
        if not task.done():
            task.cancel()
            cleanup_tasks.append((f"Background Task ({task.get_name()})", _cancel_task(task)))

    # 3. Let an in-flight refresh settle, then close data pack HTTP session
    refresher = getattr(bot, "mapping_refresher", None)
    source = getattr(bot, "data_source", None)
    if refresher or source:
        cleanup_tasks.append(("Data Pack Source", _drain_refresh_and_close(refresher, source)))

    if cleanup_tasks:
        try:
            async with asyncio.timeout(SHUTDOWN_TIMEOUT):
                results = await asyncio.gather(
                    *[_safe_cleanup(name, coro) for name, coro in cleanup_tasks],
                    return_exceptions=True
                )

                successful = sum(1 for r in results if r is True)
                logger.info("Shutdown Cleanup Complete", [
                    ("Successful", str(successful)),
                    ("Failed", str(len(results) - successful)),
                ])

        except TimeoutError:
            logger.warning("Shutdown Cleanup Timed Out", [
                ("Timeout", f"{SHUTDOWN_TIMEOUT}s"),
                ("Note", "Some tasks may not have completed"),
            ])
    else:
        logger.info("No Cleanup Tasks Required")

    logger.tree("Bot Shutdown Complete", [
        ("Status", "All services stopped"),
    ], emoji="👋")


async def _drain_refresh_and_close(refresher: Any, source: Any) -> None:
    """Wait for the shared refresh task before its HTTP session goes away."""
    if refresher:
        await refresher.wait_idle(timeout=REFRESH_DRAIN_TIMEOUT)
    if source:
        await source.close()


async def _cancel_task(task: asyncio.Task) -> None:
    """Wait for a cancelled task to finish."""
    try:
        await task
    except asyncio.CancelledError:
        pass


__all__ = ["shutdown_handler"]
