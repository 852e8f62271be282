"""
Soccerverse Discord Bot - Main Entry Point
==========================================

Application entry point with single-instance enforcement and graceful startup.

This module handles:
- Single-instance lock acquisition (prevents duplicate bots)
- Environment configuration loading
- Bot initialization and execution

Usage:
    python main.py

Environment Variables:
    DISCORD_TOKEN: Required. Discord bot authentication token.
    DATA_PACK_URL: Optional. Name mapping data pack location.
    MAPPINGS_DIR: Optional. Directory for the persisted snapshot.
    SYNC_GUILD_ID: Optional. Guild for instant slash command sync.

Author: Soccerverse Bot
"""

import os
import sys
import fcntl
import signal
import asyncio
import tempfile
from pathlib import Path
from typing import NoReturn, Optional

# Load environment variables BEFORE importing local modules that read
# from the environment at import time
from dotenv import load_dotenv
load_dotenv()

from svbot.core.logger import logger
from svbot.core.config import ConfigValidationError, validate_and_log_config
from svbot.bot import SoccerverseBot


_bot_instance: Optional[SoccerverseBot] = None

LOCK_FILE_PATH = Path(tempfile.gettempdir()) / "soccerverse_bot.lock"
"""Path to the lock file used for single-instance enforcement."""


# =============================================================================
# Single Instance Lock
# =============================================================================

def acquire_lock() -> int:
    """
    Acquire an exclusive file lock to ensure only one bot instance runs.

    The lock is released by the OS when the process terminates.

    Returns:
        File descriptor of the lock file (kept open for lock lifetime).

    Raises:
        SystemExit: If another instance is already running.
    """
    try:
        fd = os.open(str(LOCK_FILE_PATH), os.O_RDWR | os.O_CREAT, 0o644)
    except OSError as e:
        logger.error("Failed to Open Lock File", [
            ("Path", str(LOCK_FILE_PATH)),
            ("Error", str(e)),
        ])
        sys.exit(1)

    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)

        os.truncate(fd, 0)
        os.write(fd, str(os.getpid()).encode())

        logger.info("🔒 Lock Acquired Successfully", [
            ("PID", str(os.getpid())),
        ])
        return fd

    except OSError:
        existing_pid = _read_lock_pid(fd)
        logger.error("🔒 Another Instance Already Running", [
            ("Existing PID", existing_pid or "Unknown"),
        ])
        os.close(fd)
        sys.exit(1)


def _read_lock_pid(fd: int) -> str:
    try:
        os.lseek(fd, 0, os.SEEK_SET)
        return os.read(fd, 100).decode().strip()
    except (OSError, UnicodeDecodeError):
        return ""


# =============================================================================
# Configuration
# =============================================================================

def load_configuration() -> str:
    """
    Validate environment configuration.

    Returns:
        Discord bot token.

    Raises:
        SystemExit: If required configuration is missing.
    """
    try:
        validate_and_log_config()
    except ConfigValidationError as e:
        logger.error("Configuration Validation Failed", [
            ("Error", str(e)),
            ("Action", "Check your .env file"),
        ])
        sys.exit(1)

    return os.environ["DISCORD_TOKEN"]


# =============================================================================
# Signal Handlers
# =============================================================================

def _setup_signal_handlers() -> None:
    """
    Turn SIGTERM/SIGHUP into a graceful bot shutdown.

    SIGINT is handled by discord.py's bot.run() which catches KeyboardInterrupt.
    """
    def handle_signal(signum: int, frame) -> None:
        logger.info("Signal Received", [
            ("Signal", signal.Signals(signum).name),
            ("Action", "Initiating graceful shutdown"),
        ])
        bot = _bot_instance
        # discord.py raises AttributeError for .loop before login
        loop = getattr(bot, "loop", None)
        if bot is not None and loop is not None and loop.is_running():
            loop.call_soon_threadsafe(lambda: asyncio.ensure_future(bot.close()))
        else:
            sys.exit(0)

    for sig_name in ("SIGTERM", "SIGHUP"):
        if hasattr(signal, sig_name):
            signal.signal(getattr(signal, sig_name), handle_signal)


# =============================================================================
# Main Entry Point
# =============================================================================

def main() -> NoReturn:
    """
    Main entry point for the Soccerverse Discord bot.

    Execution flow:
    1. Acquire single-instance lock
    2. Load environment configuration
    3. Initialize and start bot
    """
    global _bot_instance

    lock_fd = acquire_lock()
    token = load_configuration()
    _setup_signal_handlers()

    exit_code = 0
    try:
        logger.tree(
            "Starting Soccerverse Bot",
            [
                ("Purpose", "Soccerverse club information"),
                ("Lock File", str(LOCK_FILE_PATH)),
                ("PID", str(os.getpid())),
            ],
            emoji="⚽",
        )

        bot = SoccerverseBot()
        _bot_instance = bot
        bot.run(token, log_handler=None)

    except KeyboardInterrupt:
        logger.info("🛑 Shutdown Requested", [
            ("By", "User (Ctrl+C)"),
        ])

    except Exception as e:
        logger.exception("💥 Fatal Error During Bot Execution", [
            ("Error Type", type(e).__name__),
            ("Error", str(e)),
        ])
        exit_code = 1

    finally:
        try:
            os.close(lock_fd)
        except OSError:
            pass
        logger.info("🛑 Bot Shutdown Complete")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
