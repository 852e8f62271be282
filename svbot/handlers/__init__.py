"""
Soccerverse Bot - Handlers Package
==================================

Event handlers for bot lifecycle.

Author: Soccerverse Bot
"""

from svbot.handlers.ready import on_ready_handler
from svbot.handlers.shutdown import shutdown_handler

__all__ = [
    "on_ready_handler",
    "shutdown_handler",
]
