"""
Soccerverse Discord Bot
=======================

Club information bot for the Soccerverse football game, backed by a
weekly-refreshed cache of club, player, league, stadium and cup names.

Author: Soccerverse Bot
"""

__version__ = "3.0.0"
