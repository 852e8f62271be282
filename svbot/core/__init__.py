"""
Soccerverse Bot - Core Package
==============================

Logging, configuration and shared constants.

Author: Soccerverse Bot
"""
