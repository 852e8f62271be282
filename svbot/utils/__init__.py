"""
Soccerverse Bot - Utilities Package
===================================

Author: Soccerverse Bot
"""
