"""Aura Quest: gamified habit tracking with quests, XP, streaks and mood-based suggestions"""

__version__ = "0.1.0"
