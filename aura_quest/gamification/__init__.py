"""
Gamification system for Aura Quest

This module implements the progression core:
- XP and single-step leveling
- Streak tracking tied to quest completion
- Mood inference from journal entries
- Mood-based quest suggestions
- Calm Collector mini-game
"""

from aura_quest.gamification.engine import ProgressionEngine, MAX_QUESTS, SEED_QUESTS
from aura_quest.gamification.mood import infer_mood
from aura_quest.gamification.suggestions import SuggestionGenerator
from aura_quest.gamification.minigame import CalmCollector

__all__ = [
    "ProgressionEngine",
    "MAX_QUESTS",
    "SEED_QUESTS",
    "infer_mood",
    "SuggestionGenerator",
    "CalmCollector",
]
