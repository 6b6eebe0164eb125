"""
XP and Leveling System

Leveling Rule:
- Reaching level L+1 requires total XP >= (L+1) * 200
- Completing a quest raises the level by at most one step, even when the
  reward would clear several thresholds
- Un-completing a quest removes its XP (never below 0) but never lowers the level

Progress Display:
- progress = floor((xp mod (level * 200)) / (level * 200) * 100), clamped to [0, 100]
- The modulo uses the current level's threshold, so the bar does not start
  from zero right after a level up; this is the displayed behavior
"""

from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)

XP_PER_LEVEL = 200


def next_level_threshold(level: int) -> int:
    """Total XP needed to advance from ``level``"""
    return (level + 1) * XP_PER_LEVEL


def apply_quest_completion(xp: int, level: int, reward: int) -> Dict[str, Any]:
    """
    Credit a completed quest's reward

    Returns:
        {
            'new_xp': int,
            'new_level': int,
            'leveled_up': bool
        }
    """
    new_xp = xp + reward
    leveled_up = new_xp >= next_level_threshold(level)
    new_level = level + 1 if leveled_up else level

    if leveled_up:
        logger.info(f"Level up from {level} to {new_level} at {new_xp} XP")

    return {
        "new_xp": new_xp,
        "new_level": new_level,
        "leveled_up": leveled_up,
    }


def revert_quest_completion(xp: int, reward: int) -> int:
    """Remove a quest's reward, never going below zero"""
    return max(0, xp - reward)


def progress_to_next_level(xp: int, level: int) -> int:
    """Percentage shown on the progress bar (0-100)"""
    span = level * XP_PER_LEVEL
    if span <= 0:
        return 0
    percent = (xp % span) * 100 // span
    return max(0, min(100, percent))
