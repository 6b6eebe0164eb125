"""
Streak Tracking

The streak moves in lock-step with quest completion toggles:
- completing a quest: +1
- un-completing a quest: -1, never below 0
"""


def increment_streak(streak: int) -> int:
    return streak + 1


def decrement_streak(streak: int) -> int:
    return max(0, streak - 1)
