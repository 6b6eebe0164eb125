"""Unit tests for Streak Tracking (aura_quest/gamification/streak_system.py)"""
from aura_quest.gamification.streak_system import decrement_streak, increment_streak


def test_increment_streak():
    assert increment_streak(0) == 1
    assert increment_streak(5) == 6


def test_decrement_streak():
    assert decrement_streak(5) == 4


def test_decrement_streak_floors_at_zero():
    """Test streak never goes negative"""
    assert decrement_streak(0) == 0
