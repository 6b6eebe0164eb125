"""Data models for aura-quest"""
from aura_quest.models.quest import Avatar, MoodKey, ProgressionState, Quest, Suggestion

__all__ = ["Avatar", "MoodKey", "ProgressionState", "Quest", "Suggestion"]
