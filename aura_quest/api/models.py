"""Pydantic models for API request/response validation"""
from typing import List, Optional
from pydantic import BaseModel, Field

from aura_quest.models.quest import Avatar, MoodKey, Quest, Suggestion


class StateResponse(BaseModel):
    """Everything the dashboard renders"""
    xp: int
    level: int
    streak: int
    mood: MoodKey
    progress_to_next_level: int = Field(..., ge=0, le=100)
    next_level_xp: int
    avatar: Avatar
    avatar_style: str
    display_name: str
    quests: List[Quest]
    suggestions: List[Suggestion]


class ToggleResponse(BaseModel):
    """Result of toggling a quest"""
    quest: Quest
    xp: int
    level: int
    streak: int
    progress_to_next_level: int


class JournalRequest(BaseModel):
    """Journal entry text"""
    text: str = Field(..., description="Free-text journal entry")


class JournalResponse(BaseModel):
    """Mood after a journal entry"""
    mood: MoodKey
    changed: bool = Field(..., description="False when the entry was blank")


class SuggestionsResponse(BaseModel):
    """Freshly generated suggestions"""
    mood: MoodKey
    suggestions: List[Suggestion]


class AcceptResponse(BaseModel):
    """Quest created from an accepted suggestion"""
    quest: Quest
    quests: List[Quest]
    suggestions: List[Suggestion]


class ProfileUpdateRequest(BaseModel):
    """Request to update profile preferences"""
    avatar_style: Optional[str] = Field(default=None, description="default, cute or minimal")
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=40)


class ProfileResponse(BaseModel):
    """Profile after an update"""
    avatar_style: str
    display_name: str
    avatar: Avatar


class GameStateResponse(BaseModel):
    """Calm Collector state"""
    calm: int
    combo: int
    collected: int
    xp: int
    gained: int = 0


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    store_backend: str
