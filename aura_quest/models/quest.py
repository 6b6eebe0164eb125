"""Quest, suggestion and progression models"""
from enum import Enum
from pydantic import BaseModel, Field


class MoodKey(str, Enum):
    """Mood categories inferred from journal text"""
    HAPPY = "happy"
    NEUTRAL = "neutral"
    SAD = "sad"
    TIRED = "tired"

    @classmethod
    def parse(cls, value: object) -> "MoodKey":
        """Map any stored/raw value onto a mood, falling back to neutral"""
        try:
            return cls(value)
        except ValueError:
            return cls.NEUTRAL


class Quest(BaseModel):
    """A completable task with a fixed XP reward"""
    id: int
    title: str
    xp: int = Field(..., gt=0)
    completed: bool = False


class Suggestion(BaseModel):
    """A proposed, not-yet-accepted quest"""
    id: int
    title: str
    xp: int = Field(..., ge=20, le=39)

    def to_quest(self) -> Quest:
        return Quest(id=self.id, title=self.title, xp=self.xp, completed=False)


class ProgressionState(BaseModel):
    """Snapshot of the engine-owned progression values"""
    xp: int = Field(..., ge=0)
    level: int = Field(..., ge=1)
    streak: int = Field(..., ge=0)
    mood: MoodKey = MoodKey.NEUTRAL


class Avatar(BaseModel):
    """Avatar face and label derived from XP and style"""
    face: str
    label: str
