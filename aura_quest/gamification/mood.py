"""
Mood inference from journal text

A fixed, ordered keyword table; the first category with a matching keyword
wins, anything else is neutral. Keywords match anywhere in the lower-cased
text, including inside longer words.
"""

import logging
import re
from typing import List, Tuple

from aura_quest.models.quest import MoodKey

logger = logging.getLogger(__name__)

MOOD_RULES: List[Tuple[MoodKey, re.Pattern]] = [
    (MoodKey.HAPPY, re.compile(r"happy|good|great|grateful|blessed")),
    (MoodKey.SAD, re.compile(r"sad|down|unhappy|lonely")),
    (MoodKey.TIRED, re.compile(r"tired|exhausted|sleepy")),
]


def infer_mood(text: str) -> MoodKey:
    """
    Classify journal text into a mood

    Example:
        >>> infer_mood("I am happy but tired")
        <MoodKey.HAPPY: 'happy'>
    """
    lowered = text.lower()
    for mood, pattern in MOOD_RULES:
        if pattern.search(lowered):
            return mood
    return MoodKey.NEUTRAL
