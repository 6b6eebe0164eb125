"""
Mood-conditioned quest suggestions

Each mood has a pool of three candidate titles. A batch is two titles drawn
from a shuffled copy of the pool, each with a random reward of 20-39 XP.
Randomness and ids are injected so batches are reproducible in tests.
"""

import logging
import random
from typing import Dict, List, Optional

from aura_quest.models.quest import MoodKey, Suggestion
from aura_quest.observability.metrics import suggestions_generated_total
from aura_quest.utils.ids import IdGenerator

logger = logging.getLogger(__name__)

SUGGESTIONS_PER_BATCH = 2
MIN_SUGGESTION_XP = 20
SUGGESTION_XP_SPREAD = 20  # rewards are MIN_SUGGESTION_XP + [0, 19]

SUGGESTION_POOL: Dict[MoodKey, List[str]] = {
    MoodKey.HAPPY: [
        "Share a small win with a friend (5 min)",
        "Teach someone a simple breathing exercise",
        "Write 3 things that made you smile today",
    ],
    MoodKey.NEUTRAL: [
        "Write a 2-minute gratitude note",
        "Take a 10-minute mindful walk",
        "Do a 5-minute body scan meditation",
    ],
    MoodKey.SAD: [
        "Write a letter to yourself with kindness",
        "Call someone you trust for a 10-minute chat",
        "Try 5 minutes of grounding exercises",
    ],
    MoodKey.TIRED: [
        "Take a 15-minute power nap or rest",
        "Do gentle stretches for 10 minutes",
        "Sip a warm drink and practice 3 deep breaths",
    ],
}


class SuggestionGenerator:
    """Produces suggestion batches for a mood"""

    def __init__(self, rng: Optional[random.Random] = None, ids: Optional[IdGenerator] = None):
        self.rng = rng or random.Random()
        self.ids = ids or IdGenerator()

    def generate(self, mood: object) -> List[Suggestion]:
        """
        Generate a batch for ``mood``

        Unknown moods use the neutral pool.
        """
        mood_key = MoodKey.parse(mood)
        titles = list(SUGGESTION_POOL[mood_key])
        self.rng.shuffle(titles)

        base_id = self.ids.reserve(SUGGESTIONS_PER_BATCH)
        batch = [
            Suggestion(
                id=base_id + idx,
                title=title,
                xp=MIN_SUGGESTION_XP + self.rng.randrange(SUGGESTION_XP_SPREAD),
            )
            for idx, title in enumerate(titles[:SUGGESTIONS_PER_BATCH])
        ]

        suggestions_generated_total.labels(mood=mood_key.value).inc()
        logger.info(f"Generated {len(batch)} suggestions for mood '{mood_key.value}'")
        return batch
