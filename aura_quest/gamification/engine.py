"""
Progression Engine

Single writer of XP, level, streak, mood, the quest list and the pending
suggestions. Every mutation:
1. updates the in-memory state,
2. writes the affected keys to the store,
3. publishes the matching sync event (delivered on a later tick).

The engine also listens on the bus: an xp-changed or quests-changed event
replaces its in-memory copy, so writes from other contexts win without any
merging. Undecodable payloads are ignored.

Durable keys:
- quests, ai_suggestions: JSON arrays
- xp, level, streak: decimal strings
- mood, avatar, name: plain strings
"""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from aura_quest.gamification import streak_system, xp_system
from aura_quest.gamification.avatar import AVATAR_STYLES, avatar_for_xp
from aura_quest.gamification.mood import infer_mood
from aura_quest.gamification.suggestions import SuggestionGenerator
from aura_quest.models.quest import Avatar, MoodKey, ProgressionState, Quest, Suggestion
from aura_quest.observability.metrics import (
    bonus_xp_total,
    level_ups_total,
    quest_toggles_total,
    suggestions_accepted_total,
)
from aura_quest.store.base import StoreAdapter
from aura_quest.sync.bus import (
    QUESTS_CHANGED,
    XP_CHANGED,
    SyncBus,
    decode_quests_payload,
    decode_xp_payload,
)

logger = logging.getLogger(__name__)

# Defaults used when a key is missing or unreadable
DEFAULT_XP = 120
DEFAULT_LEVEL = 3
DEFAULT_STREAK = 5
DEFAULT_AVATAR_STYLE = "default"
DEFAULT_DISPLAY_NAME = "Adventurer"

MAX_QUESTS = 12

SEED_QUESTS = [
    Quest(id=1, title="Morning Mindful Breathing", xp=20),
    Quest(id=2, title="Gratitude Journal (3 items)", xp=15),
    Quest(id=3, title="Stretch + Walk (10 min)", xp=25),
]

QUEST_LIST = TypeAdapter(List[Quest])
SUGGESTION_LIST = TypeAdapter(List[Suggestion])


def seed_quests() -> List[Quest]:
    return [q.model_copy() for q in SEED_QUESTS]


def dump_quests(quests: List[Quest]) -> str:
    """Serialize a quest list the way it is stored and broadcast"""
    return json.dumps([q.model_dump() for q in quests])


class ProgressionEngine:
    """Owns and mutates progression state for one context"""

    def __init__(
        self,
        store: StoreAdapter,
        bus: SyncBus,
        generator: Optional[SuggestionGenerator] = None,
    ):
        self.store = store
        self.bus = bus
        self.generator = generator or SuggestionGenerator()

        self._quests: List[Quest] = store.read_json("quests", seed_quests(), QUEST_LIST.validate_python)
        self._xp = max(0, store.read_int("xp", DEFAULT_XP))
        self._level = max(1, store.read_int("level", DEFAULT_LEVEL))
        self._streak = max(0, store.read_int("streak", DEFAULT_STREAK))
        self._mood = MoodKey.parse(store.read_str("mood", MoodKey.NEUTRAL.value))
        self._suggestions: List[Suggestion] = store.read_json("ai_suggestions", [], SUGGESTION_LIST.validate_python)
        self._avatar_style = store.read_str("avatar", DEFAULT_AVATAR_STYLE)
        self._display_name = store.read_str("name", DEFAULT_DISPLAY_NAME)

        self._unsubscribe = [
            bus.subscribe(XP_CHANGED, self._on_xp_changed, owner=self),
            bus.subscribe(QUESTS_CHANGED, self._on_quests_changed, owner=self),
        ]

        logger.info(
            f"Engine loaded: {self._xp} XP, level {self._level}, streak {self._streak}, "
            f"{len(self._quests)} quests, mood '{self._mood.value}'"
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def xp(self) -> int:
        return self._xp

    @property
    def level(self) -> int:
        return self._level

    @property
    def streak(self) -> int:
        return self._streak

    @property
    def mood(self) -> MoodKey:
        return self._mood

    @property
    def quests(self) -> List[Quest]:
        return [q.model_copy() for q in self._quests]

    @property
    def suggestions(self) -> List[Suggestion]:
        return [s.model_copy() for s in self._suggestions]

    @property
    def avatar_style(self) -> str:
        return self._avatar_style

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def state(self) -> ProgressionState:
        return ProgressionState(xp=self._xp, level=self._level, streak=self._streak, mood=self._mood)

    def progress_to_next_level(self) -> int:
        return xp_system.progress_to_next_level(self._xp, self._level)

    def avatar(self) -> Avatar:
        return avatar_for_xp(self._xp, self._avatar_style)

    def find_quest(self, quest_id: int) -> Optional[Quest]:
        for quest in self._quests:
            if quest.id == quest_id:
                return quest.model_copy()
        return None

    def find_suggestion(self, suggestion_id: int) -> Optional[Suggestion]:
        for suggestion in self._suggestions:
            if suggestion.id == suggestion_id:
                return suggestion.model_copy()
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def toggle_quest_completion(self, quest_id: int) -> Optional[Quest]:
        """
        Flip a quest's completed flag and adjust XP, level and streak

        Returns:
            The updated quest, or None if no quest has that id
        """
        index = next((i for i, q in enumerate(self._quests) if q.id == quest_id), None)
        if index is None:
            logger.debug(f"Toggle ignored: no quest {quest_id}")
            return None

        quest = self._quests[index]
        updated = quest.model_copy(update={"completed": not quest.completed})

        if updated.completed:
            result = xp_system.apply_quest_completion(self._xp, self._level, quest.xp)
            self._xp = result["new_xp"]
            if result["leveled_up"]:
                self._level = result["new_level"]
                level_ups_total.inc()
            self._streak = streak_system.increment_streak(self._streak)
            quest_toggles_total.labels(direction="completed").inc()
        else:
            self._xp = xp_system.revert_quest_completion(self._xp, quest.xp)
            self._streak = streak_system.decrement_streak(self._streak)
            quest_toggles_total.labels(direction="uncompleted").inc()

        self._quests = self._quests[:index] + [updated] + self._quests[index + 1:]

        self._save_quests()
        self.store.write_int("level", self._level)
        self.store.write_int("streak", self._streak)
        self.store.write_int("xp", self._xp)
        self.bus.publish(XP_CHANGED, self._xp, origin=self)

        logger.info(
            f"Quest {quest_id} {'completed' if updated.completed else 'reopened'}: "
            f"{self._xp} XP, level {self._level}, streak {self._streak}"
        )
        return updated.model_copy()

    def submit_journal_entry(self, text: str) -> Optional[MoodKey]:
        """
        Infer and store the mood expressed in a journal entry

        Returns:
            The new mood, or None for a blank entry (nothing changes)
        """
        if not text or not text.strip():
            return None

        self._mood = infer_mood(text)
        self.store.set("mood", self._mood.value)
        logger.info(f"Journal entry classified as '{self._mood.value}'")
        return self._mood

    def generate_suggestions(self) -> List[Suggestion]:
        """Replace pending suggestions with a fresh batch for the current mood"""
        self._suggestions = self.generator.generate(self._mood)
        self._save_suggestions()
        return self.suggestions

    def accept_suggestion(self, suggestion: Suggestion) -> Quest:
        """
        Turn a suggestion into a quest at the head of the list

        The list keeps the 12 most recent quests; the suggestion leaves the
        pending set.
        """
        quest = suggestion.to_quest()
        self._quests = ([quest] + self._quests)[:MAX_QUESTS]
        self._suggestions = [s for s in self._suggestions if s.id != suggestion.id]

        payload = self._save_quests()
        self._save_suggestions()
        self.bus.publish(QUESTS_CHANGED, payload, origin=self)

        suggestions_accepted_total.inc()
        logger.info(f"Accepted suggestion {suggestion.id} '{suggestion.title}' ({suggestion.xp} XP)")
        return quest.model_copy()

    def accept_suggestion_by_id(self, suggestion_id: int) -> Optional[Quest]:
        suggestion = self.find_suggestion(suggestion_id)
        if suggestion is None:
            return None
        return self.accept_suggestion(suggestion)

    def add_bonus_xp(self, amount: int) -> int:
        """
        Credit XP earned outside quests (mini-game)

        No level check and no streak change.

        Returns:
            New XP total
        """
        if amount <= 0:
            return self._xp

        self._xp += amount
        self.store.write_int("xp", self._xp)
        self.bus.publish(XP_CHANGED, self._xp, origin=self)

        bonus_xp_total.inc(amount)
        logger.info(f"Bonus {amount} XP credited, total {self._xp}")
        return self._xp

    def set_avatar_style(self, style: str) -> bool:
        if style not in AVATAR_STYLES:
            return False
        self._avatar_style = style
        self.store.set("avatar", style)
        return True

    def set_display_name(self, name: str) -> None:
        self._display_name = name
        self.store.set("name", name)

    def close(self) -> None:
        """Detach from the bus"""
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []

    def snapshot(self) -> Dict[str, Any]:
        """Everything a view needs to render the dashboard"""
        return {
            **self.state.model_dump(mode="json"),
            "progress_to_next_level": self.progress_to_next_level(),
            "next_level_xp": self._level * xp_system.XP_PER_LEVEL,
            "avatar": self.avatar().model_dump(),
            "avatar_style": self._avatar_style,
            "display_name": self._display_name,
            "quests": [q.model_dump() for q in self._quests],
            "suggestions": [s.model_dump() for s in self._suggestions],
        }

    # ------------------------------------------------------------------
    # Persistence and sync
    # ------------------------------------------------------------------

    def _save_quests(self) -> str:
        payload = dump_quests(self._quests)
        self.store.set("quests", payload)
        return payload

    def _save_suggestions(self) -> None:
        self.store.write_json("ai_suggestions", [s.model_dump() for s in self._suggestions])

    def _on_xp_changed(self, payload: Any) -> None:
        new_xp = decode_xp_payload(payload)
        if new_xp is None or new_xp < 0:
            return
        self._xp = new_xp
        # The writer stored level and streak before announcing XP
        self._level = max(1, self.store.read_int("level", self._level))
        self._streak = max(0, self.store.read_int("streak", self._streak))

    def _on_quests_changed(self, payload: Any) -> None:
        items = decode_quests_payload(payload)
        if items is None:
            return
        try:
            self._quests = QUEST_LIST.validate_python(items)[:MAX_QUESTS]
        except ValidationError:
            logger.debug("Ignoring quests-changed payload with invalid quests")
