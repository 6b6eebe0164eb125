"""
Cross-view sync bus.

Two delivery channels sit behind one publish/subscribe interface:

- Local: ``publish`` queues the event on the tick scheduler and delivers it
  once to every listener subscribed at delivery time, including the
  publisher's own listeners.
- External: ``pump_external`` drains the store's record of writes made by
  other contexts and turns ``xp`` / ``quests`` writes into the same events.

Listeners therefore never need to know where a change came from.
"""

import json
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from aura_quest.observability.metrics import (
    sync_decode_failures_total,
    sync_events_delivered_total,
    sync_events_published_total,
    sync_listener_errors_total,
)
from aura_quest.store.base import StoreAdapter
from aura_quest.sync.scheduler import AsyncioTickScheduler, TickScheduler

logger = logging.getLogger(__name__)

XP_CHANGED = "xp-changed"
QUESTS_CHANGED = "quests-changed"

EVENTS = (XP_CHANGED, QUESTS_CHANGED)

# Store keys whose external writes become bus events
EVENT_FOR_KEY = {
    "xp": XP_CHANGED,
    "quests": QUESTS_CHANGED,
}

Listener = Callable[[Any], None]


def decode_xp_payload(payload: Any) -> Optional[int]:
    """Absolute XP from an xp-changed payload, or None if it is not a number"""
    if isinstance(payload, bool):
        return None
    if isinstance(payload, int):
        return payload
    try:
        return int(str(payload).strip())
    except ValueError:
        sync_decode_failures_total.labels(event=XP_CHANGED).inc()
        logger.debug(f"Ignoring undecodable {XP_CHANGED} payload: {payload!r}")
        return None


def decode_quests_payload(payload: Any) -> Optional[List[dict]]:
    """Quest dicts from a quests-changed payload, or None if it is not a JSON array"""
    try:
        value = json.loads(payload)
    except (TypeError, ValueError):
        value = None
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        sync_decode_failures_total.labels(event=QUESTS_CHANGED).inc()
        logger.debug(f"Ignoring undecodable {QUESTS_CHANGED} payload")
        return None
    return value


class SyncBus:
    """Publish/subscribe hub for one execution context"""

    def __init__(self, store: StoreAdapter, scheduler: Optional[TickScheduler] = None):
        self.store = store
        self.scheduler = scheduler or AsyncioTickScheduler()
        self._listeners: Dict[str, List[Tuple[Listener, Any]]] = defaultdict(list)

    def subscribe(self, event: str, listener: Listener, owner: Any = None) -> Callable[[], None]:
        """
        Register ``listener`` for ``event``.

        Args:
            event: Event name
            listener: Called with the payload
            owner: Publisher the listener belongs to; local broadcasts
                published with ``origin=owner`` skip this listener

        Returns:
            Callable that removes the subscription (safe to call twice)
        """
        self._check_event(event)
        entry = (listener, owner)
        self._listeners[event].append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners[event]:
                self._listeners[event].remove(entry)

        return unsubscribe

    def listener_count(self, event: str) -> int:
        return len(self._listeners[event])

    def publish(self, event: str, payload: Any, origin: Any = None) -> None:
        """
        Queue ``event`` for delivery on the next tick.

        Callers must have written the new value to the store already.
        Listeners owned by ``origin`` are skipped; every other listener,
        including views in this context, receives the event.
        """
        self._check_event(event)
        sync_events_published_total.labels(event=event, channel="local").inc()
        self.scheduler.call_soon(self._deliver, event, payload, origin)

    def pump_external(self) -> int:
        """
        Deliver changes other contexts wrote to the store.

        Returns:
            Number of events delivered
        """
        delivered = 0
        for change in self.store.poll_external_changes():
            event = EVENT_FOR_KEY.get(change.key)
            if event is None or change.value is None:
                continue

            payload: Any = change.value
            if event == XP_CHANGED:
                payload = decode_xp_payload(change.value)
                if payload is None:
                    continue

            sync_events_published_total.labels(event=event, channel="external").inc()
            logger.debug(f"External change on '{change.key}' -> {event}")
            self._deliver(event, payload)
            delivered += 1
        return delivered

    def _deliver(self, event: str, payload: Any, origin: Any = None) -> None:
        for listener, owner in list(self._listeners[event]):
            if origin is not None and owner is origin:
                continue
            try:
                listener(payload)
                sync_events_delivered_total.labels(event=event).inc()
            except Exception as e:
                sync_listener_errors_total.labels(event=event).inc()
                logger.error(f"Listener for {event} raised: {e}", exc_info=True)

    @staticmethod
    def _check_event(event: str) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown sync event '{event}'")
