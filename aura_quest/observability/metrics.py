"""
Prometheus metrics definitions for aura-quest.

This module defines all metrics collected by the application, organized by category:
- Progression metrics: quest toggles, level ups, bonus XP
- Suggestion metrics: generated batches per mood
- Sync metrics: published and delivered events, ignored payloads
- Store metrics: backend errors and undecodable values

Metrics are exposed at the /metrics endpoint for Prometheus scraping.
"""

import logging
from prometheus_client import Counter

logger = logging.getLogger(__name__)

# =============================================================================
# Progression Metrics
# =============================================================================

quest_toggles_total = Counter(
    "aq_quest_toggles_total",
    "Total quest completion toggles",
    ["direction"],  # direction: completed/uncompleted
)

level_ups_total = Counter(
    "aq_level_ups_total",
    "Total level ups",
)

bonus_xp_total = Counter(
    "aq_bonus_xp_total",
    "XP credited outside quest completion (mini-game)",
)

# =============================================================================
# Suggestion Metrics
# =============================================================================

suggestions_generated_total = Counter(
    "aq_suggestions_generated_total",
    "Total suggestion batches generated",
    ["mood"],
)

suggestions_accepted_total = Counter(
    "aq_suggestions_accepted_total",
    "Total suggestions converted into quests",
)

# =============================================================================
# Sync Metrics
# =============================================================================

sync_events_published_total = Counter(
    "aq_sync_events_published_total",
    "Total events published on the sync bus",
    ["event", "channel"],  # channel: local/external
)

sync_events_delivered_total = Counter(
    "aq_sync_events_delivered_total",
    "Total event deliveries to listeners",
    ["event"],
)

sync_listener_errors_total = Counter(
    "aq_sync_listener_errors_total",
    "Listener callbacks that raised during delivery",
    ["event"],
)

sync_decode_failures_total = Counter(
    "aq_sync_decode_failures_total",
    "Event payloads ignored because they could not be decoded",
    ["event"],
)

# =============================================================================
# Store Metrics
# =============================================================================

store_errors_total = Counter(
    "aq_store_errors_total",
    "Store backend operations that failed",
    ["backend", "operation"],
)

store_decode_failures_total = Counter(
    "aq_store_decode_failures_total",
    "Stored values that could not be decoded and fell back to a default",
    ["key"],
)
