"""
Tracking Layer - Per-tick signal extraction from GSI snapshots.

Architecture:
    Payload -> Snapshot -> {MinimapTracker, KillFeedWatcher, DisappearanceDetector}
            -> CorrelationEngine

The trackers only record what the feed says; they never guess.
All inference happens in the correlation engine.
"""

from .snapshot import (
    Snapshot,
    VisibleEnemy,
    display_name,
    sanitize_hero_name,
    STATE_IN_PROGRESS,
    SELECTION_STATES,
)
from .minimap import MinimapTracker
from .killfeed import KillFeedWatcher
from .disappearance import DisappearanceDetector

__all__ = [
    "Snapshot",
    "VisibleEnemy",
    "display_name",
    "sanitize_hero_name",
    "STATE_IN_PROGRESS",
    "SELECTION_STATES",
    "MinimapTracker",
    "KillFeedWatcher",
    "DisappearanceDetector",
]
