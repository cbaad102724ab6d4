"""
Mapping Changes - Typed records of every transition the engine makes.

The engine returns these instead of printing, so the reporter, the API
and the tests all see exactly the same account of a tick.

Change Types:
- CREATED: First attribution for a victim slot
- EVICTED: Slot lost its hero to another slot
- CONFIRMED: Disappearance evidence agreed with the current hero
- REPLACED: Slot moved to an unclaimed hero
- STOLEN: Slot took a hero away from another slot
- SWAPPED_BACK: Bumped-out hero given to the slot that lost its hero
- RETRACTED: Mapped hero seen alive shortly after the kill
- DROPPED: Retracted with no invisible hero to fall back to
- ABSENCE_BOOST: Extended absence lined up with the slot's kill
- LOCKED: Confidence crossed the lock threshold
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ChangeType(Enum):
    """Kinds of mapping transitions."""
    CREATED = "created"
    EVICTED = "evicted"
    CONFIRMED = "confirmed"
    REPLACED = "replaced"
    STOLEN = "stolen"
    SWAPPED_BACK = "swapped_back"
    RETRACTED = "retracted"
    DROPPED = "dropped"
    ABSENCE_BOOST = "absence_boost"
    LOCKED = "locked"


@dataclass(frozen=True)
class MappingChange:
    """
    One transition of one victim slot.

    Examples:
        MappingChange(ChangeType.CONFIRMED, victim_id=2, hero_name="npc_dota_hero_axe",
                      previous_hero="npc_dota_hero_axe", old_confidence=0.1,
                      new_confidence=0.26, timestamp=10.3)
        MappingChange(ChangeType.DROPPED, victim_id=4, hero_name=None,
                      previous_hero="npc_dota_hero_lina", old_confidence=0.9,
                      new_confidence=0.0, timestamp=42.0)
    """
    change_type: ChangeType
    victim_id: int
    hero_name: str | None
    timestamp: float
    previous_hero: str | None = None
    old_confidence: float = 0.0
    new_confidence: float = 0.0
    reason: str = ""

    @property
    def hero_changed(self) -> bool:
        return self.hero_name != self.previous_hero

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.change_type.value,
            "victim_id": self.victim_id,
            "hero_name": self.hero_name,
            "previous_hero": self.previous_hero,
            "old_confidence": round(self.old_confidence, 4),
            "new_confidence": round(self.new_confidence, 4),
            "timestamp": self.timestamp,
            "reason": self.reason,
        }
