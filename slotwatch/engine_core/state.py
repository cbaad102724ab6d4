"""
Match State - Every per-match table the correlation engine works on.

Design principles:
- One value per match: trackers and the engine hold it by reference
- Bidirectional: victim -> hero and hero -> victim never disagree
- Clamped: confidence is stored in [0, 1] only
- Match-scoped: nothing here survives the end of a match
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math


VICTIM_IDS: tuple[int, ...] = (0, 1, 2, 3, 4)
HERO_PREFIX = "npc_dota_hero_"


def clamp_confidence(value: float) -> float:
    """Clamp a confidence value into [0, 1]."""
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class Position:
    """A point on the game map."""
    x: float
    y: float

    def distance_to(self, other: Position) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass
class HeroIdentity:
    """
    An enemy hero seen on the minimap at least once.

    Created on first sighting, refreshed every tick it is visible,
    never deleted during a match.
    """
    name: str  # Internal key, e.g. npc_dota_hero_storm_spirit
    display_name: str
    first_seen_at: float
    last_position: Position | None = None


@dataclass
class Mapping:
    """
    Attribution of one victim slot to one hero.

    `locked` is only ever set once confidence has reached the lock
    threshold; only the alive-contradiction path clears it.
    """
    victim_id: int
    hero_name: str
    confidence: float
    locked: bool = False
    last_updated_at: float = 0.0


@dataclass(frozen=True)
class KillEvent:
    """A positive change in one victim slot's cumulative kill counter."""
    victim_id: int
    count_delta: int
    timestamp: float


@dataclass(frozen=True)
class DisappearanceEvent:
    """A hero that was visible last tick and is not visible this tick."""
    hero_name: str
    timestamp: float
    last_position: Position | None = None


@dataclass
class PendingAbsence:
    """A hero missing from the minimap since `since`."""
    hero_name: str
    since: float


@dataclass
class RecentKill:
    """
    A kill kept around while late disappearances can still match it.

    `credited` holds the (hero, disappearance time) pairs already applied,
    so the same evidence never moves confidence twice.
    """
    event: KillEvent
    credited: set[tuple[str, float]] = field(default_factory=set)


@dataclass
class MatchState:
    """
    Complete correlation state for one match.

    Owned by a single MatchSession; MinimapTracker, KillFeedWatcher,
    DisappearanceDetector and CorrelationEngine all mutate the same
    instance.
    """
    match_id: str | None = None

    # Minimap registry (insertion order == discovery order)
    heroes: dict[str, HeroIdentity] = field(default_factory=dict)

    # Victim slot <-> hero tables
    mappings: dict[int, Mapping] = field(default_factory=dict)
    victim_by_hero: dict[str, int] = field(default_factory=dict)

    # Kill feed
    kill_counts: dict[int, int] = field(default_factory=dict)
    last_kill_at: dict[int, float] = field(default_factory=dict)

    # Visibility
    visible: frozenset[str] = frozenset()
    visibility_known: bool = False
    pending_absences: dict[str, PendingAbsence] = field(default_factory=dict)

    # Short-lived evidence buffers for kill <-> disappearance scoring
    recent_kills: list[RecentKill] = field(default_factory=list)
    recent_disappearances: list[DisappearanceEvent] = field(default_factory=list)

    observer_position: Position | None = None
    last_game_time: float | None = None

    # =========================================================================
    # Lookups
    # =========================================================================

    def mapping_for(self, victim_id: int) -> Mapping | None:
        return self.mappings.get(victim_id)

    def victim_for(self, hero_name: str) -> int | None:
        return self.victim_by_hero.get(hero_name)

    def ordered_heroes(self) -> list[HeroIdentity]:
        """Known heroes in a stable order: first seen, then name."""
        return sorted(self.heroes.values(), key=lambda h: (h.first_seen_at, h.name))

    def hero_rank(self, hero_name: str) -> int:
        """Position of a hero in `ordered_heroes`; unknown heroes sort last."""
        for index, hero in enumerate(self.ordered_heroes()):
            if hero.name == hero_name:
                return index
        return len(self.heroes)

    def unmapped_heroes(self) -> list[HeroIdentity]:
        return [h for h in self.ordered_heroes() if h.name not in self.victim_by_hero]

    def invisible_heroes(self) -> list[HeroIdentity]:
        return [h for h in self.ordered_heroes() if h.name not in self.visible]

    def display_name(self, hero_name: str) -> str:
        hero = self.heroes.get(hero_name)
        return hero.display_name if hero else hero_name

    @property
    def total_kills(self) -> int:
        return sum(self.kill_counts.values())

    # =========================================================================
    # Mutations
    # =========================================================================

    def assign(
        self,
        victim_id: int,
        hero_name: str,
        confidence: float,
        now: float,
        locked: bool = False,
    ) -> Mapping:
        """
        Map `victim_id` to `hero_name`, keeping both directions consistent.

        Any mapping the hero held on another victim slot is removed, as is
        whatever hero previously sat on this slot.
        """
        if victim_id not in VICTIM_IDS:
            raise ValueError(f"Unknown victim id: {victim_id}")

        previous_victim = self.victim_by_hero.get(hero_name)
        if previous_victim is not None and previous_victim != victim_id:
            self.unassign(previous_victim)

        current = self.mappings.get(victim_id)
        if current is not None and current.hero_name != hero_name:
            self.victim_by_hero.pop(current.hero_name, None)

        mapping = Mapping(
            victim_id=victim_id,
            hero_name=hero_name,
            confidence=clamp_confidence(confidence),
            locked=locked,
            last_updated_at=now,
        )
        self.mappings[victim_id] = mapping
        self.victim_by_hero[hero_name] = victim_id
        return mapping

    def unassign(self, victim_id: int) -> Mapping | None:
        """Remove the mapping for a victim slot, returning it."""
        mapping = self.mappings.pop(victim_id, None)
        if mapping is not None and self.victim_by_hero.get(mapping.hero_name) == victim_id:
            del self.victim_by_hero[mapping.hero_name]
        return mapping

    def check_invariants(self) -> list[str]:
        """Return a description of every violated invariant (empty if none)."""
        problems = []

        for victim_id, mapping in self.mappings.items():
            if victim_id not in VICTIM_IDS:
                problems.append(f"victim id {victim_id} outside fixed set")
            if mapping.victim_id != victim_id:
                problems.append(f"mapping keyed {victim_id} claims victim {mapping.victim_id}")
            if not 0.0 <= mapping.confidence <= 1.0:
                problems.append(f"victim {victim_id} confidence {mapping.confidence} out of range")
            if self.victim_by_hero.get(mapping.hero_name) != victim_id:
                problems.append(f"hero {mapping.hero_name} not indexed back to victim {victim_id}")

        for hero_name, victim_id in self.victim_by_hero.items():
            mapping = self.mappings.get(victim_id)
            if mapping is None or mapping.hero_name != hero_name:
                problems.append(f"reverse entry {hero_name} -> {victim_id} has no mapping")

        return problems
