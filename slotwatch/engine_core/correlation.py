"""
Correlation Engine - Infers which enemy hero occupies which victim slot.

The kill feed only names victim slots 0-4; the minimap only names heroes.
The engine links them from indirect evidence, every tick, in this order:

1. Initial mapping: a kill on an unmapped slot gets *some* hero
2. Kill/disappearance correlation: time and proximity scoring
3. Alive contradiction: a hero seen alive right after "its" kill is wrong
4. Extended absence: a long disappearance lining up with a kill confirms it

Confidence is always in [0, 1]. A mapping locks once it reaches the lock
threshold; only step 3 can break a lock.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random

from .state import (
    MatchState,
    Mapping,
    HeroIdentity,
    KillEvent,
    DisappearanceEvent,
    RecentKill,
    clamp_confidence,
)
from .changes import ChangeType, MappingChange

logger = logging.getLogger(__name__)

# Float sums such as 0.5 + 0.35 land a hair under 0.85
_LOCK_EPSILON = 1e-9


@dataclass
class CorrelationConfig:
    """Tunables for the correlation state machine."""
    initial_confidence: float = 0.1

    # Kill/disappearance scoring
    early_window: float = 1.5  # Disappearance seen before the kill
    late_window: float = 0.5  # Disappearance seen after the kill
    proximity_range: float = 1500.0
    time_weight: float = 0.5
    threshold_floor: float = 0.2
    threshold_margin: float = 0.1
    confirmation_factor: float = 0.2
    steal_margin: float = 0.2
    swap_back_cap: float = 0.5

    # Alive contradiction
    alive_check_window: float = 10.0
    correction_confidence: float = 0.8

    # Extended absence
    absence_delay: float = 5.0
    absence_match_window: float = 3.0
    absence_boost: float = 0.35
    absence_cap: float = 0.95

    lock_threshold: float = 0.85


@dataclass
class Candidate:
    """A disappearance scored against one kill."""
    disappearance: DisappearanceEvent
    time_score: float
    proximity_score: float | None
    score: float

    @property
    def hero_name(self) -> str:
        return self.disappearance.hero_name


@dataclass
class CorrelationEngine:
    """
    The victim slot state machine.

    Usage:
        engine = CorrelationEngine(state, rng=random.Random(7))
        changes = engine.tick(now, kills, disappearances, visible)
    """
    state: MatchState
    config: CorrelationConfig = field(default_factory=CorrelationConfig)
    rng: random.Random = field(default_factory=random.Random)

    def tick(
        self,
        now: float,
        kills: list[KillEvent],
        disappearances: list[DisappearanceEvent],
        visible: frozenset[str] | None,
    ) -> list[MappingChange]:
        """
        Run one tick of the state machine.

        `visible` is None when the minimap was absent this tick, which
        skips the alive-contradiction check.
        """
        changes: list[MappingChange] = []

        self._prune_evidence(now)
        self.state.recent_kills.extend(RecentKill(event=kill) for kill in kills)
        self.state.recent_disappearances.extend(disappearances)

        changes.extend(self._assign_initial(kills, now))
        changes.extend(self._correlate(now))
        if visible is not None:
            changes.extend(self._correct_alive(now, visible))
        changes.extend(self._confirm_absences(now))

        return changes

    # =========================================================================
    # Step 1: initial mapping
    # =========================================================================

    def _assign_initial(self, kills: list[KillEvent], now: float) -> list[MappingChange]:
        changes = []

        for kill in kills:
            victim_id = kill.victim_id
            if self.state.mapping_for(victim_id) is not None:
                continue

            unmapped = self.state.unmapped_heroes()
            if unmapped:
                hero = self.rng.choice(unmapped)
                self.state.assign(victim_id, hero.name, self.config.initial_confidence, now)
                changes.append(MappingChange(
                    change_type=ChangeType.CREATED,
                    victim_id=victim_id,
                    hero_name=hero.name,
                    timestamp=now,
                    new_confidence=self.config.initial_confidence,
                    reason="random unmapped hero",
                ))
                continue

            donor = self._lowest_confidence_mapping()
            if donor is None:
                logger.debug("No hero available to attribute kill on victim %d", victim_id)
                continue

            donor_victim, donor_conf = donor.victim_id, donor.confidence
            self.state.assign(victim_id, donor.hero_name, self.config.initial_confidence, now)
            changes.append(MappingChange(
                change_type=ChangeType.EVICTED,
                victim_id=donor_victim,
                hero_name=None,
                timestamp=now,
                previous_hero=donor.hero_name,
                old_confidence=donor_conf,
                reason=f"hero reused for victim {victim_id}",
            ))
            changes.append(MappingChange(
                change_type=ChangeType.CREATED,
                victim_id=victim_id,
                hero_name=donor.hero_name,
                timestamp=now,
                new_confidence=self.config.initial_confidence,
                reason=f"lowest-confidence hero from victim {donor_victim}",
            ))

        return changes

    def _lowest_confidence_mapping(self) -> Mapping | None:
        """Weakest unlocked mapping; ties go to the earliest-seen hero."""
        unlocked = [m for m in self.state.mappings.values() if not m.locked]
        if not unlocked:
            return None
        return min(unlocked, key=lambda m: (m.confidence, self.state.hero_rank(m.hero_name)))

    # =========================================================================
    # Step 2: kill/disappearance correlation
    # =========================================================================

    def score_candidates(self, kill: KillEvent) -> list[Candidate]:
        """Score every buffered disappearance that falls inside the kill's window."""
        candidates = []
        observer = self.state.observer_position

        for disappearance in self.state.recent_disappearances:
            delta = kill.timestamp - disappearance.timestamp
            window = self.config.early_window if delta >= 0 else self.config.late_window
            time_score = max(0.0, 1.0 - abs(delta) / window)
            if time_score <= 0.0:
                continue

            proximity_score = None
            if observer is not None and disappearance.last_position is not None:
                distance = observer.distance_to(disappearance.last_position)
                proximity_score = max(0.0, 1.0 - distance / self.config.proximity_range)

            if proximity_score is None:
                score = time_score
            else:
                weight = self.config.time_weight
                score = weight * time_score + (1.0 - weight) * proximity_score

            candidates.append(Candidate(
                disappearance=disappearance,
                time_score=time_score,
                proximity_score=proximity_score,
                score=score,
            ))

        return candidates

    @staticmethod
    def best_candidate(candidates: list[Candidate]) -> Candidate | None:
        """Highest score; the first candidate wins ties."""
        best = None
        for candidate in candidates:
            if best is None or candidate.score > best.score:
                best = candidate
        return best

    def _correlate(self, now: float) -> list[MappingChange]:
        changes = []

        # NOTE: every buffered kill is re-scored each tick, so a later, better
        # disappearance can still move an unlocked mapping
        for recent in self.state.recent_kills:
            kill = recent.event
            best = self.best_candidate(self.score_candidates(kill))
            if best is None:
                continue

            evidence = (best.hero_name, best.disappearance.timestamp)
            if evidence in recent.credited:
                continue

            mapping = self.state.mapping_for(kill.victim_id)

            if mapping is not None and mapping.locked:
                if best.hero_name == mapping.hero_name and best.score > self.config.threshold_floor:
                    recent.credited.add(evidence)
                    changes.extend(self._confirm(mapping, best, now))
                continue

            current = mapping.confidence if mapping else 0.0
            threshold = max(self.config.threshold_floor, current - self.config.threshold_margin)
            if best.score <= threshold:
                continue

            recent.credited.add(evidence)
            changes.extend(self._resolve(kill.victim_id, mapping, best, now))

        return changes

    def _confirm(self, mapping: Mapping, best: Candidate, now: float) -> list[MappingChange]:
        old = mapping.confidence
        mapping.confidence = clamp_confidence(min(1.0, old + best.score * self.config.confirmation_factor))
        mapping.last_updated_at = now

        changes = [MappingChange(
            change_type=ChangeType.CONFIRMED,
            victim_id=mapping.victim_id,
            hero_name=mapping.hero_name,
            timestamp=now,
            previous_hero=mapping.hero_name,
            old_confidence=old,
            new_confidence=mapping.confidence,
            reason=f"disappearance scored {best.score:.2f}",
        )]
        changes.extend(self._maybe_lock(mapping, now))
        return changes

    def _resolve(
        self,
        victim_id: int,
        mapping: Mapping | None,
        best: Candidate,
        now: float,
    ) -> list[MappingChange]:
        hero_name = best.hero_name

        if mapping is not None and mapping.hero_name == hero_name:
            return self._confirm(mapping, best, now)

        previous_hero = mapping.hero_name if mapping else None
        old_confidence = mapping.confidence if mapping else 0.0
        owner = self.state.victim_for(hero_name)

        if owner is None:
            replaced = self.state.assign(victim_id, hero_name, best.score, now)
            changes = [MappingChange(
                change_type=ChangeType.REPLACED,
                victim_id=victim_id,
                hero_name=hero_name,
                timestamp=now,
                previous_hero=previous_hero,
                old_confidence=old_confidence,
                new_confidence=replaced.confidence,
                reason=f"unclaimed hero scored {best.score:.2f}",
            )]
            changes.extend(self._maybe_lock(replaced, now))
            return changes

        other = self.state.mappings[owner]
        if other.locked:
            logger.debug("Hero %s is locked to victim %d; not stealing", hero_name, owner)
            return []
        if best.score <= other.confidence + self.config.steal_margin:
            return []

        stolen = self.state.assign(victim_id, hero_name, best.score, now)
        changes = [MappingChange(
            change_type=ChangeType.STOLEN,
            victim_id=victim_id,
            hero_name=hero_name,
            timestamp=now,
            previous_hero=previous_hero,
            old_confidence=old_confidence,
            new_confidence=stolen.confidence,
            reason=f"taken from victim {owner} (score {best.score:.2f} vs {other.confidence:.2f})",
        )]

        if previous_hero is not None:
            swap_confidence = min(old_confidence, self.config.swap_back_cap)
            self.state.assign(owner, previous_hero, swap_confidence, now)
            changes.append(MappingChange(
                change_type=ChangeType.SWAPPED_BACK,
                victim_id=owner,
                hero_name=previous_hero,
                timestamp=now,
                previous_hero=hero_name,
                old_confidence=other.confidence,
                new_confidence=swap_confidence,
                reason=f"bumped out of victim {victim_id}",
            ))
        else:
            changes.append(MappingChange(
                change_type=ChangeType.EVICTED,
                victim_id=owner,
                hero_name=None,
                timestamp=now,
                previous_hero=hero_name,
                old_confidence=other.confidence,
                reason=f"hero taken by victim {victim_id}",
            ))

        changes.extend(self._maybe_lock(stolen, now))
        return changes

    # =========================================================================
    # Step 3: alive contradiction
    # =========================================================================

    def _correct_alive(self, now: float, visible: frozenset[str]) -> list[MappingChange]:
        changes = []

        for victim_id in sorted(self.state.mappings):
            mapping = self.state.mapping_for(victim_id)
            if mapping is None or mapping.hero_name not in visible:
                continue

            kill_at = self.state.last_kill_at.get(victim_id)
            if kill_at is None or not 0.0 <= now - kill_at <= self.config.alive_check_window:
                continue

            mapping.locked = False
            self.state.unassign(victim_id)
            logger.warning(
                "Victim %d mapped to %s, but %s is alive %.1fs after the kill; retracting",
                victim_id, mapping.hero_name, mapping.hero_name, now - kill_at,
            )

            replacement = self._nearest_invisible(visible)
            if replacement is None:
                changes.append(MappingChange(
                    change_type=ChangeType.DROPPED,
                    victim_id=victim_id,
                    hero_name=None,
                    timestamp=now,
                    previous_hero=mapping.hero_name,
                    old_confidence=mapping.confidence,
                    reason="mapped hero seen alive; no invisible hero",
                ))
                continue

            vacated = self.state.victim_for(replacement.name)
            if vacated is not None:
                evicted = self.state.mappings[vacated]
                changes.append(MappingChange(
                    change_type=ChangeType.EVICTED,
                    victim_id=vacated,
                    hero_name=None,
                    timestamp=now,
                    previous_hero=replacement.name,
                    old_confidence=evicted.confidence,
                    reason=f"hero moved to victim {victim_id} by correction",
                ))

            corrected = self.state.assign(
                victim_id, replacement.name, self.config.correction_confidence, now
            )
            changes.append(MappingChange(
                change_type=ChangeType.RETRACTED,
                victim_id=victim_id,
                hero_name=replacement.name,
                timestamp=now,
                previous_hero=mapping.hero_name,
                old_confidence=mapping.confidence,
                new_confidence=corrected.confidence,
                reason="mapped hero seen alive; nearest invisible hero",
            ))

        return changes

    def _nearest_invisible(self, visible: frozenset[str]) -> HeroIdentity | None:
        """Closest hero to the observer that is off the minimap and not locked elsewhere."""
        observer = self.state.observer_position
        candidates = []

        for hero in self.state.ordered_heroes():
            if hero.name in visible:
                continue
            owner = self.state.victim_for(hero.name)
            if owner is not None and self.state.mappings[owner].locked:
                continue
            candidates.append(hero)

        if not candidates:
            return None

        def distance(hero: HeroIdentity) -> float:
            if observer is None or hero.last_position is None:
                return float("inf")
            return observer.distance_to(hero.last_position)

        return min(candidates, key=distance)

    # =========================================================================
    # Step 4: extended absence
    # =========================================================================

    def _confirm_absences(self, now: float) -> list[MappingChange]:
        changes = []
        pending = self.state.pending_absences

        for absence in sorted(pending.values(), key=lambda a: (a.since, a.hero_name)):
            if now - absence.since <= self.config.absence_delay:
                continue
            del pending[absence.hero_name]

            owner = self.state.victim_for(absence.hero_name)
            if owner is not None and self.state.mappings[owner].locked:
                continue

            matches = []
            for mapping in self.state.mappings.values():
                kill_at = self.state.last_kill_at.get(mapping.victim_id)
                if mapping.locked or kill_at is None:
                    continue
                gap = abs(kill_at - absence.since)
                if gap <= self.config.absence_match_window:
                    matches.append((gap, mapping.victim_id, mapping))
            if not matches:
                continue

            _, victim_id, target = min(matches, key=lambda match: (match[0], match[1]))
            old = target.confidence
            boosted = clamp_confidence(min(old + self.config.absence_boost, self.config.absence_cap))

            if target.hero_name == absence.hero_name:
                target.confidence = boosted
                target.last_updated_at = now
                result = target
            elif boosted > old:
                if owner is not None and owner != victim_id:
                    changes.append(MappingChange(
                        change_type=ChangeType.EVICTED,
                        victim_id=owner,
                        hero_name=None,
                        timestamp=now,
                        previous_hero=absence.hero_name,
                        old_confidence=self.state.mappings[owner].confidence,
                        reason=f"hero moved to victim {victim_id} by extended absence",
                    ))
                result = self.state.assign(victim_id, absence.hero_name, boosted, now)
            else:
                continue

            changes.append(MappingChange(
                change_type=ChangeType.ABSENCE_BOOST,
                victim_id=victim_id,
                hero_name=absence.hero_name,
                timestamp=now,
                previous_hero=target.hero_name,
                old_confidence=old,
                new_confidence=result.confidence,
                reason=f"absent since {absence.since:.1f}s",
            ))
            changes.extend(self._maybe_lock(result, now))

        return changes

    # =========================================================================
    # Helpers
    # =========================================================================

    def _maybe_lock(self, mapping: Mapping, now: float) -> list[MappingChange]:
        if mapping.locked or mapping.confidence < self.config.lock_threshold - _LOCK_EPSILON:
            return []

        mapping.locked = True
        mapping.last_updated_at = now
        logger.info(
            "Locked victim %d -> %s at confidence %.2f",
            mapping.victim_id, self.state.display_name(mapping.hero_name), mapping.confidence,
        )
        return [MappingChange(
            change_type=ChangeType.LOCKED,
            victim_id=mapping.victim_id,
            hero_name=mapping.hero_name,
            timestamp=now,
            previous_hero=mapping.hero_name,
            old_confidence=mapping.confidence,
            new_confidence=mapping.confidence,
            reason="confidence crossed lock threshold",
        )]

    def _prune_evidence(self, now: float):
        """Drop kills and disappearances that can no longer pair up."""
        self.state.recent_kills = [
            recent for recent in self.state.recent_kills
            if now - recent.event.timestamp <= self.config.late_window
        ]
        self.state.recent_disappearances = [
            event for event in self.state.recent_disappearances
            if now - event.timestamp <= self.config.early_window
        ]
