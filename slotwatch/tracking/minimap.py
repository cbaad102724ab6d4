"""
Minimap Tracker - Registry of enemy heroes seen on the minimap.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..engine_core.state import MatchState, HeroIdentity
from .snapshot import VisibleEnemy, display_name

logger = logging.getLogger(__name__)

ENEMY_COUNT = 5


@dataclass
class MinimapTracker:
    """
    Keeps MatchState.heroes current.

    A hero is registered the first tick it shows up and is never removed;
    its last position is refreshed on every tick it is visible.
    """
    state: MatchState

    def update(self, visible_enemies: tuple[VisibleEnemy, ...] | list[VisibleEnemy], now: float) -> list[HeroIdentity]:
        """Register and refresh visible heroes; returns newly discovered ones."""
        discovered = []

        for enemy in visible_enemies:
            hero = self.state.heroes.get(enemy.name)
            if hero is None:
                hero = HeroIdentity(
                    name=enemy.name,
                    display_name=display_name(enemy.name),
                    first_seen_at=now,
                )
                self.state.heroes[enemy.name] = hero
                discovered.append(hero)
                logger.info("Found enemy %s (%d known)", hero.display_name, len(self.state.heroes))

            if enemy.position is not None:
                hero.last_position = enemy.position

        if discovered and self.all_found and len(self.state.heroes) - len(discovered) < ENEMY_COUNT:
            names = ", ".join(h.display_name for h in self.state.ordered_heroes())
            logger.info("All enemies found: %s", names)

        return discovered

    @property
    def all_found(self) -> bool:
        return len(self.state.heroes) >= ENEMY_COUNT
