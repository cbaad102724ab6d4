"""
Disappearance Detector - Heroes that drop off the minimap.

Two outputs per tick:
- DisappearanceEvents for heroes visible last tick and gone this tick
- The PendingAbsence table, which remembers when each missing hero was
  first missed until it shows up again
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..engine_core.state import MatchState, DisappearanceEvent, PendingAbsence, Position

logger = logging.getLogger(__name__)


@dataclass
class DisappearanceDetector:
    """Diffs the visible-enemy set between ticks."""
    state: MatchState

    def diff(
        self,
        current_visible: frozenset[str],
        previous_visible: frozenset[str],
        timestamp: float,
        positions: dict[str, Position],
    ) -> list[DisappearanceEvent]:
        """
        Return heroes that left the minimap this tick.

        `positions` supplies each hero's last known position. Reappearing
        heroes lose their pending absence immediately.
        """
        pending = self.state.pending_absences

        for hero_name in current_visible:
            if pending.pop(hero_name, None) is not None:
                logger.debug("%s is back on the minimap", hero_name)

        events = []
        for hero_name in sorted(previous_visible - current_visible):
            events.append(DisappearanceEvent(
                hero_name=hero_name,
                timestamp=timestamp,
                last_position=positions.get(hero_name),
            ))
            if hero_name not in pending:
                pending[hero_name] = PendingAbsence(hero_name=hero_name, since=timestamp)

        return events

    def observe(self, current_visible: frozenset[str], timestamp: float) -> list[DisappearanceEvent]:
        """Diff against the stored visible set, then store the new one."""
        positions = {
            name: hero.last_position
            for name, hero in self.state.heroes.items()
            if hero.last_position is not None
        }
        events = self.diff(current_visible, self.state.visible, timestamp, positions)
        self.state.visible = current_visible
        self.state.visibility_known = True
        return events
