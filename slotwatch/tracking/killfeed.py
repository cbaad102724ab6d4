"""
Kill Feed Watcher - Turns cumulative victim slot counters into kill events.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..engine_core.state import MatchState, KillEvent, VICTIM_IDS

logger = logging.getLogger(__name__)


@dataclass
class KillFeedWatcher:
    """Diffs kill counters between ticks and records the latest kill per slot."""
    state: MatchState

    def diff(
        self,
        current: dict[int, int],
        previous: dict[int, int],
        timestamp: float,
    ) -> list[KillEvent]:
        """
        Emit one KillEvent per slot whose counter went up.

        Counters only grow; a decrease is treated as no change. A slot
        missing from either side counts as zero.
        """
        events = []

        for victim_id in VICTIM_IDS:
            delta = current.get(victim_id, 0) - previous.get(victim_id, 0)
            if delta < 0:
                logger.debug(
                    "Kill counter for victim %d went backwards (%d -> %d); ignoring",
                    victim_id, previous.get(victim_id, 0), current.get(victim_id, 0),
                )
                continue
            if delta == 0:
                continue

            events.append(KillEvent(victim_id=victim_id, count_delta=delta, timestamp=timestamp))
            self.state.last_kill_at[victim_id] = timestamp

        return events

    def observe(self, counters: dict[int, int], timestamp: float) -> list[KillEvent]:
        """Diff against the stored counters, then store the new ones."""
        events = self.diff(counters, self.state.kill_counts, timestamp)
        for victim_id in VICTIM_IDS:
            if victim_id in counters:
                previous = self.state.kill_counts.get(victim_id, 0)
                self.state.kill_counts[victim_id] = max(previous, counters[victim_id])
        return events
