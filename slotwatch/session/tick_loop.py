"""
Tick Loop - The one-directional per-snapshot pipeline.

The loop:
1. Refresh observer position
2. Minimap tracker registers/refreshes heroes
3. Disappearance detector diffs the visible set
4. Kill feed watcher diffs the victim counters
5. Correlation engine updates mappings
6. Reporter describes kills and, on cadence, summarizes
7. Highlight requests are built for the dispatcher

Each snapshot is one atomic tick. The caller serializes delivery.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING
import logging

from ..engine_core.changes import MappingChange
from ..engine_core.state import KillEvent, DisappearanceEvent, HeroIdentity
from ..integrations.highlights import HighlightRequest
from ..report.reporter import KillNotification, Summary

if TYPE_CHECKING:
    from .manager import MatchSession
    from ..tracking.snapshot import Snapshot

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """
    Everything one tick produced.

    All lists are empty for a duplicate of the previous snapshot.
    """
    match_id: str | None
    game_time: float

    discovered: list[HeroIdentity] = field(default_factory=list)
    kills: list[KillEvent] = field(default_factory=list)
    disappearances: list[DisappearanceEvent] = field(default_factory=list)
    changes: list[MappingChange] = field(default_factory=list)
    notifications: list[KillNotification] = field(default_factory=list)
    summary: Summary | None = None
    highlights: list[HighlightRequest] = field(default_factory=list)

    # Sub-steps skipped because their input was absent
    skipped: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.discovered or self.kills or self.disappearances
            or self.changes or self.notifications or self.summary
        )

    def messages(self) -> list[str]:
        lines = [note.message for note in self.notifications]
        if self.summary is not None:
            lines.extend(self.summary.lines())
        return lines

    def to_dict(self) -> dict[str, Any]:
        return {
            "match_id": self.match_id,
            "game_time": self.game_time,
            "discovered": [hero.name for hero in self.discovered],
            "kills": [
                {"victim_id": k.victim_id, "count_delta": k.count_delta, "timestamp": k.timestamp}
                for k in self.kills
            ],
            "disappearances": [d.hero_name for d in self.disappearances],
            "changes": [change.to_dict() for change in self.changes],
            "messages": self.messages(),
            "skipped": list(self.skipped),
        }


class TickLoop:
    """
    Drives one MatchSession through snapshots.

    Usage:
        loop = TickLoop(session)
        result = loop.process(Snapshot.from_payload(body))
        dispatcher.dispatch(result.highlights)
    """

    def __init__(self, session: MatchSession):
        self.session = session

    def process(self, snapshot: Snapshot) -> TickResult:
        session = self.session
        state = session.state
        now = snapshot.game_time
        result = TickResult(match_id=state.match_id, game_time=now)

        if snapshot.observer is not None:
            state.observer_position = snapshot.observer
        else:
            result.skipped.append("hero")

        visible = snapshot.visible_names
        if snapshot.enemies is not None:
            result.discovered = session.minimap.update(snapshot.enemies, now)
            result.disappearances = session.detector.observe(visible, now)
        else:
            result.skipped.append("minimap")

        if snapshot.kill_counters is not None:
            result.kills = session.watcher.observe(snapshot.kill_counters, now)
        else:
            result.skipped.append("kill_list")

        if result.skipped:
            logger.debug("Tick %.1f skipped: %s", now, ", ".join(result.skipped))

        result.changes = session.engine.tick(now, result.kills, result.disappearances, visible)
        result.notifications = session.reporter.report_kills(result.kills)
        result.summary = session.reporter.maybe_summary(now)
        result.highlights = [
            HighlightRequest.for_kill(state.match_id, note.hero_name, now)
            for note in result.notifications
        ]

        state.last_game_time = now
        return result
