"""
Reporter - Read-only projection of kills and mapping state.

Produces:
- One notification per kill event, qualified by mapping confidence
- A periodic summary on the game clock (not wall-clock)

The reporter never writes to MatchState.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..engine_core.state import MatchState, KillEvent

logger = logging.getLogger(__name__)

UNKNOWN_HERO = "Unknown"
POSSIBLE_BELOW = 0.5
PROBABLE_BELOW = 0.7


def confidence_qualifier(confidence: float) -> str:
    """'possible' below 0.5, 'probable' below 0.7, nothing above."""
    if confidence < POSSIBLE_BELOW:
        return "possible"
    if confidence < PROBABLE_BELOW:
        return "probable"
    return ""


@dataclass(frozen=True)
class KillNotification:
    """Human-readable account of one kill event."""
    victim_id: int
    hero_name: str | None
    display_name: str
    confidence: float | None
    qualifier: str
    victim_total: int
    game_time: float

    @property
    def message(self) -> str:
        target = f"{self.qualifier} {self.display_name}" if self.qualifier else self.display_name
        return f"Killed {target} (victim {self.victim_id}, {self.victim_total} total)"


@dataclass(frozen=True)
class SummaryRow:
    """One known hero in a summary."""
    hero_name: str
    display_name: str
    victim_id: int | None
    kills: int
    confidence: float | None
    locked: bool = False

    @property
    def text(self) -> str:
        if self.victim_id is None:
            return f"{self.display_name}: {self.kills} kills (unmapped)"
        lock = ", locked" if self.locked else ""
        return f"{self.display_name}: {self.kills} kills (confidence {self.confidence:.2f}{lock})"


@dataclass(frozen=True)
class Summary:
    """Full kill summary at a point on the game clock."""
    game_time: float
    total_kills: int
    rows: tuple[SummaryRow, ...] = ()

    def lines(self) -> list[str]:
        minutes, seconds = divmod(int(max(self.game_time, 0)), 60)
        header = f"Summary at {minutes}:{seconds:02d} - {self.total_kills} total kills"
        return [header] + [f"  {row.text}" for row in self.rows]


@dataclass
class Reporter:
    """
    Turns engine output into notifications.

    Usage:
        reporter = Reporter(state)
        notes = reporter.report_kills(kills, now)
        summary = reporter.maybe_summary(now)
    """
    state: MatchState
    summary_interval: float = 60.0
    last_summary_at: float | None = field(default=None)

    def describe_kill(self, kill: KillEvent) -> KillNotification:
        mapping = self.state.mapping_for(kill.victim_id)
        total = self.state.kill_counts.get(kill.victim_id, 0)

        if mapping is None:
            return KillNotification(
                victim_id=kill.victim_id,
                hero_name=None,
                display_name=UNKNOWN_HERO,
                confidence=None,
                qualifier="",
                victim_total=total,
                game_time=kill.timestamp,
            )

        return KillNotification(
            victim_id=kill.victim_id,
            hero_name=mapping.hero_name,
            display_name=self.state.display_name(mapping.hero_name),
            confidence=mapping.confidence,
            qualifier=confidence_qualifier(mapping.confidence),
            victim_total=total,
            game_time=kill.timestamp,
        )

    def report_kills(self, kills: list[KillEvent]) -> list[KillNotification]:
        notifications = [self.describe_kill(kill) for kill in kills]
        for note in notifications:
            logger.info(note.message)
        return notifications

    def summary(self, now: float) -> Summary:
        """Build a summary without touching the report cadence."""
        rows = []
        for hero in self.state.ordered_heroes():
            victim_id = self.state.victim_for(hero.name)
            mapping = self.state.mapping_for(victim_id) if victim_id is not None else None
            rows.append(SummaryRow(
                hero_name=hero.name,
                display_name=hero.display_name,
                victim_id=victim_id,
                kills=self.state.kill_counts.get(victim_id, 0) if victim_id is not None else 0,
                confidence=mapping.confidence if mapping else None,
                locked=mapping.locked if mapping else False,
            ))
        return Summary(game_time=now, total_kills=self.state.total_kills, rows=tuple(rows))

    def maybe_summary(self, now: float) -> Summary | None:
        """Return a summary once per interval of game time."""
        if self.last_summary_at is None:
            self.last_summary_at = now
            return None
        if now - self.last_summary_at < self.summary_interval:
            return None

        self.last_summary_at = now
        summary = self.summary(now)
        for line in summary.lines():
            logger.info(line)
        return summary
