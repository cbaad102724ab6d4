"""
Match Manager - Creates and ends per-match sessions.

LIFECYCLE:
1. A snapshot in progress with a new match id -> new session (in-memory only)
2. During the match every in-progress snapshot is one tick
3. A selection-phase snapshot (init, loading, hero pick) -> session ended,
   ALL correlation state dropped
4. Other phases (strategy time, pre-game, post-game) are ignored

PERSISTENCE RULES:
- Nothing carries over between matches
- Mappings only live as long as the session
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import random
import time

from ..engine_core.state import MatchState
from ..engine_core.correlation import CorrelationEngine, CorrelationConfig
from ..tracking import MinimapTracker, KillFeedWatcher, DisappearanceDetector
from ..tracking.snapshot import Snapshot
from ..report import Reporter
from .tick_loop import TickLoop, TickResult

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a match session."""
    ACTIVE = "active"
    ENDED = "ended"


@dataclass
class MatchSession:
    """
    One match worth of components sharing one MatchState.

    Build with `MatchSession.create(...)`.
    """
    match_id: str | None
    state: MatchState
    minimap: MinimapTracker
    watcher: KillFeedWatcher
    detector: DisappearanceDetector
    engine: CorrelationEngine
    reporter: Reporter
    created_at: float = field(default_factory=time.time)
    status: SessionState = SessionState.ACTIVE
    ticks: int = 0

    @classmethod
    def create(
        cls,
        match_id: str | None,
        config: CorrelationConfig | None = None,
        rng: random.Random | None = None,
        summary_interval: float = 60.0,
    ) -> MatchSession:
        state = MatchState(match_id=match_id)
        return cls(
            match_id=match_id,
            state=state,
            minimap=MinimapTracker(state),
            watcher=KillFeedWatcher(state),
            detector=DisappearanceDetector(state),
            engine=CorrelationEngine(
                state,
                config=config or CorrelationConfig(),
                rng=rng or random.Random(),
            ),
            reporter=Reporter(state, summary_interval=summary_interval),
        )

    def is_active(self) -> bool:
        return self.status == SessionState.ACTIVE


class MatchManager:
    """
    Owns the current match session.

    Responsibilities:
    - Start a session for each new match id
    - End it when the client goes back to setup
    - Route in-progress snapshots to the tick loop

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        config: CorrelationConfig | None = None,
        seed: int | None = None,
        summary_interval: float = 60.0,
    ):
        self.config = config or CorrelationConfig()
        self.seed = seed
        self.summary_interval = summary_interval
        self.current: MatchSession | None = None
        self._loop: TickLoop | None = None

    @property
    def match_id(self) -> str | None:
        return self.current.match_id if self.current else None

    def start_match(self, match_id: str | None) -> MatchSession:
        if self.current is not None:
            self.end_match(reason="new match")

        rng = random.Random(self.seed) if self.seed is not None else random.Random()
        self.current = MatchSession.create(
            match_id,
            config=self.config,
            rng=rng,
            summary_interval=self.summary_interval,
        )
        self._loop = TickLoop(self.current)
        logger.info("Starting new match %s", match_id or "(no match id)")
        return self.current

    def end_match(self, reason: str = "completed"):
        session = self.current
        if session is None:
            return
        session.status = SessionState.ENDED
        self.current = None
        self._loop = None
        logger.info("Match %s ended (%s); tracking reset", session.match_id, reason)

    def handle(self, snapshot: Snapshot) -> TickResult | None:
        """Process one snapshot; returns None when no tick ran."""
        if snapshot.in_selection:
            if self.current is not None:
                self.end_match(reason="game reset")
            return None

        if not snapshot.in_progress:
            return None

        if self.current is None or (
            snapshot.match_id is not None and snapshot.match_id != self.current.match_id
        ):
            self.start_match(snapshot.match_id)

        self.current.ticks += 1
        return self._loop.process(snapshot)
