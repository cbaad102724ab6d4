"""
Highlights - Outbound requests to save a video highlight.

The recorder itself lives outside this service. The engine only builds
HighlightRequests; the dispatcher hands them to a sink and never lets a
sink failure reach tick processing.

Sinks:
- LoggingHighlightSink: Default, records the request in the log
- MockHighlightSink: For testing, keeps requests and can fail on demand
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
import logging

from ..tracking.snapshot import sanitize_hero_name

logger = logging.getLogger(__name__)

HERO_KILL = "hero_kill"


@dataclass(frozen=True)
class HighlightRequest:
    """A request to keep the last few seconds of video."""
    match_id: str
    event_type: str
    enemy_name: str
    game_time: float = 0.0

    @classmethod
    def for_kill(cls, match_id: str | None, hero_name: str | None, game_time: float) -> HighlightRequest:
        return cls(
            match_id=match_id or "unknown",
            event_type=HERO_KILL,
            enemy_name=sanitize_hero_name(hero_name) or "unknown",
            game_time=game_time,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "matchId": self.match_id,
            "eventType": self.event_type,
            "enemyName": self.enemy_name,
            "gameTime": self.game_time,
        }


class HighlightSink(ABC):
    """
    Abstract base class for highlight recorders.

    Implementations may block or raise; the dispatcher shields the
    engine from both.
    """

    @abstractmethod
    def save(self, request: HighlightRequest) -> None:
        """Ask the recorder to save a highlight."""
        pass


class LoggingHighlightSink(HighlightSink):
    """Sink that only logs; used when no recorder is configured."""

    def save(self, request: HighlightRequest) -> None:
        logger.info("Highlight requested: %s", request.to_dict())


class MockHighlightSink(HighlightSink):
    """
    Mock sink for testing.

    Records every request; raises `error` instead when one is set.
    """

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.requests: list[HighlightRequest] = []

    def save(self, request: HighlightRequest) -> None:
        if self.error is not None:
            raise self.error
        self.requests.append(request)


@dataclass
class HighlightDispatcher:
    """Fire-and-forget delivery of highlight requests."""
    sink: HighlightSink
    enabled: bool = True

    def dispatch(self, requests: list[HighlightRequest]) -> int:
        """Send each request; failures are logged. Returns how many went through."""
        if not self.enabled:
            return 0

        delivered = 0
        for request in requests:
            try:
                self.sink.save(request)
            except Exception:
                logger.exception("Failed to save highlight %s", request.to_dict())
                continue
            delivered += 1
        return delivered
