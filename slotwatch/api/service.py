"""
API Service - Business logic layer between the HTTP app and the engine.

The service:
1. Parses webhook payloads into snapshots
2. Routes them through the match manager
3. Formats engine state into response models
4. Hands highlight requests to the dispatcher

This layer is framework-agnostic (FastAPI only lives in app.py).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging

from .. import __version__
from ..engine_core.state import VICTIM_IDS
from ..integrations.highlights import (
    HighlightDispatcher,
    HighlightRequest,
    LoggingHighlightSink,
)
from ..session import MatchManager
from ..tracking.snapshot import Snapshot
from .schemas import (
    ChangeInfo,
    ErrorCode,
    ErrorResponse,
    HealthResponse,
    HeroSummaryInfo,
    MappingInfo,
    MappingsResponse,
    SummaryResponse,
    TickResponse,
)

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        response, highlights = service.process_payload(body)
        service.dispatch_highlights(highlights)
    """
    manager: MatchManager = field(default_factory=MatchManager)
    dispatcher: HighlightDispatcher = field(
        default_factory=lambda: HighlightDispatcher(sink=LoggingHighlightSink())
    )

    def process_payload(self, payload: dict[str, Any]) -> tuple[TickResponse, list[HighlightRequest]]:
        """Run one tick for a webhook body."""
        snapshot = Snapshot.from_payload(payload)
        result = self.manager.handle(snapshot)

        if result is None:
            return TickResponse(processed=False, match_id=self.manager.match_id), []

        response = TickResponse(
            processed=True,
            match_id=result.match_id,
            game_time=result.game_time,
            kills=len(result.kills),
            disappearances=len(result.disappearances),
            discovered=[hero.name for hero in result.discovered],
            changes=[ChangeInfo(**change.to_dict()) for change in result.changes],
            messages=result.messages(),
            skipped=result.skipped,
        )
        return response, result.highlights

    def dispatch_highlights(self, requests: list[HighlightRequest]) -> int:
        return self.dispatcher.dispatch(requests)

    def get_mappings(self) -> MappingsResponse | ErrorResponse:
        session = self.manager.current
        if session is None:
            return _no_match()

        state = session.state
        mappings = [
            MappingInfo(
                victim_id=mapping.victim_id,
                hero_name=mapping.hero_name,
                display_name=state.display_name(mapping.hero_name),
                confidence=mapping.confidence,
                locked=mapping.locked,
                kills=state.kill_counts.get(mapping.victim_id, 0),
                last_updated_at=mapping.last_updated_at,
            )
            for _, mapping in sorted(state.mappings.items())
        ]
        return MappingsResponse(
            match_id=session.match_id,
            game_time=state.last_game_time,
            mappings=mappings,
            unmapped_victims=[v for v in VICTIM_IDS if v not in state.mappings],
        )

    def get_summary(self) -> SummaryResponse | ErrorResponse:
        session = self.manager.current
        if session is None:
            return _no_match()

        summary = session.reporter.summary(session.state.last_game_time or 0.0)
        return SummaryResponse(
            match_id=session.match_id,
            game_time=summary.game_time,
            total_kills=summary.total_kills,
            heroes=[
                HeroSummaryInfo(
                    hero_name=row.hero_name,
                    display_name=row.display_name,
                    victim_id=row.victim_id,
                    kills=row.kills,
                    confidence=row.confidence,
                    locked=row.locked,
                )
                for row in summary.rows
            ],
            lines=summary.lines(),
        )

    def health(self) -> HealthResponse:
        session = self.manager.current
        return HealthResponse(
            version=__version__,
            match_id=session.match_id if session else None,
            ticks=session.ticks if session else 0,
        )


def _no_match() -> ErrorResponse:
    return ErrorResponse(
        error="No match is being tracked",
        error_code=ErrorCode.NO_ACTIVE_MATCH,
    )
