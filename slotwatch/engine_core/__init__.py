"""
Engine Core - Per-match state and the victim slot correlation engine.

The engine is the runtime that:
1. Holds every per-match table in one MatchState
2. Attributes new kills to some hero
3. Scores kills against minimap disappearances
4. Retracts attributions contradicted by a living hero
5. Confirms attributions through extended absences
"""

from .state import (
    MatchState,
    HeroIdentity,
    Mapping,
    Position,
    KillEvent,
    DisappearanceEvent,
    PendingAbsence,
    VICTIM_IDS,
    HERO_PREFIX,
    clamp_confidence,
)
from .changes import ChangeType, MappingChange
from .correlation import CorrelationEngine, CorrelationConfig, Candidate

__all__ = [
    "MatchState",
    "HeroIdentity",
    "Mapping",
    "Position",
    "KillEvent",
    "DisappearanceEvent",
    "PendingAbsence",
    "VICTIM_IDS",
    "HERO_PREFIX",
    "clamp_confidence",
    "ChangeType",
    "MappingChange",
    "CorrelationEngine",
    "CorrelationConfig",
    "Candidate",
]
