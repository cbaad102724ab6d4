"""
Session Module - Manages per-match correlation sessions.

A session represents one match:
- Created on the first in-progress snapshot of a match id
- Holds the MatchState and every component reading or writing it
- Processes one snapshot per tick
- Destroyed when the client returns to setup or a new match starts

Sessions are EPHEMERAL: no persistence between matches.
"""

from .manager import MatchManager, MatchSession, SessionState
from .tick_loop import TickLoop, TickResult

__all__ = [
    "MatchManager",
    "MatchSession",
    "SessionState",
    "TickLoop",
    "TickResult",
]
