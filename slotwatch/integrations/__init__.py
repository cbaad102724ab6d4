"""
Integrations - Outbound collaborators the engine notifies but never waits on.
"""

from .highlights import (
    HighlightRequest,
    HighlightSink,
    LoggingHighlightSink,
    MockHighlightSink,
    HighlightDispatcher,
    HERO_KILL,
)

__all__ = [
    "HighlightRequest",
    "HighlightSink",
    "LoggingHighlightSink",
    "MockHighlightSink",
    "HighlightDispatcher",
    "HERO_KILL",
]
