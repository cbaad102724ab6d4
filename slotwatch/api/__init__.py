"""
API Module - HTTP interface for the game client and dashboards.

The game client POSTs a snapshot to `/` on every state change.
Everything else is read-only.
"""

from .schemas import (
    ErrorCode,
    ErrorResponse,
    MappingInfo,
    ChangeInfo,
    HeroSummaryInfo,
    TickResponse,
    MappingsResponse,
    SummaryResponse,
    HealthResponse,
)
from .service import APIService
from .app import create_app

__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "MappingInfo",
    "ChangeInfo",
    "HeroSummaryInfo",
    "TickResponse",
    "MappingsResponse",
    "SummaryResponse",
    "HealthResponse",
    "APIService",
    "create_app",
]
