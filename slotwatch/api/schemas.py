"""
Pydantic Schemas for API - Request/response models for OpenAPI.

The inbound webhook body is the raw GSI payload and is deliberately not
modeled: the client sends whatever subset it was configured for, and
the tracker layer copes with missing fields.

Error Codes:
- INVALID_PAYLOAD: Body was not a JSON object
- NO_ACTIVE_MATCH: No match is being tracked yet
- INTERNAL_ERROR: Unexpected failure
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    NO_ACTIVE_MATCH = "NO_ACTIVE_MATCH"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class MappingInfo(BaseModel):
    """One victim slot attribution."""
    victim_id: int = Field(ge=0, le=4)
    hero_name: str
    display_name: str
    confidence: float = Field(ge=0.0, le=1.0)
    locked: bool = False
    kills: int = 0
    last_updated_at: float = 0.0

    model_config = {"from_attributes": True}


class ChangeInfo(BaseModel):
    """One mapping transition made during a tick."""
    type: str
    victim_id: int
    hero_name: Optional[str] = None
    previous_hero: Optional[str] = None
    old_confidence: float = 0.0
    new_confidence: float = 0.0
    timestamp: float = 0.0
    reason: str = ""


class HeroSummaryInfo(BaseModel):
    """One known hero in a summary."""
    hero_name: str
    display_name: str
    victim_id: Optional[int] = None
    kills: int = 0
    confidence: Optional[float] = None
    locked: bool = False


# =============================================================================
# Responses
# =============================================================================

class TickResponse(BaseModel):
    """Result of processing one webhook snapshot."""
    processed: bool = Field(description="False when the snapshot was outside a match in progress")
    match_id: Optional[str] = None
    game_time: Optional[float] = None
    kills: int = 0
    disappearances: int = 0
    discovered: list[str] = Field(default_factory=list)
    changes: list[ChangeInfo] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


class MappingsResponse(BaseModel):
    """Current victim slot table."""
    match_id: Optional[str] = None
    game_time: Optional[float] = None
    mappings: list[MappingInfo] = Field(default_factory=list)
    unmapped_victims: list[int] = Field(default_factory=list)


class SummaryResponse(BaseModel):
    """On-demand kill summary."""
    match_id: Optional[str] = None
    game_time: float = 0.0
    total_kills: int = 0
    heroes: list[HeroSummaryInfo] = Field(default_factory=list)
    lines: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Liveness check."""
    status: str = "ok"
    version: str
    match_id: Optional[str] = None
    ticks: int = 0


class ErrorResponse(BaseModel):
    """Structured error."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
