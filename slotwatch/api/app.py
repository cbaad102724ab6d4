"""
FastAPI Application - Game state integration webhook and read-only views.

Endpoints:
    POST   /                    GSI webhook (one snapshot = one tick)
    GET    /api/v1/mappings     Current victim slot -> hero table
    GET    /api/v1/summary      Kill summary on demand
    GET    /api/v1/health       Liveness and current match

Ticks are serialized: at most one snapshot is processed at a time.
Highlight requests run as background tasks after the response is sent,
so a slow or failing recorder never delays the game client.
"""

from typing import Optional
import asyncio
import json


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Request, BackgroundTasks
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from .service import APIService
    from .schemas import (
        ErrorCode,
        ErrorResponse,
        HealthResponse,
        MappingsResponse,
        SummaryResponse,
        TickResponse,
    )

    app = FastAPI(
        title="Slotwatch",
        description="Links anonymized kill-feed victim slots to enemy heroes seen on the minimap.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    api_service = service or APIService()
    tick_lock = asyncio.Lock()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    # =========================================================================
    # Webhook
    # =========================================================================

    @app.post(
        "/",
        response_model=TickResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Ingest"],
        summary="Receive one game state snapshot",
    )
    async def receive_snapshot(request: Request, background_tasks: BackgroundTasks):
        """
        Process one GSI snapshot.

        Any JSON object is accepted; fields the engine needs but the
        payload lacks are skipped for this tick.
        """
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return make_error_response(ErrorCode.INVALID_PAYLOAD, "Body is not valid JSON")

        if not isinstance(payload, dict):
            return make_error_response(
                ErrorCode.INVALID_PAYLOAD,
                "Body must be a JSON object",
                details={"received": type(payload).__name__},
            )

        async with tick_lock:
            response, highlights = api_service.process_payload(payload)

        if highlights:
            background_tasks.add_task(api_service.dispatch_highlights, highlights)
        return response

    # =========================================================================
    # Views
    # =========================================================================

    @app.get(
        "/api/v1/mappings",
        response_model=MappingsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["State"],
        summary="Current victim slot mappings",
    )
    async def get_mappings():
        result = api_service.get_mappings()
        if isinstance(result, ErrorResponse):
            return make_error_response(result.error_code, result.error, status_code=404)
        return result

    @app.get(
        "/api/v1/summary",
        response_model=SummaryResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["State"],
        summary="Kill summary for the current match",
    )
    async def get_summary():
        result = api_service.get_summary()
        if isinstance(result, ErrorResponse):
            return make_error_response(result.error_code, result.error, status_code=404)
        return result

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
    )
    async def health():
        return api_service.health()

    return app
