"""GET /health -- liveness check for the marketplace (no auth)."""

from __future__ import annotations

from fastapi import APIRouter, Request

from mt_sdk.protocol import utc_timestamp
from mt_sdk.server.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Return a fixed healthy status and the current server time."""
    return HealthResponse(
        status="healthy",
        agent=request.app.state.settings.agent_id,
        timestamp=utc_timestamp(),
    )
