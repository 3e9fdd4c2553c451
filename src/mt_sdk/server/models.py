"""Pydantic response models for the agent webhook server."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    agent: str
    timestamp: str


class ErrorResponse(BaseModel):
    error: str


class QueryEnvelope(BaseModel):
    """Response body for ``POST /query``.

    Success carries ``response`` (and optionally ``metadata``); failure
    carries ``error``.  Unset fields are left out of the JSON.
    """

    success: bool
    response: str | None = None
    metadata: dict[str, Any] | None = None
    duration_ms: int = Field(default=0, ge=0)
    error: str | None = None

    def to_json(self) -> dict[str, Any]:
        # Only top-level fields are dropped; None inside metadata is kept.
        data = self.model_dump(mode="json")
        return {key: value for key, value in data.items() if value is not None}
