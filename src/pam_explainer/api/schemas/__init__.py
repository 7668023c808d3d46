"""API schemas (Pydantic models) for request/response validation.

Centralized schemas for all API routes.
"""

from __future__ import annotations

from pydantic import BaseModel

# Rule schemas
from pam_explainer.api.schemas.rules import (
    EvaluateRequest,
    EvaluateResponse,
    ParseRequest,
    ParseResponse,
)


class HealthResponse(BaseModel):
    """API liveness and version."""

    status: str
    version: str


__all__ = [
    # Rules
    "EvaluateRequest",
    "EvaluateResponse",
    "ParseRequest",
    "ParseResponse",
    # Health
    "HealthResponse",
]
