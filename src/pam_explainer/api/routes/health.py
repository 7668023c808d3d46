"""Health endpoint.

Routes mounted at: /api/health
"""

from __future__ import annotations

__all__ = ["router"]

from fastapi import APIRouter

from pam_explainer import __version__
from pam_explainer.api.schemas import HealthResponse

router = APIRouter()


@router.get("")
async def get_health() -> HealthResponse:
    """Report that the API is up and which version is running."""
    return HealthResponse(status="ok", version=__version__)
