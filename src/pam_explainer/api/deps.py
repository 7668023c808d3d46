"""Shared dependencies for API routes.

FastAPI convention: deps.py contains reusable request dependencies.

Usage with Annotated:
    from pam_explainer.api.deps import ConfigDep

    @router.post("/evaluate")
    async def evaluate(body: EvaluateRequest, config: ConfigDep) -> EvaluateResponse:
        ...
"""

from __future__ import annotations

__all__ = [
    "get_config",
    "ConfigDep",
]

from typing import Annotated, cast

from fastapi import Depends, HTTPException, Request

from pam_explainer.config import AppConfig


def get_config(request: Request) -> AppConfig:
    """Get AppConfig from app.state.

    Args:
        request: FastAPI request object.

    Returns:
        AppConfig instance.

    Raises:
        HTTPException: 503 if config not available.
    """
    config = getattr(request.app.state, "config", None)
    if config is None:
        raise HTTPException(status_code=503, detail="Configuration not available.")
    return cast(AppConfig, config)


ConfigDep = Annotated[AppConfig, Depends(get_config)]
