"""FastAPI server for the pam-explainer HTTP API.

Currently implements:
- Policy parsing (/api/parse)
- Policy evaluation with per-rule overrides (/api/evaluate)
- Health check (/api/health)
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pam_explainer import __version__
from pam_explainer.config import AppConfig

from .routes import health, rules


def create_api_app(config: AppConfig | None = None) -> FastAPI:
    """Create the FastAPI application with all routes.

    Args:
        config: Application config. Defaults to built-in defaults.
    """
    config = config or AppConfig()

    app = FastAPI(
        title="pam-explainer API",
        description="Explain what a PAM stack will decide",
        version=__version__,
    )
    app.state.config = config

    # CORS configuration
    # The API runs on localhost; browser front ends on another port need CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.effective_cors_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        max_age=3600,  # Cache preflight for 1 hour
    )

    # Mount API routes
    app.include_router(rules.router, prefix="/api", tags=["rules"])
    app.include_router(health.router, prefix="/api/health", tags=["health"])

    return app
