"""Serve command for pam-explainer CLI.

Runs the HTTP API (POST /api/parse, POST /api/evaluate) with uvicorn.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
import uvicorn

from pam_explainer import __version__
from pam_explainer.api.server import create_api_app
from pam_explainer.config import load_config
from pam_explainer.utils.logging import setup_logging


@click.command()
@click.option("--host", default=None, help="Interface to bind (default: from config, 127.0.0.1)")
@click.option("--port", type=click.IntRange(1, 65535), default=None, help="Port to listen on (default: from config, 3000)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config file (default: OS config location)",
)
def serve(host: str | None, port: int | None, config_path: Path | None) -> None:
    """Run the HTTP API.

    Unknown module outcomes default to the configured default outcome;
    clients send per-rule overrides by rule hash and get a full
    re-evaluation back.
    """
    try:
        app_config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    setup_logging(app_config.logging.log_level)

    bind_host = host or app_config.server.host
    bind_port = port or app_config.server.port

    click.echo(f"pam-explainer v{__version__}", err=True)
    click.echo(f"Listening on http://{bind_host}:{bind_port}", err=True)

    app = create_api_app(app_config)
    uvicorn.run(app, host=bind_host, port=bind_port, log_level=app_config.logging.log_level.lower())
