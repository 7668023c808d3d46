"""Command-line interface for pam-explainer.

Provides commands for explaining a policy file, serving the HTTP API,
and inspecting configuration.
"""

from .main import cli, main

__all__ = ["cli", "main"]
