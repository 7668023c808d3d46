"""Config path helpers."""

from __future__ import annotations

__all__ = ["get_config_path"]

from pathlib import Path

from pam_explainer.constants import CONFIG_FILENAME
from pam_explainer.utils.file_helpers import get_app_dir


def get_config_path() -> Path:
    """Get the full path to pam_explainer_config.json in the OS config directory."""
    return get_app_dir() / CONFIG_FILENAME
