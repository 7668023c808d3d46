"""Application configuration for pam-explainer.

Defines configuration models for logging, evaluation defaults and the HTTP
server. The config file is optional: without one, every section uses its
defaults. It lives at the OS-appropriate location (via platformdirs).

Example usage:
    # Load from config file, falling back to defaults
    config = load_config()

    # Save configuration
    config.save_to_file(config_path)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from pam_explainer.constants import (
    CORS_ORIGINS_ENV,
    DEFAULT_CORS_ORIGINS,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    MAX_SERVER_PORT,
    MIN_SERVER_PORT,
)
from pam_explainer.utils.config import get_config_path
from pam_explainer.utils.file_helpers import load_validated_json, require_file_exists, set_secure_permissions

logger = logging.getLogger(__name__)


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Attributes:
        log_level: Level for the stderr log handler. DEBUG also shows
            dropped lines and skipped comments.
    """

    log_level: Literal["DEBUG", "INFO", "WARNING"] = "INFO"


# =============================================================================
# Evaluation Configuration
# =============================================================================


class EvaluationConfig(BaseModel):
    """Defaults for stack evaluation.

    Attributes:
        default_outcome: Outcome assumed for modules with no recorded or
            supplied result when not prompting. "failure" is fail-closed.
    """

    default_outcome: Literal["success", "failure"] = "failure"


# =============================================================================
# HTTP Server Configuration
# =============================================================================


class ServerConfig(BaseModel):
    """HTTP API server settings.

    Attributes:
        host: Interface to bind (localhost by default).
        port: TCP port (1-65535).
        cors_origins: Origins allowed to call the API from a browser.
            Overridden by the PAM_EXPLAINER_CORS_ORIGINS environment variable.
    """

    host: str = DEFAULT_SERVER_HOST
    port: int = Field(default=DEFAULT_SERVER_PORT, ge=MIN_SERVER_PORT, le=MAX_SERVER_PORT)
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    def effective_cors_origins(self) -> list[str]:
        """CORS origins, with the environment override applied."""
        env_value = os.environ.get(CORS_ORIGINS_ENV)
        if env_value:
            return [origin.strip() for origin in env_value.split(",") if origin.strip()]
        return list(self.cors_origins)


class AppConfig(BaseModel):
    """Main application configuration for pam-explainer.

    Attributes:
        logging: Logging configuration.
        evaluation: Evaluation defaults.
        server: HTTP API server settings.
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file.

        Creates parent directories if they don't exist.
        Sets secure permissions (0o600) on the file.

        Args:
            config_path: Path where pam_explainer_config.json should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)

        set_secure_permissions(config_path)

    @classmethod
    def load_from_files(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config file (pam_explainer_config.json).

        Returns:
            AppConfig instance with loaded configuration.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If config file is invalid.
        """
        require_file_exists(config_path, file_type="configuration")
        return load_validated_json(
            config_path,
            cls,
            file_type="config",
            recovery_hint="Edit or delete the config file to fall back to defaults.",
            encoding="utf-8",
        )


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration, using defaults when no config file exists.

    Args:
        config_path: Explicit config file. If given, it must exist.
            If None, the OS default location is tried.

    Returns:
        Loaded or default AppConfig.

    Raises:
        FileNotFoundError: If an explicit config_path doesn't exist.
        ValueError: If the config file is invalid.
    """
    if config_path is not None:
        return AppConfig.load_from_files(config_path)

    default_path = get_config_path()
    if not default_path.exists():
        logger.debug("No config file at %s, using defaults", default_path)
        return AppConfig()
    return AppConfig.load_from_files(default_path)
