"""Application-wide constants for pam-explainer.

Constants that define application behavior.
For user-configurable settings per deployment, see config.py.
"""

import os

from platformdirs import user_config_dir

# ============================================================================
# Application Directories
# ============================================================================

APP_NAME: str = "pam-explainer"

# OS-specific config directory:
# - macOS: ~/Library/Application Support/pam-explainer/
# - Linux: ~/.config/pam-explainer/
# - Windows: %APPDATA%\pam-explainer\
APP_CONFIG_DIR: str = os.path.realpath(user_config_dir(APP_NAME))

CONFIG_FILENAME: str = "pam_explainer_config.json"

# Environment variable overriding the allowed CORS origins (comma-separated)
CORS_ORIGINS_ENV: str = "PAM_EXPLAINER_CORS_ORIGINS"

# ============================================================================
# Policy Text Format
# ============================================================================

# facility, control, module - anything shorter is not a rule
MIN_RULE_TOKENS: int = 3

COMMENT_PREFIX: str = "#"

# ============================================================================
# HTTP Server
# ============================================================================

DEFAULT_SERVER_HOST: str = "127.0.0.1"
DEFAULT_SERVER_PORT: int = 3000

MIN_SERVER_PORT: int = 1
MAX_SERVER_PORT: int = 65535

DEFAULT_CORS_ORIGINS: tuple[str, ...] = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
)

# ============================================================================
# Results Files
# ============================================================================

# Prefix for temp files created while saving results atomically
RESULTS_TEMP_PREFIX: str = ".results_"
