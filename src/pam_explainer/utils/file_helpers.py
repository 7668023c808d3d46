"""File helpers shared by config and results I/O.

Features:
- OS-appropriate application directory
- Secure file permissions (0o700 for directory, 0o600 for file)
- Detailed validation error messages for JSON files backed by pydantic models
- Atomic JSON writes (temp file + rename)
"""

from __future__ import annotations

__all__ = [
    "atomic_write_json",
    "format_validation_errors",
    "get_app_dir",
    "load_validated_json",
    "require_file_exists",
    "set_secure_permissions",
]

import json
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from pam_explainer.constants import APP_CONFIG_DIR

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)


def get_app_dir() -> Path:
    """Get the OS-appropriate config directory.

    - macOS: ~/Library/Application Support/pam-explainer
    - Linux: ~/.config/pam-explainer (XDG compliant)
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\pam-explainer

    Returns:
        Path to the config directory (may not exist yet).
    """
    return Path(APP_CONFIG_DIR)


def set_secure_permissions(path: Path, is_directory: bool = False) -> None:
    """Restrict a file (0o600) or directory (0o700) to the current user."""
    path.chmod(0o700 if is_directory else 0o600)


def require_file_exists(path: Path, file_type: str) -> None:
    """Raise FileNotFoundError with a readable message if path is missing.

    Args:
        path: File to check.
        file_type: Human name of the file for the message (e.g. "configuration").
    """
    if not path.exists():
        raise FileNotFoundError(f"{file_type.capitalize()} file not found at {path}.")


def format_validation_errors(error: ValidationError) -> str:
    """Format pydantic errors as an indented `loc: msg` list."""
    lines = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"])
        lines.append(f"  - {loc}: {item['msg']}")
    return "\n".join(lines)


def _read_json(path: Path, file_type: str, encoding: str) -> Any:
    try:
        with path.open(encoding=encoding) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Could not read {file_type} file {path}: {e}") from e


def load_validated_json(
    path: Path,
    model: type[ModelT] | TypeAdapter[T],
    file_type: str,
    recovery_hint: str = "",
    encoding: str = "utf-8",
) -> ModelT | T:
    """Load a JSON file and validate it against a pydantic model or adapter.

    Args:
        path: JSON file to load.
        model: BaseModel subclass, or TypeAdapter for non-model shapes (lists).
        file_type: Human name of the file for error messages.
        recovery_hint: Extra line appended to validation errors.
        encoding: File encoding.

    Returns:
        Validated object.

    Raises:
        ValueError: If the file cannot be read, is not JSON, or fails validation.
    """
    data = _read_json(path, file_type, encoding)

    try:
        if isinstance(model, TypeAdapter):
            return model.validate_python(data)
        return model.model_validate(data)
    except ValidationError as e:
        message = f"Invalid {file_type} in {path}:\n" + format_validation_errors(e)
        if recovery_hint:
            message += f"\n\n{recovery_hint}"
        raise ValueError(message) from e


def atomic_write_json(path: Path, data: Any, temp_prefix: str = ".tmp_") -> None:
    """Write JSON to path atomically.

    Uses atomic write pattern: write to temp file, then rename.
    This prevents file corruption if write fails midway.
    Creates parent directories if they don't exist.

    Args:
        path: Destination file.
        data: JSON-serializable data.
        temp_prefix: Prefix for the temp file in the same directory.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2) + "\n"  # Trailing newline

    # Same directory ensures rename is atomic (same filesystem)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=temp_prefix, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.chmod(temp_path, 0o600)
        os.replace(temp_path, path)

    except Exception:
        # Clean up temp file on failure
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
