"""File helpers for configuration persistence.

Features:
- OS-appropriate config location (platformdirs)
- Secure file permissions (0o700 for directory, 0o600 for file)
- Atomic JSON writes
- Pydantic validation errors reformatted as ConfigurationError
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from opaque_smartid.constants import CONFIG_DIR, CONFIG_FILENAME
from opaque_smartid.exceptions import ConfigurationError

__all__ = [
    "format_validation_errors",
    "get_app_dir",
    "get_config_path",
    "read_json_file",
    "require_file_exists",
    "set_secure_permissions",
    "validate_model",
    "write_json_atomic",
]

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_app_dir() -> Path:
    """Get the OS-appropriate config directory.

    - macOS: ~/Library/Application Support/opaque-smartid
    - Linux: ~/.config/opaque-smartid (XDG compliant)
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\opaque-smartid
    """
    return Path(CONFIG_DIR)


def get_config_path() -> Path:
    """Get the full path to the default configuration file."""
    return get_app_dir() / CONFIG_FILENAME


def require_file_exists(path: Path, file_type: str = "configuration") -> None:
    """Raise FileNotFoundError with a helpful message if path is missing."""
    if not path.exists():
        raise FileNotFoundError(f"{file_type.capitalize()} file not found at {path}.")


def set_secure_permissions(path: Path, is_directory: bool = False) -> None:
    """Restrict permissions to the owner (0o700 dirs, 0o600 files)."""
    path.chmod(0o700 if is_directory else 0o600)


def format_validation_errors(error: ValidationError) -> str:
    """Format pydantic errors as '  - loc: msg' lines."""
    lines = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"]) or "(root)"
        lines.append(f"  - {loc}: {item['msg']}")
    return "\n".join(lines)


def validate_model(model: type[ModelT], data: Any, source: str) -> ModelT:
    """Validate data against a model, translating errors.

    Args:
        model: Pydantic model class.
        data: Raw data to validate.
        source: Human-readable origin used in the error message.

    Returns:
        Validated model instance.

    Raises:
        ConfigurationError: If validation fails.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {source}:\n{format_validation_errors(e)}") from e


def read_json_file(path: Path) -> Any:
    """Read a JSON document.

    Raises:
        ConfigurationError: If the file is unreadable or not valid JSON.
    """
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e


def write_json_atomic(path: Path, data: Any) -> None:
    """Write JSON atomically with owner-only permissions.

    Writes to a temp file in the same directory, then renames over the
    target so a failed write never leaves a truncated file behind.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    set_secure_permissions(path.parent, is_directory=True)

    content = json.dumps(data, indent=2) + "\n"

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".config_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.chmod(temp_path, 0o600)
        os.replace(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
