"""
Exceptions and error logging for tagmem.

Logs full stack traces for debugging while showing clean messages to users.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path


class TagmemError(Exception):
    """Base class for tagmem errors."""


class InvalidCategoryError(TagmemError, ValueError):
    """Category name cannot be mapped safely to a file in the area root."""


class ConfigError(TagmemError):
    """Config file is present but unusable."""


def tagmem_home() -> Path:
    """Directory for tagmem's own files (config, logs), respecting TAGMEM_HOME."""
    home = os.environ.get("TAGMEM_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".tagmem"


def _error_log_path() -> Path:
    return tagmem_home() / "tagmem-errors.log"


def log_exception(exc: Exception, context: str = "") -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path()
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # Can't write error log; the caller still reports the original error
    return log_path
