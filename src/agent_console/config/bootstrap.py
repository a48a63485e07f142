"""Bootstrap configuration helpers (pre-settings).

Used by telemetry before the settings singleton can be imported. Keep this
module free of telemetry imports.
"""

from __future__ import annotations

import os
from pathlib import Path

from agent_console.config.validators import resolve_path, validate_log_level


def get_bootstrap_log_level(default: str = "INFO") -> str:
    """Get logging level from environment without importing settings.

    Args:
        default: Level used when APP_LOG_LEVEL is unset or invalid.

    Returns:
        Uppercased, validated log level string.
    """
    value = os.getenv("APP_LOG_LEVEL", default)
    try:
        return validate_log_level(value)
    except ValueError:
        return validate_log_level(default)


def get_bootstrap_log_format(default: str = "console") -> str:
    """Get console log format from environment without importing settings."""
    value = os.getenv("APP_LOG_FORMAT", default).lower()
    return value if value in ("json", "console") else default


def get_bootstrap_log_dir(default: str = "telemetry/logs") -> Path:
    """Get log directory from CONSOLE_LOG_DIR, resolved against the project root."""
    return resolve_path(os.getenv("CONSOLE_LOG_DIR", default))
