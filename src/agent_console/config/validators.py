"""Custom validators for configuration values."""

from pathlib import Path


def validate_log_level(value: str) -> str:
    """Validate log level is one of the standard levels.

    Args:
        value: Log level string.

    Returns:
        Uppercased log level.

    Raises:
        ValueError: If log level is not valid.
    """
    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if value.upper() not in valid_levels:
        raise ValueError(f"log_level must be one of {valid_levels}, got {value}")
    return value.upper()


def validate_log_format(value: str) -> str:
    """Validate log format is 'json' or 'console'.

    Raises:
        ValueError: If log format is not valid.
    """
    valid_formats = {"json", "console"}
    if value.lower() not in valid_formats:
        raise ValueError(f"log_format must be one of {valid_formats}, got {value}")
    return value.lower()


def resolve_path(value: Path | str) -> Path:
    """Resolve a path against the project root when it is relative.

    Args:
        value: Path value (string or Path).

    Returns:
        Absolute, resolved Path.
    """
    path = Path(value) if isinstance(value, str) else value
    if path.is_absolute():
        return path.resolve()

    # src/agent_console/config -> project root
    project_root = Path(__file__).parent.parent.parent.parent
    return (project_root / path).resolve()


def ms_to_seconds(value_ms: int) -> float:
    """Convert a millisecond setting to seconds for asyncio timers."""
    return max(value_ms, 0) / 1000.0
