"""Environment detection and priority-based .env file loading."""

import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from agent_console.telemetry import get_logger

log = get_logger(__name__)


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "prod": Environment.PRODUCTION,
    "stage": Environment.STAGING,
}


def get_environment() -> Environment:
    """Detect the current environment from APP_ENV.

    Accepts the enum values plus the "prod" and "stage" aliases; anything
    else means development. Runs before settings exist, so it reads the
    process environment directly.
    """
    app_env = os.getenv("APP_ENV", "").strip().lower()
    if app_env in _ENVIRONMENT_ALIASES:
        return _ENVIRONMENT_ALIASES[app_env]
    try:
        return Environment(app_env)
    except ValueError:
        return Environment.DEVELOPMENT


def load_env_files(project_root: Path | None = None) -> list[str]:
    """Load .env files in priority order.

    Priority (highest last):
    1. `.env`
    2. `.env.local`
    3. `.env.{environment}`
    4. `.env.{environment}.local`

    Explicit environment variables always win over file values.

    Args:
        project_root: Directory holding the .env files. Defaults to the
            repository root.

    Returns:
        Loaded file names, relative to project_root.
    """
    if project_root is None:
        project_root = Path(__file__).parent.parent.parent.parent

    env_name = get_environment().value
    env_files = [
        project_root / ".env",
        project_root / ".env.local",
        project_root / f".env.{env_name}",
        project_root / f".env.{env_name}.local",
    ]

    # load_dotenv(override=False) keeps the first value seen, so walk from
    # highest priority down.
    loaded_files: list[str] = []
    for env_file in reversed(env_files):
        if env_file.exists():
            load_dotenv(env_file, override=False)
            loaded_files.append(str(env_file.relative_to(project_root)))

    if loaded_files:
        log.info(
            "env_files_loaded",
            environment=env_name,
            files=loaded_files,
            project_root=str(project_root),
        )
    else:
        log.debug("no_env_files_found", environment=env_name, project_root=str(project_root))
    return loaded_files
