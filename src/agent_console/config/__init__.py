"""Configuration management for the agent console.

Single source of truth for configuration: environment variables, .env files
and defaults.
"""

from agent_console.config.env_loader import Environment, get_environment, load_env_files
from agent_console.config.settings import (
    AppConfig,
    ProcessingTimings,
    get_settings,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "ProcessingTimings",
    "get_settings",
    "load_app_config",
    "Environment",
    "get_environment",
    "load_env_files",
]
