"""Application configuration settings.

This module provides the AppConfig class, the settings singleton, and the
ProcessingTimings view the orchestrator consumes.
"""

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from agent_console.config.env_loader import Environment, get_environment, load_env_files
from agent_console.config.validators import (
    ms_to_seconds,
    resolve_path,
    validate_log_format,
    validate_log_level,
)
from agent_console.telemetry import get_logger

log = get_logger(__name__)


class AppConfig(BaseSettings):
    """Unified application configuration.

    Values come from environment variables (CONSOLE_ prefix), .env files
    loaded by env_loader, and the defaults below.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONSOLE_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )
    debug: bool = Field(default=False, alias="APP_DEBUG", description="Debug mode flag")

    # Application
    project_name: str = Field(default="Agent Console", description="Project name")
    version: str = Field(default="0.1.0", description="Application version")

    # Telemetry
    log_dir: Path = Field(default=Path("telemetry/logs"), description="Log directory path")
    log_level: str = Field(
        default="INFO",
        alias="APP_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="console", alias="APP_LOG_FORMAT", description="Console log format (json or console)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("log_dir", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str) -> Path:
        """Resolve relative paths to absolute."""
        return resolve_path(v)

    # AI processing pipeline (milliseconds)
    processing_thinking_delay_ms: int = Field(
        default=800, ge=0, description="Dwell time before the thinking response is attached"
    )
    processing_analyzing_tools_delay_ms: int = Field(
        default=600, ge=0, description="Dwell time before the classification result is attached"
    )
    processing_tool_execution_delay_ms: int = Field(
        default=1500, ge=0, description="Simulated tool latency"
    )
    processing_results_delay_ms: int = Field(
        default=800, ge=0, description="Dwell time after the result summary"
    )
    processing_generating_response_delay_ms: int = Field(
        default=1000, ge=0, description="Dwell time before the response phase completes"
    )
    processing_cleanup_timeout_ms: int = Field(
        default=500, ge=0, description="Grace delay before the live indicator resets"
    )


@dataclass(frozen=True)
class ProcessingTimings:
    """Pipeline delays in seconds, as consumed by asyncio timers."""

    thinking: float = 0.8
    analyzing_tools: float = 0.6
    tool_execution: float = 1.5
    processing_results: float = 0.8
    generating_response: float = 1.0
    cleanup_timeout: float = 0.5

    @classmethod
    def from_settings(cls, config: AppConfig) -> "ProcessingTimings":
        """Build timings from application settings."""
        return cls(
            thinking=ms_to_seconds(config.processing_thinking_delay_ms),
            analyzing_tools=ms_to_seconds(config.processing_analyzing_tools_delay_ms),
            tool_execution=ms_to_seconds(config.processing_tool_execution_delay_ms),
            processing_results=ms_to_seconds(config.processing_results_delay_ms),
            generating_response=ms_to_seconds(config.processing_generating_response_delay_ms),
            cleanup_timeout=ms_to_seconds(config.processing_cleanup_timeout_ms),
        )

    @classmethod
    def immediate(cls) -> "ProcessingTimings":
        """Zero-delay timings (tests, --fast CLI runs)."""
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


_settings: AppConfig | None = None


def load_app_config() -> AppConfig:
    """Load and validate application configuration.

    Loads .env files in priority order, then builds AppConfig from the
    environment.

    Returns:
        Validated AppConfig instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    log.info("loading_app_config", environment=get_environment().value)

    load_env_files()

    try:
        config = AppConfig()
        log.info(
            "app_config_loaded",
            environment=config.environment.value,
            debug=config.debug,
            log_level=config.log_level,
            log_format=config.log_format,
        )
        return config
    except Exception as e:
        log.error("app_config_load_failed", error=str(e), error_type=type(e).__name__)
        raise


def get_settings() -> AppConfig:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_app_config()
    return _settings
