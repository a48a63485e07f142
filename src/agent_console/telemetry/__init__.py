"""Telemetry module: structured logging via structlog and event names."""

from agent_console.telemetry.events import (
    PHASE_DELAY,
    PHASE_TRANSITION,
    PLACEHOLDER_FINALIZED,
    PLACEHOLDER_INSERTED,
    PLACEHOLDER_MISSING,
    PLACEHOLDER_RETIRED,
    REQUEST_CLASSIFIED,
    RESPONSE_APPENDED,
    RUN_CANCELLED,
    RUN_CLEANED_UP,
    RUN_FAILED,
    RUN_FINALIZED,
    RUN_STARTED,
    RUN_SUPERSEDED,
    RUNS_TORN_DOWN,
    STALE_WRITE_DROPPED,
    STEP_ATTACH_MISSED,
    TOOL_BRANCH_SELECTED,
    TOOL_BRANCH_SKIPPED,
    TOOL_CALL_COMPLETED,
    TOOL_CALL_STARTED,
)
from agent_console.telemetry.logger import configure_logging, get_logger

__all__ = [
    "get_logger",
    "configure_logging",
    # Event constants
    "RUN_STARTED",
    "RUN_SUPERSEDED",
    "RUN_CANCELLED",
    "RUN_FAILED",
    "RUN_FINALIZED",
    "RUN_CLEANED_UP",
    "RUNS_TORN_DOWN",
    "PHASE_TRANSITION",
    "PHASE_DELAY",
    "REQUEST_CLASSIFIED",
    "TOOL_BRANCH_SELECTED",
    "TOOL_BRANCH_SKIPPED",
    "TOOL_CALL_STARTED",
    "TOOL_CALL_COMPLETED",
    "STEP_ATTACH_MISSED",
    "STALE_WRITE_DROPPED",
    "PLACEHOLDER_INSERTED",
    "PLACEHOLDER_FINALIZED",
    "PLACEHOLDER_MISSING",
    "PLACEHOLDER_RETIRED",
    "RESPONSE_APPENDED",
]
