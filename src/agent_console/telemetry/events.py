"""Semantic event constants for structured logging.

Log events use these constants rather than string literals so that
telemetry can be queried reliably.
"""

# Run lifecycle
RUN_STARTED = "run_started"
RUN_SUPERSEDED = "run_superseded"
RUN_CANCELLED = "run_cancelled"
RUN_FAILED = "run_failed"
RUN_FINALIZED = "run_finalized"
RUN_CLEANED_UP = "run_cleaned_up"
RUNS_TORN_DOWN = "runs_torn_down"

# Phase sequencing
PHASE_TRANSITION = "phase_transition"
PHASE_DELAY = "phase_delay"
REQUEST_CLASSIFIED = "request_classified"
TOOL_BRANCH_SELECTED = "tool_branch_selected"
TOOL_BRANCH_SKIPPED = "tool_branch_skipped"
TOOL_CALL_STARTED = "tool_call_started"
TOOL_CALL_COMPLETED = "tool_call_completed"

# Step tracking
STEP_ATTACH_MISSED = "step_attach_missed"
STALE_WRITE_DROPPED = "stale_write_dropped"

# Conversation store synchronization
PLACEHOLDER_INSERTED = "placeholder_inserted"
PLACEHOLDER_FINALIZED = "placeholder_finalized"
PLACEHOLDER_MISSING = "placeholder_missing"
PLACEHOLDER_RETIRED = "placeholder_retired"
RESPONSE_APPENDED = "response_appended"
