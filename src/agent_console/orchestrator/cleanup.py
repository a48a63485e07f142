"""Run cleanup: retire a finalized run's live state after a grace delay."""

from agent_console.orchestrator.runs import RunRegistry
from agent_console.orchestrator.types import RunContext
from agent_console.telemetry import RUN_CLEANED_UP, STALE_WRITE_DROPPED, get_logger

log = get_logger(__name__)


class RunCleanup:
    """Hides the processing indicator once a run has been finalized.

    Only transient fields are reset. The step history already lives in the
    finalized conversation entry and is left alone.
    """

    def __init__(self, registry: RunRegistry, timeout_seconds: float) -> None:
        self.registry = registry
        self.timeout_seconds = timeout_seconds

    def schedule(self, ctx: RunContext) -> None:
        """Reset ``ctx`` after the cleanup timeout.

        The timer belongs to the run; superseding or tearing down the run
        cancels it.
        """
        self.registry.schedule(ctx, self.timeout_seconds, self.reset, ctx)

    def reset(self, ctx: RunContext) -> None:
        if not self.registry.is_current(ctx):
            log.debug(STALE_WRITE_DROPPED, operation="cleanup", **ctx.log_fields())
            return

        ctx.indicator_visible = False
        ctx.phase = None
        ctx.current_tool = None
        ctx.placeholder_ref = None
        self.registry.release(ctx)
        log.info(RUN_CLEANED_UP, steps_count=len(ctx.steps), **ctx.log_fields())
