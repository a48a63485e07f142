"""Step tracking for a run.

The step log is an ordered list with at most one incomplete entry: the step
of the current phase. Attach operations look the target step up from the
tail and quietly do nothing when it is missing, so out-of-order or repeated
calls never raise.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from agent_console.orchestrator.runs import RunRegistry
from agent_console.orchestrator.types import (
    Phase,
    RunContext,
    Step,
    ToolExecutionStatus,
    ToolInfo,
    utc_now,
)
from agent_console.telemetry import (
    PHASE_TRANSITION,
    STALE_WRITE_DROPPED,
    STEP_ATTACH_MISSED,
    get_logger,
)

log = get_logger(__name__)


class StepTracker:
    """Writes phase steps into a run context.

    Every write checks the run token first and is dropped if the run has been
    superseded or cancelled.
    """

    def __init__(self, registry: RunRegistry, clock: Callable[[], datetime] = utc_now) -> None:
        self.registry = registry
        self.clock = clock

    def _writable(self, ctx: RunContext, operation: str) -> bool:
        if self.registry.is_current(ctx):
            return True
        log.debug(STALE_WRITE_DROPPED, operation=operation, **ctx.log_fields())
        return False

    @staticmethod
    def _find(ctx: RunContext, phase: Phase) -> Step | None:
        for step in reversed(ctx.steps):
            if step.phase == phase:
                return step
        return None

    def begin_phase(self, ctx: RunContext, phase: Phase, tool_info: ToolInfo | None = None) -> None:
        """Enter ``phase``: close earlier steps and open (or reopen) its step.

        Args:
            ctx: Run context.
            phase: Phase being entered.
            tool_info: Partial tool status. Merged into ctx.current_tool; its
                tool name overrides the step label and its provider sets
                the step details.
        """
        if not self._writable(ctx, "begin_phase"):
            return

        previous = ctx.phase
        ctx.phase = phase
        if tool_info is not None:
            ctx.current_tool = _merge_tool(ctx.current_tool, tool_info)

        label = phase.label
        details = None
        if tool_info is not None:
            if tool_info.tool_name:
                label = f"Using {tool_info.tool_name}"
            if tool_info.provider:
                details = f"Using {tool_info.provider}"

        for step in ctx.steps:
            step.completed = True

        existing = self._find(ctx, phase)
        if existing is not None:
            existing.label = label
            existing.start_time = self.clock()
            existing.completed = False
            if details is not None:
                existing.details = details
        else:
            ctx.steps.append(
                Step(phase=phase, label=label, start_time=self.clock(), details=details)
            )

        log.info(
            PHASE_TRANSITION,
            from_phase=previous.value if previous else None,
            to_phase=phase.value,
            label=label,
            reopened=existing is not None,
            **ctx.log_fields(),
        )

    def attach_response(self, ctx: RunContext, phase: Phase, text: str) -> bool:
        """Set the response of the most recent step for ``phase``.

        Returns:
            True if a step was updated; False on a tolerated miss or a
            dropped stale write.
        """
        if not self._writable(ctx, "attach_response"):
            return False
        step = self._find(ctx, phase)
        if step is None:
            log.debug(STEP_ATTACH_MISSED, phase=phase.value, field="response", **ctx.log_fields())
            return False
        step.response = text
        return True

    def attach_tool_call(
        self,
        ctx: RunContext,
        phase: Phase,
        invocation: str,
        result: dict[str, Any] | None = None,
    ) -> bool:
        """Set the tool invocation (and merge the result) on the step for ``phase``.

        Returns:
            True if a step was updated.
        """
        if not self._writable(ctx, "attach_tool_call"):
            return False
        step = self._find(ctx, phase)
        if step is None:
            log.debug(STEP_ATTACH_MISSED, phase=phase.value, field="tool_call", **ctx.log_fields())
            return False
        step.tool_invocation = invocation
        if result:
            step.tool_result = {**(step.tool_result or {}), **result}
        return True

    def complete_all(self, ctx: RunContext) -> None:
        """Mark every step completed."""
        if not self._writable(ctx, "complete_all"):
            return
        for step in ctx.steps:
            step.completed = True


def _merge_tool(current: ToolExecutionStatus | None, update: ToolInfo) -> ToolExecutionStatus:
    base = current.model_dump() if current is not None else {}
    base.update(update.model_dump(exclude_none=True))
    return ToolExecutionStatus(**base)
