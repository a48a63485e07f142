"""Message synchronizer: the placeholder entry's lifecycle in the conversation store.

A run inserts one provisional ``thinking`` entry when it starts. At
finalization that same entry is completed in place; it is never deleted or
duplicated. When a reply text is supplied and no open placeholder can be
found, the reply is appended instead so it is never lost. A run cancelled
before finalization has its placeholder closed rather than left open.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from agent_console.orchestrator.cleanup import RunCleanup
from agent_console.orchestrator.steps import StepTracker
from agent_console.orchestrator.types import (
    ConversationEntry,
    EntryHandle,
    EntryMetadata,
    Phase,
    ProcessSummary,
    RunContext,
)
from agent_console.telemetry import (
    PLACEHOLDER_FINALIZED,
    PLACEHOLDER_INSERTED,
    PLACEHOLDER_MISSING,
    PLACEHOLDER_RETIRED,
    RESPONSE_APPENDED,
    RUN_FINALIZED,
    STALE_WRITE_DROPPED,
    get_logger,
)

log = get_logger(__name__)

PLACEHOLDER_CONTENT = "Processing your request..."


@dataclass(frozen=True)
class FinalizeOutcome:
    """How a run ends.

    Attributes:
        success: Terminal flag; selects COMPLETED or FAILED.
        content: Final reply text. When given, the placeholder becomes an
            assistant entry carrying it; otherwise only its metadata changes.
    """

    success: bool = True
    content: str | None = None


class MessageSynchronizer:
    """Keeps the conversation store consistent with a run."""

    def __init__(
        self,
        tracker: StepTracker,
        cleanup: RunCleanup,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the synchronizer.

        Args:
            tracker: Step tracker of the runs being synchronized.
            cleanup: Cleanup scheduled after finalization.
            clock: Time source for entry timestamps. Defaults to the
                tracker's clock so step times and durations agree.
        """
        self.tracker = tracker
        self.cleanup = cleanup
        self.clock = clock or tracker.clock
        tracker.registry.add_cancel_hook(self.retire)

    def open(self, ctx: RunContext) -> EntryHandle | None:
        """Insert the run's placeholder entry and remember its handle."""
        if not self.tracker.registry.is_current(ctx):
            log.debug(STALE_WRITE_DROPPED, operation="open", **ctx.log_fields())
            return None

        placeholder = ConversationEntry(
            role="thinking",
            content=PLACEHOLDER_CONTENT,
            timestamp=self.clock(),
            agent_id=ctx.agent_id,
            user_id=ctx.user_id,
            metadata=EntryMetadata(is_completed=False),
        )
        ctx.placeholder_ref = ctx.store.append(placeholder)
        log.info(PLACEHOLDER_INSERTED, handle=ctx.placeholder_ref, **ctx.log_fields())
        return ctx.placeholder_ref

    def finalize(self, ctx: RunContext, success: bool = True) -> ConversationEntry | None:
        """Complete the placeholder in place, keeping its role and content."""
        return self._finalize(ctx, FinalizeOutcome(success=success))

    def finalize_with_response(self, ctx: RunContext, content: str) -> ConversationEntry | None:
        """Turn the open placeholder into the assistant reply, or append the reply."""
        return self._finalize(ctx, FinalizeOutcome(success=True, content=content))

    def retire(self, ctx: RunContext) -> None:
        """Close the placeholder of a run cancelled before finalization.

        Registered as a run registry cancel hook. The placeholder keeps its
        role and content and is marked completed with the steps recorded so
        far, so it is never left open for a later reply to take over.
        """
        if ctx.finalized or ctx.placeholder_ref is None:
            return

        current = ctx.store.get(ctx.placeholder_ref)
        if not current.is_open_placeholder:
            return

        ctx.finalized = True
        ctx.phase = Phase.FAILED
        ctx.indicator_visible = False
        summary = self.build_summary(ctx, self.clock())
        for step in summary.steps:
            step.completed = True
        ctx.store.replace(
            ctx.placeholder_ref,
            current.model_copy(
                update={"metadata": EntryMetadata(is_completed=True), "process_summary": summary}
            ),
        )
        log.info(PLACEHOLDER_RETIRED, handle=ctx.placeholder_ref, **ctx.log_fields())

    def build_summary(self, ctx: RunContext, finalized_at: datetime) -> ProcessSummary:
        """Snapshot the step history for the finalized entry.

        Duration is measured from the first step's start, in milliseconds.
        """
        steps = [step.model_copy(deep=True) for step in ctx.steps]
        total_duration = 0
        if steps:
            elapsed = finalized_at - steps[0].start_time
            total_duration = max(0, round(elapsed.total_seconds() * 1000))
        return ProcessSummary(
            steps=steps,
            total_duration=total_duration,
            tools_used=[step.details for step in steps if step.details],
        )

    def _finalize(self, ctx: RunContext, outcome: FinalizeOutcome) -> ConversationEntry | None:
        """Apply ``outcome`` to the store and schedule run cleanup.

        Returns:
            The finalized entry, or None when nothing was written (the run
            was superseded or already finalized, or the boolean path found
            no open placeholder).
        """
        registry = self.tracker.registry
        if ctx.finalized or not registry.is_current(ctx):
            log.warning(
                STALE_WRITE_DROPPED,
                operation="finalize",
                reason="already_finalized" if ctx.finalized else "superseded",
                had_content=outcome.content is not None,
                **ctx.log_fields(),
            )
            return None

        ctx.finalized = True
        self.tracker.complete_all(ctx)
        ctx.phase = Phase.COMPLETED if outcome.success else Phase.FAILED
        finalized_at = self.clock()
        summary = self.build_summary(ctx, finalized_at)

        if outcome.content is None:
            entry = self._complete_placeholder(ctx, summary)
        else:
            entry = self._write_response(ctx, outcome.content, summary, finalized_at)

        log.info(
            RUN_FINALIZED,
            phase=ctx.phase.value,
            steps_count=len(summary.steps),
            total_duration_ms=summary.total_duration,
            tools_used=summary.tools_used,
            **ctx.log_fields(),
        )
        self.cleanup.schedule(ctx)
        return entry

    def _complete_placeholder(
        self, ctx: RunContext, summary: ProcessSummary
    ) -> ConversationEntry | None:
        if ctx.placeholder_ref is None:
            log.info(PLACEHOLDER_MISSING, path="flag", **ctx.log_fields())
            return None

        current = ctx.store.get(ctx.placeholder_ref)
        if current.role != "thinking":
            log.info(PLACEHOLDER_MISSING, path="flag", role=current.role, **ctx.log_fields())
            return None

        entry = current.model_copy(
            update={"metadata": EntryMetadata(is_completed=True), "process_summary": summary}
        )
        ctx.store.replace(ctx.placeholder_ref, entry)
        log.info(PLACEHOLDER_FINALIZED, handle=ctx.placeholder_ref, path="flag", **ctx.log_fields())
        return entry

    def _write_response(
        self,
        ctx: RunContext,
        content: str,
        summary: ProcessSummary,
        finalized_at: datetime,
    ) -> ConversationEntry:
        entry = ConversationEntry(
            role="assistant",
            content=content,
            timestamp=finalized_at,
            agent_id=ctx.agent_id,
            user_id=ctx.user_id,
            metadata=EntryMetadata(is_completed=True),
            process_summary=summary,
        )

        handle = None
        for index, existing in ctx.store.iter_from_tail():
            if existing.is_open_placeholder:
                handle = index
                break

        if handle is not None:
            ctx.store.replace(handle, entry)
            log.info(PLACEHOLDER_FINALIZED, handle=handle, path="content", **ctx.log_fields())
        else:
            handle = ctx.store.append(entry)
            log.info(RESPONSE_APPENDED, handle=handle, **ctx.log_fields())
        return entry
