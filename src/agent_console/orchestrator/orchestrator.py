"""High-level orchestrator API.

ResponseOrchestrator wires the run registry, step tracker, phase sequencer,
message synchronizer and run cleanup together and is the entry point the
console uses for a user turn.
"""

from collections.abc import Callable
from datetime import datetime

from agent_console.config import ProcessingTimings, get_settings
from agent_console.orchestrator.cleanup import RunCleanup
from agent_console.orchestrator.conversation import ConversationStore
from agent_console.orchestrator.errors import RunCancelledError
from agent_console.orchestrator.runs import RunRegistry
from agent_console.orchestrator.sequencer import PhaseSequencer
from agent_console.orchestrator.steps import StepTracker
from agent_console.orchestrator.synchronizer import MessageSynchronizer
from agent_console.orchestrator.types import (
    ConversationEntry,
    Phase,
    RunContext,
    SequenceResult,
    utc_now,
)
from agent_console.telemetry import RUN_CANCELLED, RUN_FAILED, get_logger

log = get_logger(__name__)


class ResponseOrchestrator:
    """Coordinates response processing runs across conversations."""

    def __init__(
        self,
        timings: ProcessingTimings | None = None,
        registry: RunRegistry | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            timings: Phase delays. If None, read from application settings.
            registry: Run arena. If None, creates a new one.
            clock: Time source for step times, entry timestamps and durations.
        """
        self.timings = timings or ProcessingTimings.from_settings(get_settings())
        self.registry = registry or RunRegistry()
        self.tracker = StepTracker(self.registry, clock=clock)
        self.sequencer = PhaseSequencer(self.registry, self.tracker, self.timings)
        self.cleanup = RunCleanup(self.registry, self.timings.cleanup_timeout)
        self.synchronizer = MessageSynchronizer(self.tracker, self.cleanup)

    def start(
        self,
        conversation_id: str,
        store: ConversationStore,
        agent_id: str | None = None,
        user_id: str | None = None,
    ) -> RunContext:
        """Begin a run: supersede any previous one, show the indicator, insert the placeholder.

        Args:
            conversation_id: Conversation the run belongs to.
            store: Conversation store to write entries into.
            agent_id: Attribution stamped onto produced entries.
            user_id: Attribution stamped onto produced entries.

        Returns:
            The new run context.
        """
        ctx = self.registry.begin(conversation_id, store, agent_id=agent_id, user_id=user_id)
        ctx.indicator_visible = True
        ctx.phase = Phase.THINKING
        self.synchronizer.open(ctx)
        return ctx

    async def process(self, ctx: RunContext, user_input: str) -> SequenceResult:
        """Run the phase sequencer for ``ctx``."""
        return await self.sequencer.run(ctx, user_input)

    def finalize(self, ctx: RunContext, success: bool = True) -> ConversationEntry | None:
        """Finalize with a success/failure flag, leaving the placeholder's content."""
        return self.synchronizer.finalize(ctx, success)

    def finalize_with_response(self, ctx: RunContext, content: str) -> ConversationEntry | None:
        """Finalize with the reply text, converting the placeholder into it."""
        return self.synchronizer.finalize_with_response(ctx, content)

    async def respond(
        self,
        conversation_id: str,
        store: ConversationStore,
        user_input: str,
        reply: str | None = None,
        agent_id: str | None = None,
        user_id: str | None = None,
    ) -> ConversationEntry | None:
        """Top-level entrypoint for a single user turn.

        Runs start -> process -> finalize. With ``reply`` the placeholder
        becomes the assistant reply; without it the run is finalized through
        the success flag only.

        Returns:
            The finalized entry, or None if the run was superseded before
            it finished.

        Raises:
            Exception: Anything the sequencer raises other than run
                cancellation, after the run has been finalized as failed.
        """
        ctx = self.start(conversation_id, store, agent_id=agent_id, user_id=user_id)
        try:
            await self.process(ctx, user_input)
        except RunCancelledError:
            log.info(RUN_CANCELLED, reason="superseded", **ctx.log_fields())
            return None
        except Exception:
            log.error(RUN_FAILED, exc_info=True, **ctx.log_fields())
            self.finalize(ctx, success=False)
            raise

        if reply is not None:
            return self.finalize_with_response(ctx, reply)
        return self.finalize(ctx, success=True)

    def get_run(self, conversation_id: str) -> RunContext | None:
        """Return the active run of a conversation, if any."""
        return self.registry.get(conversation_id)

    def teardown(self) -> int:
        """Cancel every active run and its pending timers.

        Returns:
            Number of runs cancelled.
        """
        return self.registry.teardown()
