"""Run registry: the arena of in-flight run contexts.

Holds at most one active RunContext per conversation. Starting a run for a
conversation that already has one supersedes it: the old run is marked
cancelled, its pending delays and timers are cancelled, and any later write
it attempts is dropped because its run token no longer matches. Cancel
hooks let other components retire what a cancelled run left behind.
"""

import asyncio
import itertools
import uuid
from collections.abc import Callable
from typing import Any

from agent_console.orchestrator.conversation import ConversationStore
from agent_console.orchestrator.errors import RunCancelledError
from agent_console.orchestrator.types import RunContext
from agent_console.telemetry import (
    PHASE_DELAY,
    RUN_CANCELLED,
    RUN_STARTED,
    RUN_SUPERSEDED,
    RUNS_TORN_DOWN,
    get_logger,
)

log = get_logger(__name__)


class RunRegistry:
    """Creates, tracks and retires run contexts.

    Run tokens come from a process-wide monotonic counter, so a token is
    never reused even across conversations.
    """

    _tokens = itertools.count(1)

    def __init__(self) -> None:
        """Initialize registry with an empty arena."""
        self._runs: dict[str, RunContext] = {}
        self._cancel_hooks: list[Callable[[RunContext], None]] = []

    def add_cancel_hook(self, hook: Callable[[RunContext], None]) -> None:
        """Register a callback run for every cancelled run.

        Hooks run after the run is marked cancelled and its delays and timers
        are cancelled, so they see a run that can no longer write through the
        normal paths.
        """
        if hook not in self._cancel_hooks:
            self._cancel_hooks.append(hook)

    def begin(
        self,
        conversation_id: str,
        store: ConversationStore,
        agent_id: str | None = None,
        user_id: str | None = None,
    ) -> RunContext:
        """Create the active run for ``conversation_id``.

        Args:
            conversation_id: Arena key.
            store: Conversation store the run writes to.
            agent_id: Attribution for produced entries.
            user_id: Attribution for produced entries.

        Returns:
            The new RunContext. Any previous run for the conversation is
            cancelled first.
        """
        previous = self._runs.get(conversation_id)
        if previous is not None:
            log.info(
                RUN_SUPERSEDED,
                superseded_run_id=previous.run_id,
                **previous.log_fields(),
            )
            self.cancel(previous)

        ctx = RunContext(
            conversation_id=conversation_id,
            run_id=next(self._tokens),
            trace_id=str(uuid.uuid4()),
            store=store,
            agent_id=agent_id,
            user_id=user_id,
        )
        self._runs[conversation_id] = ctx
        log.info(RUN_STARTED, agent_id=agent_id, user_id=user_id, **ctx.log_fields())
        return ctx

    def get(self, conversation_id: str) -> RunContext | None:
        """Return the active run for a conversation, if any."""
        return self._runs.get(conversation_id)

    def is_current(self, ctx: RunContext) -> bool:
        """Whether ``ctx`` is still the active run of its conversation."""
        if ctx.cancelled:
            return False
        active = self._runs.get(ctx.conversation_id)
        return active is not None and active.run_id == ctx.run_id

    def release(self, ctx: RunContext) -> None:
        """Remove ``ctx`` from the arena if it is still the active run."""
        active = self._runs.get(ctx.conversation_id)
        if active is not None and active.run_id == ctx.run_id:
            del self._runs[ctx.conversation_id]

    def cancel(self, ctx: RunContext) -> None:
        """Cancel a run's pending delays and timers and drop it from the arena."""
        ctx.cancelled = True
        for task in list(ctx.pending_tasks):
            task.cancel()
        for handle in list(ctx.pending_timers):
            handle.cancel()
        ctx.pending_tasks.clear()
        ctx.pending_timers.clear()
        self.release(ctx)
        for hook in self._cancel_hooks:
            hook(ctx)
        log.debug(RUN_CANCELLED, **ctx.log_fields())

    def teardown(self) -> int:
        """Cancel every active run.

        Returns:
            Number of runs cancelled.
        """
        runs = list(self._runs.values())
        for ctx in runs:
            self.cancel(ctx)
        log.info(RUNS_TORN_DOWN, runs_cancelled=len(runs))
        return len(runs)

    def list_active_runs(self) -> list[RunContext]:
        """Active runs, newest token first."""
        return sorted(self._runs.values(), key=lambda r: r.run_id, reverse=True)

    async def wait(self, ctx: RunContext, seconds: float, label: str) -> None:
        """Suspend the run for a configured phase delay.

        The delay is a task owned by the run, so superseding or tearing down
        the run cancels it.

        Raises:
            RunCancelledError: If the run is (or becomes) cancelled.
        """
        if not self.is_current(ctx):
            raise RunCancelledError(ctx.conversation_id, ctx.run_id)

        log.debug(PHASE_DELAY, delay=label, seconds=seconds, **ctx.log_fields())
        task = asyncio.ensure_future(asyncio.sleep(seconds))
        ctx.pending_tasks.add(task)
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            # Our own caller being cancelled takes precedence over run cancellation.
            if current is not None and current.cancelling():
                raise
            if ctx.cancelled:
                raise RunCancelledError(ctx.conversation_id, ctx.run_id) from None
            raise
        finally:
            ctx.pending_tasks.discard(task)

        if not self.is_current(ctx):
            raise RunCancelledError(ctx.conversation_id, ctx.run_id)

    def schedule(
        self, ctx: RunContext, seconds: float, callback: Callable[..., Any], *args: Any
    ) -> asyncio.TimerHandle:
        """Schedule ``callback`` after ``seconds`` as a timer owned by the run."""
        loop = asyncio.get_running_loop()
        handle: asyncio.TimerHandle

        def _fire() -> None:
            ctx.pending_timers.discard(handle)
            callback(*args)

        handle = loop.call_later(seconds, _fire)
        ctx.pending_timers.add(handle)
        return handle
