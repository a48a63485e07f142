"""Tests for the run registry."""

import asyncio

import pytest

from agent_console.orchestrator.conversation import InMemoryConversationStore
from agent_console.orchestrator.errors import RunCancelledError
from agent_console.orchestrator.runs import RunRegistry


def test_begin_run(registry: RunRegistry, store: InMemoryConversationStore) -> None:
    """Test creating a new run."""
    ctx = registry.begin("conv-1", store, agent_id="agent-1", user_id="user-1")

    assert ctx.conversation_id == "conv-1"
    assert ctx.store is store
    assert ctx.agent_id == "agent-1"
    assert ctx.user_id == "user-1"
    assert ctx.phase is None
    assert ctx.steps == []
    assert ctx.cancelled is False
    assert len(ctx.trace_id) > 0
    assert registry.get("conv-1") is ctx
    assert registry.is_current(ctx)


def test_get_unknown_conversation(registry: RunRegistry) -> None:
    """Test that an unknown conversation has no active run."""
    assert registry.get("nonexistent") is None


def test_run_tokens_are_monotonic(registry: RunRegistry, store: InMemoryConversationStore) -> None:
    """Test that tokens increase across conversations and registries."""
    first = registry.begin("conv-1", store)
    second = registry.begin("conv-2", store)
    third = RunRegistry().begin("conv-1", store)

    assert first.run_id < second.run_id < third.run_id


def test_begin_supersedes_previous_run(
    registry: RunRegistry, store: InMemoryConversationStore
) -> None:
    """Test that a second run for a conversation cancels the first."""
    old = registry.begin("conv-1", store)
    new = registry.begin("conv-1", store)

    assert old.cancelled is True
    assert registry.is_current(old) is False
    assert registry.is_current(new) is True
    assert registry.get("conv-1") is new


def test_conversations_are_independent(
    registry: RunRegistry, store: InMemoryConversationStore
) -> None:
    """Test that runs of different conversations coexist."""
    a = registry.begin("conv-a", store)
    b = registry.begin("conv-b", store)

    assert registry.is_current(a)
    assert registry.is_current(b)
    assert registry.list_active_runs() == [b, a]


def test_release_only_removes_matching_run(
    registry: RunRegistry, store: InMemoryConversationStore
) -> None:
    """Test that releasing a stale run keeps the newer one."""
    old = registry.begin("conv-1", store)
    new = registry.begin("conv-1", store)

    registry.release(old)
    assert registry.get("conv-1") is new

    registry.release(new)
    assert registry.get("conv-1") is None


def test_teardown(registry: RunRegistry, store: InMemoryConversationStore) -> None:
    """Test that teardown cancels every run."""
    runs = [registry.begin(f"conv-{i}", store) for i in range(3)]

    assert registry.teardown() == 3
    assert all(ctx.cancelled for ctx in runs)
    assert registry.list_active_runs() == []
    assert registry.teardown() == 0


@pytest.mark.asyncio
async def test_wait_completes(registry: RunRegistry, store: InMemoryConversationStore) -> None:
    """Test that a delay on a current run completes and is untracked afterwards."""
    ctx = registry.begin("conv-1", store)
    await registry.wait(ctx, 0.0, "thinking")
    assert ctx.pending_tasks == set()


@pytest.mark.asyncio
async def test_wait_on_cancelled_run(registry: RunRegistry, store: InMemoryConversationStore) -> None:
    """Test that waiting on a cancelled run raises immediately."""
    ctx = registry.begin("conv-1", store)
    registry.cancel(ctx)

    with pytest.raises(RunCancelledError):
        await registry.wait(ctx, 0.0, "thinking")


@pytest.mark.asyncio
async def test_teardown_interrupts_wait(
    registry: RunRegistry, store: InMemoryConversationStore
) -> None:
    """Test that teardown cancels an in-flight delay."""
    ctx = registry.begin("conv-1", store)
    task = asyncio.create_task(registry.wait(ctx, 30.0, "tool_execution"))
    await asyncio.sleep(0)

    registry.teardown()

    with pytest.raises(RunCancelledError):
        await asyncio.wait_for(task, timeout=1)


@pytest.mark.asyncio
async def test_schedule_fires_callback(
    registry: RunRegistry, store: InMemoryConversationStore
) -> None:
    """Test that a scheduled callback runs and its timer is untracked."""
    ctx = registry.begin("conv-1", store)
    fired: list[str] = []

    registry.schedule(ctx, 0.0, fired.append, "done")
    assert len(ctx.pending_timers) == 1
    await asyncio.sleep(0.05)

    assert fired == ["done"]
    assert ctx.pending_timers == set()


@pytest.mark.asyncio
async def test_cancel_drops_scheduled_callback(
    registry: RunRegistry, store: InMemoryConversationStore
) -> None:
    """Test that cancelling a run cancels its timers."""
    ctx = registry.begin("conv-1", store)
    fired: list[str] = []

    registry.schedule(ctx, 0.0, fired.append, "done")
    registry.cancel(ctx)
    await asyncio.sleep(0.05)

    assert fired == []
