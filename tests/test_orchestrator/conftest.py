"""Shared fixtures for orchestrator tests."""

from datetime import UTC, datetime, timedelta

import pytest

from agent_console.config import ProcessingTimings
from agent_console.orchestrator.conversation import InMemoryConversationStore
from agent_console.orchestrator.runs import RunRegistry


class FakeClock:
    """Deterministic clock that advances only when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += timedelta(milliseconds=ms)


@pytest.fixture
def timings() -> ProcessingTimings:
    return ProcessingTimings.immediate()


@pytest.fixture
def registry() -> RunRegistry:
    return RunRegistry()


@pytest.fixture
def store() -> InMemoryConversationStore:
    return InMemoryConversationStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
