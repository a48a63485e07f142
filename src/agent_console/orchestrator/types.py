"""Core types for the AI response processing orchestrator.

This module defines the data structures shared by the pipeline components:
- Phase: State machine states and their display labels
- Category: Classifier output
- ToolExecutionStatus: Live status of the simulated tool invocation
- Step: One recorded phase occurrence
- EntryMetadata, ProcessSummary, ConversationEntry: Conversation store records
- RunContext: Mutable per-run state container
- SequenceResult: What the sequencer observed while driving a run
"""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from agent_console.orchestrator.conversation import ConversationStore


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class Phase(str, Enum):
    """State machine states for response processing."""

    THINKING = "thinking"
    ANALYZING_TOOLS = "analyzing_tools"
    EXECUTING_TOOL = "executing_tool"
    PROCESSING_RESULTS = "processing_results"
    GENERATING_RESPONSE = "generating_response"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def label(self) -> str:
        """Human-readable step label for this phase."""
        return PHASE_LABELS.get(self, DEFAULT_PHASE_LABEL)

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.COMPLETED, Phase.FAILED)


DEFAULT_PHASE_LABEL = "Processing"

PHASE_LABELS: dict[Phase, str] = {
    Phase.THINKING: "Analyzing your message",
    Phase.ANALYZING_TOOLS: "Checking available tools",
    Phase.EXECUTING_TOOL: "Executing tool",
    Phase.PROCESSING_RESULTS: "Processing tool results",
    Phase.GENERATING_RESPONSE: "Generating response",
    Phase.COMPLETED: "Response ready",
    Phase.FAILED: "Processing failed",
}

ToolStatus = Literal["pending", "executing", "completed", "failed"]
EntryRole = Literal["thinking", "assistant", "user"]

# Index of an entry in a conversation store.
EntryHandle = int


class Category(BaseModel):
    """Capability category detected in a request."""

    model_config = {"frozen": True}

    id: str = Field(..., description="Stable category id (e.g. 'email')")
    label: str = Field(..., description="Display label (e.g. 'Communication')")


class ToolExecutionStatus(BaseModel):
    """Live status of the single simulated tool invocation of a run."""

    tool_name: str | None = None
    provider: str | None = None
    status: ToolStatus = "pending"
    start_time: datetime | None = None
    end_time: datetime | None = None


class ToolInfo(BaseModel):
    """Partial tool status supplied on a phase transition.

    Unset fields leave the run's current tool status unchanged.
    """

    tool_name: str | None = None
    provider: str | None = None
    status: ToolStatus | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None


class Step(BaseModel):
    """Timestamped record of one phase occurrence."""

    phase: Phase
    label: str
    start_time: datetime = Field(default_factory=utc_now)
    completed: bool = False
    response: str | None = None
    tool_invocation: str | None = None
    tool_result: dict[str, Any] | None = None
    details: str | None = Field(None, description="'Using <provider>' when a tool ran")


class EntryMetadata(BaseModel):
    is_completed: bool = False


class ProcessSummary(BaseModel):
    """Step history attached to a finalized conversation entry."""

    steps: list[Step] = Field(default_factory=list)
    total_duration: int = Field(0, ge=0, description="Milliseconds from first step to finalization")
    tools_used: list[str] = Field(default_factory=list)


class ConversationEntry(BaseModel):
    """One record in the external conversation store."""

    role: EntryRole
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    agent_id: str | None = None
    user_id: str | None = None
    metadata: EntryMetadata = Field(default_factory=EntryMetadata)
    process_summary: ProcessSummary | None = None

    @property
    def is_open_placeholder(self) -> bool:
        return self.role == "thinking" and not self.metadata.is_completed


@dataclass
class RunContext:
    """Mutable state container for one in-flight orchestration.

    Created by RunRegistry.begin(), mutated by the sequencer and step tracker,
    consumed once at finalization and retired by run cleanup. Fields other
    than ``steps`` are transient; the step history outlives the run inside
    the finalized entry's process summary.

    Attributes:
        conversation_id: Arena key; at most one active run per conversation.
        run_id: Monotonic run token. Writes from a run whose token is no
            longer active for its conversation are dropped.
        trace_id: Correlation id for log events.
        store: Conversation store this run writes to.
        agent_id: Attribution stamped onto produced entries.
        user_id: Attribution stamped onto produced entries.
        phase: Current pipeline phase, None when idle.
        current_tool: Live status of the simulated tool invocation.
        indicator_visible: Whether a "processing" affordance should show.
        steps: Ordered step log.
        placeholder_ref: Handle of the provisional thinking entry.
        finalized: Set once the run has been finalized; later finalizations
            are dropped.
        cancelled: Set once the run is superseded or torn down.
        pending_tasks: Outstanding phase delays.
        pending_timers: Outstanding scheduled callbacks (cleanup).
    """

    conversation_id: str
    run_id: int
    trace_id: str
    store: "ConversationStore"
    agent_id: str | None = None
    user_id: str | None = None
    phase: Phase | None = None
    current_tool: ToolExecutionStatus | None = None
    indicator_visible: bool = False
    steps: list[Step] = field(default_factory=list)
    placeholder_ref: EntryHandle | None = None
    finalized: bool = False
    cancelled: bool = False
    pending_tasks: set[asyncio.Task[Any]] = field(default_factory=set)
    pending_timers: set[asyncio.TimerHandle] = field(default_factory=set)

    def log_fields(self) -> dict[str, Any]:
        """Correlation fields included in every orchestrator log event."""
        return {
            "trace_id": self.trace_id,
            "run_id": self.run_id,
            "conversation_id": self.conversation_id,
        }


@dataclass
class SequenceResult:
    """Outcome of driving a run through the phase state machine.

    Attributes:
        categories: Classifier output for the request.
        primary: Category that drove the tool branch, if any.
        tool_executed: Whether EXECUTING_TOOL/PROCESSING_RESULTS ran.
        phases: Phases entered, in order.
    """

    categories: list[Category] = field(default_factory=list)
    primary: Category | None = None
    tool_executed: bool = False
    phases: list[Phase] = field(default_factory=list)
