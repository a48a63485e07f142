"""Orchestrator module for AI response processing.

Provides the phase state machine that simulates answering a user request,
its step log, and the synchronization of the conversation store.
"""

from agent_console.orchestrator.classifier import categorize, primary
from agent_console.orchestrator.conversation import ConversationStore, InMemoryConversationStore
from agent_console.orchestrator.errors import (
    OrchestratorError,
    RunCancelledError,
    UnknownEntryError,
)
from agent_console.orchestrator.orchestrator import ResponseOrchestrator
from agent_console.orchestrator.runs import RunRegistry
from agent_console.orchestrator.synchronizer import FinalizeOutcome
from agent_console.orchestrator.types import (
    Category,
    ConversationEntry,
    Phase,
    ProcessSummary,
    RunContext,
    SequenceResult,
    Step,
    ToolExecutionStatus,
    ToolInfo,
)

__all__ = [
    # Public API
    "ResponseOrchestrator",
    "RunRegistry",
    "categorize",
    "primary",
    # Conversation store
    "ConversationStore",
    "InMemoryConversationStore",
    # Types
    "Phase",
    "Category",
    "Step",
    "ToolExecutionStatus",
    "ToolInfo",
    "ConversationEntry",
    "ProcessSummary",
    "RunContext",
    "SequenceResult",
    "FinalizeOutcome",
    # Errors
    "OrchestratorError",
    "RunCancelledError",
    "UnknownEntryError",
]
