"""Exceptions raised by the orchestrator."""


class OrchestratorError(Exception):
    """Base class for orchestrator errors."""


class RunCancelledError(OrchestratorError):
    """A run was superseded or torn down while it was waiting between phases."""

    def __init__(self, conversation_id: str, run_id: int) -> None:
        super().__init__(f"Run {run_id} for conversation {conversation_id} was cancelled")
        self.conversation_id = conversation_id
        self.run_id = run_id


class UnknownEntryError(OrchestratorError, LookupError):
    """A conversation store handle does not refer to an entry."""
