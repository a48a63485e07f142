"""Agent console: AI response processing orchestrator.

Coordinates the simulated multi-phase lifecycle of answering a user request
and keeps the conversation store in sync with it.
"""

__version__ = "0.1.0"
