"""Command-line interface for the agent console."""
