"""Tests for the agent console CLI."""

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from agent_console.telemetry import configure_logging
from agent_console.ui import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Render without wrapping so assertions can match whole cells."""
    monkeypatch.setattr(cli, "console", Console(width=200, color_system=None))
    # Bind log handlers to this test's stderr, away from the runner's streams.
    configure_logging()


class TestClassify:
    """Tests for the classify command."""

    def test_no_categories(self) -> None:
        result = runner.invoke(cli.app, ["classify", "Hello, how are you today?"])
        assert result.exit_code == 0
        assert "No tool categories detected" in result.output

    def test_categories_with_primary(self) -> None:
        result = runner.invoke(
            cli.app, ["classify", "Schedule a meeting and send the notes by email"]
        )
        assert result.exit_code == 0
        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        assert lines == [
            "email: Communication (primary)",
            "docs: Documents",
            "calendar: Scheduling",
        ]


class TestSimulate:
    """Tests for the simulate command."""

    def test_reply_replaces_placeholder(self) -> None:
        result = runner.invoke(
            cli.app,
            ["simulate", "Please email John the quarterly report", "--fast", "-r", "Done!"],
        )
        assert result.exit_code == 0, result.output
        assert "Using email_service_action" in result.output
        assert "Using email_service" in result.output
        assert "generating_response" in result.output
        assert "Tools: Using email_service" in result.output
        assert "assistant: Done!" in result.output

    def test_flag_path_keeps_placeholder(self) -> None:
        result = runner.invoke(cli.app, ["simulate", "Hello", "--fast"])
        assert result.exit_code == 0, result.output
        assert "Tools: none" in result.output
        assert "thinking: Processing your request..." in result.output
        assert "executing_tool" not in result.output

    def test_failed_run(self) -> None:
        result = runner.invoke(cli.app, ["simulate", "Hello", "--fast", "--failed"])
        assert result.exit_code == 0, result.output
        assert "thinking: Processing your request..." in result.output

    def test_reply_and_failed_conflict(self) -> None:
        result = runner.invoke(cli.app, ["simulate", "Hello", "--fast", "--failed", "-r", "x"])
        assert result.exit_code != 0

    def test_json_output(self) -> None:
        result = runner.invoke(
            cli.app, ["simulate", "Search the web for news", "--fast", "-r", "Found it", "--json"]
        )
        assert result.exit_code == 0, result.output
        entries = json.loads(result.stdout[result.stdout.index("[") :])
        assert len(entries) == 1
        entry = entries[0]
        assert entry["role"] == "assistant"
        assert entry["content"] == "Found it"
        assert entry["metadata"] == {"is_completed": True}
        steps = entry["process_summary"]["steps"]
        assert [s["phase"] for s in steps] == [
            "thinking",
            "analyzing_tools",
            "executing_tool",
            "processing_results",
            "generating_response",
        ]
        assert steps[2]["tool_result"]["results_count"] == 5


class TestConfig:
    """Tests for the config command."""

    def test_shows_timings(self) -> None:
        result = runner.invoke(cli.app, ["config"])
        assert result.exit_code == 0
        assert "processing_thinking_delay_ms" in result.output
        assert "processing_cleanup_timeout_ms" in result.output
