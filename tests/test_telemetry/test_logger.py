"""Tests for structured logging configuration."""

import json
import logging
import logging.handlers
import pathlib
from collections.abc import Iterator
from typing import Any

import pytest
import structlog

import agent_console.telemetry.logger as logger_module
from agent_console.orchestrator.conversation import InMemoryConversationStore
from agent_console.orchestrator.runs import RunRegistry
from agent_console.orchestrator.steps import StepTracker
from agent_console.orchestrator.types import Phase
from agent_console.telemetry import PHASE_TRANSITION, configure_logging, get_logger


@pytest.fixture
def log_dir(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[pathlib.Path]:
    """Point logging at a temporary directory and reconfigure it."""
    directory = tmp_path / "logs"
    monkeypatch.setattr(logger_module, "_get_log_dir", lambda: directory)
    monkeypatch.setattr(logger_module, "_get_log_level", lambda: "DEBUG")
    structlog.reset_defaults()
    logging.root.handlers.clear()
    configure_logging()
    yield directory
    for handler in own_handlers():
        handler.close()
        logging.root.removeHandler(handler)


def own_handlers() -> list[logging.Handler]:
    """Root handlers installed by configure_logging, ignoring pytest's capture handlers."""
    return [
        h
        for h in logging.root.handlers
        if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
    ]


def read_entries(log_dir: pathlib.Path) -> list[dict[str, Any]]:
    with open(log_dir / "current.jsonl", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


class TestLoggerConfiguration:
    """Test logger configuration and setup."""

    def test_get_logger_returns_bound_logger(self) -> None:
        """Test that get_logger returns a logger that can be used."""
        log = get_logger(__name__)
        assert hasattr(log, "info")
        assert hasattr(log, "error")
        assert hasattr(log, "warning")

    def test_get_logger_configures_on_first_call(self) -> None:
        """Test that get_logger configures logging on first call."""
        structlog.reset_defaults()

        get_logger("test.module1")
        assert structlog.is_configured()

    def test_logger_creates_log_directory(self, log_dir: pathlib.Path) -> None:
        """Test that configuration creates the log directory."""
        assert log_dir.exists()

    def test_handler_levels(self, log_dir: pathlib.Path) -> None:
        """Test that the file keeps INFO and the console follows the configured level."""
        handlers = own_handlers()
        assert len(handlers) == 2

        file_handlers = [h for h in handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.INFO

        console_handlers = [h for h in handlers if h not in file_handlers]
        assert console_handlers[0].level == logging.DEBUG


class TestStructuredOutput:
    """Test the JSON lines written to current.jsonl."""

    def test_logger_emits_structured_logs(self, log_dir: pathlib.Path) -> None:
        """Test that key/value pairs reach the file as JSON."""
        log = get_logger("test.component")
        log.info("test_event", key1="value1", key2=42, trace_id="trace-123")

        entry = read_entries(log_dir)[-1]
        assert entry["event"] == "test_event"
        assert entry["key1"] == "value1"
        assert entry["key2"] == 42
        assert entry["trace_id"] == "trace-123"
        assert entry["level"] == "info"
        assert entry["component"] == "component"

    def test_logger_includes_utc_timestamp(self, log_dir: pathlib.Path) -> None:
        """Test that log entries include an ISO UTC timestamp."""
        get_logger("test").info("test_event")

        timestamp = read_entries(log_dir)[-1]["timestamp"]
        assert "T" in timestamp
        assert timestamp.endswith("Z") or timestamp.endswith("+00:00")

    @pytest.mark.parametrize(
        ("name", "component"),
        [
            ("agent_console.orchestrator", "orchestrator"),
            ("agent_console.orchestrator.sequencer", "sequencer"),
            ("standalone", "standalone"),
        ],
    )
    def test_component_from_logger_name(
        self, log_dir: pathlib.Path, name: str, component: str
    ) -> None:
        """Test that the component is the last segment of the logger name."""
        get_logger(name).info("test_event")
        assert read_entries(log_dir)[-1]["component"] == component

    def test_debug_events_stay_out_of_file(self, log_dir: pathlib.Path) -> None:
        """Test that the file only records INFO and above."""
        log = get_logger("test.levels")
        log.debug("debug_event")
        log.info("info_event")

        events = [e["event"] for e in read_entries(log_dir)]
        assert "debug_event" not in events
        assert "info_event" in events

    def test_foreign_stdlib_logs_are_structured(self, log_dir: pathlib.Path) -> None:
        """Test that plain stdlib loggers get component and timestamp too."""
        logging.getLogger("thirdparty.client").warning("plain message")

        entry = read_entries(log_dir)[-1]
        assert entry["event"] == "plain message"
        assert entry["component"] == "client"
        assert "timestamp" in entry

    def test_component_for_foreign_event_without_logger(self) -> None:
        """Test that a foreign event falls back to the logger name in the event."""
        event = logger_module._add_component(None, "warning", {"logger": "thirdparty.client"})
        assert event["component"] == "client"

        event = logger_module._add_component(None, "warning", {})
        assert event["component"] == "unknown"


class TestOrchestratorEvents:
    """Test that orchestrator events carry run correlation fields."""

    def test_phase_transition_event(self, log_dir: pathlib.Path) -> None:
        """Test the phase transition event of a step tracker."""
        registry = RunRegistry()
        ctx = registry.begin("conv-log", InMemoryConversationStore())
        StepTracker(registry).begin_phase(ctx, Phase.THINKING)

        transitions = [e for e in read_entries(log_dir) if e["event"] == PHASE_TRANSITION]
        assert transitions
        entry = transitions[-1]
        assert entry["to_phase"] == "thinking"
        assert entry["from_phase"] is None
        assert entry["run_id"] == ctx.run_id
        assert entry["trace_id"] == ctx.trace_id
        assert entry["conversation_id"] == "conv-log"
        assert entry["component"] == "steps"
