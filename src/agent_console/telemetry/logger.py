"""Structured logging configuration using structlog.

Configures structlog on top of stdlib logging with:
- JSON lines written to a rotating file for later analysis
- Console output on stderr (pretty or JSON, per APP_LOG_FORMAT)
- UTC timestamps and a component name derived from the logger name
"""

import logging
import logging.handlers
import pathlib
import sys
from datetime import datetime, timezone
from typing import Any

import structlog


def _get_log_level() -> str:
    """Get console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""
    # Read straight from the environment so telemetry never imports settings.
    from agent_console.config.bootstrap import get_bootstrap_log_level  # noqa: PLC0415

    return get_bootstrap_log_level()


def _get_log_format() -> str:
    """Get console rendering format ('json' or 'console')."""
    from agent_console.config.bootstrap import get_bootstrap_log_format  # noqa: PLC0415

    return get_bootstrap_log_format()


def _get_log_dir() -> pathlib.Path:
    """Get the directory holding current.jsonl."""
    from agent_console.config.bootstrap import get_bootstrap_log_dir  # noqa: PLC0415

    return get_bootstrap_log_dir()


def _component_from_name(logger_name: str) -> str:
    # "agent_console.orchestrator.sequencer" -> "sequencer"
    if not logger_name:
        return "unknown"
    return logger_name.rsplit(".", 1)[-1]


def _add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add UTC timestamp to a foreign (stdlib) log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _add_component(
    logger: logging.Logger | None, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add component name to a foreign (stdlib) log event."""
    # ProcessorFormatter passes no logger for foreign records; add_logger_name
    # has already copied the record's logger name into the event.
    name = getattr(logger, "name", None) or event_dict.get("logger", "")
    event_dict["component"] = _component_from_name(name)
    return event_dict


def _add_component_from_event_dict(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add component name using the logger name placed by add_logger_name."""
    event_dict["component"] = _component_from_name(event_dict.get("logger", ""))
    return event_dict


def _foreign_pre_chain() -> list[Any]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_timestamp,
        _add_component,
    ]


def _configure_file_handler(log_dir: pathlib.Path) -> logging.handlers.RotatingFileHandler:
    """Configure rotating file handler for JSON logs.

    Args:
        log_dir: Directory for log files. Created if missing.

    Returns:
        Configured RotatingFileHandler writing current.jsonl.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_dir / "current.jsonl"),
        maxBytes=20 * 1024 * 1024,  # 20 MB
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_foreign_pre_chain(),
        )
    )
    return handler


def _configure_console_handler(log_format: str) -> logging.StreamHandler[Any]:
    """Configure the stderr handler.

    Args:
        log_format: 'console' for colored key/value output, 'json' for JSON lines.
    """
    handler = logging.StreamHandler(sys.stderr)
    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_foreign_pre_chain(),
        )
    )
    return handler


def configure_logging() -> None:
    """Configure structlog for structured logging.

    Call once at startup; get_logger() calls it lazily otherwise.
    """
    log_level = _get_log_level()
    log_format = _get_log_format()
    log_dir = _get_log_dir()

    # Root accepts everything; handlers gate output. Telemetry INFO events
    # reach the file even when the console is set to WARNING.
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    file_handler = _configure_file_handler(log_dir)
    file_handler.setLevel(logging.INFO)
    root_logger.addHandler(file_handler)

    console_handler = _configure_console_handler(log_format)
    console_handler.setLevel(getattr(logging, log_level, logging.INFO))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            _add_component_from_event_dict,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:  # structlog.stdlib.BoundLogger
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module).

    Example:
        >>> from agent_console.telemetry import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("run_started", run_id=3, trace_id="abc")
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)
