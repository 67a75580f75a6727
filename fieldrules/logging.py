"""Structured Logging for fieldrules

- Console rendering for development, JSON lines for log shippers
- Routed through stdlib logging so host applications keep control of levels
"""
import logging
import sys
from typing import TextIO

import structlog
from structlog.types import EventDict, Processor

from fieldrules.config import get_settings


def _add_library_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that adds library metadata."""
    event_dict.setdefault("library", "fieldrules")
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used in both dev and prod configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_library_info,
    ]


def configure_logging(
    level: str | None = None, json_logs: bool | None = None, stream: TextIO | None = None
) -> None:
    """Configure the logging system.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to settings.
        json_logs: If True, output JSON format. If False, colored console output.
        stream: Where the library handler writes. Defaults to stdout.
    """
    settings = get_settings()
    level = level or settings.LOG_LEVEL
    json_logs = settings.LOG_JSON if json_logs is None else json_logs
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = get_shared_processors()

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    library_logger = logging.getLogger("fieldrules")
    library_logger.handlers = [handler]
    library_logger.setLevel(log_level)
    library_logger.propagate = False


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Wraps the stdlib logger of the same name, so the host application's
    logging levels apply even when configure_logging() was never called.

    Args:
        name: Logger name (typically __name__ from the calling module)
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)


class LoggerRegistry:
    """Registry of pre-configured loggers for the engine's components."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        """Get or create a logger for the given component."""
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"fieldrules.{name}")
        return cls._loggers[name]


def compiler_logger() -> structlog.stdlib.BoundLogger:
    """Logger for type compilation events."""
    return LoggerRegistry.get("compiler")


def registry_logger() -> structlog.stdlib.BoundLogger:
    """Logger for rule registration events."""
    return LoggerRegistry.get("registry")


def walker_logger() -> structlog.stdlib.BoundLogger:
    """Logger for validation runs."""
    return LoggerRegistry.get("walker")
