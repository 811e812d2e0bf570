"""Logging setup for query compilation and execution.

Logfire itself is configured via environment variables (``LOGFIRE_TOKEN``,
``LOGFIRE_SERVICE_NAME``, ``LOGFIRE_ENVIRONMENT``). This module routes
structlog events and standard library records (the neo4j driver logs there)
through it, at a level taken from :class:`Settings`.
"""

import logging

import logfire
import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.types import EventDict, Processor, WrappedLogger
from structlog.typing import FilteringBoundLogger

from cypher_builder.core.config import Settings, settings


def add_logfire_context(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Expose the type of a logged ``error`` as its own attribute."""
    if "error" in event_dict:
        event_dict["error_type"] = type(event_dict["error"]).__name__
    return event_dict


def resolve_level(config: Settings = settings) -> int:
    """``debug`` forces DEBUG, otherwise ``log_level`` applies (unknown names fall back to INFO)."""
    if config.debug:
        return logging.DEBUG
    return logging.getLevelNamesMapping().get(config.log_level.upper(), logging.INFO)


def build_processors(config: Settings = settings) -> list[Processor]:
    """Processor chain shared by structlog loggers and foreign stdlib records.

    The last two entries are the Logfire processor and the renderer; debug
    sessions render for the console, everything else as JSON lines.
    """
    renderer: Processor = structlog.dev.ConsoleRenderer(colors=True) if config.debug else structlog.processors.JSONRenderer()
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        CallsiteParameterAdder(
            parameters=[
                CallsiteParameter.MODULE,
                CallsiteParameter.FUNC_NAME,
                CallsiteParameter.LINENO,
            ]
        ),
        add_logfire_context,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        # MUST come before the renderer
        logfire.StructlogProcessor(),
        renderer,
    ]


def setup_logging(config: Settings = settings) -> None:
    """Configure structlog and the root logger from ``config``.

    Called once by :meth:`ExecutionContext.from_settings`; safe to call again
    to pick up changed settings.
    """
    level = resolve_level(config)
    processors = build_processors(config)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=not config.debug,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=processors[-1],
        foreign_pre_chain=processors[:-2],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)
