"""Structured logging for the client portal.

structlog renders every event; stdlib logging only provides the handlers
(stdout or a size-rotated file). Two pieces of per-request context are
attached to events automatically:

- the correlation ID set by the request middleware
- the project id bound by project routes via ``bind_project_context``

Example usage:
    >>> from clientportal.config import LoggingConfig
    >>> from clientportal.logging import setup_logging, get_logger, bind_project_context
    >>>
    >>> setup_logging(LoggingConfig(level="INFO", format="json"))
    >>> logger = get_logger(__name__)
    >>> bind_project_context(project_id="9b7c...")
    >>> logger.info("invoice_decided", count=3)
"""

from __future__ import annotations

import contextvars
import logging
import logging.handlers
import sys
from typing import Any

import structlog

from clientportal.config import LoggingConfig

# Loggers whose output duplicates the request middleware
QUIET_LOGGERS = ("uvicorn.access",)

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def add_correlation_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor adding the current correlation ID, when set."""
    correlation_id = _correlation_id.get()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def bind_project_context(project_id: str) -> None:
    """Attach ``project_id`` to every event logged in the current context."""
    structlog.contextvars.bind_contextvars(project_id=project_id)


def clear_request_context() -> None:
    """Drop the correlation ID and any bound context at the end of a request."""
    set_correlation_id(None)
    structlog.contextvars.clear_contextvars()


def _build_handler(config: LoggingConfig) -> logging.Handler:
    if config.file is None:
        return logging.StreamHandler(sys.stdout)

    config.file.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=config.file,
        maxBytes=config.rotation_size_mb * 1024 * 1024,
        backupCount=config.retention_count,
        encoding="utf-8",
    )


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(config: LoggingConfig) -> None:
    """Configure stdlib handlers and the structlog processor chain.

    Args:
        config: Logging section of PortalConfig. ``format`` selects JSON or
            console rendering; ``file`` switches from stdout to a rotating
            file of ``rotation_size_mb`` with ``retention_count`` backups.
    """
    log_level = getattr(logging, config.level)

    handler = _build_handler(config)
    handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.contextvars.merge_contextvars,
            add_correlation_id,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(config.format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)
