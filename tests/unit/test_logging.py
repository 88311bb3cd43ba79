"""Unit tests for logging configuration."""

from __future__ import annotations

import json
import logging
import logging.handlers
from io import StringIO
from pathlib import Path
from typing import Any

import pytest
import structlog

from clientportal.config import LoggingConfig
from clientportal.logging import (
    add_correlation_id,
    bind_project_context,
    clear_request_context,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Reset logging configuration before each test."""
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    set_correlation_id(None)


@pytest.fixture
def capture_stream() -> StringIO:
    return StringIO()


@pytest.fixture
def json_config() -> LoggingConfig:
    return LoggingConfig(level="INFO", format="json", file=None)


def _capture(stream: StringIO) -> None:
    logging.getLogger().handlers[0].stream = stream  # type: ignore[attr-defined]


def test_json_output_format(json_config: LoggingConfig, capture_stream: StringIO) -> None:
    setup_logging(json_config)
    _capture(capture_stream)

    get_logger("clientportal.test").info("project_created", name="Logo", revisions=3)

    entry = json.loads(capture_stream.getvalue().strip())
    assert entry["event"] == "project_created"
    assert entry["name"] == "Logo"
    assert entry["revisions"] == 3
    assert entry["level"] == "info"
    assert entry["logger"] == "clientportal.test"
    assert "timestamp" in entry


def test_console_output_format(capture_stream: StringIO) -> None:
    setup_logging(LoggingConfig(level="DEBUG", format="console"))
    _capture(capture_stream)

    get_logger("clientportal.test").debug("invoice_decided", decision="approved")

    output = capture_stream.getvalue()
    assert "invoice_decided" in output
    assert "approved" in output
    with pytest.raises(json.JSONDecodeError):
        json.loads(output.strip())


def test_log_level_filtering(json_config: LoggingConfig, capture_stream: StringIO) -> None:
    setup_logging(json_config)
    _capture(capture_stream)
    logger = get_logger("clientportal.test")

    logger.debug("debug_message")
    assert capture_stream.getvalue() == ""

    logger.warning("warning_message")
    assert "warning_message" in capture_stream.getvalue()


def test_correlation_id_binding(json_config: LoggingConfig, capture_stream: StringIO) -> None:
    setup_logging(json_config)
    _capture(capture_stream)
    logger = get_logger("clientportal.test")

    set_correlation_id("corr-12345")
    assert get_correlation_id() == "corr-12345"
    logger.info("with_correlation")
    assert json.loads(capture_stream.getvalue().strip())["correlation_id"] == "corr-12345"

    set_correlation_id(None)
    capture_stream.truncate(0)
    capture_stream.seek(0)
    logger.info("without_correlation")
    assert "correlation_id" not in json.loads(capture_stream.getvalue().strip())


def test_correlation_id_processor() -> None:
    event_dict: dict[str, Any] = {"event": "test"}

    assert "correlation_id" not in add_correlation_id(None, "", event_dict.copy())

    set_correlation_id("test-id")
    assert add_correlation_id(None, "", event_dict.copy())["correlation_id"] == "test-id"


def test_project_context_binding(json_config: LoggingConfig, capture_stream: StringIO) -> None:
    setup_logging(json_config)
    _capture(capture_stream)

    bind_project_context(project_id="8f14e45f-ceea-467f-a0e6-5b5a2f3c4d21")
    get_logger("clientportal.test").info("revision_claimed")

    entry = json.loads(capture_stream.getvalue().strip())
    assert entry["project_id"] == "8f14e45f-ceea-467f-a0e6-5b5a2f3c4d21"


def test_file_rotation_handler_configuration(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "portal.log"
    setup_logging(
        LoggingConfig(
            level="INFO",
            format="json",
            file=log_file,
            rotation_size_mb=10,
            retention_count=3,
        )
    )

    assert log_file.parent.exists()
    handler = logging.getLogger().handlers[0]
    assert isinstance(handler, logging.handlers.RotatingFileHandler)
    assert handler.maxBytes == 10 * 1024 * 1024
    assert handler.backupCount == 3

    get_logger("clientportal.test").info("file_write", data="test")
    handler.flush()

    entry = json.loads(log_file.read_text().strip())
    assert entry["event"] == "file_write"
    assert entry["data"] == "test"


def test_clear_request_context(json_config: LoggingConfig, capture_stream: StringIO) -> None:
    setup_logging(json_config)
    _capture(capture_stream)

    set_correlation_id("corr-1")
    bind_project_context(project_id="p-1")
    clear_request_context()
    get_logger("clientportal.test").info("after_request")

    entry = json.loads(capture_stream.getvalue().strip())
    assert "correlation_id" not in entry
    assert "project_id" not in entry


def test_uvicorn_access_log_is_quieted(json_config: LoggingConfig) -> None:
    setup_logging(json_config)
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
