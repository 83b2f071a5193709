"""Tests for logging configuration."""

import logging

from loguru import logger

from certvault.core.logging import (
    InterceptHandler,
    configure_logger,
    intercept_standard_logging,
)


def test_configure_logger_does_not_fail():
    """Test loguru can be configured from settings."""
    configure_logger()


def test_intercept_handler_forwards_to_loguru():
    """Test standard logging records end up in loguru sinks."""
    messages = []
    sink_id = logger.add(messages.append, format="{message}")
    try:
        std_logger = logging.getLogger("certvault.test.intercept")
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(logging.INFO)

        std_logger.warning("from stdlib")
    finally:
        logger.remove(sink_id)

    assert any("from stdlib" in str(m) for m in messages)


def test_intercept_standard_logging_installs_handlers():
    """Test boto loggers are routed through InterceptHandler."""
    intercept_standard_logging()

    for name in ["boto3", "botocore", "uvicorn"]:
        handlers = logging.getLogger(name).handlers
        assert any(isinstance(h, InterceptHandler) for h in handlers)
