"""
Loguru configuration for certvault.

This module configures loguru with:
- Configurable level and format from settings
- Redirection of standard library logs (botocore, uvicorn) to loguru
"""

import logging
import sys

from loguru import logger

from certvault.config import get_settings

__all__ = ["logger", "InterceptHandler", "configure_logger"]


def configure_logger() -> None:
    """
    Configures loguru with application settings.

    This function:
    1. Removes default loguru handlers
    2. Adds handler to stderr with custom configuration
    """
    settings = get_settings()

    logger.remove()
    logger.add(
        sink=sys.stderr,
        level=settings.log_level.upper(),
        format=settings.log_format,
        colorize=True,
        serialize=False,
        backtrace=True,
        diagnose=False,
        enqueue=settings.logger_enqueue,
    )


class InterceptHandler(logging.Handler):
    """
    Handler to redirect standard logging logs to loguru.

    boto3 and botocore log through the standard library; this handler
    forwards those records so all output shares one format.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """
        Redirects a standard logging record to loguru.

        Args:
            record: logging.LogRecord record
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def intercept_standard_logging() -> None:
    """
    Configures redirection of standard logging to loguru.

    Intercepts logs from:
    - boto3 / botocore (S3 client)
    - uvicorn (ASGI server)
    - fastapi
    """
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)

    for logger_name in [
        "boto3",
        "botocore",
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "fastapi",
    ]:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

    # botocore is very chatty below WARNING
    logging.getLogger("botocore").setLevel(logging.WARNING)
