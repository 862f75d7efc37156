# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Structured logging for the MCP proxy.

JSON output for log aggregation, plain text for local runs. Session
lifecycle events are emitted through log_event() so their fields stay
machine-readable.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName",
    "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for easy parsing by log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extra fields passed through log_event()
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Simple text formatter for human-readable logs."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> logging.Logger:
    """
    Configure the package root logger.

    Module loggers created with logging.getLogger(__name__) propagate to it,
    so this is called once by the entry point.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format type (json or text)

    Returns:
        The configured package logger
    """
    return get_logger("openapi_mcp_server", log_level=log_level, log_format=log_format)


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_format: str = "json",
    stream: Optional[Any] = None
) -> logging.Logger:
    """
    Get configured logger instance.

    Args:
        name: Logger name (usually __name__)
        log_level: Logging level
        log_format: Format type (json or text)
        stream: Output stream, stdout by default

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    if log_format == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    level: str = "INFO",
    **kwargs: Any
) -> None:
    """
    Log structured event with additional fields.

    Args:
        logger: Logger instance
        event: Event name
        level: Log level
        **kwargs: Additional fields to include in log
    """
    log_func = getattr(logger, level.lower())
    log_func(event, extra=kwargs)
