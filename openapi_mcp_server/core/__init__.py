# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities shared by the proxy.

This package contains:
- config: Configuration management
- errors: Custom exceptions
- logging: Structured logging
"""

from openapi_mcp_server.core.config import ServerConfig, get_config, load_config
from openapi_mcp_server.core.errors import (
    ConfigurationError,
    InvalidArgumentsError,
    ProxyError,
    SessionNotFoundError,
    SessionRequiredError,
    TransportClosedError,
    UnknownMethodError,
    UpstreamAPIError,
)
from openapi_mcp_server.core.logging import configure_logging, get_logger, log_event

__all__ = [
    "ServerConfig",
    "get_config",
    "load_config",
    "ProxyError",
    "ConfigurationError",
    "InvalidArgumentsError",
    "SessionNotFoundError",
    "SessionRequiredError",
    "TransportClosedError",
    "UnknownMethodError",
    "UpstreamAPIError",
    "configure_logging",
    "get_logger",
    "log_event",
]
