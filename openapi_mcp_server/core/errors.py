# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for the OpenAPI MCP proxy.

All exceptions inherit from ProxyError for consistent error handling.
"""

from typing import Any, Optional


# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ProxyError(Exception):
    """Base exception for all proxy errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[dict] = None
    ):
        """
        Initialize proxy error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for API response."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details
        }


class ConfigurationError(ProxyError):
    """Missing or invalid connection parameters, or an unusable API document."""

    def __init__(self, message: str, parameter: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize configuration error.

        Args:
            message: Configuration error message
            parameter: Name of the offending parameter
            details: Additional error details
        """
        super().__init__(message, status_code=400, details=details)
        self.parameter = parameter


class SessionNotFoundError(ProxyError):
    """Message addressed to a session id that is not registered."""

    def __init__(self, session_id: str, details: Optional[dict] = None):
        super().__init__(
            f"Session not found: {session_id}",
            status_code=404,
            details=details or {"sessionId": session_id},
        )
        self.session_id = session_id


class SessionRequiredError(ProxyError):
    """Message carries no session id and none can be inferred."""

    def __init__(self, active_sessions: int):
        super().__init__(
            "Session ID required",
            status_code=400,
            details={
                "activeSessions": active_sessions,
                "hint": "Use /messages/<id>, ?sessionId=<id>, the X-Session-ID header or a sessionId body field",
            },
        )
        self.active_sessions = active_sessions


class UnknownMethodError(ProxyError):
    """Tool name not present in the operation lookup."""

    rpc_code = INVALID_PARAMS

    def __init__(self, name: str):
        super().__init__(f"Method {name} not found", status_code=404, details={"name": name})
        self.name = name


class InvalidArgumentsError(ProxyError):
    """Arguments cannot be turned into an HTTP request."""

    rpc_code = INVALID_PARAMS

    def __init__(self, message: str, operation_id: Optional[str] = None):
        super().__init__(message, status_code=400, details={"operationId": operation_id})
        self.operation_id = operation_id


class UpstreamAPIError(ProxyError):
    """
    The described API answered with a failure or could not be reached.

    ``upstream_status`` is None for transport failures. ``data`` holds the
    parsed response body when it was JSON, otherwise the raw text.
    """

    def __init__(self, message: str, upstream_status: Optional[int] = None, data: Any = None):
        super().__init__(message, status_code=502, details={"upstreamStatus": upstream_status})
        self.upstream_status = upstream_status
        self.data = data


class TransportClosedError(ProxyError):
    """Operation attempted on a transport that has already closed."""

    def __init__(self, session_id: Optional[str] = None):
        super().__init__(f"Transport closed: {session_id}", status_code=410)
        self.session_id = session_id
