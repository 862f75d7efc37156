# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
MCP side of the proxy: tool proxy, message dispatch, transports and sessions.
"""

from openapi_mcp_server.mcp.bridge import TransportBridge
from openapi_mcp_server.mcp.dispatcher import MessageDispatcher
from openapi_mcp_server.mcp.proxy import ToolProxy
from openapi_mcp_server.mcp.session import Session, SessionRegistry, SessionState
from openapi_mcp_server.mcp.transport import SseTransport, Transport

__all__ = [
    "TransportBridge",
    "MessageDispatcher",
    "ToolProxy",
    "Session",
    "SessionRegistry",
    "SessionState",
    "SseTransport",
    "Transport",
]
