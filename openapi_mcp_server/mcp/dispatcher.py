# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
MCP method dispatch.

Maps one inbound JSON-RPC message onto a ToolProxy and produces the
JSON-RPC response to push back, or None for notifications.
"""

import logging
from typing import Any, Dict, Optional

from openapi_mcp_server.core.errors import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    InvalidArgumentsError,
    UnknownMethodError,
)
from openapi_mcp_server.mcp.jsonrpc import (
    JSONRPCMessage,
    build_error_response,
    build_initialize_result,
    build_result_response,
)
from openapi_mcp_server.mcp.proxy import ToolProxy

logger = logging.getLogger(__name__)

SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")
DEFAULT_PROTOCOL_VERSION = "2024-11-05"


class MessageDispatcher:
    """Standard MCP method table shared by all sessions."""

    def __init__(self, server_name: str, server_version: str = "1.0.0"):
        self.server_info = {
            "name": server_name,
            "version": server_version
        }
        self.capabilities = {
            "tools": {"listChanged": False}
        }

    async def dispatch(self, proxy: ToolProxy, message: JSONRPCMessage) -> Optional[Dict[str, Any]]:
        """
        Handle one message.

        Returns:
            JSON-RPC response dict, or None when the message is a notification
        """
        method = message.method
        params = message.params or {}

        if method is None:
            # Client responses to server requests; nothing is ever requested
            return None

        try:
            if method == "initialize":
                result = self._initialize(params)
            elif method == "ping":
                result = {}
            elif method == "tools/list":
                result = {"tools": [tool.to_wire() for tool in proxy.list_tools()]}
            elif method == "tools/call":
                name = params.get("name")
                if not isinstance(name, str):
                    raise InvalidArgumentsError("tools/call requires a string 'name'")
                result = await proxy.call_tool(name, params.get("arguments") or {})
            elif method.startswith("notifications/"):
                logger.debug(f"Notification received: {method}")
                return None
            else:
                if message.is_notification:
                    return None
                return build_error_response(message.id, METHOD_NOT_FOUND, f"Method not found: {method}")
        except (UnknownMethodError, InvalidArgumentsError) as e:
            return build_error_response(message.id, e.rpc_code, e.message)
        except Exception:
            logger.exception(f"Unhandled error while processing {method}")
            return build_error_response(message.id, INTERNAL_ERROR, "Internal error")

        if message.is_notification:
            return None
        return build_result_response(message.id, result)

    def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        requested = params.get("protocolVersion")
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else DEFAULT_PROTOCOL_VERSION
        client_info = params.get("clientInfo") or {}
        logger.info(f"Initialize from {client_info.get('name', 'unknown client')} (protocol {version})")
        return build_initialize_result(version, self.server_info, self.capabilities)
