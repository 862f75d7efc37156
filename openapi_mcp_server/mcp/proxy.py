# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
MCP tool proxy.

One instance per session: it owns the converted tool catalog and an
HttpClient bound to that session's ConnectionConfig, and exposes the two MCP
operations as plain methods.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from openapi_mcp_server.client.http_client import ConnectionConfig, HttpClient
from openapi_mcp_server.core.errors import UnknownMethodError, UpstreamAPIError
from openapi_mcp_server.openapi.converter import SpecConverter
from openapi_mcp_server.openapi.models import OperationRecord, ToolDefinition

logger = logging.getLogger(__name__)


class ToolProxy:
    """Exposes an OpenAPI document as MCP tools for one connection."""

    def __init__(
        self,
        document: Dict[str, Any],
        config: ConnectionConfig,
        resource_name: Optional[str] = "API",
        version_header: str = "Notion-Version",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            document: Parsed OpenAPI document
            config: Connection settings for this proxy's HTTP client
            resource_name: Tool name prefix (see SpecConverter)
            version_header: Header carrying config.api_version
            timeout: Upstream request timeout in seconds, None for no limit
            transport: Optional httpx transport (used by tests)

        Raises:
            ConfigurationError: If the document cannot be converted
        """
        converter = SpecConverter(document, resource_name=resource_name)
        result = converter.convert()

        self.config = config
        self._definitions: List[ToolDefinition] = result.definitions
        self._lookup: Dict[str, OperationRecord] = result.lookup
        self.http_client = HttpClient(
            config,
            version_header=version_header,
            timeout=timeout,
            transport=transport,
        )

    def list_tools(self) -> List[ToolDefinition]:
        """All tool definitions, in document declaration order."""
        return list(self._definitions)

    def find_operation(self, name: str) -> Optional[OperationRecord]:
        return self._lookup.get(name)

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a tool and wrap the outcome in an MCP result.

        Upstream failures come back as a normal result whose text payload
        carries ``"status": "error"`` and the upstream body.

        Raises:
            UnknownMethodError: If ``name`` is not a known tool
            InvalidArgumentsError: If the request cannot be built
        """
        operation = self.find_operation(name)
        if operation is None:
            raise UnknownMethodError(name)

        try:
            response = await self.http_client.execute_operation(operation, arguments or {})
        except UpstreamAPIError as e:
            logger.warning(f"Upstream error in tool call {name}: {e.message}")
            data = e.data if e.data is not None else {}
            payload = {"status": "error"}
            payload.update(data if isinstance(data, dict) else {"data": data})
            return _text_result(payload)

        return _text_result(response.data)

    async def aclose(self) -> None:
        await self.http_client.aclose()


def _text_result(data: Any) -> Dict[str, Any]:
    return {
        "content": [
            {
                "type": "text",
                "text": json.dumps(data),
            }
        ]
    }
