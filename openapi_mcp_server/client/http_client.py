# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
HTTP client for the described API.

Builds one request per OperationRecord: path parameters substituted into the
template, query and header parameters attached, remaining arguments sent as
the JSON body, plus the connection's authorization and version headers.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from openapi_mcp_server.core.errors import InvalidArgumentsError, UpstreamAPIError
from openapi_mcp_server.openapi.models import OperationRecord, ParameterLocation

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


@dataclass(frozen=True)
class ConnectionConfig:
    """Per-session connection settings; fixed for the session's lifetime."""
    base_url: str
    credential: str = field(repr=False)
    api_version: str


@dataclass
class UpstreamResponse:
    """Successful upstream response"""
    status_code: int
    data: Any
    headers: Dict[str, str]


class HttpClient:
    """Executes OpenAPI operations against one base URL with one credential."""

    def __init__(
        self,
        config: ConnectionConfig,
        version_header: str = "Notion-Version",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: Connection settings of the owning session
            version_header: Header name carrying config.api_version
            timeout: Per-request timeout in seconds; None waits indefinitely
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {config.credential}",
            version_header: config.api_version,
            "Accept": "application/json",
        }
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        """Release pooled connections"""
        await self._client.aclose()

    async def execute_operation(
        self, operation: OperationRecord, arguments: Optional[Dict[str, Any]] = None
    ) -> UpstreamResponse:
        """
        Issue the HTTP request described by ``operation``.

        Raises:
            InvalidArgumentsError: If a path placeholder has no value
            UpstreamAPIError: On transport failure or a non-2xx response
        """
        arguments = dict(arguments or {})
        url = self.base_url + self._render_path(operation, arguments)

        headers = dict(self.headers)
        for spec in operation.parameters_in(ParameterLocation.HEADER):
            if arguments.get(spec.name) is not None:
                headers[spec.name] = str(arguments[spec.name])

        params = {}
        for spec in operation.parameters_in(ParameterLocation.QUERY):
            if arguments.get(spec.name) is not None:
                params[spec.name] = _query_value(arguments[spec.name])

        body = self._build_body(operation, arguments)

        logger.debug(f"{operation.method} {url} ({operation.operation_id})")
        try:
            response = await self._client.request(
                operation.method,
                url,
                params=params,
                headers=headers,
                json=body,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Transport failure calling {operation.operation_id}: {e}")
            raise UpstreamAPIError(
                f"Request for {operation.operation_id} failed: {e}",
                upstream_status=None,
                data={"message": str(e)},
            )

        data = _parse_response(response)
        if not response.is_success:
            raise UpstreamAPIError(
                f"{operation.operation_id} returned HTTP {response.status_code}",
                upstream_status=response.status_code,
                data=data,
            )

        return UpstreamResponse(
            status_code=response.status_code,
            data=data,
            headers=dict(response.headers),
        )

    def _render_path(self, operation: OperationRecord, arguments: Dict[str, Any]) -> str:
        def substitute(match: "re.Match[str]") -> str:
            name = match.group(1)
            value = arguments.get(name)
            if value is None:
                raise InvalidArgumentsError(
                    f"Missing required path parameter '{name}' for {operation.operation_id}",
                    operation_id=operation.operation_id,
                )
            return quote(str(value), safe="")

        return _PLACEHOLDER.sub(substitute, operation.path)

    def _build_body(self, operation: OperationRecord, arguments: Dict[str, Any]) -> Any:
        if not operation.has_body:
            return None
        if not operation.body_is_object:
            return arguments.get("body")

        # Anything that is not a path/query/header parameter travels in the body
        non_body = {
            p.name for p in operation.parameters if p.location != ParameterLocation.BODY
        }
        return {key: value for key, value in arguments.items() if key not in non_body}


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_query_value(item) for item in value]
    if isinstance(value, dict):
        return json.dumps(value)
    return value


def _parse_response(response: httpx.Response) -> Any:
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            pass
    return response.text
