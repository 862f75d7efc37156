# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
HTTP surface of the proxy.

- GET  /sse, /mcp          open an SSE stream (one session per stream)
- POST /messages[/{id}]    submit a JSON-RPC message to a session
- GET  /health             liveness probe
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from openapi_mcp_server.client.http_client import ConnectionConfig
from openapi_mcp_server.core.config import ServerConfig
from openapi_mcp_server.core.errors import (
    INVALID_REQUEST,
    PARSE_ERROR,
    ConfigurationError,
    SessionNotFoundError,
    SessionRequiredError,
)
from openapi_mcp_server.mcp.bridge import TransportBridge
from openapi_mcp_server.mcp.dispatcher import MessageDispatcher
from openapi_mcp_server.mcp.jsonrpc import JSONRPCMessage, build_error_response
from openapi_mcp_server.mcp.session import SessionRegistry
from openapi_mcp_server.mcp.transport import SseTransport
from openapi_mcp_server.openapi.converter import SpecConverter

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-ID"


def create_app(
    config: ServerConfig,
    document: Dict[str, Any],
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The document is converted once here so a broken spec fails at startup
    rather than on the first connection.

    Args:
        config: Server configuration
        document: Parsed OpenAPI document
        http_transport: Optional httpx transport for upstream calls (tests)

    Raises:
        ConfigurationError: If the document has no base URL or bad references
    """
    tool_count = len(SpecConverter(document, resource_name=config.resource_name).convert().definitions)

    registry = SessionRegistry()
    dispatcher = MessageDispatcher(config.server_name, config.server_version)
    bridge = TransportBridge(
        registry,
        document,
        dispatcher,
        resource_name=config.resource_name,
        version_header=config.version_header,
        upstream_timeout=config.upstream_timeout,
        http_transport=http_transport,
    )

    app = FastAPI(title=f"MCP Server: {config.server_name}", version=config.server_version)
    app.state.config = config
    app.state.registry = registry
    app.state.bridge = bridge
    app.state.reaper_task = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", SESSION_HEADER],
        expose_headers=[SESSION_HEADER],
    )

    usage = (
        "/sse?credential=YOUR_KEY"
        f"&baseUrl={config.default_base_url}"
        f"&apiVersion={config.default_api_version}"
    )

    @app.on_event("startup")
    async def on_startup():
        logger.info(f"{config.server_name} serving {tool_count} tools")
        if config.session_idle_timeout:
            app.state.reaper_task = asyncio.create_task(
                bridge.run_reaper(config.session_idle_timeout, config.reaper_interval)
            )

    @app.on_event("shutdown")
    async def on_shutdown():
        if app.state.reaper_task is not None:
            app.state.reaper_task.cancel()
        await bridge.shutdown()

    @app.get("/health")
    async def health():
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/sse")
    @app.get("/mcp")
    async def open_stream(
        credential: Optional[str] = Query(None),
        base_url: Optional[str] = Query(None, alias="baseUrl"),
        api_version: Optional[str] = Query(None, alias="apiVersion"),
    ):
        """Open an SSE stream; the first event names the message endpoint."""
        connection = ConnectionConfig(
            base_url=base_url or config.default_base_url,
            credential=credential or "",
            api_version=api_version or config.default_api_version,
        )
        transport = SseTransport(message_path=config.message_path)

        try:
            session = bridge.open_session(connection, transport)
        except ConfigurationError as e:
            logger.warning(f"Rejected stream: {e.message}")
            parameter = e.parameter or "credential"
            return JSONResponse(
                status_code=400,
                content={
                    "error": f"Missing or invalid query parameter: {parameter}",
                    "usage": usage,
                },
            )

        return StreamingResponse(
            session.outbound,
            media_type="text/event-stream",
            headers={
                SESSION_HEADER: session.id,
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
            },
        )

    @app.post(config.message_path + "/{session_id}", status_code=202)
    async def post_message_to_session(session_id: str, request: Request):
        return await _accept_message(request, session_id)

    @app.post(config.message_path, status_code=202)
    async def post_message(request: Request):
        session_id = request.query_params.get("sessionId") or request.headers.get(SESSION_HEADER)
        return await _accept_message(request, session_id)

    async def _accept_message(request: Request, session_id: Optional[str]) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(status_code=400, content=build_error_response(None, PARSE_ERROR, "Parse error"))

        try:
            message = JSONRPCMessage.model_validate(body)
        except ValidationError:
            request_id = body.get("id") if isinstance(body, dict) else None
            return JSONResponse(
                status_code=400,
                content=build_error_response(request_id, INVALID_REQUEST, "Invalid JSON-RPC request"),
            )

        if not session_id:
            body_session_id = (message.model_extra or {}).get("sessionId")
            if isinstance(body_session_id, str):
                session_id = body_session_id

        try:
            session = bridge.submit(message, session_id)
        except (SessionNotFoundError, SessionRequiredError) as e:
            logger.warning(f"Rejected message: {e.message}")
            return JSONResponse(status_code=e.status_code, content={"error": e.message, **e.details})

        return JSONResponse(
            status_code=202,
            content={"status": "accepted"},
            headers={SESSION_HEADER: session.id},
        )

    return app
