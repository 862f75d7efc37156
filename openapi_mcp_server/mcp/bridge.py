# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Transport bridge - session lifecycle glue.

Opens sessions for accepted streams, routes submitted messages through the
registry to the right session, runs one pump task per session that handles
messages in arrival order, and tears sessions down when their stream closes.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, Optional

import httpx

from openapi_mcp_server.client.http_client import ConnectionConfig
from openapi_mcp_server.core.errors import (
    INTERNAL_ERROR,
    ConfigurationError,
    SessionNotFoundError,
    TransportClosedError,
)
from openapi_mcp_server.core.logging import log_event
from openapi_mcp_server.mcp.dispatcher import MessageDispatcher
from openapi_mcp_server.mcp.jsonrpc import JSONRPCMessage, build_error_response
from openapi_mcp_server.mcp.proxy import ToolProxy
from openapi_mcp_server.mcp.session import Session, SessionRegistry, SessionState
from openapi_mcp_server.mcp.transport import Transport

logger = logging.getLogger(__name__)

_STOP = object()


class TransportBridge:
    """Connects transports to sessions held in a SessionRegistry."""

    def __init__(
        self,
        registry: SessionRegistry,
        document: Dict[str, Any],
        dispatcher: MessageDispatcher,
        resource_name: Optional[str] = "API",
        version_header: str = "Notion-Version",
        upstream_timeout: Optional[float] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.registry = registry
        self.document = document
        self.dispatcher = dispatcher
        self.resource_name = resource_name
        self.version_header = version_header
        self.upstream_timeout = upstream_timeout
        self.http_transport = http_transport

    def open_session(self, config: ConnectionConfig, transport: Transport) -> Session:
        """
        Validate ``config``, create a session with its own ToolProxy and
        start serving it over ``transport``.

        Must be called from the event loop. Nothing is registered when
        validation fails.

        Raises:
            ConfigurationError: If the credential or base URL is missing, or
                the API document cannot be converted
        """
        if not config.credential:
            raise ConfigurationError("Missing required parameter: credential", parameter="credential")
        if not config.base_url:
            raise ConfigurationError("Missing required parameter: baseUrl", parameter="baseUrl")

        session_id = str(uuid.uuid4())
        proxy = ToolProxy(
            self.document,
            config,
            resource_name=self.resource_name,
            version_header=self.version_header,
            timeout=self.upstream_timeout,
            transport=self.http_transport,
        )
        session = Session(id=session_id, config=config, proxy=proxy, transport=transport)

        transport.on_inbound_message(lambda message: self._enqueue(session, message))
        transport.on_close(lambda: self.close_session(session_id))

        self.registry.register(session)
        session.outbound = transport.open(session_id)
        session.worker = asyncio.create_task(self._pump(session))

        log_event(
            logger,
            "session_opened",
            session_id=session_id,
            base_url=config.base_url,
            api_version=config.api_version,
            open_sessions=len(self.registry),
        )
        return session

    def submit(self, message: JSONRPCMessage, session_id: Optional[str] = None) -> Session:
        """
        Route one inbound message. Processing happens on the session's pump;
        the result is pushed over its transport.

        Raises:
            SessionNotFoundError: Unknown id, or the session is closing
            SessionRequiredError: No id and not exactly one open session
        """
        session = self.registry.resolve(session_id)
        try:
            session.transport.receive(message)
        except TransportClosedError:
            raise SessionNotFoundError(session.id)
        return session

    async def close_session(self, session_id: str) -> None:
        """Remove the session and close its transport. Safe to call repeatedly."""
        session = self.registry.remove(session_id)
        if session is None:
            return

        session.inbound.put_nowait(_STOP)
        if not session.transport.closed:
            await session.transport.close()

        log_event(
            logger,
            "session_closed",
            session_id=session_id,
            open_sessions=len(self.registry),
        )

    async def reap_idle_sessions(self, idle_timeout: float) -> int:
        """Close sessions idle longer than ``idle_timeout`` seconds. Returns how many."""
        expired = [s.id for s in self.registry.sessions() if s.idle_seconds() > idle_timeout]
        for session_id in expired:
            logger.info(f"Closing idle session: {session_id}")
            await self.close_session(session_id)
        return len(expired)

    async def run_reaper(self, idle_timeout: float, interval: float) -> None:
        """Periodically close idle sessions"""
        while True:
            await asyncio.sleep(interval)
            await self.reap_idle_sessions(idle_timeout)

    async def shutdown(self) -> None:
        """Close every session and stop their pumps."""
        sessions = self.registry.sessions()
        for session in sessions:
            await self.close_session(session.id)
        self.registry.clear()

        workers = [s.worker for s in sessions if s.worker is not None and not s.worker.done()]
        for worker in workers:
            worker.cancel()
        if workers:
            await asyncio.gather(*workers, return_exceptions=True)
        logger.info(f"Bridge shut down, {len(sessions)} sessions closed")

    def _enqueue(self, session: Session, message: Any) -> None:
        session.touch()
        session.inbound.put_nowait(message)

    async def _pump(self, session: Session) -> None:
        try:
            while True:
                message = await session.inbound.get()
                if message is _STOP:
                    break
                if session.state is not SessionState.OPEN:
                    # Queued before close; never started
                    continue

                try:
                    response = await self.dispatcher.dispatch(session.proxy, message)
                except Exception:
                    logger.exception(f"Failed to process message for session {session.id}")
                    response = _internal_error(message)
                if response is None:
                    continue
                if session.state is not SessionState.OPEN:
                    logger.info(f"Discarding result for closed session {session.id}")
                    continue

                try:
                    await session.transport.send(response)
                except Exception:
                    logger.exception(f"Failed to send response for session {session.id}")
                    fallback = _internal_error(message)
                    if fallback is not None:
                        await session.transport.send(fallback)
                session.touch()
        finally:
            await session.proxy.aclose()


def _internal_error(message: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(message, JSONRPCMessage) or message.is_notification:
        return None
    return build_error_response(message.id, INTERNAL_ERROR, "Internal error")
