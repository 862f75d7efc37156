# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Session transports.

A transport is the pair of channels behind one session: an outbound push
channel the server writes JSON-RPC messages to, and an inbound path that the
bridge feeds with messages submitted out of band. SseTransport renders the
outbound side as a Server-Sent Events stream.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Union

from openapi_mcp_server.core.errors import TransportClosedError

logger = logging.getLogger(__name__)

InboundHandler = Callable[[Any], None]
CloseHandler = Callable[[], Union[None, Awaitable[None]]]


class Transport(ABC):
    """Interface between a session and its client connection."""

    def __init__(self):
        self.session_id: Optional[str] = None
        self._inbound_handler: Optional[InboundHandler] = None
        self._close_handlers: List[CloseHandler] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def open(self, session_id: str) -> AsyncIterator[Any]:
        """Start the session and return its outbound channel."""

    @abstractmethod
    async def send(self, message: Dict[str, Any]) -> bool:
        """Push a message to the client. Returns False if the transport is closed."""

    @abstractmethod
    async def close(self) -> None:
        """Close the outbound channel and run close handlers once."""

    def on_inbound_message(self, handler: InboundHandler) -> None:
        self._inbound_handler = handler

    def on_close(self, handler: CloseHandler) -> None:
        self._close_handlers.append(handler)

    def receive(self, message: Any) -> None:
        """
        Hand a client-submitted message to the registered inbound handler.

        Raises:
            TransportClosedError: If the transport has closed
        """
        if self._closed or self._inbound_handler is None:
            raise TransportClosedError(self.session_id)
        self._inbound_handler(message)

    async def _mark_closed(self) -> None:
        if self._closed:
            return
        self._closed = True
        for handler in self._close_handlers:
            try:
                result = handler()
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception(f"Close handler failed for session {self.session_id}")


_CLOSE = object()


class SseTransport(Transport):
    """
    Server-Sent Events transport.

    The first event is ``endpoint``, whose data is the URL the client must
    POST messages to. Every pushed message follows as a ``message`` event.
    """

    def __init__(self, message_path: str = "/messages"):
        super().__init__()
        self.message_path = message_path
        self._queue: "asyncio.Queue[Any]" = asyncio.Queue()

    @property
    def endpoint(self) -> str:
        return f"{self.message_path}?sessionId={self.session_id}"

    def open(self, session_id: str) -> AsyncIterator[str]:
        self.session_id = session_id
        self._queue.put_nowait(format_sse_event("endpoint", self.endpoint))
        return self._stream()

    async def send(self, message: Dict[str, Any]) -> bool:
        if self._closed:
            logger.debug(f"Dropping message for closed session {self.session_id}")
            return False
        await self._queue.put(format_sse_event("message", json.dumps(message, default=str)))
        return True

    async def close(self) -> None:
        if not self._closed:
            self._queue.put_nowait(_CLOSE)
        await self._mark_closed()

    async def _stream(self) -> AsyncIterator[str]:
        # Exits on close() or when the response task is cancelled by a client disconnect
        try:
            while True:
                item = await self._queue.get()
                if item is _CLOSE:
                    break
                yield item
        finally:
            await self._mark_closed()


def format_sse_event(event: str, data: str) -> str:
    """Encode one SSE event; multi-line data is split across data fields."""
    lines = [f"event: {event}"]
    lines.extend(f"data: {line}" for line in data.splitlines() or [""])
    return "\n".join(lines) + "\n\n"
