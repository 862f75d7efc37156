# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Session registry.

The registry is the only state shared between client connections. Every
method is synchronous and runs on the event loop thread, so registration,
lookup and removal never interleave.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional

from openapi_mcp_server.client.http_client import ConnectionConfig
from openapi_mcp_server.core.errors import SessionNotFoundError, SessionRequiredError
from openapi_mcp_server.mcp.proxy import ToolProxy
from openapi_mcp_server.mcp.transport import Transport

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Session lifecycle states."""
    PENDING = "pending"
    OPEN = "open"
    CLOSED = "closed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    """Server-side state of one streaming connection"""
    id: str
    config: ConnectionConfig
    proxy: ToolProxy
    transport: Transport
    outbound: Optional[AsyncIterator[Any]] = None
    state: SessionState = SessionState.PENDING
    created_at: datetime = field(default_factory=_utcnow)
    last_activity: datetime = field(default_factory=_utcnow)
    inbound: "asyncio.Queue[Any]" = field(default_factory=asyncio.Queue)
    worker: Optional["asyncio.Task[None]"] = None

    def touch(self) -> None:
        self.last_activity = _utcnow()

    def idle_seconds(self, now: Optional[datetime] = None) -> float:
        return ((now or _utcnow()) - self.last_activity).total_seconds()


class SessionRegistry:
    """Table of open sessions keyed by session id."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def register(self, session: Session) -> None:
        """
        Add an OPEN session.

        Raises:
            ValueError: If the id is already registered
        """
        if session.id in self._sessions:
            raise ValueError(f"Session already registered: {session.id}")
        session.state = SessionState.OPEN
        self._sessions[session.id] = session
        logger.debug(f"Registered session {session.id} ({len(self._sessions)} open)")

    def get(self, session_id: str) -> Session:
        """
        Raises:
            SessionNotFoundError: If no open session has this id
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def resolve(self, session_id: Optional[str] = None) -> Session:
        """
        Find the session an inbound message belongs to.

        Without an id the message goes to the only open session; with zero
        or several open sessions the caller must name one.

        Raises:
            SessionNotFoundError: If ``session_id`` is unknown
            SessionRequiredError: If no id was given and it cannot be inferred
        """
        if session_id:
            return self.get(session_id)
        if len(self._sessions) == 1:
            return next(iter(self._sessions.values()))
        raise SessionRequiredError(len(self._sessions))

    def remove(self, session_id: str) -> Optional[Session]:
        """Remove and mark CLOSED. Returns the session, or None if it was already gone."""
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.state = SessionState.CLOSED
            logger.debug(f"Removed session {session_id} ({len(self._sessions)} open)")
        return session

    def sessions(self) -> List[Session]:
        return list(self._sessions.values())

    def clear(self) -> List[Session]:
        """Remove every session (shutdown). Returns what was removed."""
        removed = list(self._sessions.values())
        for session in removed:
            session.state = SessionState.CLOSED
        self._sessions.clear()
        return removed
