"""
WebSocket handler capability.

A websocket endpoint must provide four coroutine callbacks:

- ``on_connect(session)``
- ``on_close(session, status_code, reason)``
- ``on_message(session, message)``
- ``broadcast_message(message)``

``WebSocketHandler`` implements them with session bookkeeping so a subclass
only overrides what it needs.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable
import asyncio
import logging
import threading

from ..server.websocket import WebSocketSession

logger = logging.getLogger("routemark.sockets.handler")


@runtime_checkable
class WebSocketCapable(Protocol):

    async def on_connect(self, session: WebSocketSession) -> None:
        ...

    async def on_close(self, session: WebSocketSession, status_code: int, reason: str) -> None:
        ...

    async def on_message(self, session: WebSocketSession, message: str) -> None:
        ...

    async def broadcast_message(self, message: str) -> None:
        ...


def is_valid_websocket_class(cls: type) -> bool:
    """The class implements every websocket handler callback."""
    if not isinstance(cls, type):
        return False
    if not issubclass(cls, WebSocketCapable):
        logger.warning(
            "Couldn't register websocket %s, missing handler capability "
            "(on_connect, on_close, on_message, broadcast_message)",
            cls.__name__,
        )
        return False
    return True


class WebSocketHandler:
    """
    Base websocket endpoint tracking its open sessions.

    One instance serves every connection to its path, so per-connection
    state belongs in ``session.attributes``, not on ``self``.

    Example:
        @websocket_endpoint
        @Socket("/chat")
        class ChatSocket(WebSocketHandler):
            async def on_message(self, session, message):
                await self.broadcast_message(message)
    """

    def __init__(self):
        self._sessions: List[WebSocketSession] = []
        self._sessions_lock = threading.Lock()

    @property
    def sessions(self) -> List[WebSocketSession]:
        with self._sessions_lock:
            return list(self._sessions)

    async def on_connect(self, session: WebSocketSession) -> None:
        with self._sessions_lock:
            self._sessions.append(session)
        logger.debug("%s: session %s connected", type(self).__name__, session.id)

    async def on_close(self, session: WebSocketSession, status_code: int, reason: str) -> None:
        with self._sessions_lock:
            if session in self._sessions:
                self._sessions.remove(session)
        logger.debug(
            "%s: session %s closed (%s %s)",
            type(self).__name__, session.id, status_code, reason,
        )

    async def on_message(self, session: WebSocketSession, message: str) -> None:
        pass

    async def broadcast_message(self, message: str) -> None:
        """Send ``message`` to every open session."""
        sessions = [s for s in self.sessions if s.is_open]
        if not sessions:
            return
        results = await asyncio.gather(
            *(session.send(message) for session in sessions),
            return_exceptions=True,
        )
        for session, result in zip(sessions, results):
            if isinstance(result, Exception):
                logger.warning("Broadcast to session %s failed: %s", session.id, result)
