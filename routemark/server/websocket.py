"""
WebSocket transport primitives.

- ``websocket_endpoint``: transport-level marker declaring a class usable as
  a websocket endpoint
- ``WebSocketSession``: one live connection as seen by handler callbacks
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Mapping, Optional
import logging
import uuid

logger = logging.getLogger("routemark.server.websocket")

ENDPOINT_MARKER = "__websocket_endpoint__"


def websocket_endpoint(cls: type) -> type:
    """Mark a class as a websocket endpoint for the transport."""
    setattr(cls, ENDPOINT_MARKER, True)
    return cls


def is_websocket_endpoint(cls: type) -> bool:
    # Read from the class dict so subclasses must opt in themselves.
    return bool(vars(cls).get(ENDPOINT_MARKER, False))


class WebSocketSession:
    """
    A connected websocket client.

    Wraps the ASGI ``send`` callable; messages sent after the session closed
    are dropped with a debug log.
    """

    def __init__(
        self,
        send: Callable[[Dict[str, Any]], Awaitable[None]],
        scope: Optional[Mapping[str, Any]] = None,
    ):
        self._send = send
        self.scope = scope or {}
        self.id = uuid.uuid4().hex
        self.path: str = self.scope.get("path", "/")
        self.is_open = True
        self.attributes: Dict[str, Any] = {}

    async def send(self, message: str) -> None:
        if not self.is_open:
            logger.debug("Dropping message for closed session %s", self.id)
            return
        await self._send({"type": "websocket.send", "text": message})

    async def send_bytes(self, data: bytes) -> None:
        if not self.is_open:
            logger.debug("Dropping message for closed session %s", self.id)
            return
        await self._send({"type": "websocket.send", "bytes": data})

    async def close(self, code: int = 1000, reason: str = "") -> None:
        if not self.is_open:
            return
        self.is_open = False
        await self._send({"type": "websocket.close", "code": code, "reason": reason})

    def mark_closed(self) -> None:
        self.is_open = False

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<WebSocketSession {self.id[:8]} {self.path} {state}>"
