"""
WebSocket registry - lookup of live websocket handler instances.

Owned by the ``Setup`` that registered the handlers and handed to whatever
needs to reach them (route handlers pushing updates, the transport). A
single lock guards the list; it is held for list mutation and copying only,
never while a handler runs.
"""

from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar
import logging
import threading

logger = logging.getLogger("routemark.sockets.registry")

H = TypeVar("H")


class WebSocketRegistry:
    """
    Insertion-ordered list of websocket handler instances.

    One entry per successfully instantiated handler class; handlers sharing
    a path are not de-duplicated.
    """

    def __init__(self):
        self._handlers: List[Any] = []
        self._lock = threading.Lock()

    def add_handler(self, handler: Any) -> None:
        with self._lock:
            self._handlers.append(handler)
        logger.debug("Registered websocket handler %s", type(handler).__name__)

    def get_handlers(self) -> List[Any]:
        """Snapshot of the registered handlers."""
        with self._lock:
            return list(self._handlers)

    def get_handler(self, handler_type: Type[H]) -> Optional[H]:
        """Handler whose class is exactly ``handler_type``."""
        with self._lock:
            for handler in self._handlers:
                if type(handler) is handler_type:
                    return handler
        return None

    async def broadcast(self, handler_type: type, message: str) -> bool:
        """Push ``message`` through one handler; False if none is registered."""
        handler = self.get_handler(handler_type)
        if handler is None:
            logger.warning("No websocket handler registered for %s", handler_type.__name__)
            return False
        await handler.broadcast_message(message)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def __contains__(self, handler: Any) -> bool:
        with self._lock:
            return handler in self._handlers
