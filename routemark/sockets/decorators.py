"""
Socket decorator - declares the path a websocket endpoint is bound to.

The transport additionally requires ``@websocket_endpoint`` on the class;
a class carrying only one of the two markers is skipped at registration.

Example:
    @websocket_endpoint
    @Socket("/chat")
    class ChatSocket(WebSocketHandler):
        ...
"""

from typing import TypeVar

from ..controller.metadata import SOCKET_ATTR, WebSocketMetadata

C = TypeVar('C', bound=type)


class Socket:
    """WebSocket endpoint class decorator."""

    def __init__(self, path: str):
        self.path = path

    def __call__(self, cls: C) -> C:
        setattr(cls, SOCKET_ATTR, WebSocketMetadata(path=self.path))
        return cls
