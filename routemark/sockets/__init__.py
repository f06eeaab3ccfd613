"""
Routemark WebSockets

Declarative websocket endpoints:
- @Socket(path): the path the endpoint is bound to
- @websocket_endpoint: transport marker (from routemark.server)
- WebSocketHandler: base class implementing the handler capability
- WebSocketRegistry: lookup of live handler instances

Example:
    from routemark.sockets import Socket, WebSocketHandler
    from routemark.server import websocket_endpoint

    @websocket_endpoint
    @Socket("/echo")
    class EchoSocket(WebSocketHandler):
        async def on_message(self, session, message):
            await session.send(message)
"""

from .decorators import Socket
from .handler import WebSocketCapable, WebSocketHandler, is_valid_websocket_class
from .registry import WebSocketRegistry
from .registrar import WebSocketRegistrar

__all__ = [
    "Socket",
    "WebSocketCapable",
    "WebSocketHandler",
    "WebSocketRegistrar",
    "WebSocketRegistry",
    "is_valid_websocket_class",
]
