"""
Serving layer: ASGI router, worker pool and websocket transport.
"""

from .pool import WorkerPool
from .request import Request
from .response import Response
from .router import HttpRoute, HttpRouter, RouteMatch
from .service import DispatchState, Service
from .websocket import WebSocketSession, is_websocket_endpoint, websocket_endpoint

__all__ = [
    "DispatchState",
    "HttpRoute",
    "HttpRouter",
    "Request",
    "Response",
    "RouteMatch",
    "Service",
    "WebSocketSession",
    "WorkerPool",
    "is_websocket_endpoint",
    "websocket_endpoint",
]
