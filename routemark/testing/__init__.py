"""
Routemark Testing - in-process ASGI client for HTTP and websockets.
"""

from .client import (
    TestClient,
    TestResponse,
    WebSocketClosed,
    WebSocketRejected,
    WebSocketTestSession,
)
from .utils import make_test_receive, make_test_scope

__all__ = [
    "TestClient",
    "TestResponse",
    "WebSocketClosed",
    "WebSocketRejected",
    "WebSocketTestSession",
    "make_test_receive",
    "make_test_scope",
]
