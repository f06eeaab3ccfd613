"""
Routemark Testing - ASGI scope and receive factories.
"""

from __future__ import annotations

from typing import List, Optional


def make_test_scope(
    method: str = "GET",
    path: str = "/",
    query_string: str = "",
    headers: Optional[List[tuple]] = None,
    scheme: str = "http",
    scope_type: str = "http",
) -> dict:
    """
    Build a minimal ASGI scope for testing.

    Args:
        method: HTTP method (ignored for websocket scopes).
        path: Request path.
        query_string: Raw query string (without ``?``).
        headers: List of ``(name, value)`` tuples (strings or bytes).
        scheme: URL scheme.
        scope_type: ``http`` or ``websocket``.
    """
    raw_headers: list[tuple[bytes, bytes]] = []
    if headers:
        for name, value in headers:
            raw_headers.append((
                name.encode("latin-1") if isinstance(name, str) else name,
                value.encode("latin-1") if isinstance(value, str) else value,
            ))

    scope = {
        "type": scope_type,
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": query_string.encode("utf-8"),
        "headers": raw_headers,
        "scheme": scheme if scope_type == "http" else ("wss" if scheme == "https" else "ws"),
        "server": ("127.0.0.1", 8000),
        "client": ("127.0.0.1", 12345),
        "root_path": "",
    }
    if scope_type == "http":
        scope["method"] = method.upper()
    return scope


def make_test_receive(body: bytes = b""):
    """ASGI receive callable delivering ``body`` in one message."""
    messages = [{"type": "http.request", "body": body, "more_body": False}]
    idx = 0

    async def receive():
        nonlocal idx
        if idx < len(messages):
            msg = messages[idx]
            idx += 1
            return msg
        return {"type": "http.disconnect"}

    return receive
