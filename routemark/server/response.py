"""
Response - write access to the outgoing status, headers and body.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"


class Response:
    """
    Mutable outgoing response.

    Handlers and filters mutate it in place; the service serializes it after
    the after-filters have run.
    """

    __slots__ = ("status", "body", "headers", "content_type")

    def __init__(self, status: int = 200, body: Optional[str] = None):
        self.status = status
        self.body = body
        self.headers: Dict[str, str] = {}
        self.content_type: Optional[str] = None

    def header(self, name: str, value: str) -> None:
        self.headers[name.lower()] = value

    def type(self, content_type: str) -> None:
        self.content_type = content_type

    def redirect(self, location: str, status: int = 302) -> None:
        self.status = status
        self.header("location", location)
        if self.body is None:
            self.body = ""

    def raw_headers(self, body: bytes) -> List[Tuple[bytes, bytes]]:
        headers = dict(self.headers)
        headers["content-type"] = self.content_type or headers.get("content-type", DEFAULT_CONTENT_TYPE)
        headers["content-length"] = str(len(body))
        return [(k.encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]

    def encoded_body(self) -> bytes:
        if self.body is None:
            return b""
        return self.body.encode("utf-8")

    def __repr__(self) -> str:
        return f"<Response [{self.status}]>"
