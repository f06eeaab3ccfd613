"""
Request - read access to an incoming HTTP request.

Built once per request from the ASGI scope and the fully read body. Path
parameters are filled in by the router after matching.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import parse_qs, unquote
import json as stdlib_json

_MISSING = object()


class Request:
    """
    Incoming HTTP request.

    Attributes:
        method: Upper-case HTTP method
        path: Decoded request path
        headers: Lower-cased header names mapped to values
        body: Raw body bytes
        params: Named path parameters (``:id`` segments)
        splat: Values captured by ``*`` segments
        attributes: Request-scoped state shared between filters and handlers
    """

    __slots__ = (
        "scope", "method", "path", "query_string", "headers", "body",
        "params", "splat", "attributes", "_query_cache",
    )

    def __init__(self, scope: Mapping[str, Any], body: bytes = b""):
        self.scope = scope
        self.method: str = scope.get("method", "GET").upper()
        self.path: str = unquote(scope.get("path", "/")) or "/"

        raw_qs = scope.get("query_string", b"")
        self.query_string: str = raw_qs.decode("latin-1") if isinstance(raw_qs, bytes) else raw_qs

        headers: Dict[str, str] = {}
        for name, value in scope.get("headers", []):
            key = name.decode("latin-1").lower()
            val = value.decode("latin-1")
            headers[key] = f"{headers[key]}, {val}" if key in headers else val
        self.headers = headers

        self.body = body
        self.params: Dict[str, str] = {}
        self.splat: List[str] = []
        self.attributes: Dict[str, Any] = {}
        self._query_cache: Optional[Dict[str, List[str]]] = None

    # -- Query ------------------------------------------------------------

    @property
    def query_params(self) -> Dict[str, List[str]]:
        if self._query_cache is None:
            self._query_cache = parse_qs(self.query_string, keep_blank_values=True)
        return self._query_cache

    def query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter."""
        values = self.query_params.get(name)
        return values[0] if values else default

    # -- Headers & body ---------------------------------------------------

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def json(self) -> Any:
        return stdlib_json.loads(self.body or b"null")

    # -- Request-scoped state --------------------------------------------

    def attribute(self, name: str, value: Any = _MISSING) -> Any:
        """Get (one argument) or set (two arguments) a request attribute."""
        if value is _MISSING:
            return self.attributes.get(name)
        self.attributes[name] = value
        return value

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.path}>"
