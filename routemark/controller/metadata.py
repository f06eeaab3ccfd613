"""
Routing metadata.

Plain records attached to classes and functions by the decorators and read
once, at registration time. Nothing here executes handler code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: Any) -> "HttpMethod":
        if isinstance(value, cls):
            return value
        return cls(str(value).upper())


class FilterPhase(str, Enum):
    BEFORE = "before"
    AFTER = "after"

    @classmethod
    def parse(cls, value: Any) -> "FilterPhase":
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


# Attribute names the decorators write to
CONTROLLER_ATTR = "__controller_metadata__"
ROUTE_ATTR = "__route_metadata__"
FILTER_ATTR = "__filter_metadata__"
SOCKET_ATTR = "__socket_metadata__"


def join_path(base_path: str, path: str) -> str:
    """
    Concatenate a controller base path and a route path.

    The base loses its trailing slash; the route path is used as declared,
    so ``("/users/", "/list")`` gives ``"/users/list"``.
    """
    base = (base_path or "").rstrip("/")
    if path and not path.startswith("/"):
        path = "/" + path
    return (base + (path or "")) or "/"


@dataclass(frozen=True)
class ControllerMetadata:
    """Type-level: the class is a controller mounted at ``base_path``."""
    base_path: str = ""

    @property
    def normalized_base(self) -> str:
        return self.base_path.rstrip("/")


@dataclass(frozen=True)
class RouteMetadata:
    """
    Method-level: the method handles ``http_method`` requests on ``path``.

    Attributes:
        path: Route path relative to the controller base
        http_method: HTTP verb
        template_name: Template the returned model renders into
    """
    path: str
    http_method: HttpMethod = HttpMethod.GET
    template_name: Optional[str] = None

    def full_path(self, base_path: str) -> str:
        return join_path(base_path, self.path)


@dataclass(frozen=True)
class FilterMetadata:
    """Method-level: the method is a global hook for ``phase``."""
    phase: FilterPhase = FilterPhase.BEFORE


@dataclass(frozen=True)
class WebSocketMetadata:
    """Type-level: the class is a websocket endpoint at ``path``."""
    path: str
