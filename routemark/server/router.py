"""
HTTP dispatch table.

Two-tier matching:
1. Static routes: O(1) dict lookup per method
2. Parameterized routes (``:name`` segments, ``*`` splats): compiled regex,
   tried in registration order

Registering the same (method, path) twice replaces the first entry; the
router logs the overwrite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple
import logging
import re

from ..faults.exceptions import RoutemarkError

logger = logging.getLogger("routemark.server.router")

_EMPTY_PARAMS: Dict[str, str] = {}


@dataclass
class HttpRoute:
    """A single dispatch entry. Owned by the router once added."""
    method: str
    path: str
    handler: Callable[..., Any]
    engine: Any = None
    regex: Optional[Pattern[str]] = None
    param_names: List[str] = field(default_factory=list)
    splat_count: int = 0

    @property
    def is_static(self) -> bool:
        return self.regex is None


@dataclass
class RouteMatch:
    route: HttpRoute
    params: Dict[str, str]
    splat: List[str]


def normalize_path(path: str) -> str:
    if not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/") or "/"


def compile_path(path: str) -> Tuple[Optional[Pattern[str]], List[str], int]:
    """
    Compile ``/users/:id/*`` into a regex; static paths return None.

    Parameters become positional groups, so any segment text after ``:``
    is a usable name. A name repeated in one path keeps its last value.

    Raises:
        RoutemarkError: A ``:`` segment has no name
    """
    segments = path.strip("/").split("/")
    if not any(s.startswith(":") or s == "*" for s in segments):
        return None, [], 0

    parts: List[str] = []
    names: List[str] = []
    splats = 0
    for segment in segments:
        if segment.startswith(":"):
            name = segment[1:]
            if not name:
                raise RoutemarkError(f"Unnamed parameter in route path '{path}'")
            parts.append(f"(?P<_param{len(names)}>[^/]+)")
            names.append(name)
        elif segment == "*":
            parts.append(f"(?P<_splat{splats}>.*?)")
            splats += 1
        else:
            parts.append(re.escape(segment))
    return re.compile("^/" + "/".join(parts) + "/?$"), names, splats


class HttpRouter:
    """(method, path) -> handler table consulted for every request."""

    def __init__(self):
        self._static: Dict[str, Dict[str, HttpRoute]] = {}
        self._dynamic: Dict[str, List[HttpRoute]] = {}

    def add(self, method: str, path: str, handler: Callable[..., Any], engine: Any = None) -> HttpRoute:
        method = method.upper()
        path = normalize_path(path)
        regex, names, splats = compile_path(path)
        route = HttpRoute(
            method=method,
            path=path,
            handler=handler,
            engine=engine,
            regex=regex,
            param_names=names,
            splat_count=splats,
        )

        if route.is_static:
            table = self._static.setdefault(method, {})
            if path in table:
                logger.warning("Route %s %s registered twice, last registration wins", method, path)
            table[path] = route
            return route

        routes = self._dynamic.setdefault(method, [])
        for index, existing in enumerate(routes):
            if existing.path == path:
                logger.warning("Route %s %s registered twice, last registration wins", method, path)
                routes[index] = route
                return route
        routes.append(route)
        return route

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        method = method.upper()
        norm_path = normalize_path(path)

        # Tier 1: static lookup
        hit = self._static.get(method, {}).get(norm_path)
        if hit is not None:
            return RouteMatch(route=hit, params=_EMPTY_PARAMS, splat=[])

        # Tier 2: regex
        for route in self._dynamic.get(method, []):
            m = route.regex.match(norm_path)
            if m is None:
                continue
            params = {name: m.group(f"_param{i}") for i, name in enumerate(route.param_names)}
            splat = [m.group(f"_splat{i}") for i in range(route.splat_count)]
            return RouteMatch(route=route, params=params, splat=splat)

        return None

    def routes(self) -> List[HttpRoute]:
        """All dispatch entries, static first, in registration order."""
        result: List[HttpRoute] = []
        for table in self._static.values():
            result.extend(table.values())
        for routes in self._dynamic.values():
            result.extend(routes)
        return result

    def __len__(self) -> int:
        return len(self.routes())
