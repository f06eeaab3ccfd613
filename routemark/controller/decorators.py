"""
Controller, Route and Filter decorators.

Attach metadata without import-time side effects; registration happens
later, when the packages are scanned.

Example:
    @Controller("/users/")
    class UsersController:

        @GET("/list", template="users/list.html")
        def list(self, request: Request, response: Response) -> dict:
            return {"users": USERS}

        @Route("/", method=HttpMethod.POST, template="users/created.html")
        def create(self, request: Request, response: Response) -> dict:
            ...
"""

from typing import Any, Callable, Optional, TypeVar, Union

from .metadata import (
    CONTROLLER_ATTR,
    FILTER_ATTR,
    ROUTE_ATTR,
    ControllerMetadata,
    FilterMetadata,
    FilterPhase,
    HttpMethod,
    RouteMetadata,
)

F = TypeVar('F', bound=Callable[..., Any])
C = TypeVar('C', bound=type)


class Controller:
    """
    Controller class decorator.

    Declares the base path every route of the class is mounted under.
    """

    def __init__(self, path: str = ""):
        self.path = path

    def __call__(self, cls: C) -> C:
        setattr(cls, CONTROLLER_ATTR, ControllerMetadata(base_path=self.path))
        return cls


class Route:
    """
    Route method decorator.

    Args:
        path: Path relative to the controller base (``:name`` and ``*``
              segments are matched by the router)
        method: HTTP verb, ``HttpMethod`` or its name
        template: Template the returned mapping renders into
    """

    http_method: Optional[HttpMethod] = None

    def __init__(
        self,
        path: str,
        *,
        method: Union[HttpMethod, str, None] = None,
        template: Optional[str] = None,
    ):
        self.path = path
        if method is not None:
            self.http_method = HttpMethod.parse(method)
        elif self.http_method is None:
            self.http_method = HttpMethod.GET
        self.template = template

    def __call__(self, func: F) -> F:
        # Functions may carry several routes; stored in declaration order.
        routes = list(getattr(func, ROUTE_ATTR, ()))
        routes.append(RouteMetadata(
            path=self.path,
            http_method=self.http_method,
            template_name=self.template,
        ))
        setattr(func, ROUTE_ATTR, tuple(routes))
        return func


class GET(Route):
    """GET request decorator."""
    http_method = HttpMethod.GET


class POST(Route):
    """POST request decorator."""
    http_method = HttpMethod.POST


class PUT(Route):
    """PUT request decorator."""
    http_method = HttpMethod.PUT


class DELETE(Route):
    """DELETE request decorator."""
    http_method = HttpMethod.DELETE


class OPTIONS(Route):
    """OPTIONS request decorator."""
    http_method = HttpMethod.OPTIONS


class Filter:
    """
    Filter method decorator.

    Filters are global: they run around every request, in discovery order
    within their phase.

    Example:
        class Headers:
            @Filter(when=FilterPhase.AFTER)
            def add_server_header(self, request: Request, response: Response):
                response.header("server", "routemark")
    """

    phase: FilterPhase = FilterPhase.BEFORE

    def __init__(self, when: Union[FilterPhase, str, None] = None):
        if when is not None:
            self.phase = FilterPhase.parse(when)

    def __call__(self, func: F) -> F:
        setattr(func, FILTER_ATTR, FilterMetadata(phase=self.phase))
        return func


class Before(Filter):
    """Before-filter decorator."""
    phase = FilterPhase.BEFORE


class After(Filter):
    """After-filter decorator."""
    phase = FilterPhase.AFTER
