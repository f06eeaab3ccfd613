"""
Routemark Controller System

Declarative controllers, routes and filters.

Key Features:
- Metadata attached by decorators, no import-time side effects
- Signature validation before anything is registered
- One shared instance per declaring class
- Per-route template engines

Example:
    from routemark import Controller, GET, Before, Request, Response

    @Controller("/users/")
    class UsersController:

        @GET("/list", template="users.html")
        def list(self, request: Request, response: Response) -> dict:
            return {"users": ["ada", "linus"]}

    class Timing:

        @Before()
        def stamp(self, request: Request, response: Response):
            request.attribute("started", time.monotonic())
"""

from .decorators import (
    Controller,
    Route,
    GET, POST, PUT, DELETE, OPTIONS,
    Filter, Before, After,
)
from .metadata import (
    ControllerMetadata,
    RouteMetadata,
    FilterMetadata,
    WebSocketMetadata,
    HttpMethod,
    FilterPhase,
    join_path,
)
from .factory import InstanceFactory
from .validation import HandlerShape, is_valid_handler
from .registrar import FilterRegistrar, Registrar, RouteRegistrar

__all__ = [
    # Decorators
    "Controller",
    "Route",
    "GET", "POST", "PUT", "DELETE", "OPTIONS",
    "Filter", "Before", "After",

    # Metadata
    "ControllerMetadata",
    "RouteMetadata",
    "FilterMetadata",
    "WebSocketMetadata",
    "HttpMethod",
    "FilterPhase",
    "join_path",

    # Validation
    "HandlerShape",
    "is_valid_handler",

    # Registration
    "InstanceFactory",
    "Registrar",
    "RouteRegistrar",
    "FilterRegistrar",
]
