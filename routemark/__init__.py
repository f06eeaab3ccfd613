"""
Routemark - declarative routing for an ASGI service

Complete integration of:
- Controllers: class-level base paths and per-method routes
- Filters: global before/after hooks
- Sockets: websocket endpoints with a shared handler registry
- Faults: route exceptions rendered as error pages
- Templates: per-route template engines with a JSON fallback
- Setup: one-time package scanning and registration
"""

__version__ = "0.1.0"

# ============================================================================
# Declarations
# ============================================================================

from .controller import (
    Controller,
    Route,
    GET, POST, PUT, DELETE, OPTIONS,
    Filter, Before, After,
    HttpMethod,
    FilterPhase,
)
from .sockets import Socket, WebSocketHandler, WebSocketRegistry

# ============================================================================
# Serving
# ============================================================================

from .server import Request, Response, Service, WebSocketSession, websocket_endpoint

# ============================================================================
# Faults & Templates
# ============================================================================

from .faults import RouteException, RoutemarkError, DiscoveryError, ConfigError
from .templates import TemplateEngine, Jinja2TemplateEngine, FallbackTemplateEngine

# ============================================================================
# Setup & Config
# ============================================================================

from .config import RoutemarkConfig, ConfigLoader
from .bootstrap import Setup, default_setup, init, init_package

__all__ = [
    "__version__",
    # Declarations
    "Controller", "Route", "GET", "POST", "PUT", "DELETE", "OPTIONS",
    "Filter", "Before", "After", "HttpMethod", "FilterPhase",
    "Socket", "WebSocketHandler", "WebSocketRegistry",
    # Serving
    "Request", "Response", "Service", "WebSocketSession", "websocket_endpoint",
    # Faults & Templates
    "RouteException", "RoutemarkError", "DiscoveryError", "ConfigError",
    "TemplateEngine", "Jinja2TemplateEngine", "FallbackTemplateEngine",
    # Setup & Config
    "RoutemarkConfig", "ConfigLoader",
    "Setup", "default_setup", "init", "init_package",
]
