"""
Template contract for rendered routes.

Example:
    from routemark.templates import Jinja2TemplateEngine

    class SiteTemplates(Jinja2TemplateEngine):
        search_path = "site/templates"

    setup.init("app.controllers", "app.filters", "app.sockets",
               8, 2, 30000, SiteTemplates, "main.html")
"""

from .engine import (
    EngineFactory,
    FallbackTemplateEngine,
    Jinja2TemplateEngine,
    RenderModel,
    TemplateEngine,
    build_engine,
)

__all__ = [
    "EngineFactory",
    "FallbackTemplateEngine",
    "Jinja2TemplateEngine",
    "RenderModel",
    "TemplateEngine",
    "build_engine",
]
