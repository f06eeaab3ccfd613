"""
Template engine contract and the bundled engines.

The routing core only needs ``render(model, template_name) -> str`` from an
engine and a zero-argument factory to build one. Every route (and every error
render) gets its own engine instance; if the factory raises, the
``FallbackTemplateEngine`` takes over and serializes the raw model.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
import json
import logging

from jinja2 import Environment, FileSystemLoader, select_autoescape
from jinja2.sandbox import SandboxedEnvironment

logger = logging.getLogger("routemark.templates")

EngineFactory = Callable[[], "TemplateEngine"]


@dataclass
class RenderModel:
    """A handler's model paired with the template it renders into."""
    model: Mapping[str, Any] = field(default_factory=dict)
    template_name: Optional[str] = None


class TemplateEngine(ABC):
    """Renders a model into a named template."""

    @abstractmethod
    def render(self, model: Mapping[str, Any], template_name: Optional[str]) -> str:
        ...

    def render_model(self, render_model: RenderModel) -> str:
        return self.render(render_model.model, render_model.template_name)


class FallbackTemplateEngine(TemplateEngine):
    """
    Degraded renderer used when the configured engine cannot be built.

    Serializes the model as JSON; values JSON cannot encode are stringified.
    """

    content_type = "application/json"

    def render(self, model: Mapping[str, Any], template_name: Optional[str] = None) -> str:
        logger.error(
            "Can't render to the registered template engine, "
            "serializing model for template %s instead",
            template_name,
        )
        return json.dumps(dict(model or {}), default=str)


class Jinja2TemplateEngine(TemplateEngine):
    """
    Jinja2-backed engine, constructible without arguments.

    Subclass and set ``search_path`` to point at another template directory:

        class SiteTemplates(Jinja2TemplateEngine):
            search_path = "site/templates"

    Args:
        search_path: Template directory or list of directories
        sandbox: Render inside Jinja2's sandboxed environment
        autoescape: Enable HTML autoescaping
        globals: Extra template globals
        filters: Extra template filters
    """

    search_path: Union[str, List[str]] = "templates"

    def __init__(
        self,
        search_path: Optional[Union[str, List[str]]] = None,
        *,
        sandbox: bool = True,
        autoescape: bool = True,
        globals: Optional[Dict[str, Any]] = None,
        filters: Optional[Dict[str, Callable]] = None,
    ):
        paths = search_path if search_path is not None else self.search_path
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self.search_paths = [str(p) for p in paths]

        env_class = SandboxedEnvironment if sandbox else Environment
        self.env = env_class(
            loader=FileSystemLoader(self.search_paths),
            autoescape=select_autoescape(
                enabled_extensions=["html", "htm", "xml"],
                default_for_string=True,
            ) if autoescape else False,
        )
        if globals:
            self.env.globals.update(globals)
        if filters:
            self.env.filters.update(filters)

    def render(self, model: Mapping[str, Any], template_name: Optional[str]) -> str:
        if not template_name:
            raise ValueError("Jinja2TemplateEngine requires a template name")
        template = self.env.get_template(template_name)
        return template.render(**dict(model or {}))


def build_engine(factory: Optional[EngineFactory]) -> TemplateEngine:
    """
    Build a fresh engine from a zero-argument factory.

    Never raises: a missing factory, a failing constructor or an object
    without ``render`` all yield a FallbackTemplateEngine.
    """
    if factory is None:
        return FallbackTemplateEngine()

    try:
        engine = factory()
    except Exception:
        logger.error(
            "Couldn't instantiate template engine %s",
            getattr(factory, "__name__", repr(factory)),
            exc_info=True,
        )
        return FallbackTemplateEngine()

    if not callable(getattr(engine, "render", None)):
        logger.error(
            "Template engine factory %r produced %r which has no render()",
            factory, engine,
        )
        return FallbackTemplateEngine()

    return engine
