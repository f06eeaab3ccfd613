"""
Error & fallback dispatcher.

Renders the error pages for failed, unmatched and crashed requests through
the main template. A fresh template engine is built for every render, and a
broken engine (unconstructible, or failing while rendering) degrades to the
JSON fallback so an error page can always be produced.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING
import logging
import traceback

from ..templates.engine import EngineFactory, FallbackTemplateEngine, build_engine
from .outcome import Failure, FailureKind, INTERNAL_ERROR_MESSAGE

if TYPE_CHECKING:
    from ..server.request import Request
    from ..server.response import Response

logger = logging.getLogger("routemark.faults.dispatcher")

NOT_FOUND_MESSAGE = "The page you were looking for was not found"


def format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


class ErrorDispatcher:
    """
    Maps failures to rendered error payloads.

    Args:
        engine_factory: Zero-argument template engine factory
        main_template: Template every error page renders into
        expose_stack: Include ``errorStack`` in error models
    """

    def __init__(
        self,
        engine_factory: Optional[EngineFactory],
        main_template: Optional[str],
        *,
        expose_stack: bool = True,
    ):
        self.engine_factory = engine_factory
        self.main_template = main_template
        self.expose_stack = expose_stack

    def error_model(
        self,
        message: str,
        status_code: int,
        cause: Optional[BaseException] = None,
    ) -> Dict[str, Any]:
        model: Dict[str, Any] = {
            "error": True,
            "errorMsg": message,
            "code": str(status_code),
        }
        if self.expose_stack and cause is not None:
            model["errorStack"] = format_stack(cause)
        return model

    def render(self, model: Dict[str, Any], response: Optional["Response"] = None) -> str:
        """
        Render ``model`` into the main template.

        When ``response`` is given and the engine that produced the body
        declares a ``content_type``, the response takes it.
        """
        engine = build_engine(self.engine_factory)
        try:
            body = engine.render(model, self.main_template)
        except Exception:
            if isinstance(engine, FallbackTemplateEngine):
                raise
            logger.error("Error page failed to render with %s", type(engine).__name__, exc_info=True)
            engine = FallbackTemplateEngine()
            body = engine.render(model, self.main_template)
        content_type = getattr(engine, "content_type", None)
        if response is not None and content_type:
            response.content_type = content_type
        return body

    # -- Service hooks --------------------------------------------------

    def handle_failure(self, failure: Failure, request: "Request", response: "Response") -> None:
        """Render a handler or filter failure with its carried status code."""
        if failure.kind is FailureKind.DOMAIN:
            logger.debug(
                "Route error %d on %s %s: %s",
                failure.status_code, request.method, request.path, failure.message,
            )
        model = self.error_model(failure.message, failure.status_code, failure.cause)
        response.status = failure.status_code
        response.body = self.render(model, response)

    def not_found(self, request: "Request", response: "Response") -> str:
        response.status = 404
        return self.render(self.error_model(NOT_FOUND_MESSAGE, 404), response)

    def internal_error(self, request: "Request", response: "Response") -> str:
        response.status = 500
        return self.render(self.error_model(INTERNAL_ERROR_MESSAGE, 500), response)
