"""
Service - the HTTP router and websocket transport routemark registers into.

A registration facade (``get``/``post``/``before``/``websocket``...) over an
ASGI application. It owns the dispatch table once entries are installed and
never inspects handler metadata; registrars feed it plain callables.

Request flow:
    before filters -> route handler (or not-found) -> render -> after filters

Handlers and filters may be plain functions, which run on the worker pool,
or coroutine functions, which run on the event loop. They return either an
``Outcome`` (``Success``/``Failure``) or a plain value.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple
import inspect
import logging

from ..faults.outcome import Failure, Success, failure_from_exception, to_outcome
from ..templates.engine import RenderModel
from .pool import WorkerPool
from .request import Request
from .response import Response
from .router import HttpRouter, normalize_path
from .websocket import WebSocketSession

logger = logging.getLogger("routemark.server")

Handler = Callable[[Request, Response], Any]
FailureHandler = Callable[[Failure, Request, Response], Any]
PageRenderer = Callable[[Request, Response], Any]


class DispatchState(str, Enum):
    """Terminal state of one request."""
    RENDERED = "rendered"
    ERROR_RENDERED = "error_rendered"
    NOT_FOUND_RENDERED = "not_found_rendered"


class Service:
    """
    ASGI application holding routes, filters and websocket endpoints.

    Example:
        service = Service()
        service.get("/hello", lambda req, res: "hi")
        service.serve(port=4567)
    """

    def __init__(self, pool: Optional[WorkerPool] = None):
        self.router = HttpRouter()
        self.pool = pool or WorkerPool()
        self.before_filters: List[Handler] = []
        self.after_filters: List[Handler] = []
        self.websockets: Dict[str, Any] = {}
        self._not_found: Optional[PageRenderer] = None
        self._internal_error: Optional[PageRenderer] = None
        self._failure_handler: Optional[FailureHandler] = None
        self.initialized = False

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def thread_pool(self, max_threads: int, min_threads: int = 2, idle_timeout_ms: int = 30000) -> None:
        if self.initialized:
            raise RuntimeError("Thread pool must be configured before init()")
        self.pool = WorkerPool(max_threads, min_threads, idle_timeout_ms)

    def add_route(self, method: str, path: str, handler: Handler, engine: Any = None) -> None:
        self.router.add(method, path, handler, engine)

    def get(self, path: str, handler: Handler, engine: Any = None) -> None:
        self.add_route("GET", path, handler, engine)

    def post(self, path: str, handler: Handler, engine: Any = None) -> None:
        self.add_route("POST", path, handler, engine)

    def put(self, path: str, handler: Handler, engine: Any = None) -> None:
        self.add_route("PUT", path, handler, engine)

    def delete(self, path: str, handler: Handler, engine: Any = None) -> None:
        self.add_route("DELETE", path, handler, engine)

    def options(self, path: str, handler: Handler, engine: Any = None) -> None:
        self.add_route("OPTIONS", path, handler, engine)

    def before(self, handler: Handler) -> None:
        self.before_filters.append(handler)

    def after(self, handler: Handler) -> None:
        self.after_filters.append(handler)

    def not_found(self, renderer: PageRenderer) -> None:
        self._not_found = renderer

    def internal_server_error(self, renderer: PageRenderer) -> None:
        self._internal_error = renderer

    def on_failure(self, handler: FailureHandler) -> None:
        self._failure_handler = handler

    def websocket(self, path: str, handler: Any) -> None:
        path = normalize_path(path)
        if path in self.websockets:
            logger.warning("WebSocket path %s bound twice, last binding wins", path)
        self.websockets[path] = handler

    def websocket_handler(self, path: str) -> Optional[Any]:
        return self.websockets.get(normalize_path(path))

    def init(self) -> None:
        self.pool.start()
        self.initialized = True
        logger.debug(
            "Service ready: %d routes, %d before filters, %d after filters, %d websockets",
            len(self.router), len(self.before_filters), len(self.after_filters), len(self.websockets),
        )

    def routes(self) -> List[Tuple[str, str]]:
        return [(route.method, route.path) for route in self.router.routes()]

    # ------------------------------------------------------------------
    # Invocation helpers
    # ------------------------------------------------------------------

    async def _call(self, func: Callable[..., Any], *args: Any) -> Any:
        if inspect.iscoroutinefunction(func) or inspect.iscoroutinefunction(getattr(func, "__call__", None)):
            return await func(*args)
        result = await self.pool.run(func, *args)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _guarded(self, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return to_outcome(await self._call(func, *args))
        except Exception as exc:
            return failure_from_exception(exc)

    async def _render_failure(self, failure: Failure, request: Request, response: Response) -> None:
        if failure.cause is not None and failure.status_code >= 500:
            logger.error(
                "Request %s %s failed", request.method, request.path,
                exc_info=(type(failure.cause), failure.cause, failure.cause.__traceback__),
            )
        if self._failure_handler is None:
            response.status = failure.status_code
            response.body = failure.message
            return
        await self._call(self._failure_handler, failure, request, response)

    async def _render_success(self, value: Any, engine: Any) -> Optional[str]:
        if isinstance(value, RenderModel):
            if engine is None:
                raise RuntimeError(f"No template engine bound for template {value.template_name}")
            return await self._call(engine.render, value.model, value.template_name)
        if value is None or isinstance(value, str):
            return value
        if engine is not None:
            return await self._call(engine.render, value, None)
        return str(value)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _run_filters(self, filters: List[Handler], request: Request, response: Response, stop_on_failure: bool) -> bool:
        """Run filters in order; False when one of them failed."""
        ok = True
        for filter_func in filters:
            outcome = await self._guarded(filter_func, request, response)
            if isinstance(outcome, Failure):
                await self._render_failure(outcome, request, response)
                ok = False
                if stop_on_failure:
                    break
        return ok

    async def dispatch(self, request: Request, response: Response) -> DispatchState:
        """Run one request through filters, routing and rendering."""
        state = DispatchState.RENDERED
        try:
            if not await self._run_filters(self.before_filters, request, response, stop_on_failure=True):
                state = DispatchState.ERROR_RENDERED
            else:
                state = await self._dispatch_route(request, response)

            if not await self._run_filters(self.after_filters, request, response, stop_on_failure=False):
                state = DispatchState.ERROR_RENDERED
        except Exception:
            logger.exception("Unhandled error while serving %s %s", request.method, request.path)
            await self._render_internal_error(request, response)
            state = DispatchState.ERROR_RENDERED

        logger.debug("%s %s -> %s (%d)", request.method, request.path, state.value, response.status)
        return state

    async def _dispatch_route(self, request: Request, response: Response) -> DispatchState:
        match = self.router.match(request.method, request.path)
        if match is None:
            response.status = 404
            if self._not_found is None:
                response.body = "Not Found"
            else:
                response.body = await self._call(self._not_found, request, response)
            return DispatchState.NOT_FOUND_RENDERED

        request.params = dict(match.params)
        request.splat = list(match.splat)

        outcome = await self._guarded(match.route.handler, request, response)
        if isinstance(outcome, Success):
            try:
                response.body = await self._render_success(outcome.value, match.route.engine)
                if response.content_type is None:
                    response.content_type = getattr(match.route.engine, "content_type", None)
                return DispatchState.RENDERED
            except Exception as exc:
                outcome = failure_from_exception(exc)

        await self._render_failure(outcome, request, response)
        return DispatchState.ERROR_RENDERED

    async def _render_internal_error(self, request: Request, response: Response) -> None:
        response.status = 500
        try:
            if self._internal_error is None:
                response.body = "Internal Server Error"
            else:
                response.body = await self._call(self._internal_error, request, response)
        except Exception:
            logger.exception("Internal error page failed to render")
            response.body = "Internal Server Error"

    # ------------------------------------------------------------------
    # ASGI
    # ------------------------------------------------------------------

    async def __call__(self, scope: Dict[str, Any], receive: Callable, send: Callable) -> None:
        scope_type = scope["type"]
        if scope_type == "http":
            await self._handle_http(scope, receive, send)
        elif scope_type == "websocket":
            await self._handle_websocket(scope, receive, send)
        elif scope_type == "lifespan":
            await self._handle_lifespan(receive, send)

    async def _handle_http(self, scope: Dict[str, Any], receive: Callable, send: Callable) -> None:
        body = b""
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body += message.get("body", b"")
            more_body = message.get("more_body", False)

        request = Request(scope, body)
        response = Response()
        await self.dispatch(request, response)

        payload = response.encoded_body()
        await send({
            "type": "http.response.start",
            "status": response.status,
            "headers": response.raw_headers(payload),
        })
        await send({"type": "http.response.body", "body": payload})

    async def _handle_websocket(self, scope: Dict[str, Any], receive: Callable, send: Callable) -> None:
        message = await receive()
        if message["type"] != "websocket.connect":
            return

        handler = self.websocket_handler(scope.get("path", "/"))
        if handler is None:
            logger.debug("No websocket endpoint at %s", scope.get("path"))
            await send({"type": "websocket.close", "code": 1003})
            return

        await send({"type": "websocket.accept"})
        session = WebSocketSession(send, scope)

        try:
            await self._call(handler.on_connect, session)
        except Exception:
            logger.exception("on_connect failed for %s", type(handler).__name__)
            await session.close(1011, "Internal error")
            return

        while True:
            message = await receive()
            if message["type"] == "websocket.receive":
                text = message.get("text")
                if text is None:
                    text = (message.get("bytes") or b"").decode("utf-8", errors="replace")
                try:
                    await self._call(handler.on_message, session, text)
                except Exception:
                    logger.exception("on_message failed for %s", type(handler).__name__)
            elif message["type"] == "websocket.disconnect":
                session.mark_closed()
                try:
                    await self._call(
                        handler.on_close, session,
                        message.get("code", 1000), message.get("reason") or "",
                    )
                except Exception:
                    logger.exception("on_close failed for %s", type(handler).__name__)
                return

    async def _handle_lifespan(self, receive: Callable, send: Callable) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                if not self.initialized:
                    self.init()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                self.pool.shutdown(wait=False)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------

    def serve(self, host: str = "127.0.0.1", port: int = 4567, log_level: str = "info") -> None:
        """Run the service under uvicorn (blocking)."""
        import uvicorn

        logging.basicConfig(
            level=getattr(logging, log_level.upper()),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        logger.info("Starting uvicorn server on %s:%d", host, port)
        uvicorn.run(
            self,
            host=host,
            port=port,
            log_level=log_level,
            timeout_keep_alive=self.pool.idle_timeout_seconds,
        )
