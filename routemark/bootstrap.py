"""
Setup - one-time discovery and registration.

Initialization order:
    thread pool -> error pages -> websockets -> filters -> routes -> service.init()

``init`` runs at most once per Setup. It holds a lock while running, and
every later call returns False without touching the dispatch tables. An
unexpected registration error is logged and ends registration early; the
Setup still counts as initialized so a retry cannot register twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
import logging
import threading

from .config import RoutemarkConfig, load_object
from .controller.factory import InstanceFactory
from .controller.registrar import FilterRegistrar, RouteRegistrar
from .discovery.scanner import PackageScanner
from .faults.dispatcher import ErrorDispatcher
from .server.service import Service
from .sockets.registrar import WebSocketRegistrar
from .sockets.registry import WebSocketRegistry
from .templates.engine import EngineFactory

logger = logging.getLogger("routemark.setup")


@dataclass
class RegistrationSummary:
    websockets: int = 0
    filters: int = 0
    routes: int = 0


class Setup:
    """
    Owns the service, the websocket registry and the shared handler instances.

    Example:
        setup = Setup()
        setup.init(
            "myapp.controllers", "myapp.filters", "myapp.sockets",
            max_threads=8, min_threads=2, idle_timeout_ms=30000,
            template_engine=SiteTemplates, main_template="main.html",
        )
        setup.service.serve(port=4567)
    """

    def __init__(
        self,
        service: Optional[Service] = None,
        registry: Optional[WebSocketRegistry] = None,
        *,
        expose_error_stack: bool = True,
    ):
        self.service = service or Service()
        self.registry = registry or WebSocketRegistry()
        self.scanner = PackageScanner()
        self.instances = InstanceFactory()
        self.expose_error_stack = expose_error_stack
        self.dispatcher: Optional[ErrorDispatcher] = None
        self.summary = RegistrationSummary()
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(
        self,
        controller_package: Optional[str],
        filter_package: Optional[str],
        websocket_package: Optional[str],
        max_threads: int = 8,
        min_threads: int = 2,
        idle_timeout_ms: int = 30000,
        template_engine: Optional[EngineFactory] = None,
        main_template: Optional[str] = None,
    ) -> bool:
        """
        Scan the three packages and build the dispatch tables.

        Returns:
            True if this call initialized the service, False if it was a no-op
        """
        with self._lock:
            if self._initialized:
                logger.debug("Setup already initialized, ignoring init()")
                return False

            self.service.thread_pool(max_threads, min_threads, idle_timeout_ms)

            self.dispatcher = ErrorDispatcher(
                template_engine,
                main_template,
                expose_stack=self.expose_error_stack,
            )
            self.service.internal_server_error(self.dispatcher.internal_error)
            self.service.not_found(self.dispatcher.not_found)
            self.service.on_failure(self.dispatcher.handle_failure)

            summary = RegistrationSummary()
            try:
                self._register(
                    summary, controller_package, filter_package, websocket_package, template_engine,
                )
            except Exception:
                logger.exception("Registration aborted, serving what was registered so far")

            self.service.init()
            self.summary = summary
            self._initialized = True
            logger.debug(
                "Started server: %d routes, %d filters, %d websockets",
                summary.routes, summary.filters, summary.websockets,
            )
            return True

    def _register(
        self,
        summary: RegistrationSummary,
        controller_package: Optional[str],
        filter_package: Optional[str],
        websocket_package: Optional[str],
        template_engine: Optional[EngineFactory],
    ) -> None:
        if websocket_package:
            summary.websockets = WebSocketRegistrar(
                self.service, self.registry, self.scanner, self.instances,
            ).register_all(websocket_package)

        if filter_package:
            summary.filters = FilterRegistrar(
                self.service, self.scanner, self.instances,
            ).register_all(filter_package)

        if controller_package:
            summary.routes = RouteRegistrar(
                self.service, template_engine, self.scanner, self.instances,
            ).register_all(controller_package)

    def init_package(
        self,
        package: str,
        max_threads: int = 8,
        min_threads: int = 2,
        idle_timeout_ms: int = 30000,
        template_engine: Optional[EngineFactory] = None,
        main_template: Optional[str] = None,
    ) -> bool:
        """Scan one package for controllers, filters and websockets alike."""
        return self.init(
            package, package, package,
            max_threads, min_threads, idle_timeout_ms,
            template_engine, main_template,
        )

    def from_config(self, config: RoutemarkConfig) -> bool:
        """Initialize from a loaded RoutemarkConfig."""
        self.expose_error_stack = config.expose_error_stack
        engine_factory = load_object(config.template_engine) if config.template_engine else None
        return self.init(
            config.controller_package,
            config.filter_package,
            config.websocket_package,
            config.max_threads,
            config.min_threads,
            config.idle_timeout_ms,
            engine_factory,
            config.main_template,
        )


_default_setup: Optional[Setup] = None
_default_lock = threading.Lock()


def default_setup() -> Setup:
    """The process-wide Setup used by the module-level helpers."""
    global _default_setup
    with _default_lock:
        if _default_setup is None:
            _default_setup = Setup()
        return _default_setup


def init(
    controller_package: Optional[str],
    filter_package: Optional[str],
    websocket_package: Optional[str],
    max_threads: int = 8,
    min_threads: int = 2,
    idle_timeout_ms: int = 30000,
    template_engine: Optional[EngineFactory] = None,
    main_template: Optional[str] = None,
) -> bool:
    return default_setup().init(
        controller_package, filter_package, websocket_package,
        max_threads, min_threads, idle_timeout_ms,
        template_engine, main_template,
    )


def init_package(package: str, *args: Any, **kwargs: Any) -> bool:
    return default_setup().init_package(package, *args, **kwargs)
