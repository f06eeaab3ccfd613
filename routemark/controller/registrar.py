"""
Route and filter registration.

Turns discovered, validated controller and filter methods into entries on
the service's dispatch table. Every failure below the namespace level is
local: an invalid or unconstructible member is logged and skipped, and the
scan continues.
"""

from __future__ import annotations

from types import MethodType
from typing import Any, Callable, Dict, List, Optional
import inspect
import logging

from ..discovery.scanner import Discovered, MetadataKind, PackageScanner
from ..faults.exceptions import DiscoveryError
from ..faults.outcome import Outcome, invoke, invoke_async
from ..templates.engine import EngineFactory, RenderModel, build_engine
from .factory import InstanceFactory
from .metadata import FilterMetadata, FilterPhase, HttpMethod, RouteMetadata
from .validation import HandlerShape, is_valid_handler

logger = logging.getLogger("routemark.controller.registrar")


def _discard(value: Any) -> None:
    return None


class Registrar:
    """Shared plumbing: scanning with namespace-level failure isolation."""

    category = "handlers"

    def __init__(
        self,
        service: Any,
        scanner: Optional[PackageScanner] = None,
        instances: Optional[InstanceFactory] = None,
    ):
        self.service = service
        self.scanner = scanner or PackageScanner()
        self.instances = instances or InstanceFactory()

    def scan(self, namespace: str, kind: MetadataKind) -> List[Discovered]:
        try:
            return self.scanner.discover(namespace, kind)
        except DiscoveryError as exc:
            logger.warning("Skipping %s registration: %s", self.category, exc)
            return []


class RouteRegistrar(Registrar):
    """
    Installs controller routes.

    Each route gets its own template engine built from ``engine_factory``;
    if construction fails the route renders with the JSON fallback.
    """

    category = "route"

    def __init__(
        self,
        service: Any,
        engine_factory: Optional[EngineFactory],
        scanner: Optional[PackageScanner] = None,
        instances: Optional[InstanceFactory] = None,
    ):
        super().__init__(service, scanner, instances)
        self.engine_factory = engine_factory

    def _verb_registrars(self) -> Dict[HttpMethod, Callable[..., None]]:
        return {
            HttpMethod.GET: self.service.get,
            HttpMethod.POST: self.service.post,
            HttpMethod.PUT: self.service.put,
            HttpMethod.DELETE: self.service.delete,
            HttpMethod.OPTIONS: self.service.options,
        }

    def register_all(self, namespace: str) -> int:
        """Register every valid route of every controller in ``namespace``."""
        logger.debug("Setting up routes")
        count = 0
        for found in self.scan(namespace, MetadataKind.CONTROLLER):
            controller_cls = found.declaring_type
            base_path = found.metadata.base_path
            logger.debug("Adding controller %s", controller_cls.__name__)

            for route in self.scanner.members_of(controller_cls, MetadataKind.ROUTE):
                if not is_valid_handler(controller_cls, route.member, HandlerShape.ROUTE):
                    continue
                instance = self.instances.get(controller_cls, "controller")
                if instance is None:
                    continue
                try:
                    self.register_route(instance, route.member, route.metadata, base_path)
                except Exception as exc:
                    logger.warning(
                        "Couldn't register route %s for controller %s: %s",
                        route.member.__name__, controller_cls.__name__, exc,
                    )
                    continue
                count += 1

        logger.debug("Finished setting up routes (%d registered)", count)
        return count

    def register_route(
        self,
        instance: Any,
        func: Callable[..., Any],
        route_meta: RouteMetadata,
        base_path: str,
    ) -> str:
        """Install one route and return its effective path."""
        full_path = route_meta.full_path(base_path)
        logger.debug(
            "Adding route: %s, path: %s method: %s",
            func.__name__, full_path, route_meta.http_method.value,
        )
        engine = build_engine(self.engine_factory)
        handler = self._bind(instance, func, route_meta, full_path)
        self._verb_registrars()[route_meta.http_method](full_path, handler, engine)
        return full_path

    @staticmethod
    def _bind(
        instance: Any,
        func: Callable[..., Any],
        route_meta: RouteMetadata,
        full_path: str,
    ) -> Callable[..., Any]:
        bound = MethodType(func, instance)
        verb = route_meta.http_method.value
        template = route_meta.template_name

        def to_model(value: Any) -> RenderModel:
            return RenderModel(value if value is not None else {}, template)

        if inspect.iscoroutinefunction(func):
            async def handler(request, response) -> Outcome:
                logger.debug("%s - path: %s", verb, full_path)
                outcome = await invoke_async(bound, request, response)
                return outcome.map(to_model)
        else:
            def handler(request, response) -> Outcome:
                logger.debug("%s - path: %s", verb, full_path)
                return invoke(bound, request, response).map(to_model)

        handler.__qualname__ = f"{type(instance).__name__}.{func.__name__}"
        return handler


class FilterRegistrar(Registrar):
    """
    Installs global before/after hooks.

    Filters communicate through the response; their return value is
    dropped unless it is a failure.
    """

    category = "filter"

    def register_all(self, namespace: str) -> int:
        logger.debug("Setting up filters")
        count = 0
        for found in self.scan(namespace, MetadataKind.FILTER):
            owner = found.declaring_type
            if not is_valid_handler(owner, found.member, HandlerShape.FILTER):
                continue
            instance = self.instances.get(owner, "filter class")
            if instance is None:
                continue
            try:
                self.register_filter(instance, found.member, found.metadata)
            except Exception as exc:
                logger.warning(
                    "Couldn't register filter %s for class %s: %s",
                    found.member.__name__, owner.__name__, exc,
                )
                continue
            count += 1

        logger.debug("Finished setting up filters (%d registered)", count)
        return count

    def register_filter(self, instance: Any, func: Callable[..., Any], filter_meta: FilterMetadata) -> None:
        logger.debug(
            "Adding filter: %s, class: %s when: %s",
            func.__name__, type(instance).__name__, filter_meta.phase.value,
        )
        bound = MethodType(func, instance)

        if inspect.iscoroutinefunction(func):
            async def hook(request, response) -> Outcome:
                return (await invoke_async(bound, request, response)).map(_discard)
        else:
            def hook(request, response) -> Outcome:
                return invoke(bound, request, response).map(_discard)

        hook.__qualname__ = f"{type(instance).__name__}.{func.__name__}"

        if filter_meta.phase is FilterPhase.BEFORE:
            self.service.before(hook)
        else:
            self.service.after(hook)
