"""
WebSocket endpoint registration.

A class is bound only if it carries both markers (``@Socket`` for the path
and ``@websocket_endpoint`` for the transport) and implements the handler
capability. Each class is instantiated once, recorded in the registry and
bound to the service at its path.
"""

from __future__ import annotations

from typing import Any, Optional
import logging

from ..controller.factory import InstanceFactory
from ..controller.metadata import WebSocketMetadata
from ..controller.registrar import Registrar
from ..discovery.scanner import MetadataKind, PackageScanner
from ..server.websocket import is_websocket_endpoint
from .handler import is_valid_websocket_class
from .registry import WebSocketRegistry

logger = logging.getLogger("routemark.sockets.registrar")


class WebSocketRegistrar(Registrar):

    category = "websocket"

    def __init__(
        self,
        service: Any,
        registry: WebSocketRegistry,
        scanner: Optional[PackageScanner] = None,
        instances: Optional[InstanceFactory] = None,
    ):
        super().__init__(service, scanner, instances)
        self.registry = registry

    def register_all(self, namespace: str) -> int:
        logger.debug("Setting up websocket handlers")
        count = 0
        for found in self.scan(namespace, MetadataKind.WEBSOCKET):
            if self.register_websocket(found.declaring_type, found.metadata) is not None:
                count += 1
        logger.debug("Finished setting up websocket handlers (%d registered)", count)
        return count

    def register_websocket(self, cls: type, metadata: WebSocketMetadata) -> Optional[Any]:
        """Bind ``cls`` at ``metadata.path``; returns the instance or None."""
        if not is_websocket_endpoint(cls):
            logger.warning(
                "Couldn't register websocket %s, missing @websocket_endpoint marker",
                cls.__name__,
            )
            return None

        logger.debug("Adding websocket handler %s", cls.__name__)
        if not is_valid_websocket_class(cls):
            return None

        handler = self.instances.get(cls, "websocket class")
        if handler is None:
            return None

        self.registry.add_handler(handler)
        self.service.websocket(metadata.path, handler)
        return handler
