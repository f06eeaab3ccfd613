"""
Handler instance factory.

Controllers, filter holders and websocket endpoints are constructed once per
declaring class, with no arguments, and the instance is shared by every
route, filter or connection that class serves. Handlers are therefore
expected to be stateless; request-scoped data goes in
``request.attributes``.
"""

from typing import Any, Dict, Optional, Set, Type
import logging

logger = logging.getLogger("routemark.controller.factory")


class InstanceFactory:
    """Builds and caches one instance per class."""

    def __init__(self):
        self._instances: Dict[Type, Any] = {}
        self._failed: Set[Type] = set()

    def get(self, cls: Type, kind: str = "controller") -> Optional[Any]:
        """
        Return the shared instance of ``cls``, creating it on first use.

        Returns None (and logs) when construction fails; the failure is
        remembered so later members of the same class are skipped quietly.
        """
        if cls in self._instances:
            return self._instances[cls]
        if cls in self._failed:
            logger.debug("Skipping %s %s, construction failed earlier", kind, cls.__name__)
            return None

        try:
            instance = cls()
        except Exception:
            logger.error("Couldn't create %s %s", kind, cls.__name__, exc_info=True)
            self._failed.add(cls)
            return None

        self._instances[cls] = instance
        return instance

    def instances(self) -> Dict[Type, Any]:
        return dict(self._instances)

    def __contains__(self, cls: Type) -> bool:
        return cls in self._instances
