"""
Package Scanner.

Runtime introspection that finds decorated classes and methods within a
package. Used once, at startup, to feed the registrars.

Discovery order is deterministic:
- modules in ``pkgutil.walk_packages`` order (root module first)
- classes in definition order within their module
- methods in definition order, base classes first (routes only; a filter
  is found once, on the class that declares it)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import Any, Dict, Iterator, List, Optional, Set
import importlib
import inspect
import logging
import pkgutil

from ..controller.metadata import CONTROLLER_ATTR, FILTER_ATTR, ROUTE_ATTR, SOCKET_ATTR
from ..faults.exceptions import DiscoveryError

logger = logging.getLogger("routemark.discovery")


class MetadataKind(str, Enum):
    CONTROLLER = "controller"
    ROUTE = "route"
    FILTER = "filter"
    WEBSOCKET = "websocket"

    @property
    def attribute(self) -> str:
        return _ATTRIBUTES[self]

    @property
    def type_level(self) -> bool:
        return self in (MetadataKind.CONTROLLER, MetadataKind.WEBSOCKET)

    @property
    def inherited(self) -> bool:
        """Routes are collected through base classes; filters only where declared."""
        return self is MetadataKind.ROUTE


_ATTRIBUTES = {
    MetadataKind.CONTROLLER: CONTROLLER_ATTR,
    MetadataKind.ROUTE: ROUTE_ATTR,
    MetadataKind.FILTER: FILTER_ATTR,
    MetadataKind.WEBSOCKET: SOCKET_ATTR,
}


@dataclass(frozen=True)
class Discovered:
    """
    One discovered declaration.

    For type-level kinds ``member`` is the class itself; for method-level
    kinds it is the plain function as defined on the class.
    """
    declaring_type: type
    member: Any
    metadata: Any


class PackageScanner:
    """
    Scanner for decorated declarations in Python packages.

    Features:
    - Recursive package walking
    - Per-scanner module cache
    - Broken submodules logged and skipped without aborting the scan
    """

    def __init__(self):
        self._module_cache: Dict[str, List[ModuleType]] = {}

    def clear_cache(self) -> None:
        self._module_cache.clear()

    def modules(self, namespace: str) -> List[ModuleType]:
        """
        Import ``namespace`` and, for packages, every submodule.

        Raises:
            DiscoveryError: The namespace itself cannot be imported
        """
        if namespace in self._module_cache:
            return list(self._module_cache[namespace])

        if not namespace:
            raise DiscoveryError(namespace, "empty namespace")

        try:
            root = importlib.import_module(namespace)
        except Exception as exc:
            raise DiscoveryError(namespace, str(exc)) from exc

        found = [root]
        if hasattr(root, "__path__"):
            def on_error(name: str) -> None:
                logger.warning("Failed to import package %s while scanning %s", name, namespace)

            seen = {root.__name__}
            for _, name, _ in pkgutil.walk_packages(root.__path__, root.__name__ + ".", onerror=on_error):
                if name in seen:
                    continue
                seen.add(name)
                try:
                    found.append(importlib.import_module(name))
                except Exception as exc:
                    logger.warning("Failed to scan submodule %s: %s", name, exc)

        self._module_cache[namespace] = found
        return list(found)

    def classes(self, namespace: str) -> List[type]:
        """Classes defined (not merely imported) inside ``namespace``."""
        discovered: List[type] = []
        seen: Set[type] = set()
        for module in self.modules(namespace):
            for obj in list(vars(module).values()):
                if not inspect.isclass(obj) or obj in seen:
                    continue
                if getattr(obj, "__module__", None) != module.__name__:
                    continue
                seen.add(obj)
                discovered.append(obj)
        return discovered

    @staticmethod
    def methods(cls: type) -> List[Any]:
        """Functions of ``cls`` in definition order, base classes first."""
        ordered: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name, value in vars(klass).items():
                if inspect.isfunction(value):
                    ordered[name] = value
                elif name in ordered:
                    # Overridden by a non-function attribute
                    del ordered[name]
        return list(ordered.values())

    def members_of(self, cls: type, kind: MetadataKind) -> Iterator[Discovered]:
        """Decorated declarations on one class."""
        if kind.type_level:
            metadata = vars(cls).get(kind.attribute)
            if metadata is not None:
                yield Discovered(cls, cls, metadata)
            return

        if kind.inherited:
            functions = self.methods(cls)
        else:
            functions = [value for value in vars(cls).values() if inspect.isfunction(value)]

        for func in functions:
            metadata = getattr(func, kind.attribute, None)
            if metadata is None:
                continue
            if isinstance(metadata, tuple):
                for entry in metadata:
                    yield Discovered(cls, func, entry)
            else:
                yield Discovered(cls, func, metadata)

    def discover(self, namespace: str, kind: MetadataKind) -> List[Discovered]:
        """All declarations of ``kind`` inside ``namespace``."""
        results: List[Discovered] = []
        for cls in self.classes(namespace):
            results.extend(self.members_of(cls, kind))
        logger.debug("Discovered %d %s declarations in %s", len(results), kind.value, namespace)
        return results


def discover(
    namespace: str,
    kind: MetadataKind,
    scanner: Optional[PackageScanner] = None,
) -> List[Discovered]:
    """
    Enumerate ``(declaring_type, member, metadata)`` for ``kind`` in a package.

    Raises:
        DiscoveryError: The namespace cannot be resolved
    """
    return (scanner or PackageScanner()).discover(namespace, MetadataKind(kind))
