"""
Handler signature validation.

A route or filter method is registered only if it can be called as
``method(request, response)``:

- first parameter after ``self`` annotated ``Request`` (or a subclass)
- second parameter annotated ``Response`` (or a subclass)
- any further parameters have defaults
- routes only: the return annotation is a key-value mapping

Mismatches are logged and reported as ``False``; the caller skips the
member and carries on with the rest of the scan.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, get_origin, get_type_hints, is_typeddict
import inspect
import logging

from ..server.request import Request
from ..server.response import Response

logger = logging.getLogger("routemark.controller.validation")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class HandlerShape(str, Enum):
    ROUTE = "controller"
    FILTER = "filter"

    @property
    def requires_mapping_return(self) -> bool:
        return self is HandlerShape.ROUTE


def _is_subclass(hint: Any, base: type) -> bool:
    return isinstance(hint, type) and issubclass(hint, base)


def is_mapping_type(hint: Any) -> bool:
    """True for dict, Dict[...], dict[...], Mapping[...], TypedDicts and friends."""
    if is_typeddict(hint):
        return True
    origin = get_origin(hint) or hint
    return _is_subclass(origin, Mapping)


def is_valid_handler(owner: type, func: Callable[..., Any], shape: HandlerShape) -> bool:
    """Check ``func`` (as found on ``owner``) against the handler shape."""
    name = getattr(func, "__name__", repr(func))
    owner_name = owner.__name__

    def reject(reason: str) -> bool:
        logger.warning(
            "Couldn't register method %s for %s %s, %s",
            name, shape.value, owner_name, reason,
        )
        return False

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return reject("signature cannot be inspected")

    try:
        hints = get_type_hints(func)
    except Exception as exc:
        return reject(f"unresolvable annotations ({exc})")

    # Drop the instance parameter
    params = list(signature.parameters.values())[1:]
    positional = [p for p in params if p.kind in _POSITIONAL]

    if len(positional) < 1 or not _is_subclass(hints.get(positional[0].name), Request):
        return reject("invalid first parameter")

    if len(positional) < 2 or not _is_subclass(hints.get(positional[1].name), Response):
        return reject("invalid second parameter")

    for param in params[2:]:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if param.default is inspect.Parameter.empty:
            return reject(f"unexpected required parameter '{param.name}'")

    if shape.requires_mapping_return and not is_mapping_type(hints.get("return")):
        return reject("invalid return type")

    return True
