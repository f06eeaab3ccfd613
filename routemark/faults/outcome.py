"""
Handler outcomes.

Handler calls cross the invocation boundary as values: ``Success`` with the
handler's result, or ``Failure`` describing a domain or internal error. The
dispatcher inspects the value instead of catching exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from .exceptions import RouteException


class FailureKind(str, Enum):
    DOMAIN = "domain"       # RouteException raised or returned by the handler
    INTERNAL = "internal"   # anything else


@dataclass(frozen=True)
class Success:
    value: Any = None

    @property
    def ok(self) -> bool:
        return True

    def map(self, func: Callable[[Any], Any]) -> "Success":
        return Success(func(self.value))


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    status_code: int
    message: str
    cause: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return False

    def map(self, func: Callable[[Any], Any]) -> "Failure":
        return self

    @classmethod
    def from_route_exception(cls, exc: RouteException) -> "Failure":
        return cls(
            kind=FailureKind.DOMAIN,
            status_code=exc.status_code,
            message=exc.message,
            cause=exc,
        )


Outcome = Union[Success, Failure]

INTERNAL_ERROR_MESSAGE = "There was an error on the server"


def find_route_exception(exc: BaseException) -> Optional[RouteException]:
    """Walk the cause/context chain looking for a RouteException."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, RouteException):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def failure_from_exception(exc: BaseException) -> Failure:
    """
    Convert an exception escaping a handler into a Failure.

    Wrapped RouteExceptions are unwrapped and keep their status code;
    everything else becomes a 500 internal failure.
    """
    route_exc = find_route_exception(exc)
    if route_exc is not None:
        return Failure.from_route_exception(route_exc)
    return Failure(
        kind=FailureKind.INTERNAL,
        status_code=500,
        message=INTERNAL_ERROR_MESSAGE,
        cause=exc,
    )


def to_outcome(value: Any) -> Outcome:
    """Normalize a handler return value."""
    if isinstance(value, (Success, Failure)):
        return value
    if isinstance(value, RouteException):
        return Failure.from_route_exception(value)
    return Success(value)


def invoke(func: Callable[..., Any], *args: Any) -> Outcome:
    """Call a sync handler and capture its outcome."""
    try:
        return to_outcome(func(*args))
    except Exception as exc:
        return failure_from_exception(exc)


async def invoke_async(func: Callable[..., Any], *args: Any) -> Outcome:
    """Await an async handler and capture its outcome."""
    try:
        return to_outcome(await func(*args))
    except Exception as exc:
        return failure_from_exception(exc)
