"""
Faults: exception taxonomy, handler outcomes and error-page dispatch.
"""

from .exceptions import ConfigError, DiscoveryError, RouteException, RoutemarkError
from .outcome import (
    Failure,
    FailureKind,
    Outcome,
    Success,
    failure_from_exception,
    invoke,
    invoke_async,
    to_outcome,
)
from .dispatcher import ErrorDispatcher

__all__ = [
    "ConfigError",
    "DiscoveryError",
    "ErrorDispatcher",
    "Failure",
    "FailureKind",
    "Outcome",
    "RouteException",
    "RoutemarkError",
    "Success",
    "failure_from_exception",
    "invoke",
    "invoke_async",
    "to_outcome",
]
