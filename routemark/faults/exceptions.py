"""
Routemark exception taxonomy.

- RoutemarkError: base for everything the framework raises itself
- DiscoveryError: a namespace could not be resolved during scanning
- ConfigError: configuration failed validation
- RouteException: application-level HTTP error raised (or returned) by handlers
"""

from http import HTTPStatus
from typing import Optional


class RoutemarkError(Exception):
    """Base class for routemark errors."""
    pass


class DiscoveryError(RoutemarkError):
    """Raised when a namespace cannot be imported for scanning."""

    def __init__(self, namespace: str, reason: str = ""):
        self.namespace = namespace
        self.reason = reason
        message = f"Cannot resolve namespace '{namespace}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ConfigError(RoutemarkError):
    """Raised when configuration validation fails."""
    pass


class RouteException(RoutemarkError):
    """
    Structured application error carrying an HTTP status code.

    Handlers raise (or return) it to end a request with a rendered error
    page instead of their normal template.

    Example:
        @GET("/users/:id", template="user.html")
        def show(self, request: Request, response: Response) -> dict:
            user = self.repo.get(request.params["id"])
            if user is None:
                raise RouteException(404, "User not found")
            return {"user": user}
    """

    def __init__(
        self,
        status_code: int,
        message: Optional[str] = None,
        *,
        cause: Optional[BaseException] = None,
    ):
        self.status_code = status_code
        self.cause = cause
        if message is None:
            if cause is not None:
                message = str(cause)
            else:
                message = _reason_phrase(status_code)
        self.message = message
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def code(self) -> int:
        return self.status_code

    def __repr__(self) -> str:
        return f"RouteException(status_code={self.status_code}, message={self.message!r})"


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"
