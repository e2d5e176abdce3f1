"""
Custom exceptions for corehttp.
"""

from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:
    from .types import Response


class CoreHttpError(Exception):
    """Base exception for all corehttp errors."""

    pass


class UninitializedClientError(CoreHttpError):
    """
    Raised when a request is made before `CoreClient.initialize()` ran.

    The check happens before any network activity, so nothing has been sent
    when this is raised. Call `await CoreClient.initialize(...)` first.
    """

    def __init__(self, message: str | None = None):
        super().__init__(
            message or "[CoreClient] is not initialized. Call CoreClient.initialize() before using it."
        )


class RequestError(CoreHttpError):
    """
    A request that failed in transport or returned a non-2xx status.

    Attributes:
        method: HTTP method of the failed request.
        url: Resolved URL the request targeted.
        status: Status code of the failing response, or None when no
            response was received (connection error, timeout).
        response: The failing `Response`, when the server answered.
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status: int | None = None,
        response: "Response[Any] | None" = None,
    ):
        self.method = method
        self.url = url
        self.status = status
        self.response = response
        if status is not None:
            super().__init__(f"{method} {url} failed with HTTP {status}: {message}")
        else:
            super().__init__(f"{method} {url} failed: {message}")


class ConfigurationError(CoreHttpError):
    """Raised when a client configuration value is invalid."""

    def __init__(self, message: str, config_key: str | None = None):
        self.config_key = config_key
        if config_key:
            super().__init__(f"Configuration error for '{config_key}': {message}")
        else:
            super().__init__(f"Configuration error: {message}")
