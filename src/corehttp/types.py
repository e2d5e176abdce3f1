"""
Core types for the corehttp client.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Generic
from typing import TypeVar

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .exceptions import CoreHttpError

T = TypeVar("T")

# Type alias for query parameter values accepted by the client
QueryValue = str | int | float | bool | None | list[Any] | tuple[Any, ...]

# Environment variables read by ClientConfiguration.from_env()
ENV_BASE_URL = "COREHTTP_BASE_URL"
ENV_CONNECT_TIMEOUT = "COREHTTP_CONNECT_TIMEOUT"
ENV_RECEIVE_TIMEOUT = "COREHTTP_RECEIVE_TIMEOUT"

DEFAULT_TIMEOUT_SECONDS = 30.0


class HTTPMethod(Enum):
    """HTTP methods supported by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ClientConfiguration:
    """
    Configuration applied to every request made by the client.

    Attributes:
        base_url: Prefix prepended to every relative request path.
            Defaults to an empty string, meaning no base URL is set.
        connect_timeout: Seconds allowed to establish a connection.
        receive_timeout: Seconds allowed between reads of the response.
        headers: Default headers sent with every request.
    """

    base_url: str = ""
    connect_timeout: float = DEFAULT_TIMEOUT_SECONDS
    receive_timeout: float = DEFAULT_TIMEOUT_SECONDS
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.connect_timeout <= 0:
            raise ConfigurationError("must be a positive number of seconds", "connect_timeout")
        if self.receive_timeout <= 0:
            raise ConfigurationError("must be a positive number of seconds", "receive_timeout")
        # Copy so later changes to the caller's dict don't leak in
        object.__setattr__(self, "headers", dict(self.headers))

    @classmethod
    def from_env(cls, headers: Mapping[str, str] | None = None) -> "ClientConfiguration":
        """
        Build a configuration from environment variables.

        Loads a `.env` file first, then reads COREHTTP_BASE_URL,
        COREHTTP_CONNECT_TIMEOUT and COREHTTP_RECEIVE_TIMEOUT. Missing
        variables fall back to the defaults.

        Raises:
            ConfigurationError: If a timeout variable is not a number
        """
        load_dotenv()
        return cls(
            base_url=os.getenv(ENV_BASE_URL, ""),
            connect_timeout=_env_seconds(ENV_CONNECT_TIMEOUT),
            receive_timeout=_env_seconds(ENV_RECEIVE_TIMEOUT),
            headers=headers or {},
        )


def _env_seconds(name: str) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"expected seconds, got {raw!r}", name) from e


@dataclass
class RequestOptions:
    """Per-call request options."""

    path: str
    data: Any = None
    headers: Mapping[str, str] | None = None
    query_parameters: Mapping[str, QueryValue] | None = None


@dataclass(frozen=True)
class Response(Generic[T]):
    """
    A completed HTTP exchange.

    `data` holds the decoded body: parsed JSON for JSON content types,
    text for anything else, None for an empty body.
    """

    status_code: int
    data: T
    headers: Mapping[str, str] = field(default_factory=dict)
    method: str = HTTPMethod.GET.value
    url: str = ""
    reason: str | None = None

    @property
    def ok(self) -> bool:
        """True for 2xx status codes."""
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome of `CoreClient.send()`."""

    response: Response[T]
    ok: bool = True


@dataclass(frozen=True)
class Failure:
    """Failed outcome of `CoreClient.send()`."""

    error: CoreHttpError
    ok: bool = False

    @property
    def status(self) -> int | None:
        """Status code carried by the error, if any."""
        return getattr(self.error, "status", None)


# Union returned by CoreClient.send()
Result = Success[Any] | Failure
