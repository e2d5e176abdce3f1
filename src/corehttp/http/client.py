"""
Process-wide async HTTP client built on aiohttp.
"""

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from ..exceptions import CoreHttpError
from ..exceptions import RequestError
from ..exceptions import UninitializedClientError
from ..types import DEFAULT_TIMEOUT_SECONDS
from ..types import ClientConfiguration
from ..types import Failure
from ..types import HTTPMethod
from ..types import QueryValue
from ..types import RequestOptions
from ..types import Response
from ..types import Result
from ..types import Success
from .logger import CoreLogger
from .logger import RequestLogger

logger = logging.getLogger(__name__)


def encode_query(params: Mapping[str, QueryValue] | None) -> list[tuple[str, str]] | None:
    """
    Flatten query parameters into the (key, value) pairs aiohttp expects.

    Booleans become ``true``/``false``, sequences repeat the key and
    None values are dropped.
    """
    if not params:
        return None
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if item is None:
                continue
            if isinstance(item, bool):
                pairs.append((key, "true" if item else "false"))
            else:
                pairs.append((key, str(item)))
    return pairs


def _body_kwargs(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, (dict, list)):
        return {"json": data}
    return {"data": data}


def _is_json(content_type: str) -> bool:
    return content_type == "application/json" or content_type.endswith("+json")


def merge_headers(
    defaults: Mapping[str, str],
    overrides: Mapping[str, str] | None,
) -> dict[str, str]:
    """
    Merge per-call headers over the defaults.

    Header names match case-insensitively, so an override replaces the
    default whatever its spelling. `defaults` is not modified.
    """
    merged = dict(defaults)
    for key, value in (overrides or {}).items():
        for existing in [k for k in merged if k.lower() == key.lower()]:
            del merged[existing]
        merged[key] = value
    return merged


async def _read_response(method: str, resp: aiohttp.ClientResponse) -> Response[Any]:
    """Read and decode the body of an aiohttp response."""
    text = await resp.text(errors="replace")
    data: Any
    if not text:
        data = None
    elif _is_json(resp.content_type):
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            # Servers that mislabel their payload get the text back unchanged
            data = text
    else:
        data = text
    return Response(
        status_code=resp.status,
        data=data,
        headers={str(k): v for k, v in resp.headers.items()},
        method=method,
        url=str(resp.url),
        reason=resp.reason,
    )


class CoreClient:
    """
    Singleton HTTP client for a whole application.

    Configure it once with `initialize()`, then call the verb methods from
    anywhere. Every request is reported to the configured `RequestLogger`
    before dispatch and again on success or failure.

    Example:
        # Don't forget to initialize the client before making requests!
        await CoreClient.initialize(
            base_url="https://api.example.com",
            connect_timeout=30,
            receive_timeout=30,
            headers={"Authorization": "Bearer YOUR_TOKEN"},
        )

        client = CoreClient()
        response = await client.get("/posts/1")
        if response.status_code == 200:
            print(response.data["title"])

        # Errors carry the failing status code
        try:
            await client.get("/does-not-exist")
        except RequestError as e:
            print(e.status)

        await CoreClient.close()
    """

    _instance: "CoreClient | None" = None

    _initialized: bool
    _config: ClientConfiguration | None
    _logger: RequestLogger | None
    _session: aiohttp.ClientSession | None

    def __new__(cls) -> "CoreClient":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._initialized = False
            instance._config = None
            instance._logger = None
            instance._session = None
            cls._instance = instance
        return cls._instance

    @classmethod
    async def initialize(
        cls,
        base_url: str = "",
        connect_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        receive_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        headers: Mapping[str, str] | None = None,
        *,
        config: ClientConfiguration | None = None,
        logger: RequestLogger | None = None,
    ) -> None:
        """
        Configure the client.

        Must be awaited before any request is made. Calling it again
        replaces the previous configuration entirely; nothing is merged.

        Args:
            base_url: Prefix for every relative path. Defaults to an empty
                string, meaning no base URL is set.
            connect_timeout: Seconds allowed to establish a connection.
            receive_timeout: Seconds allowed between reads of a response.
            headers: Default headers sent with every request.
            config: A complete configuration, used instead of the fields above.
            logger: Request observer. Defaults to `CoreLogger`.

        Raises:
            ConfigurationError: If a timeout is not positive
        """
        if not CoreLogger.is_initialized():
            CoreLogger.initialize()
        else:
            CoreLogger().info("CoreLogger is already initialized.")

        core_logger = CoreLogger()
        core_logger.info("Initializing CoreClient")

        if config is None:
            config = ClientConfiguration(
                base_url=base_url,
                connect_timeout=connect_timeout,
                receive_timeout=receive_timeout,
                headers=headers or {},
            )

        client = cls()
        # A session built for the old timeouts must not be reused
        await cls.close()
        client._config = config
        client._logger = logger if logger is not None else core_logger
        client._initialized = True
        core_logger.success("CoreClient initialized!")

    @classmethod
    def is_initialized(cls) -> bool:
        """Return True once `initialize()` has completed."""
        return cls()._initialized

    @classmethod
    async def close(cls) -> None:
        """Close the underlying session. The next request opens a new one."""
        client = cls()
        if client._session is not None and not client._session.closed:
            logger.debug("Closing aiohttp session")
            await client._session.close()
        client._session = None

    @property
    def configuration(self) -> ClientConfiguration:
        """The active configuration."""
        self._ensure_initialized()
        assert self._config is not None
        return self._config

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise UninitializedClientError()

    def _resolve_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.configuration.base_url}{path}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            config = self.configuration
            timeout = aiohttp.ClientTimeout(
                sock_connect=config.connect_timeout,
                sock_read=config.receive_timeout,
            )
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def request(
        self,
        method: HTTPMethod | str,
        path: str,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
        query_parameters: Mapping[str, QueryValue] | None = None,
    ) -> Response[Any]:
        """
        Send a request and return its response.

        Args:
            method: HTTP method
            path: Path relative to the base URL, or an absolute URL
            data: Request body. Dicts and lists are sent as JSON, anything
                else as the raw body.
            headers: Headers added to the defaults for this call only. On a
                key conflict the value given here wins.
            query_parameters: Query string parameters

        Returns:
            The response, for any 2xx status

        Raises:
            UninitializedClientError: If `initialize()` has not been awaited
            RequestError: On a transport failure or a non-2xx status
        """
        self._ensure_initialized()
        verb = HTTPMethod(method.upper()).value if isinstance(method, str) else method.value
        url = self._resolve_url(path)
        merged_headers = merge_headers(self.configuration.headers, headers)
        observer = self._logger
        assert observer is not None

        observer.log_request(verb, url, merged_headers, data)

        try:
            session = await self._get_session()
            async with session.request(
                verb,
                url,
                headers=merged_headers,
                params=encode_query(query_parameters),
                **_body_kwargs(data),
            ) as resp:
                response = await _read_response(verb, resp)
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeError, LookupError) as e:
            error = RequestError(verb, url, str(e) or type(e).__name__)
            observer.log_error(verb, url, error)
            raise error from e

        if not response.ok:
            error = RequestError(
                verb,
                url,
                response.reason or "Request failed",
                status=response.status_code,
                response=response,
            )
            observer.log_error(verb, url, error)
            raise error

        observer.log_response(verb, url, response)
        return response

    async def get(
        self,
        path: str,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
        query_parameters: Mapping[str, QueryValue] | None = None,
    ) -> Response[Any]:
        """
        Make a GET request.

        Example:
            response = await client.get("/posts", query_parameters={"userId": 1})
        """
        return await self.request(HTTPMethod.GET, path, data, headers, query_parameters)

    async def post(
        self,
        path: str,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
        query_parameters: Mapping[str, QueryValue] | None = None,
    ) -> Response[Any]:
        """
        Make a POST request.

        Example:
            response = await client.post("/posts", data={"title": "New Post"})
        """
        return await self.request(HTTPMethod.POST, path, data, headers, query_parameters)

    async def put(
        self,
        path: str,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
        query_parameters: Mapping[str, QueryValue] | None = None,
    ) -> Response[Any]:
        """Make a PUT request."""
        return await self.request(HTTPMethod.PUT, path, data, headers, query_parameters)

    async def delete(
        self,
        path: str,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
        query_parameters: Mapping[str, QueryValue] | None = None,
    ) -> Response[Any]:
        """Make a DELETE request."""
        return await self.request(HTTPMethod.DELETE, path, data, headers, query_parameters)

    async def send(self, method: HTTPMethod | str, options: RequestOptions) -> Result:
        """
        Send a request without raising on failure.

        Returns:
            `Success` wrapping the response, or `Failure` wrapping the
            `UninitializedClientError` or `RequestError` that `request()`
            would have raised
        """
        try:
            response = await self.request(
                method,
                options.path,
                options.data,
                options.headers,
                options.query_parameters,
            )
        except CoreHttpError as e:
            return Failure(e)
        return Success(response)

    async def __aenter__(self) -> "CoreClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
