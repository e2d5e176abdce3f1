"""
corehttp - a process-wide async HTTP client.

Configure a base URL, timeouts and default headers once, then make
GET/POST/PUT/DELETE requests from anywhere in the application. Requests
are dispatched with aiohttp and every request, response and failure is
reported to a pluggable logger.

Example:
    from corehttp import CoreClient

    await CoreClient.initialize(base_url="https://jsonplaceholder.typicode.com")
    response = await CoreClient().get("/posts/1")
    print(response.status_code, response.data["title"])
"""

from .exceptions import ConfigurationError
from .exceptions import CoreHttpError
from .exceptions import RequestError
from .exceptions import UninitializedClientError
from .http import CoreClient
from .http import CoreLogger
from .http import FileRequestLogger
from .http import RequestLogger
from .types import ClientConfiguration
from .types import Failure
from .types import HTTPMethod
from .types import RequestOptions
from .types import Response
from .types import Result
from .types import Success

__all__ = [
    "ClientConfiguration",
    "ConfigurationError",
    "CoreClient",
    "CoreHttpError",
    "CoreLogger",
    "Failure",
    "FileRequestLogger",
    "HTTPMethod",
    "RequestError",
    "RequestLogger",
    "RequestOptions",
    "Response",
    "Result",
    "Success",
    "UninitializedClientError",
]

__version__ = "0.1.0"
