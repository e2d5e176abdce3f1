"""
Request loggers for the corehttp client.

`RequestLogger` is the observer interface the client calls around every
request. `CoreLogger` forwards those events to the standard logging module,
`FileRequestLogger` appends the full traffic to a file for debugging.
"""

import json
import logging
from datetime import UTC
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

from rich.logging import RichHandler

if TYPE_CHECKING:
    from ..exceptions import RequestError
    from ..types import Response

LOGGER_NAME = "corehttp"

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "x-api-key", "api-key", "cookie"}


class RequestLogger(Protocol):
    """Protocol for request logging callbacks."""

    def log_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
    ) -> None:
        """Log an outgoing request, before it is dispatched."""
        ...

    def log_response(
        self,
        method: str,
        url: str,
        response: "Response[Any]",
    ) -> None:
        """Log a successful response."""
        ...

    def log_error(
        self,
        method: str,
        url: str,
        error: "RequestError",
    ) -> None:
        """Log a failed request."""
        ...


def sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    """Mask the values of credential-bearing headers."""
    sanitized = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            # Show first 10 chars, mask the rest
            if len(value) > 14:
                sanitized[key] = value[:10] + "..." + value[-4:]
            else:
                sanitized[key] = "***"
        else:
            sanitized[key] = value
    return sanitized


class CoreLogger:
    """
    Application-wide logging facility.

    Writes to the ``corehttp`` standard library logger. `initialize()`
    attaches a rich console handler once; later calls are no-ops.

    Example:
        CoreLogger.initialize()
        log = CoreLogger()
        log.info("Starting")
        log.success("Done")
    """

    _initialized: bool = False

    def __init__(self, name: str = LOGGER_NAME):
        self._logger = logging.getLogger(name)

    @classmethod
    def initialize(cls, level: int | str = logging.INFO) -> None:
        """Attach a console handler to the ``corehttp`` logger."""
        if cls._initialized:
            return
        base = logging.getLogger(LOGGER_NAME)
        if not any(isinstance(h, RichHandler) for h in base.handlers):
            base.addHandler(RichHandler(rich_tracebacks=True, show_path=False))
        base.setLevel(level)
        cls._initialized = True

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._initialized

    def info(self, message: str, detail: Any = None) -> None:
        self._logger.info(message, extra={"detail": detail})

    def success(self, message: str, detail: Any = None) -> None:
        self._logger.info("SUCCESS %s", message, extra={"detail": detail})

    def error(self, message: str, detail: Any = None) -> None:
        self._logger.error(message, extra={"detail": detail})

    def log_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
    ) -> None:
        self.info(f"Making {method} request to {url}")

    def log_response(
        self,
        method: str,
        url: str,
        response: "Response[Any]",
    ) -> None:
        self.success(
            f"{method} request successful: {url} | status code: {response.status_code}",
            response,
        )

    def log_error(
        self,
        method: str,
        url: str,
        error: "RequestError",
    ) -> None:
        self.error(f"{method} request failed: {url} | status code: {error.status}", error)


class FileRequestLogger:
    """
    Logs request traffic to a file.

    Format:
        [timestamp] [direction] [type] payload

    Where:
        - timestamp: ISO 8601 format
        - direction: >>> for outgoing, <<< for incoming, !!! for failures
        - type: REQUEST, RESPONSE, or ERROR
        - payload: JSON-formatted data
    """

    def __init__(self, log_file: Path):
        """
        Initialize the file logger.

        Args:
            log_file: Path to the log file. Parent directories will be created
                      if they don't exist.
        """
        self.log_file = log_file
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.log_file.touch(exist_ok=True)

    def _write_log(self, direction: str, kind: str, payload: dict[str, Any]) -> None:
        timestamp = datetime.now(UTC).isoformat(timespec="milliseconds")
        entry = f"[{timestamp}] {direction} {kind} {json.dumps(payload, ensure_ascii=False, default=str)}"
        with self.log_file.open("a", encoding="utf-8") as f:
            f.write(entry + "\n")

    def log_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
    ) -> None:
        """Log an outgoing request."""
        payload = {
            "method": method,
            "url": url,
            "headers": sanitize_headers(headers),
            "body": body,
        }
        self._write_log(">>>", "REQUEST", payload)

    def log_response(
        self,
        method: str,
        url: str,
        response: "Response[Any]",
    ) -> None:
        """Log a successful response."""
        payload = {
            "method": method,
            "url": url,
            "status": response.status_code,
            "body": response.data,
        }
        self._write_log("<<<", "RESPONSE", payload)

    def log_error(
        self,
        method: str,
        url: str,
        error: "RequestError",
    ) -> None:
        """Log a failed request."""
        payload: dict[str, Any] = {
            "method": method,
            "url": url,
            "status": error.status,
            "error": str(error),
        }
        if error.response is not None:
            payload["body"] = error.response.data
        self._write_log("!!!", "ERROR", payload)
