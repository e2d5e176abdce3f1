"""
Pytest configuration and fixtures for corehttp tests.

Requests go to a local aiohttp application so the tests never touch the
public network.
"""

import asyncio
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from corehttp import CoreClient
from corehttp import CoreLogger

SAMPLE_POST = {
    "userId": 1,
    "id": 1,
    "title": "sunt aut facere repellat provident",
    "body": "quia et suscipit\nsuscipit recusandae",
}


async def _get_post(request: web.Request) -> web.Response:
    return web.json_response({**SAMPLE_POST, "id": int(request.match_info["post_id"])})


async def _create_post(request: web.Request) -> web.Response:
    payload = await request.json()
    return web.json_response({**payload, "id": 101}, status=201)


async def _update_post(request: web.Request) -> web.Response:
    payload = await request.json()
    return web.json_response({**payload, "id": int(request.match_info["post_id"])})


async def _delete_post(request: web.Request) -> web.Response:
    return web.json_response({})


async def _echo(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "method": request.method,
            "headers": {k.lower(): v for k, v in request.headers.items()},
            "query": [[k, v] for k, v in request.query.items()],
            "body": await request.text(),
        }
    )


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(0.5)
    return web.json_response({})


async def _text(request: web.Request) -> web.Response:
    return web.Response(text="plain body")


async def _empty(request: web.Request) -> web.Response:
    return web.Response(status=204)


async def _server_error(request: web.Request) -> web.Response:
    return web.json_response({"error": "boom"}, status=500)


async def _mislabelled_json(request: web.Request) -> web.Response:
    return web.Response(body=b"not json at all", headers={"Content-Type": "application/json"})


async def _problem_json(request: web.Request) -> web.Response:
    return web.Response(
        body=b'{"title": "Bad input", "status": 200}',
        headers={"Content-Type": "application/problem+json"},
    )


async def _latin1_text(request: web.Request) -> web.Response:
    return web.Response(
        body="café crème".encode("latin-1"),
        headers={"Content-Type": "text/plain; charset=iso-8859-1"},
    )


async def _unknown_charset(request: web.Request) -> web.Response:
    return web.Response(body=b'{"a": 1}', headers={"Content-Type": "application/json; charset=bogus"})


def create_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/posts/{post_id}", _get_post)
    app.router.add_post("/posts", _create_post)
    app.router.add_put("/posts/{post_id}", _update_post)
    app.router.add_delete("/posts/{post_id}", _delete_post)
    app.router.add_route("*", "/echo", _echo)
    app.router.add_get("/slow", _slow)
    app.router.add_get("/text", _text)
    app.router.add_delete("/empty", _empty)
    app.router.add_get("/error", _server_error)
    app.router.add_get("/mislabelled", _mislabelled_json)
    app.router.add_get("/problem", _problem_json)
    app.router.add_get("/latin1", _latin1_text)
    app.router.add_get("/unknown-charset", _unknown_charset)
    return app


class RecordingLogger:
    """RequestLogger that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []

    def log_request(self, method: str, url: str, headers: dict[str, str], body: Any) -> None:
        self.events.append(("request", method, url, headers, body))

    def log_response(self, method: str, url: str, response: Any) -> None:
        self.events.append(("response", method, url, response.status_code))

    def log_error(self, method: str, url: str, error: Any) -> None:
        self.events.append(("error", method, url, error.status))

    def kinds(self) -> list[str]:
        return [event[0] for event in self.events]


def _reset_client() -> None:
    client = CoreClient()
    client._initialized = False
    client._config = None
    client._logger = None
    client._session = None


@pytest.fixture(autouse=True)
def reset_core_client():
    """Start every test with an uninitialized client and logger."""
    _reset_client()
    CoreLogger._initialized = False
    yield
    _reset_client()


@pytest.fixture
def recorder() -> RecordingLogger:
    return RecordingLogger()


@pytest_asyncio.fixture
async def api_server():
    """Serve the test application and yield its base URL."""
    server = TestServer(create_app())
    await server.start_server()
    yield f"http://{server.host}:{server.port}"
    await CoreClient.close()
    await server.close()


@pytest_asyncio.fixture
async def client(api_server, recorder) -> CoreClient:
    """A client initialized against the test application."""
    await CoreClient.initialize(
        base_url=api_server,
        connect_timeout=10,
        receive_timeout=10,
        headers={"Content-Type": "application/json"},
        logger=recorder,
    )
    return CoreClient()
