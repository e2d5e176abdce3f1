"""
Example demonstrating the corehttp client.

This example shows how to:
- Initialize the client once, from arguments or from a .env file
- Make GET/POST/PUT/DELETE requests
- Handle a failing request
- Log all traffic to a file alongside the console log

Set COREHTTP_BASE_URL (and optionally COREHTTP_CONNECT_TIMEOUT /
COREHTTP_RECEIVE_TIMEOUT) to target another API.
"""

import asyncio
import os
from logging import basicConfig
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from corehttp import ClientConfiguration
from corehttp import CoreClient
from corehttp import FileRequestLogger
from corehttp import HTTPMethod
from corehttp import RequestError
from corehttp import RequestOptions
from corehttp import Success

load_dotenv()

console = Console()


async def main() -> None:
    console.print(Panel.fit("[bold blue]corehttp Example[/bold blue]"))

    config = ClientConfiguration(
        base_url=os.getenv("COREHTTP_BASE_URL", "https://jsonplaceholder.typicode.com"),
        connect_timeout=15,
        receive_timeout=15,
        headers={"Content-Type": "application/json"},
    )
    log_file = Path("logs") / "traffic.txt"

    # Don't forget to initialize the client before making requests!
    await CoreClient.initialize(config=config, logger=FileRequestLogger(log_file))
    client = CoreClient()

    try:
        response = await client.get("/posts/1")
        console.print(f"[green]GET[/green] {response.status_code}: {response.data['title']}")

        response = await client.post(
            "/posts",
            data={"title": "New Post", "body": "This is a new post", "userId": 1},
        )
        console.print(f"[green]POST[/green] {response.status_code}: id={response.data['id']}")

        response = await client.put(
            "/posts/1",
            data={"id": 1, "title": "Updated Post", "body": "Updated body", "userId": 1},
        )
        console.print(f"[green]PUT[/green] {response.status_code}: {response.data['title']}")

        response = await client.delete("/posts/1")
        console.print(f"[green]DELETE[/green] {response.status_code}")

        try:
            await client.get("/this-does-not-exist")
        except RequestError as e:
            console.print(f"[red]Expected failure[/red] status={e.status}")

        # Same request without exceptions
        result = await client.send(HTTPMethod.GET, RequestOptions(path="/posts", query_parameters={"userId": 1}))
        if isinstance(result, Success):
            console.print(f"[green]send()[/green] {len(result.response.data)} posts")
        else:
            console.print(f"[red]send() failed[/red] {result.error}")
    finally:
        await CoreClient.close()

    console.print(f"\n[dim]HTTP traffic logged to: {log_file.absolute()}[/dim]")


if __name__ == "__main__":
    basicConfig(
        level="INFO",
        format="[%(name)s] %(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    asyncio.run(main())
