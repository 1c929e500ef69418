"""MCP server exposing Twelve Data tools over stdio or HTTP."""

from __future__ import annotations

import contextlib
import logging
import sys
from typing import Any

import anyio
import uvicorn
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from . import __version__
from .client import TwelveDataClient
from .config import Settings, get_settings
from .constants import SERVER_NAME
from .registry import Dispatcher, build_registry

logger = logging.getLogger(__name__)


def create_server(dispatcher: Dispatcher) -> Server:
    """Bind the dispatcher to an MCP server instance."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    # Arguments are validated by the dispatcher so that every failure shares one envelope
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await dispatcher.call(name, arguments)

    return server


def build_server(settings: Settings) -> Server:
    client = TwelveDataClient(settings.api_key, base_url=settings.base_url)
    return create_server(Dispatcher(client, build_registry()))


class StreamableHTTPEndpoint:
    """ASGI adapter so the session manager can be routed at an exact path."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope, receive, send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


def create_http_app(server: Server) -> Starlette:
    """Create the Starlette app serving health, Streamable HTTP and legacy SSE endpoints.

    Routes:
        GET  /health     liveness probe
        POST /mcp        Streamable HTTP (stateless, JSON responses)
        GET  /sse        SSE stream for legacy clients (e.g. n8n)
        POST /messages/  SSE message post, keyed by ``session_id``
    """
    session_manager = StreamableHTTPSessionManager(app=server, json_response=True, stateless=True)
    sse_transport = SseServerTransport("/messages/")

    async def handle_health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "server": SERVER_NAME})

    async def handle_sse(request: Request) -> Response:
        async with sse_transport.connect_sse(request.scope, request.receive, request._send) as streams:
            await server.run(streams[0], streams[1], server.create_initialization_options())
        return Response()

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        async with session_manager.run():
            yield

    return Starlette(
        routes=[
            Route("/health", handle_health, methods=["GET"]),
            Route("/mcp", StreamableHTTPEndpoint(session_manager)),
            Route("/sse", handle_sse, methods=["GET"]),
            Mount("/messages/", app=sse_transport.handle_post_message),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["*"],
                allow_headers=["*"],
                expose_headers=["Mcp-Session-Id"],
            )
        ],
        lifespan=lifespan,
    )


async def run_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Twelve Data MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run_http(server: Server, settings: Settings) -> None:
    app = create_http_app(server)
    logger.info(f"Twelve Data MCP Server running on http://{settings.mcp_host}:{settings.port}")
    logger.info("  - Streamable HTTP: POST /mcp")
    logger.info("  - SSE: GET /sse, POST /messages/")
    uvicorn.run(app, host=settings.mcp_host, port=settings.port, log_level=settings.log_level.lower())


def main() -> None:
    """Run the MCP server with the transport selected by ``TRANSPORT``."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = get_settings()
    except ValueError as exc:
        logger.error(f"Configuration error: {exc}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    server = build_server(settings)

    if settings.transport == "http":
        run_http(server, settings)
    else:
        anyio.run(run_stdio, server)


if __name__ == "__main__":
    main()
