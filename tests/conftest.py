"""Shared fixtures: an in-process fake of the Twelve Data API."""

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from twelvedata_mcp.client import TwelveDataClient
from twelvedata_mcp.registry import Dispatcher, build_registry


class FakeTwelveData:
    """Serves canned responses per path and records every request it gets."""

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.base_url = ""

    def respond(self, path, payload, status=200):
        self.routes[path] = (status, payload)

    @property
    def call_count(self):
        return len(self.requests)

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append((request.path, dict(request.query)))
        status, payload = self.routes.get(
            request.path,
            (404, {"status": "error", "code": 404, "message": "not found"}),
        )
        if isinstance(payload, str):
            return web.Response(status=status, text=payload)
        return web.json_response(payload, status=status)


@pytest.fixture
async def upstream():
    fake = FakeTwelveData()
    app = web.Application()
    app.router.add_route("GET", "/{path:.*}", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.base_url = str(server.make_url("")).rstrip("/")
    try:
        yield fake
    finally:
        await server.close()


@pytest.fixture
def client(upstream):
    return TwelveDataClient("test-key", base_url=upstream.base_url)


@pytest.fixture
def dispatcher(client):
    return Dispatcher(client, build_registry())

