"""Shared fixtures for SynClub adapter tests."""

import json

import httpx
import pytest
import pytest_asyncio

from synclub_mcp.client import GatewayClient
from synclub_mcp.config import Settings

API_HOST = "http://comic.test"
API_KEY = "test-key"


class RecordingBackend:
    """httpx.MockTransport handler that replays queued responses per path.

    Each queued item is either a JSON-able body (sent with status 200) or a
    ready httpx.Response. Every request is recorded with its decoded JSON body.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def queue(self, path, *responses):
        self.routes.setdefault(path, []).extend(responses)
        return self

    def calls(self, path):
        return [r for r in self.requests if r["path"] == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = None
        if request.content and request.headers.get("content-type", "").startswith(
            "application/json"
        ):
            body = json.loads(request.content)
        self.requests.append(
            {"path": request.url.path, "request": request, "json": body}
        )
        queued = self.routes.get(request.url.path)
        if not queued:
            return httpx.Response(404, json={"detail": "not found"})
        item = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)


class FakeGateway:
    """Stands in for GatewayClient in poller tests; replays bodies in order."""

    def __init__(self, *bodies):
        self.bodies = list(bodies)
        self.posts = []

    async def post(self, endpoint, **kwargs):
        self.posts.append((endpoint, kwargs))
        if len(self.bodies) > 1:
            return self.bodies.pop(0)
        return self.bodies[0]


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture
def settings():
    return Settings(
        api_key=API_KEY,
        api_host=API_HOST,
        poll_interval=0,
        image_edit_poll_interval=0,
        _env_file=None,
    )


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest_asyncio.fixture
async def gateway(backend):
    client = GatewayClient(
        api_key=API_KEY,
        api_host=API_HOST,
        transport=httpx.MockTransport(backend),
    )
    yield client
    await client.aclose()


@pytest.fixture
def make_gateway():
    """Factory for a FakeGateway replaying the given bodies."""
    return FakeGateway


@pytest.fixture
def sleep():
    return RecordingSleep()
