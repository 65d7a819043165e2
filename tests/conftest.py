"""Shared fixtures.

The hosted database and the webhook receiver are replaced by
``httpx.MockTransport`` handlers that record every request, so the
whole app runs in-process through ``httpx.ASGITransport``.
"""

import json

import httpx
import pytest
from backends.database import DatabaseClient
from backends.webhook import WebhookNotifier
from gateway.config import Settings
from gateway.server import create_app


class FakeDatabase:
    """PostgREST stand-in: echoes written rows, fails on request."""

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self.failures: dict[tuple[str, str], tuple[int, dict]] = {}

    def fail(self, method: str, table: str, status: int = 400, message: str = "boom") -> None:
        self.failures[(method, table)] = (status, {"message": message, "code": "23505"})

    def calls(self, method: str | None = None, table: str | None = None) -> list[dict]:
        return [
            r
            for r in self.requests
            if (method is None or r["method"] == method) and (table is None or r["table"] == table)
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        table = request.url.path.rsplit("/", 1)[-1]
        payload = json.loads(request.content) if request.content else None
        self.requests.append(
            {
                "method": request.method,
                "table": table,
                "params": dict(request.url.params),
                "json": payload,
                "headers": dict(request.headers),
            }
        )
        failure = self.failures.get((request.method, table))
        if failure is not None:
            status, body = failure
            return httpx.Response(status, json=body)
        status = 201 if request.method == "POST" else 200
        return httpx.Response(status, json=[{"id": len(self.requests), **(payload or {})}])


class WebhookRecorder:
    def __init__(self, status: int = 200, error: Exception | None = None) -> None:
        self.status = status
        self.error = error
        self.payloads: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.error is not None:
            raise self.error
        self.payloads.append(json.loads(request.content))
        return httpx.Response(self.status)


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def hook():
    return WebhookRecorder()


def build_app(fake_db=None, hook=None, settings=None):
    database = None
    if fake_db is not None:
        database = DatabaseClient("http://db.test", "anon-key", transport=httpx.MockTransport(fake_db))
    webhook = None
    if hook is not None:
        webhook = WebhookNotifier("http://hooks.test/rise", transport=httpx.MockTransport(hook))
    return create_app(settings or Settings(), database=database, webhook=webhook)


def asgi_client(app):
    transport = httpx.ASGITransport(app=app)  # type: ignore[arg-type]
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
async def client(fake_db, hook):
    """App with both the database and the webhook wired to fakes."""
    async with asgi_client(build_app(fake_db, hook)) as c:
        yield c


@pytest.fixture
async def client_no_webhook(fake_db):
    async with asgi_client(build_app(fake_db)) as c:
        yield c


@pytest.fixture
def anyio_backend():
    """The app targets asyncio only; trio is not a project dependency."""
    return "asyncio"
