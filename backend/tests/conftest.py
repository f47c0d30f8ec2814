from __future__ import annotations

from collections import defaultdict
import json
from typing import Any

import httpx
import pytest

from relay.clients.docstore import DocumentStoreClient
from relay.clients.pusher import PusherClient
from relay.config import DatabaseSettings
from relay.main import app
from relay.repositories.connection import DocumentStore
from relay.services.broadcaster import EventBroadcaster

DATABASE_SETTINGS = DatabaseSettings(
    app_id="app",
    master_key="master",
    server_url="https://db.example.com",
)


class FakeDocumentStoreBackend:
    """In-memory stand-in for the document store's REST storage API."""

    def __init__(self) -> None:
        self.objects: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None

    @property
    def creates(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.method == "POST"]

    @property
    def pings(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == "/1.1/date"]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"code": 1, "error": "unavailable"})
        path = request.url.path
        if path == "/1.1/date":
            return httpx.Response(200, json={"__type": "Date", "iso": "2025-01-01T00:00:00.000Z"})
        if not path.startswith("/1.1/classes/"):
            return httpx.Response(404, json={"code": 101, "error": "not found"})
        class_name = path.rsplit("/", 1)[-1]
        if request.method == "POST":
            payload = json.loads(request.content)
            sequence = sum(len(items) for items in self.objects.values()) + 1
            created = {
                "objectId": f"obj-{sequence}",
                "createdAt": f"2025-01-01T00:00:00.{sequence:03d}Z",
            }
            self.objects[class_name].append(payload | created)
            return httpx.Response(201, json=created)
        params = request.url.params
        where = json.loads(params.get("where", "{}"))
        limit = int(params.get("limit", 100))
        skip = int(params.get("skip", 0))
        matches = [
            item
            for item in self.objects[class_name]
            if all(item.get(key) == value for key, value in where.items())
        ]
        return httpx.Response(200, json={"results": matches[skip : skip + limit]})


class FakeBroker:
    """Captures events published through the Pusher HTTP API."""

    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, text="broker unavailable")
        body = json.loads(request.content)
        self.events.append(
            {
                "channel": body["channels"][0],
                "name": body["name"],
                "data": json.loads(body["data"]),
            }
        )
        return httpx.Response(200, json={})


@pytest.fixture
def broker_env(monkeypatch):
    monkeypatch.setenv("PUSHER_APP_ID", "1234")
    monkeypatch.setenv("PUSHER_KEY", "key")
    monkeypatch.setenv("PUSHER_SECRET", "secret")
    monkeypatch.setenv("PUSHER_CLUSTER", "eu")
    monkeypatch.delenv("PUSHER_CHANNEL", raising=False)


@pytest.fixture
def docstore_backend():
    return FakeDocumentStoreBackend()


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
async def docstore_client(docstore_backend):
    client = DocumentStoreClient(
        app_id=DATABASE_SETTINGS.app_id,
        master_key=DATABASE_SETTINGS.master_key,
        server_url=DATABASE_SETTINGS.server_url,
        transport=httpx.MockTransport(docstore_backend),
    )
    yield client
    await client.close()


@pytest.fixture
async def pusher_client(broker):
    client = PusherClient(
        app_id="1234",
        key="key",
        secret="secret",
        cluster="eu",
        transport=httpx.MockTransport(broker),
    )
    yield client
    await client.close()


@pytest.fixture
async def document_store(docstore_backend):
    store = DocumentStore(
        settings_loader=lambda: DATABASE_SETTINGS,
        transport=httpx.MockTransport(docstore_backend),
    )
    yield store
    await store.close()


@pytest.fixture
def relay_app(pusher_client, document_store):
    app.state.pusher = pusher_client
    app.state.broadcaster = EventBroadcaster(pusher_client, "presentation")
    app.state.document_store = document_store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def api_client(relay_app):
    transport = httpx.ASGITransport(app=relay_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
