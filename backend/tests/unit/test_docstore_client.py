import json

import httpx
import pytest

from relay.clients.docstore import DocumentStoreClient, DocumentStoreError


def _client(handler):
    return DocumentStoreClient(
        app_id="app",
        master_key="master",
        server_url="https://db.example.com",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_requests_carry_master_credentials():
    captured = []

    async def handler(request):
        captured.append(request)
        return httpx.Response(200, json={"__type": "Date", "iso": "2025-01-01T00:00:00.000Z"})

    client = _client(handler)

    await client.ping()

    assert captured[0].url.path == "/1.1/date"
    assert captured[0].headers["X-LC-Id"] == "app"
    assert captured[0].headers["X-LC-Key"] == "master,master"

    await client.close()


@pytest.mark.asyncio
async def test_query_objects_pages_through_results():
    items = [{"objectId": f"obj-{index}"} for index in range(5)]
    skips = []

    async def handler(request):
        skip = int(request.url.params["skip"])
        limit = int(request.url.params["limit"])
        skips.append(skip)
        assert request.url.params["order"] == "createdAt"
        assert json.loads(request.url.params["where"]) == {"teamName": "T1"}
        return httpx.Response(200, json={"results": items[skip : skip + limit]})

    client = _client(handler)

    results = await client.query_objects("Evaluation", where={"teamName": "T1"}, page_limit=2)

    assert [item["objectId"] for item in results] == [item["objectId"] for item in items]
    assert skips == [0, 2, 4]

    await client.close()


@pytest.mark.asyncio
async def test_query_without_filter_omits_where():
    captured = []

    async def handler(request):
        captured.append(request)
        return httpx.Response(200, json={"results": []})

    client = _client(handler)

    assert await client.query_objects("Evaluation") == []
    assert "where" not in captured[0].url.params

    await client.close()


@pytest.mark.asyncio
async def test_error_surface_on_client_error():
    async def handler(request):
        return httpx.Response(400, text="bad request")

    client = _client(handler)

    with pytest.raises(DocumentStoreError) as exc:
        await client.create_object("Evaluation", {"teamName": "T1"})

    assert exc.value.status_code == 400
    assert exc.value.body == "bad request"

    await client.close()


@pytest.mark.asyncio
async def test_create_requires_object_id():
    async def handler(request):
        return httpx.Response(201, json={"createdAt": "2025-01-01T00:00:00.000Z"})

    client = _client(handler)

    with pytest.raises(DocumentStoreError) as exc:
        await client.create_object("Evaluation", {"teamName": "T1"})

    assert "objectId" in str(exc.value)

    await client.close()


@pytest.mark.asyncio
async def test_server_errors_are_not_retried():
    calls = {"count": 0}

    async def handler(request):
        calls["count"] += 1
        return httpx.Response(503, json={"error": "server"})

    client = _client(handler)

    with pytest.raises(DocumentStoreError) as exc:
        await client.ping()

    assert exc.value.status_code == 503
    assert calls["count"] == 1

    await client.close()
