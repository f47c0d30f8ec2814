from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Any

import httpx

PAGE_LIMIT = 1000


@dataclass(frozen=True)
class DocumentStoreError(Exception):
    message: str
    status_code: int | None = None
    body: str | None = None

    def __str__(self) -> str:
        return self.message


class DocumentStoreClient:
    def __init__(
        self,
        *,
        app_id: str,
        master_key: str,
        server_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=server_url,
            timeout=timeout,
            transport=transport,
            headers={
                "X-LC-Id": app_id,
                "X-LC-Key": f"{master_key},master",
                "Accept": "application/json",
            },
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def request_json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise DocumentStoreError(f"Document store request failed: {exc}") from exc
        if not response.is_success:
            raise DocumentStoreError(
                f"Document store error {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        if not response.text:
            return {}
        return response.json()

    async def ping(self) -> dict[str, Any]:
        return await self.request_json("GET", "/1.1/date")

    async def create_object(self, class_name: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.request_json(
            "POST", f"/1.1/classes/{class_name}", json=payload
        )
        if "objectId" not in response:
            raise DocumentStoreError(f"Create {class_name} response missing 'objectId'")
        return response

    async def query_objects(
        self,
        class_name: str,
        *,
        where: dict[str, Any] | None = None,
        order: str = "createdAt",
        page_limit: int = PAGE_LIMIT,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"order": order, "limit": page_limit}
        if where:
            params["where"] = json.dumps(where)
        results: list[dict[str, Any]] = []
        skip = 0
        while True:
            page = await self.request_json(
                "GET",
                f"/1.1/classes/{class_name}",
                params=params | {"skip": skip},
            )
            batch = page.get("results", [])
            if not isinstance(batch, list):
                raise DocumentStoreError(f"Query {class_name} response missing 'results'")
            results.extend(batch)
            if len(batch) < page_limit:
                return results
            skip += len(batch)
