from __future__ import annotations

from dataclasses import dataclass
import hashlib
import hmac
import json
import re
import time
from typing import Any, Callable

import httpx

AUTH_VERSION = "1.0"

_SOCKET_ID = re.compile(r"\A\d+\.\d+\Z")
_CHANNEL_NAME = re.compile(r"\A[-a-zA-Z0-9_=@,.;]{1,200}\Z")


@dataclass(frozen=True)
class PusherError(Exception):
    message: str
    status_code: int | None = None
    body: str | None = None

    def __str__(self) -> str:
        return self.message


class PusherAuthError(ValueError):
    pass


def _sign(secret: str, message: str) -> str:
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


class PusherClient:
    """Async client for the Pusher Channels HTTP API."""

    def __init__(
        self,
        *,
        app_id: str,
        key: str,
        secret: str,
        cluster: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        for name, value in (
            ("app_id", app_id),
            ("key", key),
            ("secret", secret),
            ("cluster", cluster),
        ):
            if not value:
                raise PusherError(f"Missing Pusher credential: {name}")
        self.app_id = app_id
        self.key = key
        self._secret = secret
        self._clock = clock
        self._client = httpx.AsyncClient(
            base_url=f"https://api-{cluster}.pusher.com",
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    def _signed_params(self, method: str, path: str, body: bytes) -> dict[str, str]:
        params = {
            "auth_key": self.key,
            "auth_timestamp": str(int(self._clock())),
            "auth_version": AUTH_VERSION,
            "body_md5": hashlib.md5(body).hexdigest(),
        }
        query = "&".join(f"{name}={params[name]}" for name in sorted(params))
        params["auth_signature"] = _sign(self._secret, f"{method}\n{path}\n{query}")
        return params

    async def trigger(self, channel: str, event: str, data: Any) -> dict[str, Any]:
        path = f"/apps/{self.app_id}/events"
        body = json.dumps(
            {"name": event, "channels": [channel], "data": json.dumps(data, default=str)},
            separators=(",", ":"),
        ).encode("utf-8")
        try:
            response = await self._client.post(
                path,
                content=body,
                params=self._signed_params("POST", path, body),
            )
        except httpx.RequestError as exc:
            raise PusherError(f"Pusher request failed: {exc}") from exc
        if not response.is_success:
            raise PusherError(
                f"Pusher error {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        if not response.text:
            return {}
        return response.json()

    def authorize_channel(self, socket_id: str, channel_name: str) -> dict[str, str]:
        if not isinstance(socket_id, str) or not _SOCKET_ID.match(socket_id):
            raise PusherAuthError(f"Invalid socket id: {socket_id!r}")
        if not isinstance(channel_name, str) or not _CHANNEL_NAME.match(channel_name):
            raise PusherAuthError(f"Invalid channel name: {channel_name!r}")
        signature = _sign(self._secret, f"{socket_id}:{channel_name}")
        return {"auth": f"{self.key}:{signature}"}
