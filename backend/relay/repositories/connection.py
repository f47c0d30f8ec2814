from __future__ import annotations

import asyncio
from enum import IntEnum
import logging
from typing import Callable

import httpx

from relay.clients.docstore import DocumentStoreClient
from relay.config import DatabaseSettings, load_database_settings
from relay.telemetry.tracing import emit_event

logger = logging.getLogger(__name__)


class ReadyState(IntEnum):
    DISCONNECTED = 0
    CONNECTED = 1
    CONNECTING = 2


class DocumentStore:
    """Process-wide handle on the document store, connected on first use.

    ``ensure_ready`` only connects while the handle is disconnected; callers
    that arrive during a connection attempt wait for that attempt.
    """

    def __init__(
        self,
        *,
        settings_loader: Callable[[], DatabaseSettings] = load_database_settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings_loader = settings_loader
        self._transport = transport
        self._state = ReadyState.DISCONNECTED
        self._client: DocumentStoreClient | None = None
        self._pending: asyncio.Future[DocumentStoreClient] | None = None

    @property
    def ready_state(self) -> ReadyState:
        return self._state

    async def ensure_ready(self) -> DocumentStoreClient:
        while True:
            if self._state is ReadyState.CONNECTED and self._client is not None:
                return self._client
            pending = self._pending
            if self._state is not ReadyState.CONNECTING or pending is None:
                break
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                # The connecting caller was cancelled, not this one: try again.
                if not pending.cancelled():
                    raise

        self._state = ReadyState.CONNECTING
        pending = asyncio.get_running_loop().create_future()
        self._pending = pending
        try:
            client = await self._connect()
        except BaseException as exc:
            self._state = ReadyState.DISCONNECTED
            self._pending = None
            if isinstance(exc, Exception):
                pending.set_exception(exc)
                # Retrieved here so waiter-less failures are not reported as unhandled.
                pending.exception()
                logger.error("Document store connection error: %s", exc)
            else:
                pending.cancel()
            raise
        self._client = client
        self._state = ReadyState.CONNECTED
        self._pending = None
        pending.set_result(client)
        emit_event("relay.docstore.connected")
        return client

    async def _connect(self) -> DocumentStoreClient:
        settings = self._settings_loader()
        client = DocumentStoreClient(
            app_id=settings.app_id,
            master_key=settings.master_key,
            server_url=settings.server_url,
            transport=self._transport,
        )
        try:
            await client.ping()
        except BaseException:
            await client.close()
            raise
        return client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
        self._client = None
        self._state = ReadyState.DISCONNECTED
