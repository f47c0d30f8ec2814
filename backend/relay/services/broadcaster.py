from __future__ import annotations

from typing import Any, Protocol

from relay.telemetry.tracing import emit_event


class TriggerClient(Protocol):
    async def trigger(self, channel: str, event: str, data: Any) -> dict[str, Any]: ...


class EventBroadcaster:
    """Publishes named events to a single broker channel."""

    def __init__(self, client: TriggerClient, channel: str) -> None:
        self._client = client
        self.channel = channel

    async def publish(self, event: str, payload: Any) -> None:
        await self._client.trigger(self.channel, event, payload)
        emit_event("relay.broadcast", channel=self.channel, event=event)
