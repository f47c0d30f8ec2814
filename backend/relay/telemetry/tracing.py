from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger("relay.telemetry")


def build_event(
    name: str,
    *,
    channel: str | None = None,
    event: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload = {
        "type": "event",
        "name": name,
        "channel": channel,
        "event": event,
        "attributes": attributes or {},
    }
    return payload


def emit_event(
    name: str,
    *,
    channel: str | None = None,
    event: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload = build_event(
        name,
        channel=channel,
        event=event,
        attributes=attributes,
    )
    logger.info(json.dumps(payload, sort_keys=True, default=str))
    return payload
