from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status
from fastapi.responses import PlainTextResponse

from relay.telemetry.metrics import render_latest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/metrics")
def metrics():
    try:
        content, media_type = render_latest()
    except Exception:
        logger.exception("Error collecting metrics")
        return PlainTextResponse(
            "Error collecting metrics",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return Response(content=content, media_type=media_type)
