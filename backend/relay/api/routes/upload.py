from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from relay.api.deps import get_dispatcher
from relay.models.events import UploadRequest
from relay.services.dispatcher import DispatchError, EventDispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload")
async def upload_event(
    body: UploadRequest,
    dispatcher: EventDispatcher = Depends(get_dispatcher),
):
    try:
        result = await dispatcher.dispatch(body)
    except DispatchError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": exc.message},
        )
    except Exception:
        logger.exception("Error processing event %s", body.event)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )
    return result.to_response()
