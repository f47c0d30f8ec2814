from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from relay.api.deps import get_pusher_client
from relay.clients.pusher import PusherAuthError, PusherClient
from relay.models.events import ChannelAuthRequest

router = APIRouter()


@router.post("/pusher-auth")
def authorize_channel(
    body: ChannelAuthRequest,
    client: PusherClient = Depends(get_pusher_client),
):
    try:
        return client.authorize_channel(body.socket_id, body.channel_name)
    except PusherAuthError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": str(exc)},
        )
