from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from relay.api.router import api_router, root_router
from relay.clients.pusher import PusherClient
from relay.config import load_app_settings, load_broker_settings
from relay.repositories.connection import DocumentStore
from relay.services.broadcaster import EventBroadcaster
from relay.telemetry.metrics import metrics_middleware

CORS_ORIGINS = ["*"]

logger = logging.getLogger("relay")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_app_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.setLevel(settings.log_level)

    broker = load_broker_settings()
    pusher = PusherClient(
        app_id=broker.app_id,
        key=broker.key,
        secret=broker.secret,
        cluster=broker.cluster,
    )
    document_store = DocumentStore()
    app.state.settings = settings
    app.state.pusher = pusher
    app.state.broadcaster = EventBroadcaster(pusher, broker.channel)
    app.state.document_store = document_store
    app.state.lifespan_started = True
    logger.info("Relay started (channel=%s, static_dir=%s)", broker.channel, settings.static_dir)
    try:
        yield
    finally:
        await document_store.close()
        await pusher.close()
        app.state.lifespan_shutdown = True


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(metrics_middleware)
app.include_router(api_router, prefix="/api")
app.include_router(root_router)
