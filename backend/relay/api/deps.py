from __future__ import annotations

from pathlib import Path

from fastapi import Depends, Request

from relay.clients.pusher import PusherClient
from relay.repositories.connection import DocumentStore
from relay.repositories.evaluation_repository import EvaluationRepository
from relay.services.broadcaster import EventBroadcaster
from relay.services.dispatcher import EventDispatcher, RepositoryProvider


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_pusher_client(request: Request) -> PusherClient:
    return request.app.state.pusher


def get_broadcaster(request: Request) -> EventBroadcaster:
    return request.app.state.broadcaster


def get_repository_provider(
    store: DocumentStore = Depends(get_document_store),
) -> RepositoryProvider:
    async def _repository() -> EvaluationRepository:
        client = await store.ensure_ready()
        return EvaluationRepository(client)

    return _repository


def get_dispatcher(
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
    repositories: RepositoryProvider = Depends(get_repository_provider),
) -> EventDispatcher:
    return EventDispatcher(broadcaster, repositories)


def get_static_dir(request: Request) -> Path:
    return request.app.state.settings.static_dir
