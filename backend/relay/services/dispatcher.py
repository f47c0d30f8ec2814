from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from relay.models.events import (
    RELAY_EVENTS,
    EvaluationSubmission,
    EventKind,
    UploadKind,
    UploadRequest,
)
from relay.repositories.evaluation_repository import EvaluationRepository
from relay.services.broadcaster import EventBroadcaster
from relay.telemetry.tracing import emit_event

logger = logging.getLogger(__name__)

RepositoryProvider = Callable[[], Awaitable[EvaluationRepository]]
Handler = Callable[[EventKind, Any], Awaitable[None]]


class DispatchError(ValueError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidEventError(DispatchError):
    pass


class InvalidPayloadError(DispatchError):
    pass


@dataclass(frozen=True)
class DispatchResult:
    message: str
    count: int | None = None

    def to_response(self) -> dict[str, Any]:
        response: dict[str, Any] = {"message": self.message}
        if self.count is not None:
            response["count"] = self.count
        return response


class EventDispatcher:
    """Routes an uploaded event to a broadcast or a persist-then-broadcast flow.

    The evaluation repository is resolved through ``repositories`` only when
    an event needs persistence, so relay events never touch the store.
    """

    def __init__(self, broadcaster: EventBroadcaster, repositories: RepositoryProvider) -> None:
        self._broadcaster = broadcaster
        self._repositories = repositories
        self._handlers: dict[EventKind, Handler] = {kind: self._relay for kind in RELAY_EVENTS}
        self._handlers[EventKind.EVALUATION_SUBMITTED] = self._submit_evaluation

    async def dispatch(self, request: UploadRequest) -> DispatchResult:
        if isinstance(request.type, str) and request.type in {kind.value for kind in UploadKind}:
            return self._acknowledge_upload(UploadKind(request.type), request.data)

        kind = EventKind.parse(request.event)
        handler = self._handlers.get(kind) if kind is not None else None
        if handler is None:
            raise InvalidEventError("Invalid event type")
        await handler(kind, request.data)
        return DispatchResult("Event processed successfully")

    def _acknowledge_upload(self, kind: UploadKind, data: Any) -> DispatchResult:
        # Bulk uploads are acknowledged only; nothing is stored or broadcast.
        if not isinstance(data, list):
            raise InvalidPayloadError("Invalid upload payload")
        logger.info("Acknowledged %s upload (%s items)", kind.value, len(data))
        return DispatchResult(f"Successfully processed {kind.value} upload", count=len(data))

    async def _relay(self, kind: EventKind, data: Any) -> None:
        await self._broadcaster.publish(kind.value, data)

    async def _submit_evaluation(self, kind: EventKind, data: Any) -> None:
        try:
            submission = EvaluationSubmission.model_validate(data)
        except ValidationError as exc:
            raise InvalidPayloadError("Invalid evaluation payload") from exc

        repository = await self._repositories()
        record = await repository.create_evaluation(
            team_name=submission.team,
            evaluator_usn=submission.evaluator,
            ratings=submission.evaluation.ratings,
            feedback=submission.evaluation.feedback,
        )
        emit_event(
            "relay.evaluation.persisted",
            event=kind.value,
            attributes={"evaluationId": record.id, "team": submission.team},
        )

        await self._broadcaster.publish(kind.value, {**data, "evaluationId": record.id})

        team_records = await repository.find_by_team(submission.team)
        await self._broadcaster.publish(
            EventKind.TEAM_EVALUATIONS.value,
            {
                "team": data.get("team"),
                "evaluations": [item.to_document() for item in team_records],
            },
        )
