from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from relay.clients.docstore import DocumentStoreClient

EVALUATION_CLASS = "Evaluation"


@dataclass(frozen=True)
class EvaluationRecord:
    id: str
    team_name: str | None
    evaluator_usn: str | None
    ratings: Any
    feedback: str | None
    submitted_at: str | None

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "teamName": self.team_name,
            "evaluatorUSN": self.evaluator_usn,
            "ratings": self.ratings,
            "feedback": self.feedback,
            "submittedAt": self.submitted_at,
        }

    def to_feedback(self) -> dict[str, Any]:
        return {
            "evaluatorUSN": self.evaluator_usn,
            "ratings": self.ratings,
            "feedback": self.feedback,
            "submittedAt": self.submitted_at,
        }


def _evaluation_from_store(payload: dict[str, Any]) -> EvaluationRecord:
    return EvaluationRecord(
        id=payload["objectId"],
        team_name=payload.get("teamName"),
        evaluator_usn=payload.get("evaluatorUSN"),
        ratings=payload.get("ratings"),
        feedback=payload.get("feedback"),
        submitted_at=_normalize_date(payload.get("submittedAt")),
    )


def _normalize_date(raw: Any) -> str | None:
    if isinstance(raw, dict):
        return raw.get("iso") or raw.get("value")
    if isinstance(raw, str):
        return raw
    return None


def _format_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class EvaluationRepository:
    def __init__(self, client: DocumentStoreClient) -> None:
        self._client = client

    async def create_evaluation(
        self,
        *,
        team_name: str | None,
        evaluator_usn: str | None,
        ratings: Any,
        feedback: str | None,
        submitted_at: datetime | None = None,
    ) -> EvaluationRecord:
        submitted_at = submitted_at or datetime.now(timezone.utc)
        payload = {
            "teamName": team_name,
            "evaluatorUSN": evaluator_usn,
            "ratings": ratings,
            "feedback": feedback,
            "submittedAt": {"__type": "Date", "iso": _format_iso(submitted_at)},
        }
        response = await self._client.create_object(EVALUATION_CLASS, payload)
        return _evaluation_from_store(payload | response)

    async def find_by_team(self, team_name: str | None) -> list[EvaluationRecord]:
        results = await self._client.query_objects(
            EVALUATION_CLASS, where={"teamName": team_name}
        )
        return [_evaluation_from_store(item) for item in results]

    async def find_all(self) -> list[EvaluationRecord]:
        results = await self._client.query_objects(EVALUATION_CLASS)
        return [_evaluation_from_store(item) for item in results]
