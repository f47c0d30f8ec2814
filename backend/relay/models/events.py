from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class EventKind(str, Enum):
    PRESENTATION_STARTING = "presentationStarting"
    PRESENTATION_STARTED = "presentationStarted"
    PRESENTATION_ENDED = "presentationEnded"
    TIME_SYNC = "timeSync"
    EVALUATION_FORM = "evaluationForm"
    PRESENTATION_RESET = "presentationReset"
    EVALUATION_SUBMITTED = "evaluationSubmitted"
    TEAM_EVALUATIONS = "teamEvaluations"

    @classmethod
    def parse(cls, name: Any) -> EventKind | None:
        if not isinstance(name, str):
            return None
        try:
            return cls(name)
        except ValueError:
            return None


RELAY_EVENTS = frozenset(
    {
        EventKind.PRESENTATION_STARTING,
        EventKind.PRESENTATION_STARTED,
        EventKind.PRESENTATION_ENDED,
        EventKind.TIME_SYNC,
        EventKind.EVALUATION_FORM,
        EventKind.PRESENTATION_RESET,
    }
)


class UploadKind(str, Enum):
    PARTICIPANTS = "participants"
    TEAMS = "teams"


class UploadRequest(BaseModel):
    event: Any = None
    data: Any = None
    type: Any = None


def _as_store_string(value: Any) -> Any:
    # String columns take scalars the way the store casts them: 7 -> "7".
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class SubmittedEvaluation(BaseModel):
    model_config = ConfigDict(extra="allow")

    ratings: Any = None
    feedback: Any = None

    @field_validator("feedback", mode="before")
    @classmethod
    def _cast_feedback(cls, value: Any) -> Any:
        return _as_store_string(value)


class EvaluationSubmission(BaseModel):
    model_config = ConfigDict(extra="allow")

    team: Any = None
    evaluator: Any = None
    evaluation: SubmittedEvaluation

    @field_validator("team", "evaluator", mode="before")
    @classmethod
    def _cast_identity(cls, value: Any) -> Any:
        return _as_store_string(value)


class ChannelAuthRequest(BaseModel):
    socket_id: str
    channel_name: str
