from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from relay.api.deps import get_repository_provider
from relay.repositories.evaluation_repository import EvaluationRecord
from relay.services.dispatcher import RepositoryProvider

logger = logging.getLogger(__name__)

router = APIRouter()


def group_by_team(records: list[EvaluationRecord]) -> dict[str, list[dict[str, Any]]]:
    grouped: dict[str, list[dict[str, Any]]] = {}
    for record in records:
        key = record.team_name if record.team_name is not None else "null"
        grouped.setdefault(key, []).append(record.to_feedback())
    return grouped


@router.get("/feedbacks")
async def list_feedbacks(
    repositories: RepositoryProvider = Depends(get_repository_provider),
):
    try:
        repository = await repositories()
        records = await repository.find_all()
    except Exception:
        logger.exception("Error fetching feedbacks")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )
    return group_by_team(records)
