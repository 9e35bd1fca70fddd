"""Log tail and degraded-assessment endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from harvest_guard.api.deps import get_assessment_service
from harvest_guard.core.logging_config import get_log_buffer
from harvest_guard.services.assessment import RiskAssessmentService
from harvest_guard.services.notifications import DegradedEnvironmentEvent

router = APIRouter(prefix="/logs", tags=["logs"])


class DegradedEventsResponse(BaseModel):
    notifications: list[DegradedEnvironmentEvent]


@router.get("")
def list_logs(
    limit: int = Query(100, ge=1, le=500),
    level: Optional[str] = Query(None, description="Minimum level, e.g. WARNING"),
    location: Optional[str] = None,
    batch_id: Optional[str] = None,
) -> dict[str, list[dict[str, str]]]:
    try:
        logs = get_log_buffer(limit=limit, min_level=level, location=location, batch_id=batch_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"logs": logs}


@router.get("/notifications", response_model=DegradedEventsResponse)
def list_degraded_events(
    limit: int = Query(20, ge=1, le=200),
    location: Optional[str] = None,
    service: RiskAssessmentService = Depends(get_assessment_service),
) -> DegradedEventsResponse:
    return DegradedEventsResponse(
        notifications=service.degraded_events.recent(limit, location=location)
    )


__all__ = ["router"]
