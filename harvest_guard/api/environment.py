"""Environment lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from harvest_guard.api.deps import get_assessment_service
from harvest_guard.core.exceptions import EnvironmentUnavailable
from harvest_guard.models import EnvironmentReading, Locale, WeatherAdvisory
from harvest_guard.services.assessment import RiskAssessmentService
from harvest_guard.services.recommendations import weather_advisories

router = APIRouter(prefix="/environment", tags=["environment"])


class EnvironmentResponse(BaseModel):
    reading: EnvironmentReading
    advisories: list[WeatherAdvisory]


@router.get("/{location}", response_model=EnvironmentResponse)
async def get_environment(
    location: str,
    locale: Locale = Query("en"),
    service: RiskAssessmentService = Depends(get_assessment_service),
) -> EnvironmentResponse:
    try:
        reading = await service.cache.get(location)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except EnvironmentUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return EnvironmentResponse(reading=reading, advisories=weather_advisories(reading, locale))


__all__ = ["router"]
