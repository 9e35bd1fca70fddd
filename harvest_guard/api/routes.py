"""Service health."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from harvest_guard.api.deps import get_assessment_service
from harvest_guard.core.config import settings
from harvest_guard.services.assessment import RiskAssessmentService

health_router = APIRouter(tags=["system"])


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    environment_provider: str
    cached_locations: list[str]
    degraded_locations: list[str]
    advisory_enabled: bool


@health_router.get("/health", response_model=HealthResponse, summary="Service health probe")
async def healthcheck(
    service: RiskAssessmentService = Depends(get_assessment_service),
) -> HealthResponse:
    """Report the weather provider and which locations are currently cached.

    ``degraded_locations`` lists locations whose weather recently failed and
    were scored on neutral defaults; the service itself stays up.
    """

    return HealthResponse(
        version=settings.app_version,
        environment_provider=getattr(service.cache.source, "name", type(service.cache.source).__name__),
        cached_locations=service.cache.cached_locations(),
        degraded_locations=service.degraded_events.affected_locations(),
        advisory_enabled=service.advisor is not None,
    )


__all__ = ["health_router", "HealthResponse"]
