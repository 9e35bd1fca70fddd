"""Risk assessment endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from harvest_guard.api.deps import get_assessment_service
from harvest_guard.core.exceptions import InvalidBatch
from harvest_guard.models import CropBatch, Locale, PortfolioSummary, RiskAssessment, RiskScore
from harvest_guard.services.assessment import RiskAssessmentService

router = APIRouter(prefix="/risk", tags=["risk"])


class PortfolioResponse(BaseModel):
    summary: PortfolioSummary | None = Field(
        default=None, description="Null when the farmer has no active batches."
    )
    batches: list[RiskScore] = Field(default_factory=list)


@router.post("/assess", response_model=RiskAssessment)
async def assess_batch(
    batch: CropBatch,
    locale: Locale = Query("en"),
    service: RiskAssessmentService = Depends(get_assessment_service),
) -> RiskAssessment:
    try:
        return await service.assess_batch(batch, locale=locale)
    except InvalidBatch as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/portfolio", response_model=PortfolioResponse)
async def assess_portfolio(
    batches: list[CropBatch],
    locale: Locale = Query("en"),
    service: RiskAssessmentService = Depends(get_assessment_service),
) -> PortfolioResponse:
    scores, rejected = await service.score_batches(batches, locale=locale)
    summary = service.aggregator.aggregate(scores, rejected_batch_ids=rejected)
    return PortfolioResponse(summary=summary, batches=scores)


__all__ = ["router"]
