"""API dependencies."""

from __future__ import annotations

from fastapi import Request

from harvest_guard.services.assessment import RiskAssessmentService


def get_assessment_service(request: Request) -> RiskAssessmentService:
    return request.app.state.assessment_service
