"""Risk engine outputs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field

RiskLevel = Literal["low", "medium", "high", "critical"]
Locale = Literal["en", "bn"]
RecommendationSource = Literal["deterministic", "advisory"]


class RiskScore(BaseModel):
    """Continuous portfolio-style score for one batch."""

    batch_id: Optional[str] = None
    risk_score: float = Field(ge=0, le=100)
    expected_loss_percent: int = Field(ge=0, le=50)
    suggestions: list[str] = Field(default_factory=list)
    environment_degraded: bool = False


class EtclResult(BaseModel):
    """Threshold-ladder classification of one batch."""

    risk_level: RiskLevel
    etcl_hours: float = Field(ge=0)
    etcl_label: str
    etcl_label_localized: str
    aflatoxin_risk: bool


class Recommendation(BaseModel):
    text: str
    text_localized: str
    source: RecommendationSource = "deterministic"


class WeatherAdvisory(BaseModel):
    level: Literal["high", "medium", "good"]
    title: str
    message: str


class RiskAssessment(BaseModel):
    """Complete assessment for a single batch; never partially filled."""

    batch_id: str
    risk_level: RiskLevel
    etcl_hours: float
    etcl_label: str
    etcl_label_localized: str
    aflatoxin_risk: bool
    moisture_level: float
    temperature_level: float
    recommendation: str
    recommendation_localized: str
    recommendation_source: RecommendationSource = "deterministic"
    risk_score: float
    expected_loss_percent: int
    suggestions: list[str] = Field(default_factory=list)
    environment_degraded: bool = False
    telemetry_estimated: bool = False


class PortfolioSummary(BaseModel):
    """Aggregate over the active batches of one farmer."""

    batch_count: int
    average_risk_score: int = Field(ge=0, le=100)
    average_expected_loss_percent: int = Field(ge=0, le=100)
    degraded_batch_ids: list[str] = Field(default_factory=list)
    rejected_batch_ids: list[str] = Field(default_factory=list)
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = [
    "RiskLevel",
    "Locale",
    "RecommendationSource",
    "RiskScore",
    "EtclResult",
    "Recommendation",
    "WeatherAdvisory",
    "RiskAssessment",
    "PortfolioSummary",
]
