"""Domain models."""

from .assessment import (
    EtclResult,
    Locale,
    PortfolioSummary,
    Recommendation,
    RiskAssessment,
    RiskLevel,
    RiskScore,
    WeatherAdvisory,
)
from .batch import BatchStatus, CropBatch
from .environment import EnvironmentReading, ForecastDay

__all__ = [
    "BatchStatus",
    "CropBatch",
    "EnvironmentReading",
    "ForecastDay",
    "EtclResult",
    "Locale",
    "PortfolioSummary",
    "Recommendation",
    "RiskAssessment",
    "RiskLevel",
    "RiskScore",
    "WeatherAdvisory",
]
