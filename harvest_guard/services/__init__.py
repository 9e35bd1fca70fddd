"""Service-layer utilities."""

from .advisory import AdvisoryStrategy, GeminiAdvisoryService
from .assessment import RiskAssessmentService, build_assessment_service
from .environment import (
    EnvironmentSource,
    OpenMeteoEnvironmentSource,
    SyntheticEnvironmentSource,
    build_environment_source,
)
from .environment_cache import EnvironmentCache
from .etcl import ETCLClassifier
from .portfolio import PortfolioAggregator
from .recommendations import RecommendationGenerator, weather_advisories
from .risk_scoring import RiskScorer

__all__ = [
    "AdvisoryStrategy",
    "GeminiAdvisoryService",
    "RiskAssessmentService",
    "build_assessment_service",
    "EnvironmentSource",
    "OpenMeteoEnvironmentSource",
    "SyntheticEnvironmentSource",
    "build_environment_source",
    "EnvironmentCache",
    "ETCLClassifier",
    "PortfolioAggregator",
    "RecommendationGenerator",
    "weather_advisories",
    "RiskScorer",
]
