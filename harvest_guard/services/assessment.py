"""Batch and portfolio risk assessment."""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import date, datetime, timezone
from hashlib import sha256
from typing import Iterable

from harvest_guard.core.config import settings
from harvest_guard.core.crop_profiles import load_crop_profiles
from harvest_guard.core.exceptions import AdvisoryServiceFailure, EnvironmentUnavailable, InvalidBatch
from harvest_guard.models import (
    CropBatch,
    EnvironmentReading,
    EtclResult,
    Locale,
    PortfolioSummary,
    Recommendation,
    RiskAssessment,
    RiskScore,
)
from harvest_guard.services.advisory import AdvisoryStrategy, GeminiAdvisoryService
from harvest_guard.services.environment import build_environment_source
from harvest_guard.services.environment_cache import EnvironmentCache
from harvest_guard.services.etcl import ETCLClassifier
from harvest_guard.services.notifications import DEGRADED_EVENTS, DegradedEventLog
from harvest_guard.services.portfolio import PortfolioAggregator
from harvest_guard.services.recommendations import RecommendationGenerator
from harvest_guard.services.risk_scoring import RiskScorer, finite_or

logger = logging.getLogger(__name__)

# Ranges used when a batch has no sensor reading
SYNTHETIC_MOISTURE = (55.0, 30.0)
SYNTHETIC_TEMPERATURE = (25.0, 10.0)


class RiskAssessmentService:
    """Assess single batches and portfolios against cached environment data.

    Environment failures never abort an assessment: the scorer falls back to
    neutral values and the result is flagged as degraded. Random draws (missing
    telemetry, ETCL sampling) come from a generator seeded by the batch id, so
    assessing the same batch twice gives the same answer.
    """

    def __init__(
        self,
        cache: EnvironmentCache,
        scorer: RiskScorer | None = None,
        classifier: ETCLClassifier | None = None,
        recommender: RecommendationGenerator | None = None,
        aggregator: PortfolioAggregator | None = None,
        advisor: AdvisoryStrategy | None = None,
        etcl_sampling: bool | None = None,
        degraded_events: DegradedEventLog | None = None,
    ) -> None:
        self.cache = cache
        self.scorer = scorer or RiskScorer()
        self.classifier = classifier or ETCLClassifier()
        self.recommender = recommender or RecommendationGenerator()
        self.aggregator = aggregator or PortfolioAggregator()
        self.advisor = advisor
        self.etcl_sampling = settings.etcl_sampling if etcl_sampling is None else etcl_sampling
        self.degraded_events = DEGRADED_EVENTS if degraded_events is None else degraded_events

    async def assess_batch(self, batch: CropBatch, locale: Locale = "en") -> RiskAssessment:
        self.validate(batch)
        reading = await self.environment_for(batch)
        score = self.scorer.score(batch, reading, locale=locale)

        rng = self._rng_for(batch)
        moisture, temperature, estimated = self._resolve_telemetry(batch, reading, rng)
        etcl = self.classifier.classify(moisture, temperature, rng if self.etcl_sampling else None)
        recommendation = await self._recommend(batch, etcl, moisture, temperature)

        assessment = RiskAssessment(
            batch_id=batch.id,
            risk_level=etcl.risk_level,
            etcl_hours=etcl.etcl_hours,
            etcl_label=etcl.etcl_label,
            etcl_label_localized=etcl.etcl_label_localized,
            aflatoxin_risk=etcl.aflatoxin_risk,
            moisture_level=round(moisture, 2),
            temperature_level=round(temperature, 2),
            recommendation=recommendation.text,
            recommendation_localized=recommendation.text_localized,
            recommendation_source=recommendation.source,
            risk_score=score.risk_score,
            expected_loss_percent=score.expected_loss_percent,
            suggestions=score.suggestions,
            environment_degraded=score.environment_degraded,
            telemetry_estimated=estimated,
        )
        logger.info(
            "Assessed batch %s: tier=%s etcl=%.1fh score=%.1f degraded=%s",
            batch.id,
            assessment.risk_level,
            assessment.etcl_hours,
            assessment.risk_score,
            assessment.environment_degraded,
            extra={"batch_id": batch.id},
        )
        return assessment

    async def score_batches(
        self, batches: Iterable[CropBatch], locale: Locale = "en"
    ) -> tuple[list[RiskScore], list[str]]:
        """Score every active batch; return (scores, ids of rejected batches)."""
        active = [batch for batch in batches if batch.is_active]
        rejected: list[str] = []
        valid: list[CropBatch] = []
        for batch in active:
            try:
                self.validate(batch)
            except InvalidBatch as exc:
                logger.warning("Skipping batch in portfolio: %s", exc)
                rejected.append(exc.batch_id or "<unidentified>")
                continue
            valid.append(batch)

        scores = await asyncio.gather(*(self._score_one(batch, locale) for batch in valid))
        return list(scores), rejected

    async def assess_portfolio(
        self, batches: Iterable[CropBatch], locale: Locale = "en"
    ) -> PortfolioSummary | None:
        scores, rejected = await self.score_batches(batches, locale)
        summary = self.aggregator.aggregate(scores, rejected_batch_ids=rejected)
        if summary is None and rejected:
            logger.warning("No assessable active batches; %d rejected", len(rejected))
        return summary

    def validate(self, batch: CropBatch) -> None:
        missing = [name for name in ("id", "crop_type") if not (getattr(batch, name) or "").strip()]
        if missing:
            raise InvalidBatch(batch.id, missing)

    async def environment_for(self, batch: CropBatch) -> EnvironmentReading | None:
        location = (batch.storage_location or "").strip() or settings.default_location
        try:
            return await self.cache.get(location)
        except EnvironmentUnavailable as exc:
            logger.warning(
                "Using neutral environment for batch %s: %s",
                batch.id,
                exc,
                extra={"batch_id": batch.id, "location": location},
            )
            self.degraded_events.record(batch.id, location, exc.reason)
            return None

    async def _score_one(self, batch: CropBatch, locale: Locale) -> RiskScore:
        reading = await self.environment_for(batch)
        return self.scorer.score(batch, reading, locale=locale)

    def _rng_for(self, batch: CropBatch) -> random.Random:
        digest = sha256((batch.id or "").encode("utf-8")).digest()
        return random.Random(int.from_bytes(digest[:8], "big"))

    def _resolve_telemetry(
        self,
        batch: CropBatch,
        reading: EnvironmentReading | None,
        rng: random.Random,
    ) -> tuple[float, float, bool]:
        # Always draw both so later draws do not depend on which value was missing
        moisture_guess = SYNTHETIC_MOISTURE[0] + rng.random() * SYNTHETIC_MOISTURE[1]
        temperature_guess = SYNTHETIC_TEMPERATURE[0] + rng.random() * SYNTHETIC_TEMPERATURE[1]

        # NaN or infinite sensor values count as missing
        measured_moisture = finite_or(batch.moisture_level, None)
        measured_temperature = finite_or(batch.temperature_level, None)

        moisture = measured_moisture if measured_moisture is not None else moisture_guess
        if measured_temperature is not None:
            temperature = measured_temperature
        elif reading is not None:
            temperature = reading.temperature
        else:
            temperature = temperature_guess
        estimated = measured_moisture is None or measured_temperature is None
        return moisture, temperature, estimated

    async def _recommend(
        self,
        batch: CropBatch,
        etcl: EtclResult,
        moisture: float,
        temperature: float,
    ) -> Recommendation:
        fallback = self.recommender.generate(
            etcl.risk_level, etcl.aflatoxin_risk, moisture, temperature, etcl.etcl_hours
        )
        if self.advisor is None:
            return fallback
        try:
            return await self.advisor.advise(batch, moisture, temperature, days_in_storage(batch))
        except AdvisoryServiceFailure as exc:
            logger.warning("Advisory failed for batch %s, using built-in text: %s", batch.id, exc)
            return fallback


def days_in_storage(batch: CropBatch, today: date | None = None) -> int:
    started = batch.created_at.date() if batch.created_at else batch.harvest_date
    if started is None:
        return 0
    today = today or datetime.now(timezone.utc).date()
    return max(0, (today - started).days)


def build_assessment_service(cache: EnvironmentCache | None = None) -> RiskAssessmentService:
    """Wire the service from settings (environment provider, crop profiles, advisory)."""

    cache = cache or EnvironmentCache(build_environment_source())
    advisor = GeminiAdvisoryService()
    return RiskAssessmentService(
        cache=cache,
        scorer=RiskScorer(load_crop_profiles()),
        advisor=advisor if advisor.enabled else None,
    )


__all__ = ["RiskAssessmentService", "build_assessment_service", "days_in_storage"]
