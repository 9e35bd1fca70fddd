"""Weighted storage-risk scoring for crop batches."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

from harvest_guard.core.config import settings
from harvest_guard.core.crop_profiles import CropProfile, CropProfileTable
from harvest_guard.models import CropBatch, EnvironmentReading, Locale, RiskScore

logger = logging.getLogger(__name__)

PROTECTED_STORAGE = re.compile(r"sealed|airtight|container", re.IGNORECASE)

SUGGESTIONS: dict[str, dict[str, str]] = {
    "rain": {
        "en": "Cover stored batches and improve drainage to avoid water ingress.",
        "bn": "সংরক্ষিত ব্যাচগুলি ঢেকে রাখুন এবং জল প্রবেশ এড়াতে নিষ্কাশন উন্নত করুন।",
    },
    "humidity": {
        "en": "Increase ventilation or use desiccants to reduce humidity.",
        "bn": "বায়ুচলাচল বাড়ান বা আর্দ্রতা কমাতে ডেসিক্যান্ট ব্যবহার করুন।",
    },
    "heat": {
        "en": "Move produce to cooler storage or provide shade to reduce heat stress.",
        "bn": "ঠান্ডা সংরক্ষণে স্থানান্তর করুন বা তাপ চাপ কমাতে ছায়া প্রদান করুন।",
    },
    "interventions": {
        "en": "Review past interventions and increase monitoring frequency.",
        "bn": "পূর্ববর্তী হস্তক্ষেপ পর্যালোচনা করুন এবং পর্যবেক্ষণের ফ্রিকোয়েন্সি বাড়ান।",
    },
    "monitor": {
        "en": "No immediate actions, continue regular monitoring.",
        "bn": "তৎক্ষণাৎ কোনো পদক্ষেপ প্রয়োজন নেই, নিয়মিত পর্যবেক্ষণ চালিয়ে যান।",
    },
}


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def finite_or(value: float | None, default: float | None) -> float | None:
    """``value`` unless it is missing, NaN or infinite."""
    if value is None or not math.isfinite(value):
        return default
    return value


def is_protected_storage(storage_type: str | None) -> bool:
    return bool(storage_type) and PROTECTED_STORAGE.search(storage_type) is not None


@dataclass(frozen=True)
class ResolvedEnvironment:
    """Environment values the scorer actually used."""

    humidity: float
    rain_chance: float
    temperature: float
    degraded: bool


class RiskScorer:
    """Additive risk score (0-100) and expected loss for one batch.

    Components:
    - humidity above 65% (x0.8, crop humidity factor)
    - rain chance (x0.35)
    - heat at or above 35°C (+8, crop temperature factor)
    - unprotected storage (+8, crop storage sensitivity)
    - prior loss events (+6 each)
    - intervention success rate (-0.25 per point)

    The sum is clamped to [0, 100]; expected loss is 35% of the score,
    capped at 50.
    """

    HUMIDITY_THRESHOLD = 65.0
    HUMIDITY_WEIGHT = 0.8
    RAIN_WEIGHT = 0.35
    HEAT_THRESHOLD = 35.0
    HEAT_PENALTY = 8.0
    STORAGE_PENALTY = 8.0
    LOSS_EVENT_PENALTY = 6.0
    INTERVENTION_CREDIT = 0.25
    EXPECTED_LOSS_RATIO = 0.35
    EXPECTED_LOSS_CAP = 50

    def __init__(self, profiles: CropProfileTable | None = None) -> None:
        self.profiles = profiles or CropProfileTable()

    def score(
        self,
        batch: CropBatch,
        reading: EnvironmentReading | None,
        locale: Locale = "en",
        profile: CropProfile | None = None,
    ) -> RiskScore:
        env = self.resolve_environment(reading)
        factors = profile or self.profiles.get(batch.crop_type)

        components = {
            "humidity": self._score_humidity(env.humidity, factors),
            "rain": env.rain_chance * self.RAIN_WEIGHT,
            "heat": self._score_heat(env.temperature, factors),
            "storage": self._score_storage(batch.storage_type, factors),
            "losses": max(0, batch.loss_events) * self.LOSS_EVENT_PENALTY,
            "interventions": -self._intervention_rate(batch) * self.INTERVENTION_CREDIT,
        }
        risk = min(100.0, max(0.0, sum(components.values())))
        expected_loss = min(self.EXPECTED_LOSS_CAP, max(0, round_half_up(risk * self.EXPECTED_LOSS_RATIO)))

        logger.debug(
            "Scoring %s: %s => %.1f (loss %d%%, degraded=%s)",
            batch.id,
            " ".join(f"{name}={value:.1f}" for name, value in components.items()),
            risk,
            expected_loss,
            env.degraded,
        )

        return RiskScore(
            batch_id=batch.id,
            risk_score=risk,
            expected_loss_percent=expected_loss,
            suggestions=self.suggestions(batch, env, locale),
            environment_degraded=env.degraded,
        )

    def resolve_environment(self, reading: EnvironmentReading | None) -> ResolvedEnvironment:
        if reading is None:
            return ResolvedEnvironment(
                humidity=settings.neutral_humidity_pct,
                rain_chance=settings.neutral_rain_chance_pct,
                temperature=settings.neutral_temperature_c,
                degraded=True,
            )
        return ResolvedEnvironment(
            humidity=reading.humidity,
            rain_chance=reading.rain_chance,
            temperature=reading.temperature,
            degraded=False,
        )

    def suggestions(
        self, batch: CropBatch, env: ResolvedEnvironment, locale: Locale = "en"
    ) -> list[str]:
        """Independent threshold checks, in a fixed order."""
        keys = []
        if env.rain_chance > 50:
            keys.append("rain")
        if env.humidity > 75:
            keys.append("humidity")
        if env.temperature >= self.HEAT_THRESHOLD:
            keys.append("heat")
        if self._intervention_rate(batch) < 50:
            keys.append("interventions")
        if not keys:
            keys.append("monitor")
        lang = locale if locale in ("en", "bn") else "en"
        return [SUGGESTIONS[key][lang] for key in keys]

    def _intervention_rate(self, batch: CropBatch) -> float:
        # NaN or infinite rates earn no credit
        return finite_or(batch.intervention_success_rate, 0.0)

    def _score_humidity(self, humidity: float, factors: CropProfile) -> float:
        excess = max(0.0, humidity - self.HUMIDITY_THRESHOLD)
        return excess * self.HUMIDITY_WEIGHT * factors.humidity_factor

    def _score_heat(self, temperature: float, factors: CropProfile) -> float:
        if temperature >= self.HEAT_THRESHOLD:
            return self.HEAT_PENALTY * factors.temperature_factor
        return 0.0

    def _score_storage(self, storage_type: str, factors: CropProfile) -> float:
        # Unspecified storage is not penalized
        if not storage_type or is_protected_storage(storage_type):
            return 0.0
        return self.STORAGE_PENALTY * factors.storage_sensitivity


__all__ = [
    "RiskScorer",
    "ResolvedEnvironment",
    "finite_or",
    "round_half_up",
    "is_protected_storage",
]
