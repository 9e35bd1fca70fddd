"""Estimated Time to Critical Loss (ETCL) classification."""

from __future__ import annotations

import random
from dataclasses import dataclass

from harvest_guard.models import EtclResult, RiskLevel


@dataclass(frozen=True)
class EtclTier:
    level: RiskLevel
    base_hours: float
    spread_hours: float

    @property
    def representative_hours(self) -> float:
        return self.base_hours + self.spread_hours / 2


TIERS: dict[RiskLevel, EtclTier] = {
    "critical": EtclTier("critical", 24.0, 24.0),
    "high": EtclTier("high", 48.0, 48.0),
    "medium": EtclTier("medium", 72.0, 72.0),
    "low": EtclTier("low", 144.0, 168.0),
}

# (upper bound in hours, English label, Bengali label); checked in order
ETCL_LABELS: list[tuple[float, str, str]] = [
    (24.0, "Critical – less than 1 day", "সংকটজনক – ১ দিনের কম"),
    (48.0, "High – 1–2 days", "উচ্চ – ১–২ দিন"),
    (96.0, "Medium – 2–4 days", "মাধ্যম – ২–৪ দিন"),
    (float("inf"), "Low – 4+ days", "কম – ৪+ দিন"),
]


def classify_tier(moisture: float, temperature: float) -> RiskLevel:
    """First matching rule wins."""
    if moisture > 75 and temperature > 30:
        return "critical"
    if moisture > 70 or temperature > 28:
        return "high"
    if moisture > 65 or temperature > 25:
        return "medium"
    return "low"


def etcl_label(hours: float) -> tuple[str, str]:
    """Label by the numeric ETCL, independent of the tier."""
    for upper, label, label_bn in ETCL_LABELS:
        if hours < upper:
            return label, label_bn
    return ETCL_LABELS[-1][1], ETCL_LABELS[-1][2]


class ETCLClassifier:
    """Map moisture/temperature to a tier, an ETCL estimate and an aflatoxin flag.

    With ``rng`` the ETCL is sampled from the tier's range and the high-tier
    aflatoxin flag is a coin flip. Without it the classifier is deterministic:
    the range midpoint is used and a high-tier batch is never flagged for
    aflatoxin (only critical is). Pass an ``rng`` for the probabilistic flag.
    """

    def classify(
        self,
        moisture: float,
        temperature: float,
        rng: random.Random | None = None,
    ) -> EtclResult:
        level = classify_tier(moisture, temperature)
        tier = TIERS[level]

        if rng is None:
            hours = tier.representative_hours
        else:
            hours = tier.base_hours + rng.random() * tier.spread_hours

        if level == "critical":
            aflatoxin = True
        elif level == "high":
            aflatoxin = rng.random() > 0.5 if rng is not None else False
        else:
            aflatoxin = False

        label, label_bn = etcl_label(hours)
        return EtclResult(
            risk_level=level,
            etcl_hours=hours,
            etcl_label=label,
            etcl_label_localized=label_bn,
            aflatoxin_risk=aflatoxin,
        )


__all__ = ["ETCLClassifier", "EtclTier", "TIERS", "ETCL_LABELS", "classify_tier", "etcl_label"]
