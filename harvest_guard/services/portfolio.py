"""Portfolio-level aggregation of per-batch risk scores."""

from __future__ import annotations

from typing import Iterable

from harvest_guard.models import PortfolioSummary, RiskScore
from harvest_guard.services.risk_scoring import round_half_up


class PortfolioAggregator:
    def aggregate(
        self,
        scores: Iterable[RiskScore],
        rejected_batch_ids: Iterable[str] = (),
    ) -> PortfolioSummary | None:
        """Mean score and expected loss, or None when there is nothing to aggregate."""
        scores = list(scores)
        if not scores:
            return None

        count = len(scores)
        total_risk = sum(score.risk_score for score in scores)
        total_loss = sum(score.expected_loss_percent for score in scores)
        return PortfolioSummary(
            batch_count=count,
            average_risk_score=round_half_up(total_risk / count),
            average_expected_loss_percent=round_half_up(total_loss / count),
            degraded_batch_ids=[s.batch_id for s in scores if s.environment_degraded and s.batch_id],
            rejected_batch_ids=list(rejected_batch_ids),
        )


__all__ = ["PortfolioAggregator"]
