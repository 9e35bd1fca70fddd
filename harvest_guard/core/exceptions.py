"""Error types raised by the risk engine."""

from __future__ import annotations


class HarvestGuardError(Exception):
    """Base class for risk engine errors."""


class EnvironmentUnavailable(HarvestGuardError):
    """The environment source failed or timed out for a location."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"Environment data unavailable for {location!r}: {reason}")
        self.location = location
        self.reason = reason


class InvalidBatch(HarvestGuardError):
    """A batch is missing the identity fields needed to assess it."""

    def __init__(self, batch_id: str | None, missing: list[str]) -> None:
        label = batch_id or "<unidentified>"
        super().__init__(f"Batch {label} is missing required fields: {', '.join(missing)}")
        self.batch_id = batch_id
        self.missing = missing


class AdvisoryServiceFailure(HarvestGuardError):
    """The generative advisory service returned an error or unusable output."""


__all__ = [
    "HarvestGuardError",
    "EnvironmentUnavailable",
    "InvalidBatch",
    "AdvisoryServiceFailure",
]
