"""Environment readings returned by the weather sources."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clamp_pct(value: float) -> float:
    return min(100.0, max(0.0, float(value)))


class ForecastDay(BaseModel):
    """One day of the short forecast."""

    model_config = ConfigDict(allow_inf_nan=False)

    day: str
    date: dt.date
    max_temperature: float
    min_temperature: float
    rain_chance: float = 0.0
    humidity: float = 0.0

    @field_validator("rain_chance", "humidity")
    @classmethod
    def _clamp_percentages(cls, value: float) -> float:
        return _clamp_pct(value)


class EnvironmentReading(BaseModel):
    """Current conditions plus forecast for one named location.

    Humidity and rain chance are clamped into [0, 100]; temperature is left
    as reported. NaN and infinities are rejected, so a source that produces
    them fails the fetch instead of poisoning the scores.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    location: str
    temperature: float
    humidity: float
    rain_chance: float = 0.0
    wind_speed: float | None = None
    condition: str = "Unknown"
    forecast: list[ForecastDay] = Field(default_factory=list)
    fetched_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    @field_validator("humidity", "rain_chance")
    @classmethod
    def _clamp_percentages(cls, value: float) -> float:
        return _clamp_pct(value)


__all__ = ["EnvironmentReading", "ForecastDay"]
