"""Environment (weather) sources for named storage locations."""

from __future__ import annotations

import logging
import math
import random
from datetime import date, datetime, timedelta, timezone
from typing import Any, Protocol

import httpx

from harvest_guard.core.config import settings
from harvest_guard.core.exceptions import EnvironmentUnavailable
from harvest_guard.models import EnvironmentReading, ForecastDay

logger = logging.getLogger(__name__)

# Divisional headquarters used as storage locations
LOCATION_COORDINATES: dict[str, tuple[float, float]] = {
    "Dhaka": (23.8103, 90.4125),
    "Chittagong": (22.3569, 91.7832),
    "Khulna": (22.8456, 89.5403),
    "Rajshahi": (24.3745, 88.6042),
    "Barisal": (22.7010, 90.3535),
    "Sylhet": (24.8949, 91.8687),
    "Rangpur": (25.7439, 89.2752),
    "Mymensingh": (24.7471, 90.4203),
}

# WMO weather interpretation codes, grouped
_WMO_CONDITIONS: list[tuple[range, str]] = [
    (range(0, 1), "Clear"),
    (range(1, 3), "Partly Cloudy"),
    (range(3, 4), "Overcast"),
    (range(45, 49), "Fog"),
    (range(51, 58), "Drizzle"),
    (range(61, 68), "Rain"),
    (range(80, 83), "Rain Showers"),
    (range(95, 100), "Thunderstorm"),
]


class EnvironmentSource(Protocol):
    """Anything that can produce a reading for a named location."""

    name: str

    async def fetch(self, location: str) -> EnvironmentReading:
        ...


def resolve_coordinates(location: str) -> tuple[float, float] | None:
    coords = LOCATION_COORDINATES.get(location)
    if coords is not None:
        return coords
    folded = location.strip().casefold()
    for name, value in LOCATION_COORDINATES.items():
        if name.casefold() == folded:
            return value
    return None


class OpenMeteoEnvironmentSource:
    """Fetch current conditions and a daily forecast from Open-Meteo."""

    name = "open-meteo"

    def __init__(
        self,
        base_url: str | None = None,
        forecast_days: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.open_meteo_url
        self.forecast_days = max(1, forecast_days or settings.environment_forecast_days)
        self.timeout = timeout or settings.environment_fetch_timeout
        self._transport = transport

    async def fetch(self, location: str) -> EnvironmentReading:
        coords = resolve_coordinates(location)
        if coords is None:
            raise EnvironmentUnavailable(location, "location not found")

        params = self._build_params(*coords)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                logger.debug("Fetching Open-Meteo weather for %s", location)
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.warning("Failed to fetch Open-Meteo weather for %s: %s", location, exc)
                if isinstance(exc, httpx.HTTPStatusError):
                    logger.warning(
                        "Open-Meteo error response: %s %s",
                        exc.response.status_code,
                        exc.response.text[:500],
                    )
                raise EnvironmentUnavailable(location, str(exc) or type(exc).__name__) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise EnvironmentUnavailable(location, "malformed response") from exc
        return self._parse(location, payload)

    def _build_params(self, latitude: float, longitude: float) -> dict[str, Any]:
        return {
            "latitude": latitude,
            "longitude": longitude,
            "current": "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code",
            "hourly": "precipitation_probability",
            "daily": ",".join(
                [
                    "temperature_2m_max",
                    "temperature_2m_min",
                    "precipitation_probability_max",
                    "relative_humidity_2m_mean",
                ]
            ),
            "forecast_days": self.forecast_days,
            "timezone": "Asia/Dhaka",
        }

    def _parse(self, location: str, payload: dict[str, Any]) -> EnvironmentReading:
        current = payload.get("current") or {}
        hourly = payload.get("hourly") or {}
        daily = payload.get("daily") or {}

        temperature = _coerce_float(current.get("temperature_2m"))
        humidity = _coerce_float(current.get("relative_humidity_2m"))
        if temperature is None or humidity is None:
            raise EnvironmentUnavailable(location, "response missing current conditions")

        hourly_times = hourly.get("time") or []
        current_hour = str(current.get("time") or "")[:13]
        target_idx = 0
        for idx, stamp in enumerate(hourly_times):
            if str(stamp)[:13] == current_hour:
                target_idx = idx
                break
        rain_chance = _series_value(hourly.get("precipitation_probability"), target_idx)

        return EnvironmentReading(
            location=location,
            temperature=temperature,
            humidity=humidity,
            rain_chance=rain_chance or 0.0,
            wind_speed=_coerce_float(current.get("wind_speed_10m")),
            condition=_condition_label(current.get("weather_code")),
            forecast=self._parse_daily(daily),
            fetched_at=datetime.now(timezone.utc),
        )

    def _parse_daily(self, daily: dict[str, Any]) -> list[ForecastDay]:
        days: list[ForecastDay] = []
        for idx, stamp in enumerate(daily.get("time") or []):
            try:
                day = date.fromisoformat(str(stamp))
            except ValueError:
                continue
            max_temp = _series_value(daily.get("temperature_2m_max"), idx)
            min_temp = _series_value(daily.get("temperature_2m_min"), idx)
            if max_temp is None or min_temp is None:
                continue
            days.append(
                ForecastDay(
                    day=day.strftime("%a"),
                    date=day,
                    max_temperature=max_temp,
                    min_temperature=min_temp,
                    rain_chance=_series_value(daily.get("precipitation_probability_max"), idx) or 0.0,
                    humidity=_series_value(daily.get("relative_humidity_2m_mean"), idx) or 0.0,
                )
            )
        return days


class SyntheticEnvironmentSource:
    """Plausible monsoon-season readings for offline and demo use."""

    name = "synthetic"

    def __init__(self, seed: int | None = None, forecast_days: int | None = None) -> None:
        self._rng = random.Random(seed if seed is not None else settings.synthetic_environment_seed)
        self.forecast_days = max(1, forecast_days or settings.environment_forecast_days)

    async def fetch(self, location: str) -> EnvironmentReading:
        if resolve_coordinates(location) is None:
            raise EnvironmentUnavailable(location, "location not found")

        rng = self._rng
        today = date.today()
        forecast = []
        for offset in range(self.forecast_days):
            day = today + timedelta(days=offset)
            forecast.append(
                ForecastDay(
                    day=day.strftime("%a"),
                    date=day,
                    max_temperature=28 + rng.random() * 3,
                    min_temperature=22 + rng.random() * 3,
                    rain_chance=float(rng.randrange(100)),
                    humidity=70 + rng.random() * 15,
                )
            )
        return EnvironmentReading(
            location=location,
            temperature=28 + rng.random() * 5,
            humidity=70 + rng.random() * 15,
            rain_chance=float(rng.randrange(100)),
            wind_speed=5 + rng.random() * 10,
            condition="Partly Cloudy",
            forecast=forecast,
        )


def build_environment_source(provider: str | None = None) -> EnvironmentSource:
    """Return the configured source implementation."""

    name = (provider or settings.environment_provider).lower()
    if name == "synthetic":
        return SyntheticEnvironmentSource()
    if name != "open-meteo":
        logger.warning("Unsupported environment provider %s; using open-meteo", name)
    return OpenMeteoEnvironmentSource()


def _series_value(series: Any, index: int) -> float | None:
    if not isinstance(series, list) or index >= len(series):
        return None
    return _coerce_float(series[index])


def _coerce_float(value: Any) -> float | None:
    try:
        if value is None:
            return None
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _condition_label(code: Any) -> str:
    value = _coerce_float(code)
    if value is None:
        return "Unknown"
    for codes, label in _WMO_CONDITIONS:
        if int(value) in codes:
            return label
    return "Unknown"


__all__ = [
    "EnvironmentSource",
    "OpenMeteoEnvironmentSource",
    "SyntheticEnvironmentSource",
    "LOCATION_COORDINATES",
    "build_environment_source",
    "resolve_coordinates",
]
