"""Open-Meteo and synthetic environment sources."""

from __future__ import annotations

from datetime import date

import httpx
import pytest
from pydantic import ValidationError

from harvest_guard.core.exceptions import EnvironmentUnavailable
from harvest_guard.models import EnvironmentReading
from harvest_guard.services.environment import (
    OpenMeteoEnvironmentSource,
    SyntheticEnvironmentSource,
    build_environment_source,
    resolve_coordinates,
)

FORECAST_URL = "https://weather.test/v1/forecast"

OPEN_METEO_PAYLOAD = {
    "current": {
        "time": "2024-06-01T14:15",
        "temperature_2m": 31.2,
        "relative_humidity_2m": 82,
        "wind_speed_10m": 9.5,
        "weather_code": 61,
    },
    "hourly": {
        "time": ["2024-06-01T13:00", "2024-06-01T14:00", "2024-06-01T15:00"],
        "precipitation_probability": [40, 65, 90],
    },
    "daily": {
        "time": ["2024-06-01", "2024-06-02", "not-a-date"],
        "temperature_2m_max": [33.0, 32.1, 30.0],
        "temperature_2m_min": [26.0, 25.4, 24.0],
        "precipitation_probability_max": [70, None, 10],
        "relative_humidity_2m_mean": [80, 78, 75],
    },
}


def make_source(handler) -> OpenMeteoEnvironmentSource:
    return OpenMeteoEnvironmentSource(
        base_url=FORECAST_URL,
        forecast_days=3,
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
class TestOpenMeteoSource:
    async def test_parses_current_conditions_and_forecast(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=OPEN_METEO_PAYLOAD)

        reading = await make_source(handler).fetch("Dhaka")

        assert reading.location == "Dhaka"
        assert reading.temperature == 31.2
        assert reading.humidity == 82
        assert reading.rain_chance == 65
        assert reading.wind_speed == 9.5
        assert reading.condition == "Rain"
        assert [day.date for day in reading.forecast] == [date(2024, 6, 1), date(2024, 6, 2)]
        assert reading.forecast[0].day == "Sat"
        assert reading.forecast[1].rain_chance == 0

        params = requests[0].url.params
        assert params["latitude"] == "23.8103"
        assert params["forecast_days"] == "3"

    async def test_location_lookup_ignores_case(self):
        reading = await make_source(lambda request: httpx.Response(200, json=OPEN_METEO_PAYLOAD)).fetch(
            "sylhet"
        )
        assert reading.location == "sylhet"

    async def test_unknown_location_never_hits_the_network(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        with pytest.raises(EnvironmentUnavailable) as exc_info:
            await make_source(handler).fetch("Atlantis")
        assert exc_info.value.reason == "location not found"

    async def test_server_error(self):
        source = make_source(lambda request: httpx.Response(502, text="bad gateway"))

        with pytest.raises(EnvironmentUnavailable) as exc_info:
            await source.fetch("Khulna")
        assert exc_info.value.location == "Khulna"

    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(EnvironmentUnavailable):
            await make_source(handler).fetch("Khulna")

    async def test_non_json_body(self):
        source = make_source(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

        with pytest.raises(EnvironmentUnavailable) as exc_info:
            await source.fetch("Dhaka")
        assert exc_info.value.reason == "malformed response"

    async def test_missing_current_block(self):
        source = make_source(lambda request: httpx.Response(200, json={"hourly": {}, "daily": {}}))

        with pytest.raises(EnvironmentUnavailable):
            await source.fetch("Dhaka")

    async def test_non_finite_temperature_is_unavailable(self):
        body = b'{"current": {"temperature_2m": NaN, "relative_humidity_2m": 80}}'
        source = make_source(lambda request: httpx.Response(200, content=body))

        with pytest.raises(EnvironmentUnavailable) as exc_info:
            await source.fetch("Dhaka")
        assert exc_info.value.reason == "response missing current conditions"

    async def test_non_finite_hourly_rain_chance_reads_as_zero(self):
        body = (
            b'{"current": {"time": "2024-06-01T14:00", "temperature_2m": 30, "relative_humidity_2m": 70},'
            b' "hourly": {"time": ["2024-06-01T14:00"], "precipitation_probability": [Infinity]}}'
        )
        reading = await make_source(lambda request: httpx.Response(200, content=body)).fetch("Dhaka")

        assert reading.rain_chance == 0

    async def test_out_of_range_humidity_is_clamped(self):
        payload = {"current": {"temperature_2m": 30, "relative_humidity_2m": 104}}
        reading = await make_source(lambda request: httpx.Response(200, json=payload)).fetch("Dhaka")

        assert reading.humidity == 100
        assert reading.rain_chance == 0
        assert reading.condition == "Unknown"


@pytest.mark.asyncio
class TestSyntheticSource:
    async def test_seeded_readings_repeat(self):
        first = await SyntheticEnvironmentSource(seed=11, forecast_days=2).fetch("Rangpur")
        second = await SyntheticEnvironmentSource(seed=11, forecast_days=2).fetch("Rangpur")

        assert first.model_dump(exclude={"fetched_at"}) == second.model_dump(exclude={"fetched_at"})
        assert len(first.forecast) == 2

    async def test_readings_stay_in_monsoon_ranges(self):
        source = SyntheticEnvironmentSource(seed=3)
        for _ in range(20):
            reading = await source.fetch("Mymensingh")
            assert 28 <= reading.temperature <= 33
            assert 70 <= reading.humidity <= 85
            assert 0 <= reading.rain_chance < 100

    async def test_unknown_location(self):
        with pytest.raises(EnvironmentUnavailable):
            await SyntheticEnvironmentSource(seed=1).fetch("Atlantis")


def test_build_environment_source():
    assert isinstance(build_environment_source("synthetic"), SyntheticEnvironmentSource)
    assert isinstance(build_environment_source("Open-Meteo"), OpenMeteoEnvironmentSource)
    assert isinstance(build_environment_source("carrier-pigeon"), OpenMeteoEnvironmentSource)


def test_resolve_coordinates():
    assert resolve_coordinates("Chittagong") == (22.3569, 91.7832)
    assert resolve_coordinates(" barisal ") == (22.7010, 90.3535)
    assert resolve_coordinates("Paris") is None


@pytest.mark.parametrize("field", ["temperature", "humidity", "rain_chance", "wind_speed"])
def test_reading_rejects_non_finite_values(field):
    values = {"location": "Dhaka", "temperature": 30.0, "humidity": 70.0, field: float("inf")}

    with pytest.raises(ValidationError):
        EnvironmentReading(**values)
