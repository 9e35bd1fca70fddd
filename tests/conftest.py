"""Shared fixtures: fake clock, controllable environment source, batch factory."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import pytest

from harvest_guard.core.exceptions import EnvironmentUnavailable
from harvest_guard.models import CropBatch, EnvironmentReading
from harvest_guard.services.environment_cache import EnvironmentCache
from harvest_guard.services.notifications import DegradedEventLog


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeEnvironmentSource:
    """Counts fetches; can be gated, delayed or told to fail."""

    name = "fake"

    def __init__(self, **reading: Any) -> None:
        self.calls: list[str] = []
        self.reading_values = {"temperature": 28.0, "humidity": 60.0, "rain_chance": 10.0, **reading}
        self.gate: asyncio.Event | None = None
        self.delay: float = 0.0
        self.fail_with: Exception | None = None
        self.failing_locations: set[str] = set()

    async def fetch(self, location: str) -> EnvironmentReading:
        self.calls.append(location)
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        if location in self.failing_locations:
            raise EnvironmentUnavailable(location, "station offline")
        return EnvironmentReading(location=location, **self.reading_values)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source() -> FakeEnvironmentSource:
    return FakeEnvironmentSource()


@pytest.fixture
def cache(source: FakeEnvironmentSource, clock: FakeClock) -> EnvironmentCache:
    return EnvironmentCache(source, ttl_seconds=300, timeout=1.0, clock=clock)


@pytest.fixture
def degraded_events() -> DegradedEventLog:
    return DegradedEventLog(max_items=20)


@pytest.fixture
def make_batch() -> Callable[..., CropBatch]:
    def _make(**overrides: Any) -> CropBatch:
        values: dict[str, Any] = {
            "id": "batch-1",
            "owner_id": "farmer-1",
            "crop_type": "Wheat",
            "estimated_weight": 500.0,
            "storage_location": "Dhaka",
            "storage_type": "Sealed Container",
            "status": "active",
            "moisture_level": 55.0,
            "temperature_level": 22.0,
            "loss_events": 0,
            "intervention_success_rate": 90.0,
        }
        values.update(overrides)
        return CropBatch(**values)

    return _make
