"""Time-bounded, coalescing cache in front of an environment source."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

from prometheus_client import Counter, Histogram

from harvest_guard.core.config import settings
from harvest_guard.core.exceptions import EnvironmentUnavailable
from harvest_guard.models import EnvironmentReading
from harvest_guard.services.environment import EnvironmentSource

logger = logging.getLogger(__name__)

CACHE_HITS = Counter(
    "harvest_guard_environment_cache_hits_total",
    "Environment lookups served from the cache.",
)
CACHE_MISSES = Counter(
    "harvest_guard_environment_cache_misses_total",
    "Environment lookups that started a source fetch.",
)
CACHE_COALESCED = Counter(
    "harvest_guard_environment_cache_coalesced_total",
    "Environment lookups that joined a fetch already in flight.",
)
FETCH_FAILURES = Counter(
    "harvest_guard_environment_fetch_failures_total",
    "Source fetches that failed or timed out.",
)
FETCH_LATENCY_SECONDS = Histogram(
    "harvest_guard_environment_fetch_seconds",
    "Latency of environment source fetches.",
)


@dataclass(frozen=True)
class _CacheEntry:
    reading: EnvironmentReading
    stored_at: float


class EnvironmentCache:
    """Cache readings per location for ``ttl_seconds``.

    Concurrent lookups for a location that is not cached share a single
    in-flight fetch. Failed fetches are handed to every waiter and are never
    stored, so the next lookup retries. All state is guarded by one
    ``asyncio.Lock``; an instance belongs to a single event loop.

    ``invalidate`` does not cancel a fetch already in flight: its waiters still
    receive the result, but the result is not stored, so the next lookup
    after the invalidation fetches again.
    """

    def __init__(
        self,
        source: EnvironmentSource,
        ttl_seconds: float | None = None,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.source = source
        self.ttl = settings.environment_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.timeout = settings.environment_fetch_timeout if timeout is None else timeout
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._inflight: dict[str, asyncio.Future[EnvironmentReading]] = {}
        # Bumped by invalidate(); a fetch only stores if its generation is unchanged
        self._epoch = 0
        self._generations: dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def get(self, location: str) -> EnvironmentReading:
        if not location or not location.strip():
            raise ValueError("location must be a non-empty string")

        async with self._lock:
            entry = self._entries.get(location)
            if entry is not None and self._is_fresh(entry):
                CACHE_HITS.inc()
                logger.debug("Environment cache HIT: %s", location, extra={"location": location})
                return entry.reading

            task = self._inflight.get(location)
            if task is None:
                CACHE_MISSES.inc()
                logger.debug("Environment cache MISS: %s", location, extra={"location": location})
                task = asyncio.ensure_future(self._fetch(location, self._generation(location)))
                self._inflight[location] = task
            else:
                CACHE_COALESCED.inc()
                logger.debug(
                    "Environment fetch already in flight: %s", location, extra={"location": location}
                )

        # A cancelled waiter must not cancel the fetch other callers share
        return await asyncio.shield(task)

    async def invalidate(self, location: str | None = None) -> None:
        async with self._lock:
            if location is None:
                self._epoch += 1
                self._entries.clear()
            else:
                self._generations[location] = self._generations.get(location, 0) + 1
                self._entries.pop(location, None)

    def cached_locations(self) -> list[str]:
        return sorted(loc for loc, entry in self._entries.items() if self._is_fresh(entry))

    def _is_fresh(self, entry: _CacheEntry) -> bool:
        return self._clock() - entry.stored_at < self.ttl

    def _generation(self, location: str) -> tuple[int, int]:
        return self._epoch, self._generations.get(location, 0)

    async def _fetch(self, location: str, generation: tuple[int, int]) -> EnvironmentReading:
        reading: EnvironmentReading | None = None
        started = time.perf_counter()
        context = {"location": location}
        try:
            reading = await asyncio.wait_for(self.source.fetch(location), timeout=self.timeout)
            return reading
        except asyncio.TimeoutError as exc:
            FETCH_FAILURES.inc()
            logger.warning(
                "Environment fetch for %s timed out after %ss", location, self.timeout, extra=context
            )
            raise EnvironmentUnavailable(location, f"timed out after {self.timeout}s") from exc
        except EnvironmentUnavailable:
            FETCH_FAILURES.inc()
            raise
        except Exception as exc:
            FETCH_FAILURES.inc()
            logger.warning("Environment fetch for %s failed: %s", location, exc, extra=context)
            raise EnvironmentUnavailable(location, str(exc) or type(exc).__name__) from exc
        finally:
            FETCH_LATENCY_SECONDS.observe(time.perf_counter() - started)
            async with self._lock:
                self._inflight.pop(location, None)
                if reading is not None:
                    if self._generation(location) == generation:
                        self._entries[location] = _CacheEntry(reading=reading, stored_at=self._clock())
                    else:
                        logger.debug(
                            "Discarding %s reading invalidated mid-fetch", location, extra=context
                        )


__all__ = ["EnvironmentCache"]
