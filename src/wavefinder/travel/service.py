"""
Travel time service.

Resolves the user's free-text origin, measures the great-circle distance to a
destination and converts it into a per-mode duration. Results are memoized per
(origin, destination coordinates, mode) in a `TTLCache` for an hour.

Errors:
- `GeocodeNotFound` when the origin matches no known city.
- `TravelTimeoutExceeded` is raised by callers that bound the lookup in time
  (see `wavefinder.recommender.recommend`).
Both are recovered by the ranking pipeline via `estimate_simple_travel`.
"""

from __future__ import annotations

import logging
from typing import Callable

from wavefinder.config.settings import Settings, get_settings
from wavefinder.core.cache import TTLCache
from wavefinder.core.geo import haversine_km
from wavefinder.domain.models import Coordinates, TravelTimeResult
from wavefinder.scoring.composite import round_half_up
from wavefinder.travel.estimator import estimate_duration_hours
from wavefinder.travel.geocoder import geocode

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "travel"


class GeocodeNotFound(LookupError):
    """The origin text matched no entry in the geocoding table."""


class TravelTimeoutExceeded(TimeoutError):
    """A travel lookup did not finish within its time budget."""


def build_cache(settings: Settings) -> TTLCache:
    return TTLCache(enabled=settings.cache.enabled, default_ttl_seconds=settings.cache.default_ttl_seconds)


class TravelTimeService:
    """Computes (and caches) travel options from an origin to destination coordinates."""

    def __init__(
        self,
        settings: Settings | None = None,
        cache: TTLCache | None = None,
        *,
        geocoder: Callable[[str], Coordinates | None] = geocode,
    ):
        self._settings = settings or get_settings()
        self._cache = cache if cache is not None else build_cache(self._settings)
        self._geocode = geocoder

    @property
    def cache(self) -> TTLCache:
        return self._cache

    @staticmethod
    def cache_key(from_location: str, to: Coordinates, mode: str) -> str:
        return f"{from_location}-{to.lat},{to.lng}-{mode}"

    def calculate_travel_time(
        self, from_location: str, to: Coordinates, transport_modes: list[str]
    ) -> list[TravelTimeResult]:
        """Return one result per requested mode, in the order requested."""
        origin = self._geocode(from_location)
        if origin is None:
            raise GeocodeNotFound(f"Could not find coordinates for location '{from_location}'")

        ttl = int(self._settings.travel.cache_ttl_seconds)
        results: list[TravelTimeResult] = []
        for mode in transport_modes:
            key = self.cache_key(from_location, to, mode)
            cached = self._cache.get(CACHE_NAMESPACE, key, ttl_seconds=ttl)
            if isinstance(cached, TravelTimeResult):
                results.append(cached)
                continue

            distance = haversine_km(origin, to)
            duration = estimate_duration_hours(distance, mode, settings=self._settings)
            result = TravelTimeResult(
                distance=round_half_up(distance),
                duration=round_half_up(duration, 1),
                mode=mode,
            )
            self._cache.set(CACHE_NAMESPACE, key, result, ttl_seconds=ttl)
            results.append(result)
        return results

    def clear_cache(self) -> None:
        self._cache.clear(CACHE_NAMESPACE)
