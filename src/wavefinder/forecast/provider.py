"""
Surf forecast provider (simulated).

There is no live surf-data integration. Instead, forecasts are generated from a
pseudo-random stream seeded by the destination id and the current UTC day, so a
given spot shows the same conditions all day and changes from one day to the next.
Results are cached for `forecast.cache_ttl_seconds` (15 minutes by default).
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone

from wavefinder.config.settings import Settings, get_settings
from wavefinder.core.cache import TTLCache
from wavefinder.domain.models import SurfForecast
from wavefinder.scoring.composite import round_half_up

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "forecast"

COMPASS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

BIG_WAVE_SPOTS = {"us-hi-pipeline", "us-hi-sunset", "pt-nazare", "za-dungeons", "mx-puerto-escondido"}
MEDIUM_WAVE_SPOTS = {"id-uluwatu", "au-superbank", "pt-ericeira", "fr-hossegor"}
SMALL_WAVE_SPOTS = {"us-hi-waikiki", "cr-nosara", "es-tarifa", "lk-hikkaduwa"}

TROPICAL_SPOTS = {"id-uluwatu", "ph-siargao", "mv-cokes", "cr-nosara", "mx-sayulita"}
TEMPERATE_SPOTS = {"us-ca-malibu", "au-byron-bay", "nz-raglan", "za-jeffreys-bay"}
COLD_SPOTS = {"us-ca-ocean-beach", "cl-pichilemu", "za-dungeons"}

WORLD_CLASS_SPOTS = {"us-hi-pipeline", "id-uluwatu", "pt-nazare", "pe-chicama"}


def hash_code(value: str) -> int:
    """Stable 32-bit string hash (Python's `hash()` is salted per process)."""
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def day_number(now: datetime) -> int:
    return int(now.timestamp() // 86400)


def base_wave_height(destination_id: str, rng: random.Random) -> float:
    if destination_id in BIG_WAVE_SPOTS:
        return 6 + rng.random() * 8
    if destination_id in MEDIUM_WAVE_SPOTS:
        return 3 + rng.random() * 4
    if destination_id in SMALL_WAVE_SPOTS:
        return 1 + rng.random() * 3
    return 2 + rng.random() * 5


def base_temperature(destination_id: str) -> float:
    if destination_id in TROPICAL_SPOTS:
        return 28
    if destination_id in TEMPERATE_SPOTS:
        return 20
    if destination_id in COLD_SPOTS:
        return 15
    return 22


def surf_rating(wave_height: float, wave_period: float, wind_speed: float, destination_id: str) -> int:
    rating = 5
    if 2 <= wave_height <= 8:
        rating += 2
    elif 1 <= wave_height <= 10:
        rating += 1

    if wave_period >= 12:
        rating += 2
    elif wave_period >= 8:
        rating += 1

    if wind_speed <= 5:
        rating += 2
    elif wind_speed <= 10:
        rating += 1
    elif wind_speed >= 20:
        rating -= 2

    if destination_id in WORLD_CLASS_SPOTS:
        rating += 1
    return max(1, min(10, rating))


def describe_conditions(rating: int, wind_speed: float, wave_height: float) -> str:
    if wind_speed <= 5:
        wind = "light offshore"
    elif wind_speed <= 10:
        wind = "moderate winds"
    elif wind_speed <= 15:
        wind = "strong winds"
    else:
        wind = "very windy"

    if wave_height <= 2:
        waves = "small waves"
    elif wave_height <= 5:
        waves = "good size waves"
    elif wave_height <= 8:
        waves = "large waves"
    else:
        waves = "big waves"

    if rating >= 8:
        quality = "Excellent"
    elif rating >= 6:
        quality = "Good"
    elif rating >= 4:
        quality = "Fair"
    else:
        quality = "Poor"
    return f"{quality} conditions - {waves}, {wind}"


def generate_forecast(destination_id: str, now: datetime) -> SurfForecast:
    """Deterministic forecast for (destination_id, UTC day of `now`)."""
    rng = random.Random(hash_code(destination_id) * 100_003 + day_number(now))

    wave_height = max(0.5, base_wave_height(destination_id, rng) + (rng.random() - 0.5) * 3)
    wave_period = 8 + rng.random() * 12
    wind_speed = rng.random() * 25
    wind_direction = COMPASS[int(rng.random() * len(COMPASS))]
    wave_direction = COMPASS[int(rng.random() * len(COMPASS))]

    base_temp = base_temperature(destination_id)
    air_temp = round_half_up(base_temp + (rng.random() - 0.5) * 8)
    water_temp = round_half_up(base_temp - 2 + (rng.random() - 0.5) * 6)

    rating = surf_rating(wave_height, wave_period, wind_speed, destination_id)

    return SurfForecast(
        wave_height=round_half_up(wave_height, 1),
        wave_direction=wave_direction,
        wave_period=round_half_up(wave_period, 1),
        wind_speed=round_half_up(wind_speed),
        wind_direction=wind_direction,
        water_temp=water_temp,
        air_temp=air_temp,
        rating=rating,
        conditions=describe_conditions(rating, wind_speed, wave_height),
        last_updated=now,
    )


class ForecastProvider:
    """Serves cached, simulated forecasts per destination id."""

    def __init__(self, settings: Settings | None = None, cache: TTLCache | None = None):
        self._settings = settings or get_settings()
        self._cache = cache if cache is not None else TTLCache(
            enabled=self._settings.cache.enabled,
            default_ttl_seconds=self._settings.forecast.cache_ttl_seconds,
        )

    def get_forecast(self, destination_id: str) -> SurfForecast:
        def builder() -> SurfForecast:
            logger.debug("Generating forecast for %s", destination_id)
            return generate_forecast(destination_id, datetime.now(timezone.utc))

        return self._cache.get_or_set(
            CACHE_NAMESPACE,
            destination_id,
            builder,
            ttl_seconds=int(self._settings.forecast.cache_ttl_seconds),
        )

    def clear_cache(self) -> None:
        self._cache.clear(CACHE_NAMESPACE)
