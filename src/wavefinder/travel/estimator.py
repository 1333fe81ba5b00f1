# src/wavefinder/travel/estimator.py
"""
Travel duration models.

Two estimators live here:
- `estimate_duration_hours`: distance-based, per transport mode. Flights add an
  airport overhead that steps up with distance; ground modes are distance / speed.
- `estimate_simple_travel`: a coarse fallback used when the origin cannot be
  geocoded (or the lookup timed out). It guesses from keywords in the origin
  text plus the destination's latitude band, so ranking still produces
  results instead of excluding every destination.

Speeds and overhead steps come from `settings.travel` (YAML).
"""

from __future__ import annotations

from wavefinder.config.settings import Settings, get_settings
from wavefinder.core.geo import LatLng

UK_KEYWORDS = ("london", "uk", "england")
EUROPE_KEYWORDS = ("paris", "amsterdam", "berlin")
US_KEYWORDS = ("new york", "los angeles", "usa")


def flight_overhead_hours(distance_km: float, *, settings: Settings | None = None) -> float:
    """Airport time for a flight of `distance_km` (step function)."""
    cfg = (settings or get_settings()).travel
    overhead = float(cfg.flight_base_overhead_hours)
    for step in cfg.flight_overhead_steps:
        if distance_km > step.above_km:
            overhead = float(step.hours)
    return overhead


def estimate_duration_hours(distance_km: float, mode: str, *, settings: Settings | None = None) -> float:
    """Door-to-door hours for `mode` over `distance_km`; unknown modes travel at car speed."""
    settings = settings or get_settings()
    cfg = settings.travel
    if mode == "flight":
        return distance_km / float(cfg.flight_cruise_speed_kmh) + flight_overhead_hours(
            distance_km, settings=settings
        )
    speed = float(cfg.ground_speeds_kmh.get(mode) or cfg.default_speed_kmh)
    return distance_km / speed


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(k in text for k in keywords)


def estimate_simple_travel(destination: LatLng, from_location: str) -> float:
    """Coarse hour guess (2..12) from origin keywords and the destination's |latitude|."""
    origin = (from_location or "").lower()
    lat = abs(destination.lat)

    if _contains_any(origin, UK_KEYWORDS):
        if 40 < lat < 65:
            return 2  # Europe
        if 20 < lat < 40:
            return 6  # Mediterranean / North Africa
        if lat < 20:
            return 12  # tropics
        return 8
    if _contains_any(origin, EUROPE_KEYWORDS):
        if 40 < lat < 65:
            return 3
        if 20 < lat < 40:
            return 5
        if lat < 20:
            return 11
        return 7
    if _contains_any(origin, US_KEYWORDS):
        if 25 < lat < 50:
            return 5  # North America
        if lat < 25:
            return 8  # Central / South America
        return 12
    return 8
