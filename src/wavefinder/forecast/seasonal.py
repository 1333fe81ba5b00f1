"""
Seasonal conditions estimator.

Gives a rough picture of what a destination is like in a given month:
- peak season (month is a best month), shoulder season (next to one) or off season
- wave height band from the spot's `wave_size`, shifted by season
- crowd level shifted by season, kept within 1..10
- water temperature adjusted for hemisphere summer/winter
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from wavefinder.domain.models import Destination
from wavefinder.scoring.composite import round_half_up
from wavefinder.scoring.score import adjacent_months

Season = Literal["peak", "good", "poor"]

BASE_WAVE_HEIGHT_FT: dict[str, tuple[int, int]] = {
    "small": (2, 4),
    "medium": (4, 8),
    "large": (8, 15),
}
DEFAULT_WAVE_HEIGHT_FT = (3, 6)

NORTHERN_SUMMER = (6, 7, 8)
NORTHERN_WINTER = (12, 1, 2)

_SEASON_PROFILE: dict[Season, dict] = {
    "peak": {"consistency": "Excellent", "crowd_shift": 2, "temp_scale": 1.0, "conditions": "Prime conditions"},
    "good": {"consistency": "Good", "crowd_shift": -1, "temp_scale": 0.7, "conditions": "Solid conditions"},
    "poor": {"consistency": "Inconsistent", "crowd_shift": -3, "temp_scale": 0.5, "conditions": "Variable conditions"},
}


class SeasonalConditions(BaseModel):
    season: Season
    wave_height: str
    consistency: str
    crowd: str
    water_temp: float
    conditions: str
    month: int = Field(..., ge=1, le=12)


def season_for(destination: Destination, month: int) -> Season:
    if month in destination.best_months:
        return "peak"
    # Adjacency is symmetric: `month` is next to a best month iff a best month is next to `month`.
    if any(m in adjacent_months(month) for m in destination.best_months):
        return "good"
    return "poor"


def seasonal_wave_height(wave_size: str, season: Season) -> str:
    lo, hi = BASE_WAVE_HEIGHT_FT.get(wave_size, DEFAULT_WAVE_HEIGHT_FT)
    if season == "peak":
        return f"{lo + 1}-{hi + 2}ft"
    if season == "good":
        return f"{lo}-{hi + 1}ft"
    return f"{max(lo - 1, 1)}-{hi}ft"


def hemisphere_temp_adjustment(lat: float, month: int) -> int:
    """+3 in local summer, -3 in local winter, 0 otherwise."""
    northern = lat > 0
    summer = NORTHERN_SUMMER if northern else NORTHERN_WINTER
    winter = NORTHERN_WINTER if northern else NORTHERN_SUMMER
    if month in summer:
        return 3
    if month in winter:
        return -3
    return 0


def get_seasonal_conditions(destination: Destination, month: int) -> SeasonalConditions:
    season = season_for(destination, month)
    profile = _SEASON_PROFILE[season]

    crowd = destination.crowd_level + profile["crowd_shift"]
    crowd = min(crowd, 10) if profile["crowd_shift"] > 0 else max(crowd, 1)

    adjustment = hemisphere_temp_adjustment(destination.coordinates.lat, month)
    water_temp = destination.water_temp + round_half_up(adjustment * profile["temp_scale"])

    return SeasonalConditions(
        season=season,
        wave_height=seasonal_wave_height(destination.wave_size, season),
        consistency=profile["consistency"],
        crowd=f"{int(crowd)}/10",
        water_temp=water_temp,
        conditions=profile["conditions"],
        month=month,
    )
