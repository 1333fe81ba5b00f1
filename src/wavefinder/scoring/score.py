# src/wavefinder/scoring/score.py
"""
Primary ranking score (0..100).

`calculate_score` is a sum of independent components, each with its own ceiling:

| component            | max | rule                                                         |
|----------------------|-----|--------------------------------------------------------------|
| ability match        | 20  | 20 / 15 / 5 / 0 for a difficulty gap of 0 / 1 / 2 / 3+      |
| budget fit           | 15* | 15 * (1 - cost/budget + 0.2) in budget; 10 / 5 / 0 over it  |
| seasonality          | 15  | 15 in a best month, 10 next to one, else 0                  |
| transport            | 10  | 10 with any mode selected, else 5                           |
| surf lessons         | 15  | 10 when not needed; 15 / 0 for surf school present / absent |
| temperature          | 15  | 15 inside the band, then 10 / 5 / 2 / 0 by distance         |
| wave quality         | 20  | wave_quality * 2                                            |

(*) The budget component is not clamped on its own and exceeds 15 for very
cheap destinations; only the total is capped at 100.

This score orders the ranked list. The explanation shown next to each result
(`wavefinder.scoring.explain`) uses a separate factor model.
"""

from __future__ import annotations

from wavefinder.domain.models import Destination, Preferences

MAX_SCORE = 100.0

# temperature_range -> (min, max) °C; unknown values fall back to "mild".
TEMPERATURE_BANDS: dict[int, tuple[float, float]] = {
    1: (5, 15),  # cold
    2: (15, 22),  # mild
    3: (22, 28),  # warm
    4: (28, 40),  # hot
}
DEFAULT_TEMPERATURE_BAND = TEMPERATURE_BANDS[2]

SURF_SCHOOL_MARKERS = ("surf school", "surf-school")


def adjacent_months(month: int) -> tuple[int, int]:
    """The months before and after `month`, wrapping at the year boundary."""
    return (12 if month == 1 else month - 1, 1 if month == 12 else month + 1)


def score_surfing_ability(difficulty_level: int, surfing_ability: int) -> float:
    gap = abs(difficulty_level - surfing_ability)
    if gap == 0:
        return 20
    if gap == 1:
        return 15
    if gap == 2:
        return 5
    return 0


def score_budget(cost: float, budget: float) -> float:
    if cost <= budget:
        return 15 * (1 - cost / budget + 0.2)

    overage = (cost - budget) / budget
    if overage <= 0.2:
        return 10
    if overage <= 0.5:
        return 5
    return 0


def score_seasonality(best_months: list[int], travel_month: int) -> float:
    if travel_month in best_months:
        return 15
    nearby = adjacent_months(travel_month)
    if any(m in nearby for m in best_months):
        return 10
    return 0


def score_transport(transport_modes: list[str]) -> float:
    return 10 if transport_modes else 5


def has_surf_school(accommodation_options: list[str]) -> bool:
    return any(marker in option.lower() for option in accommodation_options for marker in SURF_SCHOOL_MARKERS)


def score_surf_lessons(accommodation_options: list[str], needs_lessons: bool) -> float:
    if not needs_lessons:
        return 10
    return 15 if has_surf_school(accommodation_options) else 0


def score_temperature(average_temp: float, temperature_range: int) -> float:
    lo, hi = TEMPERATURE_BANDS.get(temperature_range, DEFAULT_TEMPERATURE_BAND)
    if lo <= average_temp <= hi:
        return 15

    distance = lo - average_temp if average_temp < lo else average_temp - hi
    if distance <= 3:
        return 10
    if distance <= 6:
        return 5
    if distance <= 10:
        return 2
    return 0


def score_wave_quality(wave_quality: float) -> float:
    return wave_quality * 2


def score_components(destination: Destination, preferences: Preferences) -> dict[str, float]:
    """Every component of `calculate_score`, keyed by name (useful for debugging output)."""
    return {
        "ability": score_surfing_ability(destination.difficulty_level, preferences.surfing_ability),
        "budget": score_budget(destination.cost, preferences.budget),
        "seasonality": score_seasonality(destination.best_months, preferences.travel_month),
        "transport": score_transport(preferences.transport_modes),
        "surf_lessons": score_surf_lessons(destination.accommodation_options, preferences.needs_surf_lessons),
        "temperature": score_temperature(destination.average_temp, preferences.temperature_range),
        "wave_quality": score_wave_quality(destination.wave_quality),
    }


def calculate_score(destination: Destination, preferences: Preferences) -> float:
    """Pure, deterministic ranking score capped at 100."""
    return min(sum(score_components(destination, preferences).values()), MAX_SCORE)
