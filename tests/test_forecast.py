from datetime import datetime, timezone

from wavefinder.config.settings import get_settings
from wavefinder.core.cache import TTLCache, record_cache_stats
from wavefinder.domain.models import Destination
from wavefinder.forecast.provider import (
    ForecastProvider,
    describe_conditions,
    generate_forecast,
    hash_code,
    surf_rating,
)
from wavefinder.forecast.seasonal import get_seasonal_conditions, hemisphere_temp_adjustment

MORNING = datetime(2026, 7, 1, 6, 0, tzinfo=timezone.utc)
EVENING = datetime(2026, 7, 1, 21, 0, tzinfo=timezone.utc)


def _destination(**overrides) -> Destination:
    data = {
        "id": "test-point",
        "name": "Test Point",
        "country": "Testland",
        "region": "Coast",
        "coordinates": {"lat": 43.5, "lng": -1.4},
        "wave_quality": 8,
        "wave_size": "medium",
        "difficulty_level": 2,
        "best_months": [6, 7, 8],
        "average_temp": 22,
        "water_temp": 20,
        "crowd_level": 9,
        "cost": 80,
    }
    data.update(overrides)
    return Destination(**data)


def test_hash_code_is_stable():
    assert hash_code("") == 0
    assert hash_code("a") == 97
    assert hash_code("ab") == 97 * 31 + 98


def test_forecast_is_deterministic_within_a_day():
    assert generate_forecast("pt-ericeira", MORNING).model_dump(exclude={"last_updated"}) == generate_forecast(
        "pt-ericeira", EVENING
    ).model_dump(exclude={"last_updated"})


def test_forecast_values_are_in_range():
    for dest_id in ("us-hi-pipeline", "cr-nosara", "id-uluwatu", "unknown-spot"):
        f = generate_forecast(dest_id, MORNING)
        assert 1 <= f.rating <= 10
        assert f.wave_height >= 0.5
        assert 8 <= f.wave_period <= 20
        assert 0 <= f.wind_speed <= 25
        assert f.conditions.split(" ", 1)[0] in {"Excellent", "Good", "Fair", "Poor"}


def test_surf_rating_bounds():
    assert surf_rating(4, 14, 3, "us-hi-pipeline") == 10
    assert surf_rating(12, 6, 22, "somewhere") == 3


def test_describe_conditions():
    assert describe_conditions(9, 3, 4) == "Excellent conditions - good size waves, light offshore"
    assert describe_conditions(3, 18, 1.5) == "Poor conditions - small waves, very windy"


def test_provider_caches_per_destination():
    provider = ForecastProvider(get_settings(), TTLCache())

    with record_cache_stats() as stats:
        first = provider.get_forecast("pt-ericeira")
        second = provider.get_forecast("pt-ericeira")

    assert first is second
    assert stats.hits == 1
    assert stats.sets == 1

    provider.clear_cache()
    with record_cache_stats() as stats:
        provider.get_forecast("pt-ericeira")
    assert stats.sets == 1


def test_hemisphere_adjustment():
    assert hemisphere_temp_adjustment(43.5, 7) == 3
    assert hemisphere_temp_adjustment(43.5, 1) == -3
    assert hemisphere_temp_adjustment(-33.9, 1) == 3
    assert hemisphere_temp_adjustment(-33.9, 7) == -3
    assert hemisphere_temp_adjustment(43.5, 4) == 0


def test_seasonal_peak_month():
    s = get_seasonal_conditions(_destination(), 7)
    assert s.season == "peak"
    assert s.wave_height == "5-10ft"
    assert s.consistency == "Excellent"
    assert s.crowd == "10/10"
    assert s.water_temp == 23


def test_seasonal_shoulder_month():
    s = get_seasonal_conditions(_destination(), 9)
    assert s.season == "good"
    assert s.wave_height == "4-9ft"
    assert s.crowd == "8/10"
    assert s.water_temp == 20


def test_seasonal_off_season_in_winter():
    s = get_seasonal_conditions(_destination(), 1)
    assert s.season == "poor"
    assert s.wave_height == "3-8ft"
    assert s.crowd == "6/10"
    # -3 scaled by 0.5 rounds half up to -1.
    assert s.water_temp == 19


def test_seasonal_crowd_never_drops_below_one():
    s = get_seasonal_conditions(_destination(crowd_level=2, wave_size="small"), 3)
    assert s.crowd == "1/10"
    assert s.wave_height == "1-4ft"


def test_seasonal_southern_hemisphere_summer():
    dest = _destination(coordinates={"lat": -33.9, "lng": 25.0}, best_months=[1])
    assert get_seasonal_conditions(dest, 1).water_temp == 23
