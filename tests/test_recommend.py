import time
from datetime import datetime, timezone

from wavefinder.config.settings import get_settings
from wavefinder.domain.models import Destination, Preferences, TravelTimeResult
from wavefinder.forecast.provider import generate_forecast
from wavefinder.recommender.recommend import RankingStats, numbeo_url, rank_destinations, recommend
from wavefinder.scoring.score import calculate_score
from wavefinder.travel.estimator import estimate_simple_travel
from wavefinder.travel.service import TravelTimeService


def _destination(dest_id: str, **overrides) -> Destination:
    data = {
        "id": dest_id,
        "name": dest_id.title(),
        "country": "Testland",
        "region": "Coast",
        "coordinates": {"lat": 43.5, "lng": -1.4},
        "wave_quality": 7,
        "wave_size": "medium",
        "difficulty_level": 2,
        "best_months": [7],
        "average_temp": 24,
        "water_temp": 20,
        "crowd_level": 5,
        "cost": 60,
        "accommodation_options": ["Hostel"],
    }
    data.update(overrides)
    return Destination(**data)


def _preferences(**overrides) -> Preferences:
    data = {
        "surfing_ability": 2,
        "current_location": "London",
        "transport_modes": ["flight"],
        "max_travel_time": 12,
        "budget": 100,
        "temperature_range": 3,
        "travel_dates": {"start_date": "2026-07-10"},
    }
    data.update(overrides)
    return Preferences(**data)


class StubTravelService:
    """Returns fixed durations keyed by destination longitude."""

    def __init__(self, durations: dict[float, list[tuple[str, float]]]):
        self._durations = durations

    def calculate_travel_time(self, from_location, to, transport_modes):
        return [TravelTimeResult(distance=1000, duration=d, mode=m) for m, d in self._durations[to.lng]]


class SlowTravelService:
    def __init__(self, delay: float = 0.3):
        self.delay = delay

    def calculate_travel_time(self, from_location, to, transport_modes):
        time.sleep(self.delay)
        return [TravelTimeResult(distance=1000, duration=1, mode="flight")]


class StubForecastProvider:
    def __init__(self):
        self.calls = []

    def get_forecast(self, destination_id):
        self.calls.append(destination_id)
        return generate_forecast(destination_id, datetime(2026, 7, 1, tzinfo=timezone.utc))


def test_hard_travel_filter_excludes_destinations_over_budget():
    destinations = [
        _destination("near", coordinates={"lat": 43.5, "lng": 1}),
        _destination("edge", coordinates={"lat": 43.5, "lng": 2}),
        _destination("far", coordinates={"lat": 43.5, "lng": 3}),
    ]
    service = StubTravelService({1: [("flight", 5)], 2: [("flight", 12)], 3: [("flight", 12.1)]})

    ranked = rank_destinations(destinations, _preferences(), travel_service=service)

    assert {d.id for d in ranked} == {"near", "edge"}
    assert all(d.travel_time.duration <= 12 for d in ranked)


def test_fastest_mode_is_attached():
    dest = _destination("spot", coordinates={"lat": 43.5, "lng": 1})
    service = StubTravelService({1: [("flight", 6), ("car", 4.5), ("train", 4.5)]})

    prefs = _preferences(transport_modes=["flight", "car", "train"])

    (ranked,) = rank_destinations([dest], prefs, travel_service=service)

    assert ranked.travel_time.mode == "car"
    assert ranked.travel_time.duration == 4.5


def test_results_are_sorted_by_score_and_ties_keep_input_order():
    destinations = [
        _destination("twin-a", coordinates={"lat": 43.5, "lng": 1}, wave_quality=5),
        _destination("best", coordinates={"lat": 43.5, "lng": 2}, wave_quality=10),
        _destination("twin-b", coordinates={"lat": 43.5, "lng": 3}, wave_quality=5),
        _destination("worst", coordinates={"lat": 43.5, "lng": 4}, wave_quality=1, difficulty_level=4),
    ]
    service = StubTravelService({lng: [("flight", 3)] for lng in (1, 2, 3, 4)})
    prefs = _preferences()

    ranked = rank_destinations(destinations, prefs, travel_service=service)

    assert [d.id for d in ranked] == ["best", "twin-a", "twin-b", "worst"]
    scores = [calculate_score(d, prefs) for d in ranked]
    assert scores == sorted(scores, reverse=True)


def test_inputs_are_not_mutated_and_numbeo_link_is_attached():
    dest = _destination("spot", name="Sao Paulo", country="Brazil", coordinates={"lat": 43.5, "lng": 1})
    before = dest.model_dump()

    (ranked,) = rank_destinations([dest], _preferences(), travel_service=StubTravelService({1: [("flight", 3)]}))

    assert dest.model_dump() == before
    assert dest.travel_time is None
    assert ranked.numbeo_url == "https://www.numbeo.com/cost-of-living/in/Sao%20Paulo-Brazil"


def test_numbeo_url_keeps_reserved_punctuation():
    assert numbeo_url("St. John's", "Canada") == "https://www.numbeo.com/cost-of-living/in/St.%20John's-Canada"


def test_unknown_origin_falls_back_to_coarse_estimate():
    dest = _destination("spot", coordinates={"lat": -8.8, "lng": 115.1})
    stats = RankingStats()

    (ranked,) = rank_destinations(
        [dest], _preferences(current_location="Lonodn"), travel_service=TravelTimeService(), stats=stats
    )

    assert ranked.travel_time.distance == 0
    assert ranked.travel_time.duration == 8
    assert ranked.travel_time.mode == "flight"
    assert stats.fallbacks == {"geocode_not_found": 1}


def test_fallback_uses_origin_keywords():
    dest = _destination("spot", coordinates={"lat": 43.5, "lng": -1.4})
    service = TravelTimeService(geocoder=lambda location: None)

    (ranked,) = rank_destinations([dest], _preferences(current_location="Somewhere, UK"), travel_service=service)

    assert ranked.travel_time.duration == estimate_simple_travel(dest.coordinates, "Somewhere, UK") == 2


def test_slow_lookups_time_out_and_fall_back():
    settings = get_settings()
    settings = settings.model_copy(
        update={"travel": settings.travel.model_copy(update={"timeout_seconds": 0.05})}
    )
    destinations = [
        _destination("a", coordinates={"lat": 43.5, "lng": 1}),
        _destination("b", coordinates={"lat": 30.0, "lng": 2}),
    ]
    stats = RankingStats()

    t0 = time.monotonic()
    ranked = rank_destinations(
        destinations, _preferences(), settings=settings, travel_service=SlowTravelService(), stats=stats
    )

    assert time.monotonic() - t0 < 0.3
    assert stats.fallbacks == {"timeout": 2}
    by_id = {d.id: d.travel_time.duration for d in ranked}
    assert by_id == {"a": 2, "b": 6}


def test_recommend_reports_counts_and_fallback_warning():
    destinations = [
        _destination("a", coordinates={"lat": 43.5, "lng": 1}),
        _destination("b", coordinates={"lat": -8.8, "lng": 115.1}),
    ]

    result = recommend(
        _preferences(current_location="Atlantis", max_travel_time=10),
        destinations=destinations,
        travel_service=TravelTimeService(),
    )

    # Atlantis is unknown and has no region keyword: both get the 8h default.
    assert [d.id for d in result.results] == ["a", "b"]
    assert result.meta["ranked"] is True
    assert result.meta["counts"] == {"candidates": 2, "within_travel_budget": 2, "returned": 2}
    assert result.meta["travel_fallbacks"] == {"geocode_not_found": 2}
    assert [w["code"] for w in result.meta["warnings"]] == ["TRAVEL_ESTIMATED"]
    assert result.query.travel_month == 7


def test_recommend_fails_open_with_unranked_catalog(monkeypatch):
    import wavefinder.recommender.recommend as rec

    def boom(destination, preferences):
        raise RuntimeError("scoring exploded")

    monkeypatch.setattr(rec, "calculate_score", boom)
    destinations = [
        _destination("z", coordinates={"lat": 43.5, "lng": 1}),
        _destination("a", coordinates={"lat": 43.5, "lng": 2}),
    ]
    service = StubTravelService({1: [("flight", 3)], 2: [("flight", 3)]})

    result = recommend(_preferences(), destinations=destinations, travel_service=service)

    assert [d.id for d in result.results] == ["z", "a"]
    assert result.meta["ranked"] is False
    assert result.meta["warnings"][0]["code"] == "RANKING_FAILED"


def test_recommend_can_attach_explanations_and_forecasts():
    destinations = [_destination("spot", coordinates={"lat": 43.5, "lng": 1})]
    forecasts = StubForecastProvider()

    result = recommend(
        _preferences(),
        destinations=destinations,
        travel_service=StubTravelService({1: [("flight", 3)]}),
        forecast_provider=forecasts,
        include_explanations=True,
    )

    (dest,) = result.results
    assert forecasts.calls == ["spot"]
    assert dest.forecast is not None
    assert dest.recommendation_score is not None
    assert 0 <= dest.recommendation_score.overall_score <= 100


def test_recommend_uses_packaged_catalog_by_default():
    result = recommend(_preferences(max_travel_time=48))
    assert result.meta["counts"]["candidates"] >= 20
    assert len(result.results) > 0
    assert all(d.travel_time is not None for d in result.results)


def _with_travel(**updates):
    settings = get_settings()
    return settings.model_copy(update={"travel": settings.travel.model_copy(update=updates)})


def _many_destinations(n: int) -> list[Destination]:
    return [_destination(f"spot-{i}", coordinates={"lat": 43.5, "lng": float(i)}) for i in range(n)]


def test_queued_lookups_are_not_charged_for_waiting_on_a_capped_pool():
    # Three rounds of 0.3s lookups through 8 workers: ~0.9s in total, but no lookup takes 1s itself.
    settings = _with_travel(timeout_seconds=1.0, max_workers=8)
    stats = RankingStats()

    ranked = rank_destinations(
        _many_destinations(24),
        _preferences(),
        settings=settings,
        travel_service=SlowTravelService(delay=0.3),
        stats=stats,
    )

    assert stats.fallbacks is None
    assert len(ranked) == 24
    assert all(d.travel_time.duration == 1 for d in ranked)


def test_every_destination_gets_its_own_worker_by_default():
    settings = _with_travel(timeout_seconds=1.0)
    assert settings.travel.max_workers is None
    stats = RankingStats()

    t0 = time.monotonic()
    rank_destinations(
        _many_destinations(24),
        _preferences(),
        settings=settings,
        travel_service=SlowTravelService(delay=0.3),
        stats=stats,
    )

    assert stats.fallbacks is None
    assert time.monotonic() - t0 < 0.9
