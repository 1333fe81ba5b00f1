import json

import pytest
from pydantic import ValidationError

from wavefinder.catalog.loader import find_destination, load_destinations
from wavefinder.config.settings import get_settings
from wavefinder.core.time import parse_date, trip_duration_days


@pytest.fixture
def fresh_settings():
    # `get_settings` is cached; clear it around tests that change the environment.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_default_settings_values():
    settings = get_settings()
    assert settings.travel.timeout_seconds == 2
    assert settings.travel.cache_ttl_seconds == 3600
    assert settings.forecast.cache_ttl_seconds == 900
    assert [s.above_km for s in settings.travel.flight_overhead_steps] == [3000, 8000, 15000]
    assert sum(settings.scoring.default_preference_weights.model_dump().values()) == 100


def test_env_overrides_log_level(monkeypatch, fresh_settings):
    monkeypatch.setenv("WAVEFINDER_LOG_LEVEL", "DEBUG")
    assert get_settings().app.log_level == "DEBUG"


def test_external_config_file(monkeypatch, tmp_path, fresh_settings):
    cfg = tmp_path / "wavefinder.yaml"
    cfg.write_text("travel:\n  timeout_seconds: 0.5\n  max_workers: 2\n", encoding="utf-8")
    monkeypatch.setenv("WAVEFINDER_CONFIG_PATH", str(cfg))

    settings = get_settings()
    assert settings.travel.timeout_seconds == 0.5
    assert settings.travel.max_workers == 2
    # Unspecified sections keep their model defaults.
    assert settings.travel.ground_speeds_kmh["train"] == 120


def test_packaged_catalog_is_valid():
    destinations = load_destinations()
    ids = [d.id for d in destinations]
    assert len(ids) == len(set(ids)) >= 20
    assert all(1 <= d.difficulty_level <= 4 for d in destinations)
    assert find_destination(destinations, "pt-ericeira").country == "Portugal"
    assert find_destination(destinations, "nope") is None


def test_catalog_rejects_duplicate_ids(tmp_path):
    record = load_destinations()[0].model_dump(mode="json")
    path = tmp_path / "dupes.json"
    path.write_text(json.dumps([record, record]), encoding="utf-8")

    with pytest.raises(ValueError, match="Duplicate destination id"):
        load_destinations(path)


def test_catalog_rejects_invalid_months(tmp_path):
    record = load_destinations()[0].model_dump(mode="json")
    record["best_months"] = [0, 13]
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([record]), encoding="utf-8")

    with pytest.raises(ValidationError):
        load_destinations(path)


def test_trip_duration_and_date_parsing():
    assert parse_date("2026-07-10") == parse_date("2026-07-10T08:30:00Z")
    assert trip_duration_days(parse_date("2026-07-01"), None) == 7
    assert trip_duration_days(parse_date("2026-07-01"), parse_date("2026-07-01")) == 1
    assert trip_duration_days(parse_date("2026-07-01"), parse_date("2026-07-10")) == 10
