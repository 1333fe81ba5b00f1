# src/wavefinder/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/wavefinder/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `WAVEFINDER_LOG_LEVEL`, `WAVEFINDER_CATALOG_PATH`)
- an external YAML file via `WAVEFINDER_CONFIG_PATH`

Design rule:
- Tuning knobs live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from wavefinder.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `wavefinder.config`."""
    text = resources.files("wavefinder.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "WaveFinder"
    timezone: str = "UTC"
    log_level: str = "INFO"


class CacheSettings(BaseModel):
    enabled: bool = True
    default_ttl_seconds: int = 60 * 60


class CatalogSettings(BaseModel):
    # None means "use the catalog packaged with wavefinder".
    path: str | None = None


class FlightOverheadStep(BaseModel):
    above_km: float = Field(..., ge=0)
    hours: float = Field(..., ge=0)


class TravelSettings(BaseModel):
    timeout_seconds: float = Field(2.0, gt=0)
    cache_ttl_seconds: int = 60 * 60
    # None: one worker per destination.
    max_workers: int | None = Field(None, ge=1)
    flight_cruise_speed_kmh: float = Field(900, gt=0)
    flight_base_overhead_hours: float = 3
    flight_overhead_steps: list[FlightOverheadStep] = Field(
        default_factory=lambda: [
            FlightOverheadStep(above_km=3000, hours=4),
            FlightOverheadStep(above_km=8000, hours=5),
            FlightOverheadStep(above_km=15000, hours=6),
        ]
    )
    ground_speeds_kmh: dict[str, float] = Field(
        default_factory=lambda: {"car": 80, "train": 120, "bus": 60}
    )
    default_speed_kmh: float = Field(80, gt=0)
    fallback_mode: Literal["flight", "car", "train", "bus"] = "flight"


class ForecastSettings(BaseModel):
    cache_ttl_seconds: int = 15 * 60


class PreferenceWeightDefaults(BaseModel):
    wave_quality: float = 25
    budget: float = 20
    travel_time: float = 15
    crowd_level: float = 10
    temperature: float = 10
    skill_match: float = 15
    safety_factors: float = 5


class ScoringSettings(BaseModel):
    default_preference_weights: PreferenceWeightDefaults = Field(default_factory=PreferenceWeightDefaults)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    travel: TravelSettings = Field(default_factory=TravelSettings)
    forecast: ForecastSettings = Field(default_factory=ForecastSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("WAVEFINDER_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("WAVEFINDER_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("WAVEFINDER_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
