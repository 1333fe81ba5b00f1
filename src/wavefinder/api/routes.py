"""
API routes.

Endpoints:
- POST `/api/rank`: main ranking entrypoint (fails open; see `recommend`).
- POST `/api/destinations/{id}/explanation`: factor breakdown for one destination.
- GET  `/api/destinations`, `/api/destinations/{id}`: the catalog.
- GET  `/api/destinations/{id}/forecast`: simulated surf forecast.
- GET  `/api/destinations/{id}/seasonal?month=`: seasonal conditions estimate.
- POST `/api/weights/normalize`: apply a slider edit and renormalize weights to 100.
- GET  `/api/health`
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from wavefinder.catalog.loader import find_destination, get_catalog
from wavefinder.config.settings import get_settings
from wavefinder.core.cache import record_cache_stats
from wavefinder.domain.models import (
    Destination,
    PreferenceWeights,
    Preferences,
    RecommendationExplanation,
    RecommendationResult,
    SurfForecast,
    WeightName,
)
from wavefinder.forecast.provider import ForecastProvider
from wavefinder.forecast.seasonal import SeasonalConditions, get_seasonal_conditions
from wavefinder.recommender.recommend import recommend
from wavefinder.scoring.composite import blend_weight, normalize_weights
from wavefinder.scoring.explain import generate_explanation
from wavefinder.travel.service import TravelTimeService

router = APIRouter()


class WeightsUpdate(BaseModel):
    """A weight set plus an optional single-slider edit."""

    weights: PreferenceWeights
    factor: WeightName | None = None
    value: float | None = None


@lru_cache
def _services() -> tuple[TravelTimeService, ForecastProvider]:
    settings = get_settings()
    return TravelTimeService(settings), ForecastProvider(settings)


def _catalog() -> tuple[Destination, ...]:
    return get_catalog(get_settings().catalog.path)


def _destination_or_404(destination_id: str) -> Destination:
    dest = find_destination(_catalog(), destination_id)
    if dest is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "NOT_FOUND", "message": f"Unknown destination '{destination_id}'."},
        )
    return dest


@router.get("/api/health")
def get_health() -> dict:
    settings = get_settings()
    return {"status": "ok", "app": settings.app.name, "destinations": len(_catalog())}


@router.post("/api/rank", response_model=RecommendationResult)
def post_rank(preferences: Preferences, explain: bool = False) -> RecommendationResult:
    """Rank the catalog for validated preferences (most recommended first)."""
    settings = get_settings()
    travel_service, forecast_provider = _services()
    with record_cache_stats() as stats:
        result = recommend(
            preferences,
            settings=settings,
            travel_service=travel_service,
            forecast_provider=forecast_provider,
            include_explanations=explain,
        )
    meta = {**(result.meta or {}), "cache": stats.as_dict()}
    return result.model_copy(update={"meta": meta})


@router.get("/api/destinations", response_model=list[Destination])
def get_destinations() -> list[Destination]:
    return list(_catalog())


@router.get("/api/destinations/{destination_id}", response_model=Destination)
def get_destination(destination_id: str) -> Destination:
    return _destination_or_404(destination_id)


@router.post("/api/destinations/{destination_id}/explanation", response_model=RecommendationExplanation)
def post_explanation(destination_id: str, preferences: Preferences) -> RecommendationExplanation:
    dest = _destination_or_404(destination_id)
    return generate_explanation(dest, preferences, settings=get_settings())


@router.get("/api/destinations/{destination_id}/forecast", response_model=SurfForecast)
def get_forecast(destination_id: str) -> SurfForecast:
    dest = _destination_or_404(destination_id)
    _, forecast_provider = _services()
    return forecast_provider.get_forecast(dest.id)


@router.get("/api/destinations/{destination_id}/seasonal", response_model=SeasonalConditions)
def get_seasonal(destination_id: str, month: int = Query(..., ge=1, le=12)) -> SeasonalConditions:
    dest = _destination_or_404(destination_id)
    return get_seasonal_conditions(dest, month)


@router.post("/api/weights/normalize", response_model=PreferenceWeights)
def post_normalize_weights(update: WeightsUpdate) -> PreferenceWeights:
    if update.factor is not None:
        if update.value is None:
            raise HTTPException(
                status_code=400,
                detail={"code": "VALIDATION_ERROR", "message": "'value' is required when 'factor' is set."},
            )
        return blend_weight(update.weights, update.factor, update.value)
    return normalize_weights(update.weights)
