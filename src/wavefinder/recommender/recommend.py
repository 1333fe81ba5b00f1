from __future__ import annotations

# This module is the "orchestrator" for the ranking pipeline.
# It wires together:
# - domain input (Preferences)
# - travel time estimation (geocode -> haversine -> per-mode duration, with a coarse fallback)
# - the primary score (calculate_score) used for ordering
# - optional explanations (generate_explanation) for display
#
# Design goal:
# - Keep each layer focused (travel does estimation; scoring does math; this file does orchestration).
# - Fail open: a destination whose travel lookup fails is estimated heuristically, and a
#   ranking run that blows up returns the unranked catalog rather than nothing.

import contextvars
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence
from urllib.parse import quote
from zoneinfo import ZoneInfo

from wavefinder.catalog.loader import get_catalog
from wavefinder.config.settings import Settings, get_settings
from wavefinder.domain.models import Destination, Preferences, RecommendationResult, TravelTimeResult
from wavefinder.forecast.provider import ForecastProvider
from wavefinder.scoring.explain import generate_explanation
from wavefinder.scoring.score import calculate_score
from wavefinder.travel.estimator import estimate_simple_travel
from wavefinder.travel.service import GeocodeNotFound, TravelTimeoutExceeded, TravelTimeService

logger = logging.getLogger(__name__)

NUMBEO_BASE_URL = "https://www.numbeo.com/cost-of-living/in/"


@dataclass(frozen=True)
class ScoredDestination:
    """Sort pairing; discarded once the ranking is built."""

    destination: Destination
    score: float


@dataclass(frozen=True)
class TravelResolution:
    """The travel option chosen for one destination, and how it was obtained."""

    result: TravelTimeResult
    fallback_reason: str | None = None


@dataclass
class RankingStats:
    """Counters collected during one ranking pass (reported in `meta`)."""

    candidates: int = 0
    within_travel_budget: int = 0
    scored: int = 0
    fallbacks: dict[str, int] | None = None

    def count_fallback(self, reason: str) -> None:
        if self.fallbacks is None:
            self.fallbacks = {}
        self.fallbacks[reason] = self.fallbacks.get(reason, 0) + 1


def numbeo_url(city: str, country: str) -> str:
    """Cost-of-living link for a destination."""
    safe = "!~*'()"
    return f"{NUMBEO_BASE_URL}{quote(city, safe=safe)}-{quote(country, safe=safe)}"


def _fallback_travel(destination: Destination, preferences: Preferences, settings: Settings) -> TravelTimeResult:
    mode = preferences.transport_modes[0] if preferences.transport_modes else settings.travel.fallback_mode
    return TravelTimeResult(
        distance=0,
        duration=estimate_simple_travel(destination.coordinates, preferences.current_location),
        mode=mode,
    )


def _fastest(results: list[TravelTimeResult]) -> TravelTimeResult:
    # min() keeps the first of equal durations, i.e. the earlier requested mode wins ties.
    return min(results, key=lambda r: r.duration)


class TimedLookup:
    """One destination's travel lookup; the clock starts when a worker picks it up."""

    def __init__(self, destination: Destination):
        self.destination = destination
        self.started = threading.Event()
        self.started_at = 0.0
        self.future: Future | None = None

    def run(self, fn, *args) -> list[TravelTimeResult]:
        self.started_at = time.monotonic()
        self.started.set()
        return fn(*args)


def _await_travel(lookup: TimedLookup, *, timeout: float) -> list[TravelTimeResult]:
    # Time spent queued behind other destinations does not count against this one.
    lookup.started.wait()
    future = lookup.future
    remaining = max(0.0, lookup.started_at + timeout - time.monotonic())
    try:
        return future.result(timeout=remaining)
    except FutureTimeoutError as e:
        future.cancel()
        raise TravelTimeoutExceeded("Travel time calculation timeout") from e


def _resolve_travel(
    lookup: TimedLookup,
    *,
    timeout: float,
    preferences: Preferences,
    settings: Settings,
) -> TravelResolution:
    destination = lookup.destination
    try:
        results = _await_travel(lookup, timeout=timeout)
        if not results:
            raise ValueError("no transport modes requested")
        return TravelResolution(result=_fastest(results))
    except GeocodeNotFound as e:
        reason = "geocode_not_found"
        logger.warning("Could not calculate travel time for %s: %s", destination.name, e)
    except TravelTimeoutExceeded as e:
        reason = "timeout"
        logger.warning("Could not calculate travel time for %s: %s", destination.name, e)
    except Exception as e:
        reason = "error"
        logger.warning("Could not calculate travel time for %s: %s", destination.name, e)
    return TravelResolution(result=_fallback_travel(destination, preferences, settings), fallback_reason=reason)


def rank_destinations(
    destinations: Sequence[Destination],
    preferences: Preferences,
    *,
    settings: Settings | None = None,
    travel_service: TravelTimeService | None = None,
    stats: RankingStats | None = None,
) -> list[Destination]:
    """Filter by travel-time budget, score, and order destinations (best first).

    Returned items are copies carrying `travel_time` and `numbeo_url`; the input
    records are never modified.
    """
    settings = settings or get_settings()
    travel_service = travel_service or TravelTimeService(settings)
    stats = stats if stats is not None else RankingStats()
    stats.candidates = len(destinations)

    # ---- Step 1: travel lookups, one task per destination (independent, so run them concurrently) ----
    # One worker per destination unless `travel.max_workers` caps the pool.
    cap = settings.travel.max_workers
    workers = len(destinations) if cap is None else min(int(cap), len(destinations))
    executor = ThreadPoolExecutor(
        max_workers=max(1, workers),
        thread_name_prefix="wavefinder-travel",
    )
    try:
        lookups: list[TimedLookup] = []
        for dest in destinations:
            lookup = TimedLookup(dest)
            # Copy the context so cache stats recorded by the caller are visible in worker threads.
            ctx = contextvars.copy_context()
            lookup.future = executor.submit(
                ctx.run,
                lookup.run,
                travel_service.calculate_travel_time,
                preferences.current_location,
                dest.coordinates,
                list(preferences.transport_modes),
            )
            lookups.append(lookup)

        # Results are consumed in input order, so completion order never affects the ranking.
        within_budget: list[Destination] = []
        timeout = float(settings.travel.timeout_seconds)
        for lookup in lookups:
            dest = lookup.destination
            resolution = _resolve_travel(lookup, timeout=timeout, preferences=preferences, settings=settings)
            if resolution.fallback_reason:
                stats.count_fallback(resolution.fallback_reason)

            # ---- Step 2: hard travel-time filter (not a scoring penalty) ----
            if resolution.result.duration > preferences.max_travel_time:
                continue
            within_budget.append(
                dest.model_copy(
                    update={
                        "travel_time": resolution.result,
                        "numbeo_url": numbeo_url(dest.name, dest.country),
                    }
                )
            )
    finally:
        # Do not wait for stuck lookups; their results are no longer needed.
        executor.shutdown(wait=False, cancel_futures=True)
    stats.within_travel_budget = len(within_budget)

    # ---- Step 3: score survivors, drop non-positive scores ----
    scored = [ScoredDestination(destination=d, score=calculate_score(d, preferences)) for d in within_budget]
    scored = [s for s in scored if s.score > 0]
    stats.scored = len(scored)

    # ---- Step 4: stable sort, best first ----
    scored.sort(key=lambda s: s.score, reverse=True)
    return [s.destination for s in scored]


def _attach_explanations(
    ranked: list[Destination],
    preferences: Preferences,
    *,
    settings: Settings,
    forecast_provider: ForecastProvider | None,
) -> list[Destination]:
    out: list[Destination] = []
    for dest in ranked:
        if forecast_provider is not None and dest.forecast is None:
            dest = dest.model_copy(update={"forecast": forecast_provider.get_forecast(dest.id)})
        explanation = generate_explanation(dest, preferences, settings=settings)
        out.append(dest.model_copy(update={"recommendation_score": explanation}))
    return out


def recommend(
    preferences: Preferences,
    *,
    settings: Settings | None = None,
    destinations: Sequence[Destination] | None = None,
    travel_service: TravelTimeService | None = None,
    forecast_provider: ForecastProvider | None = None,
    include_explanations: bool = False,
) -> RecommendationResult:
    """Top-level entry point: rank the catalog for `preferences`, never raising for data errors."""
    t0 = time.monotonic()
    timings_ms: dict[str, int] = {}
    settings = settings or get_settings()

    # ---- Load destination catalog (unless tests inject a small in-memory list) ----
    if destinations is None:
        destinations = get_catalog(settings.catalog.path)
    destinations = list(destinations)
    timings_ms["load_catalog"] = int((time.monotonic() - t0) * 1000)

    warnings: list[dict[str, Any]] = []
    stats = RankingStats()
    ranked_ok = True
    t_rank = time.monotonic()
    try:
        results = rank_destinations(
            destinations, preferences, settings=settings, travel_service=travel_service, stats=stats
        )
        if include_explanations:
            results = _attach_explanations(
                results, preferences, settings=settings, forecast_provider=forecast_provider
            )
    except Exception:
        # Fail open: show every destination, unranked, rather than an empty result.
        logger.exception("Ranking failed; returning the unranked catalog")
        ranked_ok = False
        results = destinations
        warnings.append(
            {
                "code": "RANKING_FAILED",
                "message": "Ranking failed; showing all destinations unranked.",
            }
        )
    timings_ms["rank"] = int((time.monotonic() - t_rank) * 1000)

    if stats.fallbacks:
        warnings.append(
            {
                "code": "TRAVEL_ESTIMATED",
                "message": "Some travel times are rough estimates; the origin could not be resolved in time.",
                "detail": dict(stats.fallbacks),
            }
        )

    generated_at = datetime.now(ZoneInfo(settings.app.timezone))
    meta = {
        "ranked": ranked_ok,
        "counts": {
            "candidates": stats.candidates,
            "within_travel_budget": stats.within_travel_budget,
            "returned": len(results),
        },
        "travel_fallbacks": dict(stats.fallbacks or {}),
        "warnings": warnings,
        "timings_ms": timings_ms,
    }
    return RecommendationResult(generated_at=generated_at, query=preferences, results=results, meta=meta)
