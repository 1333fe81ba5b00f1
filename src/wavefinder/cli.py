"""
WaveFinder CLI entrypoint.

This CLI is intended for quick local demos and debugging without the HTTP API.
It delegates all ranking logic to `wavefinder.recommender.recommend.recommend`.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from wavefinder.catalog.loader import find_destination, get_catalog
from wavefinder.config.settings import get_settings
from wavefinder.core.logging import configure_logging
from wavefinder.core.time import parse_date
from wavefinder.domain.models import PreferenceWeights, Preferences, TravelDates
from wavefinder.forecast.provider import ForecastProvider
from wavefinder.forecast.seasonal import get_seasonal_conditions
from wavefinder.recommender.recommend import recommend
from wavefinder.scoring.explain import generate_explanation, one_line_summary

WEIGHT_FLAGS = (
    "wave_quality",
    "budget",
    "travel_time",
    "crowd_level",
    "temperature",
    "skill_match",
    "safety_factors",
)


def _parse_weight_pairs(pairs: list[str]) -> dict[str, float]:
    """Parse `NAME=VALUE` CLI arguments into a weights dict."""
    out: dict[str, float] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid --weight '{pair}', expected NAME=VALUE")
        name, value = pair.split("=", 1)
        name = name.strip().lower()
        if name not in WEIGHT_FLAGS:
            raise ValueError(f"Unknown weight '{name}'; expected one of {', '.join(WEIGHT_FLAGS)}")
        out[name] = float(value)
    return out


def _preferences_from_args(args: argparse.Namespace) -> Preferences:
    settings = get_settings()
    weights = None
    if args.weight:
        base = settings.scoring.default_preference_weights.model_dump()
        base.update(_parse_weight_pairs(args.weight))
        weights = PreferenceWeights(**base)

    return Preferences(
        surfing_ability=int(args.ability),
        current_location=args.location,
        transport_modes=args.mode or ["flight"],
        max_travel_time=float(args.max_travel_time),
        budget=float(args.budget),
        currency=args.currency,
        temperature_range=int(args.temperature),
        travel_dates=TravelDates(
            start_date=parse_date(args.start),
            end_date=parse_date(args.end) if args.end else None,
        ),
        needs_surf_lessons=bool(args.lessons),
        preference_weights=weights,
    )


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _cmd_rank(args: argparse.Namespace) -> int:
    """Handle the `rank` subcommand."""
    settings = get_settings()
    prefs = _preferences_from_args(args)
    result = recommend(
        prefs,
        settings=settings,
        forecast_provider=ForecastProvider(settings) if args.explain else None,
        include_explanations=bool(args.explain),
    )

    if args.limit is not None:
        result = result.model_copy(update={"results": result.results[: int(args.limit)]})

    if args.json:
        _print_json(result.model_dump(mode="json"))
        return 0

    print(f"Generated at: {result.generated_at.isoformat()}")
    for w in result.meta.get("warnings", []):
        print(f"warning: {w['message']}", file=sys.stderr)
    print("Top results:")
    for i, dest in enumerate(result.results, start=1):
        travel = dest.travel_time
        travel_text = f"{travel.duration:g}h by {travel.mode}" if travel else "travel unknown"
        print(f"{i:>2}. {dest.name} ({dest.region}, {dest.country})  {travel_text}  ${dest.cost:g}/day")
        if dest.recommendation_score is not None:
            print(f"    {one_line_summary(dest.recommendation_score)}")
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    settings = get_settings()
    dest = find_destination(get_catalog(settings.catalog.path), args.id)
    if dest is None:
        print(f"Unknown destination '{args.id}'", file=sys.stderr)
        return 2

    explanation = generate_explanation(dest, _preferences_from_args(args), settings=settings)
    if args.json:
        _print_json(explanation.model_dump(mode="json"))
        return 0

    print(f"{dest.name}: {one_line_summary(explanation)}")
    for name, factor in explanation.factor_breakdown.items():
        print(f"  - {name}: score={factor.score:.0f} weight={factor.weight:.0f}  {factor.explanation}")
    for reason in explanation.alternative_reasons:
        print(f"  + {reason}")
    if explanation.why_not_higher:
        print(f"  ! {explanation.why_not_higher}")
    return 0


def _cmd_forecast(args: argparse.Namespace) -> int:
    settings = get_settings()
    dest = find_destination(get_catalog(settings.catalog.path), args.id)
    if dest is None:
        print(f"Unknown destination '{args.id}'", file=sys.stderr)
        return 2

    forecast = ForecastProvider(settings).get_forecast(dest.id)
    if args.json:
        _print_json(forecast.model_dump(mode="json"))
        return 0
    print(f"{dest.name}: {forecast.conditions} (rating {forecast.rating}/10)")
    print(
        f"  waves {forecast.wave_height}ft @ {forecast.wave_period}s from {forecast.wave_direction}; "
        f"wind {forecast.wind_speed:g}mph {forecast.wind_direction}; water {forecast.water_temp:g}°C"
    )
    return 0


def _cmd_seasonal(args: argparse.Namespace) -> int:
    settings = get_settings()
    dest = find_destination(get_catalog(settings.catalog.path), args.id)
    if dest is None:
        print(f"Unknown destination '{args.id}'", file=sys.stderr)
        return 2

    conditions = get_seasonal_conditions(dest, int(args.month))
    if args.json:
        _print_json(conditions.model_dump(mode="json"))
        return 0
    print(
        f"{dest.name} in month {conditions.month}: {conditions.season} season, {conditions.wave_height}, "
        f"consistency {conditions.consistency}, crowd {conditions.crowd}, water {conditions.water_temp:g}°C"
    )
    return 0


def _add_preference_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--location", required=True, help="Where you travel from (e.g. London)")
    p.add_argument("--ability", required=True, type=int, choices=[1, 2, 3, 4], help="1=beginner .. 4=expert")
    p.add_argument("--max-travel-time", dest="max_travel_time", required=True, type=float, help="Hours")
    p.add_argument("--budget", required=True, type=float, help="Budget for the whole trip")
    p.add_argument("--currency", default="USD", choices=["USD", "EUR", "GBP"])
    p.add_argument("--temperature", required=True, type=int, choices=[1, 2, 3, 4], help="1=cold .. 4=hot")
    p.add_argument("--start", required=True, help="ISO date (e.g. 2026-06-01)")
    p.add_argument("--end", default=None, help="ISO date; omit for a one-week trip")
    p.add_argument(
        "--mode",
        action="append",
        default=[],
        choices=["flight", "car", "train", "bus"],
        help="Repeatable. Defaults to flight.",
    )
    p.add_argument("--lessons", action="store_true", help="You want surf lessons on site")
    p.add_argument("--weight", action="append", default=[], help="Override a preference weight: NAME=VALUE")
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the WaveFinder CLI."""
    parser = argparse.ArgumentParser(prog="wavefinder")
    sub = parser.add_subparsers(dest="command", required=True)

    rank = sub.add_parser("rank", help="Rank surf destinations for your preferences.")
    _add_preference_args(rank)
    rank.add_argument("--limit", type=int, default=None)
    rank.add_argument("--explain", action="store_true", help="Attach a factor breakdown to each result")
    rank.set_defaults(func=_cmd_rank)

    exp = sub.add_parser("explain", help="Explain how one destination fits your preferences.")
    exp.add_argument("--id", required=True)
    _add_preference_args(exp)
    exp.set_defaults(func=_cmd_explain)

    fc = sub.add_parser("forecast", help="Show today's (simulated) surf forecast for a destination.")
    fc.add_argument("--id", required=True)
    fc.add_argument("--json", action="store_true")
    fc.set_defaults(func=_cmd_forecast)

    se = sub.add_parser("seasonal", help="Estimate conditions at a destination for a month.")
    se.add_argument("--id", required=True)
    se.add_argument("--month", required=True, type=int, choices=range(1, 13))
    se.add_argument("--json", action="store_true")
    se.set_defaults(func=_cmd_seasonal)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m wavefinder.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
