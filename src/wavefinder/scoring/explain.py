"""
Recommendation explanations.

`generate_explanation` builds the breakdown shown next to a ranked destination:
six named factors (score 0..100, display weight, sentence, confidence), an
overall weighted score, a confidence estimate and short human-readable reasons.

Note: this is a separate factor model from `wavefinder.scoring.score`, so
`overall_score` is not the number used for ordering. The two are kept
distinct on purpose (see DESIGN.md, open questions).

`one_line_summary` renders an explanation compactly for the CLI.
"""

from __future__ import annotations

from wavefinder.config.settings import Settings, get_settings
from wavefinder.domain.models import (
    Destination,
    FactorBreakdown,
    FactorScore,
    PreferenceWeights,
    Preferences,
    RecommendationExplanation,
)
from wavefinder.scoring.composite import round_half_up
from wavefinder.scoring.score import adjacent_months

SKILL_LEVEL_NAMES = {1: "beginner", 2: "intermediate", 3: "advanced", 4: "expert"}
MONTH_NAMES = {
    1: "January", 2: "February", 3: "March", 4: "April", 5: "May", 6: "June",
    7: "July", 8: "August", 9: "September", 10: "October", 11: "November", 12: "December",
}

WHY_NOT_HIGHER_THRESHOLD = 70


def _money(x: float) -> str:
    return str(int(x)) if float(x).is_integer() else str(x)


def _safety_rating(destination: Destination) -> float | None:
    return destination.safety_info.overall_safety_rating if destination.safety_info else None


def calculate_skill_match(destination: Destination, preferences: Preferences) -> FactorScore:
    skill = preferences.surfing_ability
    difficulty = destination.difficulty_level
    level_name = SKILL_LEVEL_NAMES.get(skill, "unknown")
    confidence = 90

    if skill == difficulty:
        score = 100
        explanation = f"Perfect match for your {level_name} level"
    elif abs(skill - difficulty) == 1:
        score = 75
        if skill > difficulty:
            explanation = "Slightly easier than your skill level - great for building confidence"
        else:
            explanation = "Slightly more challenging - good for progression"
    elif skill < difficulty:
        score = 30
        explanation = f"May be too challenging for {level_name} level"
        confidence = 95
    else:
        score = 60
        explanation = "Easier than your skill level but still enjoyable"

    rating = _safety_rating(destination)
    if skill == 1 and rating is not None and rating >= 8:
        score += 10
        explanation += " (bonus for excellent safety rating)"

    return FactorScore(score=min(100, score), weight=15, explanation=explanation, confidence=confidence)


def calculate_budget_fit(destination: Destination, preferences: Preferences) -> FactorScore:
    daily_cost = destination.cost
    daily_budget = preferences.budget / preferences.trip_duration
    vs = f"(${_money(daily_cost)} vs ${daily_budget:.0f} daily)"

    if daily_cost <= daily_budget * 0.8:
        score, explanation = 100, f"Well within budget {vs}"
    elif daily_cost <= daily_budget:
        score, explanation = 80, f"Fits your budget (${_money(daily_cost)} daily)"
    elif daily_cost <= daily_budget * 1.2:
        score, explanation = 60, f"Slightly over budget {vs}"
    else:
        score, explanation = 30, f"Above your budget range {vs}"

    return FactorScore(score=score, weight=20, explanation=explanation, confidence=85)


def calculate_seasonal_timing(destination: Destination, preferences: Preferences) -> FactorScore:
    month = preferences.travel_month
    if month in destination.best_months:
        score, confidence = 100, 90
        explanation = f"Excellent timing - {MONTH_NAMES.get(month, 'unknown')} is peak season"
    elif any(m in adjacent_months(month) for m in destination.best_months):
        score, confidence = 70, 75
        explanation = "Good timing - close to peak season"
    else:
        score, confidence = 40, 60
        explanation = "Off-season timing - waves may be smaller/less consistent"

    return FactorScore(score=score, weight=25, explanation=explanation, confidence=confidence)


def calculate_travel_logistics(destination: Destination, preferences: Preferences) -> FactorScore:
    # Infrastructure proxy only; the resolved travel time is not consulted here.
    score, confidence = 70, 50
    explanation = "Travel logistics look manageable"
    if destination.tourist_friendliness is not None and destination.tourist_friendliness >= 8:
        score += 15
        confidence = 80
        explanation = "Excellent tourist infrastructure makes travel easy"

    return FactorScore(score=min(100, score), weight=15, explanation=explanation, confidence=confidence)


def calculate_safety_factors(destination: Destination, preferences: Preferences) -> FactorScore:
    novice = preferences.surfing_ability <= 2
    weight = 10 if novice else 5
    info = destination.safety_info
    if info is None:
        return FactorScore(
            score=50, weight=weight, explanation="Limited safety information available", confidence=30
        )

    rating = info.overall_safety_rating
    score = rating * 10
    explanation = f"Safety rating: {_money(rating)}/10"
    if novice and rating >= 8:
        score += 10
        explanation += " (excellent for beginners)"
    if info.lifeguard_presence:
        explanation += ", lifeguards present"

    return FactorScore(score=min(100, score), weight=weight, explanation=explanation, confidence=95)


def _matches_temperature_preference(average_temp: float, temperature_range: int) -> bool:
    if temperature_range == 1:
        return average_temp < 15
    if temperature_range == 2:
        return 15 <= average_temp < 20
    if temperature_range == 3:
        return 20 <= average_temp < 25
    if temperature_range == 4:
        return average_temp >= 25
    return False


def calculate_personal_preferences(destination: Destination, preferences: Preferences) -> FactorScore:
    score = 70
    explanation = "Matches your general preferences"
    if _matches_temperature_preference(destination.average_temp, preferences.temperature_range):
        score += 15
        explanation = "Perfect temperature match for your preferences"
    if destination.crowd_level <= 5:
        score += 10
        explanation += ", uncrowded spot"

    return FactorScore(score=min(100, score), weight=10, explanation=explanation, confidence=70)


def calculate_overall_score(breakdown: FactorBreakdown, weights: PreferenceWeights) -> float:
    """Weighted mean of the factor scores over all seven preference weights.

    Seasonal timing is weighted by `wave_quality`, and personal preferences by
    `temperature + crowd_level`.
    """
    weighted_sum = (
        breakdown.skill_match.score * weights.skill_match
        + breakdown.budget_fit.score * weights.budget
        + breakdown.seasonal_timing.score * weights.wave_quality
        + breakdown.travel_logistics.score * weights.travel_time
        + breakdown.safety_factors.score * weights.safety_factors
        + breakdown.personal_preferences.score * (weights.temperature + weights.crowd_level)
    )
    total_weight = weights.total()
    if total_weight <= 0:
        return 0
    return round_half_up(weighted_sum / total_weight)


def calculate_confidence(destination: Destination, breakdown: FactorBreakdown) -> float:
    confidences = [factor.confidence for _, factor in breakdown.items()]
    confidence = sum(confidences) / len(confidences)
    if not destination.reddit_quotes:
        confidence -= 10
    if destination.forecast is None:
        confidence -= 5
    return round_half_up(max(0.0, confidence))


def humanize_factor(name: str) -> str:
    """`skill_match` -> `skill match`."""
    return name.replace("_", " ").lower()


def generate_alternative_reasons(breakdown: FactorBreakdown) -> list[str]:
    ranked = sorted(breakdown.items(), key=lambda kv: kv[1].score, reverse=True)
    reasons = [f"Strong {humanize_factor(ranked[0][0])}: {ranked[0][1].explanation}"]
    if len(ranked) > 1:
        reasons.append(f"Good {humanize_factor(ranked[1][0])}: {ranked[1][1].explanation}")
    return reasons


def generate_why_not_higher(breakdown: FactorBreakdown) -> str | None:
    name, weakest = min(breakdown.items(), key=lambda kv: kv[1].score)
    if weakest.score < WHY_NOT_HIGHER_THRESHOLD:
        return f"Score limited by {humanize_factor(name)}: {weakest.explanation}"
    return None


def default_weights(settings: Settings | None = None) -> PreferenceWeights:
    defaults = (settings or get_settings()).scoring.default_preference_weights
    return PreferenceWeights(**defaults.model_dump())


def generate_explanation(
    destination: Destination,
    preferences: Preferences,
    weights: PreferenceWeights | None = None,
    *,
    settings: Settings | None = None,
) -> RecommendationExplanation:
    """Explain how well `destination` fits `preferences`.

    Weights precedence: explicit argument -> `preferences.preference_weights` -> configured defaults.
    """
    weights = weights or preferences.preference_weights or default_weights(settings)

    breakdown = FactorBreakdown(
        skill_match=calculate_skill_match(destination, preferences),
        budget_fit=calculate_budget_fit(destination, preferences),
        seasonal_timing=calculate_seasonal_timing(destination, preferences),
        travel_logistics=calculate_travel_logistics(destination, preferences),
        safety_factors=calculate_safety_factors(destination, preferences),
        personal_preferences=calculate_personal_preferences(destination, preferences),
    )

    return RecommendationExplanation(
        overall_score=calculate_overall_score(breakdown, weights),
        confidence_level=calculate_confidence(destination, breakdown),
        factor_breakdown=breakdown,
        alternative_reasons=generate_alternative_reasons(breakdown),
        why_not_higher=generate_why_not_higher(breakdown),
    )


def one_line_summary(explanation: RecommendationExplanation) -> str:
    """Render a compact single-line summary for an explanation."""
    parts = [f"overall={explanation.overall_score:.0f}", f"confidence={explanation.confidence_level:.0f}%"]
    for name, factor in explanation.factor_breakdown.items():
        parts.append(f"{name}={factor.score:.0f}")
    return " | ".join(parts)
