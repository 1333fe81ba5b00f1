"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- API/CLI inputs (`Preferences`, `PreferenceWeights`)
- catalog entities (`Destination` and its enrichment records)
- ranking + explainability output (`TravelTimeResult`, `RecommendationExplanation`,
  `RecommendationResult`)

Keeping these models in one place helps:
- validation (reject bad inputs early),
- typed refactors,
- consistent JSON output across CLI/API.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from wavefinder.core.time import trip_duration_days, trip_month

TransportMode = Literal["flight", "car", "train", "bus"]
WaveSize = Literal["small", "medium", "large"]
Currency = Literal["USD", "EUR", "GBP"]


class Coordinates(BaseModel):
    """A geographic point in decimal degrees."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class SafetyInfo(BaseModel):
    overall_safety_rating: float = Field(..., ge=1, le=10)
    medical_facilities_nearby: bool = False
    lifeguard_presence: bool = False
    emergency_contacts: list[str] = Field(default_factory=list)
    common_hazards: list[str] = Field(default_factory=list)
    beginner_friendly_times: list[str] = Field(default_factory=list)
    water_quality_rating: float | None = Field(default=None, ge=1, le=10)


class SkillRequirement(BaseModel):
    skill: str
    level: Literal["required", "recommended", "helpful"]
    description: str = ""


class BookingOption(BaseModel):
    type: Literal["accommodation", "flights", "surf-lessons", "equipment-rental"]
    provider: str
    url: str
    estimated_price: float | None = None
    currency: str | None = None


class RedditQuote(BaseModel):
    text: str
    author: str
    url: str
    subreddit: str


class SurfForecast(BaseModel):
    """Point-in-time surf conditions for one destination."""

    wave_height: float  # feet
    wave_direction: str
    wave_period: float  # seconds
    wind_speed: float  # mph
    wind_direction: str
    water_temp: float
    air_temp: float
    rating: int = Field(..., ge=1, le=10)
    conditions: str
    last_updated: datetime


class TravelTimeResult(BaseModel):
    """Best travel option from the user's location to a destination."""

    distance: float = Field(..., ge=0)  # km
    duration: float = Field(..., ge=0)  # hours
    mode: str


class FactorScore(BaseModel):
    score: float = Field(..., ge=0, le=100)
    weight: float = Field(..., ge=0, le=100)
    explanation: str
    confidence: float = Field(..., ge=0, le=100)


class FactorBreakdown(BaseModel):
    """The six explanation factors, in display order."""

    skill_match: FactorScore
    budget_fit: FactorScore
    seasonal_timing: FactorScore
    travel_logistics: FactorScore
    safety_factors: FactorScore
    personal_preferences: FactorScore

    def items(self) -> list[tuple[str, FactorScore]]:
        return [(name, getattr(self, name)) for name in type(self).model_fields]


class RecommendationExplanation(BaseModel):
    overall_score: float
    confidence_level: float = Field(..., ge=0, le=100)
    factor_breakdown: FactorBreakdown
    alternative_reasons: list[str] = Field(default_factory=list)
    why_not_higher: str | None = None


class Destination(BaseModel):
    """A static surf-spot record from the catalog."""

    id: str
    name: str
    country: str
    region: str
    coordinates: Coordinates
    wave_quality: float = Field(..., ge=1, le=10)
    wave_size: WaveSize
    difficulty_level: int = Field(..., ge=1, le=4)
    best_months: list[int] = Field(default_factory=list)
    average_temp: float
    water_temp: float
    crowd_level: float = Field(..., ge=1, le=10)
    cost: float = Field(..., ge=0)
    accommodation_options: list[str] = Field(default_factory=list)

    description: str | None = None
    highlights: list[str] = Field(default_factory=list)
    image_url: str | None = None
    weather_conditions: str | None = None
    break_type: str | None = None
    tourist_friendliness: float | None = Field(default=None, ge=1, le=10)
    lifeguard_presence: bool | None = None
    safety_info: SafetyInfo | None = None
    skill_requirements: list[SkillRequirement] = Field(default_factory=list)
    booking_options: list[BookingOption] = Field(default_factory=list)
    reddit_quotes: list[RedditQuote] = Field(default_factory=list)
    forecast: SurfForecast | None = None

    # Per-request fields, only ever set on a copy during ranking.
    travel_time: TravelTimeResult | None = None
    numbeo_url: str | None = None
    recommendation_score: RecommendationExplanation | None = None

    @field_validator("best_months")
    @classmethod
    def _validate_months(cls, months: list[int]) -> list[int]:
        bad = [m for m in months if not 1 <= m <= 12]
        if bad:
            raise ValueError(f"best_months must be within 1..12, got {bad}")
        return months


class PreferenceWeights(BaseModel):
    """User-adjustable importance of each factor (percentages, ideally summing to 100)."""

    wave_quality: float = Field(..., ge=0)
    budget: float = Field(..., ge=0)
    travel_time: float = Field(..., ge=0)
    crowd_level: float = Field(..., ge=0)
    temperature: float = Field(..., ge=0)
    skill_match: float = Field(..., ge=0)
    safety_factors: float = Field(..., ge=0)

    def total(self) -> float:
        return float(sum(self.model_dump().values()))


WeightName = Literal[
    "wave_quality", "budget", "travel_time", "crowd_level", "temperature", "skill_match", "safety_factors"
]


class TravelDates(BaseModel):
    start_date: date
    end_date: date | None = None

    @model_validator(mode="after")
    def _validate_order(self) -> "TravelDates":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("travel_dates.end_date must not be before travel_dates.start_date")
        return self


class Preferences(BaseModel):
    """End-user request payload for a ranking run."""

    surfing_ability: int = Field(..., ge=1, le=4)
    current_location: str = ""
    transport_modes: list[TransportMode] = Field(default_factory=lambda: ["flight"])
    max_travel_time: float = Field(..., ge=0)
    budget: float = Field(..., gt=0)
    currency: Currency = "USD"
    temperature_range: int = Field(..., ge=1, le=4)
    travel_dates: TravelDates
    needs_surf_lessons: bool = False
    preference_weights: PreferenceWeights | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def travel_month(self) -> int:
        return trip_month(self.travel_dates.start_date)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def trip_duration(self) -> int:
        return trip_duration_days(self.travel_dates.start_date, self.travel_dates.end_date)


class RecommendationResult(BaseModel):
    """Ranked destinations plus the original query."""

    generated_at: datetime
    query: Preferences
    results: list[Destination]
    meta: dict[str, Any] = Field(default_factory=dict)
