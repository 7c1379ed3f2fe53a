"""Domain models for recommendation ranking."""

from collections import Counter
from dataclasses import dataclass, field
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from meal_feed.domain.meals import Meal, MealCategory, PrepTimeBucket
from meal_feed.domain.profiles import MacroHistoryEntry, MacroValues, Profile


class ScoringWeights(BaseModel):
    """Weights for each term of the recommendation score."""

    model_config = ConfigDict(frozen=True)

    engagement: float = Field(default=2.0, ge=0.0)
    nutrient_fit: float = Field(default=30.0, ge=0.0)
    consistency: float = Field(default=10.0, ge=0.0)
    remaining_fit: float = Field(default=5.0, ge=0.0)
    preference: float = Field(default=15.0, ge=0.0)
    search_filter: float = Field(default=5.0, ge=0.0)
    prep_time: float = Field(default=5.0, ge=0.0)
    price: float = Field(default=5.0, ge=0.0)
    social: float = Field(default=8.0, ge=0.0)
    recency: float = Field(default=5.0, ge=0.0)
    recency_horizon_days: float = Field(default=10.0, gt=0.0)
    consistency_threshold: float = Field(default=0.9, gt=0.0, le=1.0)


@dataclass(frozen=True)
class UserSignals:
    """Raw inputs gathered for one recommendation request."""

    profile: Profile
    macro_history: list[MacroHistoryEntry]
    recent_meals: list[Meal]
    search_filters: list[dict[str, object]]
    followee_ids: frozenset[UUID]
    corpus: list[Meal]
    liked_meal_ids: frozenset[UUID] = frozenset()
    saved_meal_ids: frozenset[UUID] = frozenset()


@dataclass(frozen=True)
class FilterPreference:
    """How often a filter key was used and its most recent value."""

    count: int
    latest_value: object


@dataclass
class UserFeatures:
    """Normalized per-user features used by the scoring function."""

    goals: MacroValues
    consistency: float = 0.0
    preferences: dict[MealCategory, Counter[str]] = field(default_factory=dict)
    prep_times: Counter[PrepTimeBucket] = field(default_factory=Counter)
    filters: dict[str, FilterPreference] = field(default_factory=dict)
    remaining: MacroValues | None = None
    followee_ids: frozenset[UUID] = frozenset()


@dataclass(frozen=True)
class ScoredMeal:
    """A candidate meal with its final score and per-term breakdown."""

    meal: Meal
    score: float
    breakdown: dict[str, float]


@dataclass(frozen=True)
class Recommendation:
    """A ranked meal with the viewer's engagement flags."""

    meal: Meal
    score: float
    is_liked: bool
    is_saved: bool
