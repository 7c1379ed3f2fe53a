"""Weighted scoring of candidate meals."""

from datetime import datetime

from meal_feed.domain.meals import FILTER_FIELDS, Meal, MealCategory, prep_time_bucket
from meal_feed.domain.profiles import MACRO_NAMES
from meal_feed.domain.recommendations import ScoredMeal, ScoringWeights, UserFeatures

SECONDS_PER_DAY = 86400


def score_meal(
    meal: Meal,
    features: UserFeatures,
    weights: ScoringWeights,
    now: datetime,
) -> ScoredMeal:
    """Score one candidate; the total is never negative."""
    breakdown = {
        "engagement": meal.engagement.total * weights.engagement,
        "nutrient_fit": _nutrient_fit(meal, features, weights),
        "consistency": features.consistency * weights.consistency,
        "remaining_fit": _remaining_fit(meal, features, weights),
        "preference": _preference_match(meal, features, weights),
        "search_filter": _filter_match(meal, features, weights),
        "prep_time": _prep_time_match(meal, features, weights),
        "price": _price_affordability(meal, features, weights),
        "social": weights.social if meal.user_id in features.followee_ids else 0.0,
        "recency": _recency(meal, weights, now),
    }
    return ScoredMeal(
        meal=meal, score=max(0.0, sum(breakdown.values())), breakdown=breakdown
    )


def _nutrient_fit(meal: Meal, features: UserFeatures, weights: ScoringWeights) -> float:
    goals = features.goals.as_dict()
    values = meal.macros.as_dict()
    total = 0.0
    for name in MACRO_NAMES:
        goal = goals[name]
        if not goal:
            continue
        total += weights.nutrient_fit * (1 - min(abs(goal - values[name]) / goal, 1))
    return total


def _remaining_fit(
    meal: Meal, features: UserFeatures, weights: ScoringWeights
) -> float:
    if features.remaining is None:
        return 0.0
    remaining = features.remaining.as_dict()
    values = meal.macros.as_dict()
    total = 0.0
    for name in MACRO_NAMES:
        left = remaining[name]
        value = values[name]
        total += weights.remaining_fit * (
            1 - min(abs(left - value) / (left + value + 1), 1)
        )
    return total


def _preference_match(
    meal: Meal, features: UserFeatures, weights: ScoringWeights
) -> float:
    total = 0.0
    for category in MealCategory:
        value = meal.attributes.category(category)
        counts = features.preferences.get(category)
        if value and counts and counts[value]:
            total += counts[value] * weights.preference
    return total


def _filter_match(meal: Meal, features: UserFeatures, weights: ScoringWeights) -> float:
    total = 0.0
    for key, preference in features.filters.items():
        field = FILTER_FIELDS.get(key)
        if field is None:
            continue
        if field(meal.attributes) == preference.latest_value:
            total += preference.count * weights.search_filter
    return total


def _prep_time_match(
    meal: Meal, features: UserFeatures, weights: ScoringWeights
) -> float:
    bucket = prep_time_bucket(meal.attributes.prep_time_mins)
    if bucket is None:
        return 0.0
    return features.prep_times[bucket] * weights.prep_time


def _price_affordability(
    meal: Meal, features: UserFeatures, weights: ScoringWeights
) -> float:
    price = meal.attributes.price
    calories_goal = features.goals.calories
    if price is None or price <= 0 or calories_goal <= 0:
        return 0.0
    return weights.price * (1 - min(price / (calories_goal / 100), 1))


def _recency(meal: Meal, weights: ScoringWeights, now: datetime) -> float:
    if meal.created_at is None:
        return 0.0
    age_days = max(0.0, (now - meal.created_at).total_seconds() / SECONDS_PER_DAY)
    horizon = weights.recency_horizon_days
    return weights.recency * max(0.0, (horizon - age_days) / horizon)
