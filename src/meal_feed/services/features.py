"""Turn raw user signals into scoring features."""

from collections import Counter
from datetime import date

from meal_feed.domain.meals import Meal, MealCategory, PrepTimeBucket, prep_time_bucket
from meal_feed.domain.profiles import (
    MACRO_NAMES,
    MacroHistoryEntry,
    MacroValues,
    Profile,
)
from meal_feed.domain.recommendations import FilterPreference, UserFeatures, UserSignals

DEFAULT_CONSISTENCY_THRESHOLD = 0.9


def extract_features(
    signals: UserSignals,
    today: date,
    consistency_threshold: float = DEFAULT_CONSISTENCY_THRESHOLD,
) -> UserFeatures:
    """Build the feature set for one user on the given local date."""
    profile = signals.profile
    return UserFeatures(
        goals=profile.goals,
        consistency=consistency_score(
            signals.macro_history, profile.goals, consistency_threshold
        ),
        preferences=preference_counts(signals.recent_meals),
        prep_times=prep_time_counts(signals.recent_meals),
        filters=filter_preferences(signals.search_filters),
        remaining=remaining_macros(profile, today),
        followee_ids=signals.followee_ids,
    )


def consistency_score(
    history: list[MacroHistoryEntry],
    goals: MacroValues,
    threshold: float = DEFAULT_CONSISTENCY_THRESHOLD,
) -> float:
    """Return the fraction of days where every macro reached threshold of goal."""
    if not history:
        return 0.0
    goal_values = goals.as_dict()
    met = 0
    for entry in history:
        day_values = {
            "calories": entry.calories,
            "protein": entry.protein,
            "carbs": entry.carbs,
            "fat": entry.fat,
        }
        if all(
            day_values[name] >= goal_values[name] * threshold for name in MACRO_NAMES
        ):
            met += 1
    return met / len(history)


def preference_counts(meals: list[Meal]) -> dict[MealCategory, Counter[str]]:
    """Count attribute values per category across a user's meals."""
    counts: dict[MealCategory, Counter[str]] = {
        category: Counter() for category in MealCategory
    }
    for meal in meals:
        for category in MealCategory:
            value = meal.attributes.category(category)
            if value:
                counts[category][value] += 1
    return counts


def prep_time_counts(meals: list[Meal]) -> Counter[PrepTimeBucket]:
    """Count meals per prep time bucket."""
    counts: Counter[PrepTimeBucket] = Counter()
    for meal in meals:
        bucket = prep_time_bucket(meal.attributes.prep_time_mins)
        if bucket is not None:
            counts[bucket] += 1
    return counts


def filter_preferences(
    filter_sets: list[dict[str, object]],
) -> dict[str, FilterPreference]:
    """Count filter key usage and keep the newest value for each key.

    ``filter_sets`` must be ordered newest first.
    """
    counts: Counter[str] = Counter()
    latest: dict[str, object] = {}
    for filters in filter_sets:
        for key, value in filters.items():
            if value is None or value == "":
                continue
            counts[key] += 1
            latest.setdefault(key, value)
    return {
        key: FilterPreference(count=count, latest_value=latest[key])
        for key, count in counts.items()
    }


def remaining_macros(profile: Profile, today: date) -> MacroValues | None:
    """Return what is left of today's goals, or None if consumption is stale."""
    if profile.consumed_updated_on != today:
        return None
    goals = profile.goals
    consumed = profile.consumed
    return MacroValues(
        calories=max(0.0, goals.calories - consumed.calories),
        protein=max(0.0, goals.protein - consumed.protein),
        carbs=max(0.0, goals.carbs - consumed.carbs),
        fat=max(0.0, goals.fat - consumed.fat),
    )
