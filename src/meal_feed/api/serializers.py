"""JSON payload builders for API responses."""

from meal_feed.domain.meals import Meal
from meal_feed.domain.profiles import MacroHistoryEntry
from meal_feed.domain.recommendations import Recommendation
from meal_feed.domain.search import UserSearchResult
from meal_feed.services.search import MealSearchResult


def meal_payload(meal: Meal) -> dict[str, object]:
    """Return the public JSON shape of a meal."""
    attrs = meal.attributes
    return {
        "id": str(meal.id),
        "user_id": str(meal.user_id),
        "recipe_text": meal.description,
        "meal_image_url": meal.image_url,
        **meal.macros.as_dict(),
        "created_at": meal.created_at.isoformat() if meal.created_at else None,
        "cuisine": attrs.cuisine,
        "meal_time": attrs.meal_time,
        "course_type": attrs.course_type,
        "diet_type": attrs.diet_type,
        "spice_level": attrs.spice_level,
        "serving_size": attrs.serving_size,
        "prep_time_mins": attrs.prep_time_mins,
        "price": attrs.price,
        "location": attrs.location,
        "likes_count": meal.engagement.likes,
        "comments_count": meal.engagement.comments,
        "saves_count": meal.engagement.saves,
    }


def recommendation_payload(item: Recommendation) -> dict[str, object]:
    author = item.meal.author
    return {
        **meal_payload(item.meal),
        "score": item.score,
        "author": (
            {"username": author.username, "avatar_url": author.avatar_url}
            if author
            else None
        ),
        "isLiked": item.is_liked,
        "isSaved": item.is_saved,
    }


def meal_search_payload(result: MealSearchResult) -> dict[str, object]:
    return {**meal_payload(result.meal), "score": result.score}


def user_search_payload(result: UserSearchResult) -> dict[str, object]:
    return {
        "id": str(result.id),
        "username": result.username,
        "display_name": result.display_name,
        "avatar_url": result.avatar_url,
    }


def macro_history_payload(entry: MacroHistoryEntry) -> dict[str, object]:
    return entry.to_json()
