"""Domain models for shared meals."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from meal_feed.domain.profiles import MacroValues


class MealCategory(str, Enum):
    """Categorical meal attributes used for preference matching."""

    CUISINE = "cuisine"
    MEAL_TIME = "meal_time"
    DIET_TYPE = "diet_type"
    SPICE_LEVEL = "spice_level"
    LOCATION = "location"


class PrepTimeBucket(str, Enum):
    """Coarse preparation time buckets."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


SHORT_PREP_MAX_MINS = 20
MEDIUM_PREP_MAX_MINS = 45


def prep_time_bucket(prep_time_mins: float | None) -> PrepTimeBucket | None:
    """Return the bucket for a prep time, or None when unknown."""
    if prep_time_mins is None:
        return None
    if prep_time_mins <= SHORT_PREP_MAX_MINS:
        return PrepTimeBucket.SHORT
    if prep_time_mins <= MEDIUM_PREP_MAX_MINS:
        return PrepTimeBucket.MEDIUM
    return PrepTimeBucket.LONG


@dataclass(frozen=True)
class MealAttributes:
    """Categorical and descriptive attributes of a meal."""

    cuisine: str | None = None
    meal_time: str | None = None
    diet_type: str | None = None
    spice_level: str | None = None
    location: str | None = None
    course_type: str | None = None
    serving_size: str | None = None
    prep_time_mins: float | None = None
    price: float | None = None

    def category(self, category: MealCategory) -> str | None:
        """Return the value for a preference category."""
        return _CATEGORY_FIELDS[category](self)


_CATEGORY_FIELDS = {
    MealCategory.CUISINE: lambda attrs: attrs.cuisine,
    MealCategory.MEAL_TIME: lambda attrs: attrs.meal_time,
    MealCategory.DIET_TYPE: lambda attrs: attrs.diet_type,
    MealCategory.SPICE_LEVEL: lambda attrs: attrs.spice_level,
    MealCategory.LOCATION: lambda attrs: attrs.location,
}

# Search filter keys that name a comparable meal field.
FILTER_FIELDS = {
    "cuisine": lambda attrs: attrs.cuisine,
    "meal_time": lambda attrs: attrs.meal_time,
    "diet_type": lambda attrs: attrs.diet_type,
    "spice_level": lambda attrs: attrs.spice_level,
    "location": lambda attrs: attrs.location,
    "course_type": lambda attrs: attrs.course_type,
    "serving_size": lambda attrs: attrs.serving_size,
    "prep_time_mins": lambda attrs: attrs.prep_time_mins,
    "price": lambda attrs: attrs.price,
}


@dataclass(frozen=True)
class Author:
    """Public author fields embedded with a meal."""

    username: str | None
    avatar_url: str | None


@dataclass(frozen=True)
class Engagement:
    """Denormalized engagement counts."""

    likes: int = 0
    comments: int = 0
    saves: int = 0

    @property
    def total(self) -> int:
        return self.likes + self.comments + self.saves


@dataclass(frozen=True)
class Meal:
    """A shared meal with macros, attributes and engagement."""

    id: UUID
    user_id: UUID
    description: str
    image_url: str | None
    macros: MacroValues
    attributes: MealAttributes
    created_at: datetime | None
    engagement: Engagement
    author: Author | None = None


# Text fields matched by keyword search, keyed by their meals column.
SEARCH_FIELDS = {
    "recipe_text": lambda meal: meal.description,
    "cuisine": lambda meal: meal.attributes.cuisine,
    "meal_time": lambda meal: meal.attributes.meal_time,
    "course_type": lambda meal: meal.attributes.course_type,
    "diet_type": lambda meal: meal.attributes.diet_type,
    "spice_level": lambda meal: meal.attributes.spice_level,
    "serving_size": lambda meal: meal.attributes.serving_size,
}
