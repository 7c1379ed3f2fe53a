"""Supabase repository for meals and engagement."""

import asyncio
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_feed.adapters.postgrest import (
    embedded_count,
    embedded_row,
    ilike_pattern,
    parse_timestamp,
)
from meal_feed.domain.meals import (
    SEARCH_FIELDS,
    Author,
    Engagement,
    Meal,
    MealAttributes,
)
from meal_feed.domain.profiles import MacroValues, to_number
from meal_feed.services.signals import MealRepository

MEAL_COLUMNS = (
    "id, user_id, recipe_text, meal_image_url, calories, protein, carbs, fat, "
    "created_at, cuisine, meal_time, course_type, diet_type, spice_level, "
    "serving_size, prep_time_mins, price, location, "
    "meal_likes:meal_likes(count), meal_comments:meal_comments(count), "
    "meal_saves:meal_saves(count), profiles(username, avatar_url)"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal reads."""

    client: Client

    async def list_recent_meals(self, user_id: UUID, limit: int) -> list[Meal]:
        """Return a user's most recent meals."""
        query = (
            self.client.table("meals")
            .select(MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
        )
        response = await asyncio.to_thread(query.execute)
        return [parse_meal(row) for row in response.data or []]

    async def list_all_meals(self) -> list[Meal]:
        """Return the full candidate corpus."""
        query = self.client.table("meals").select(MEAL_COLUMNS)
        response = await asyncio.to_thread(query.execute)
        return [parse_meal(row) for row in response.data or []]

    async def search_meals(self, terms: list[str]) -> list[Meal]:
        """Return all meals where any searched column contains any term."""
        if not terms:
            return []
        condition = ",".join(
            f"{column}.ilike.{ilike_pattern(term)}"
            for term in dict.fromkeys(terms)
            for column in SEARCH_FIELDS
        )
        request = self.client.table("meals").select(MEAL_COLUMNS).or_(condition)
        response = await asyncio.to_thread(request.execute)
        return [parse_meal(row) for row in response.data or []]

    async def list_liked_meal_ids(self, user_id: UUID) -> set[UUID]:
        """Return ids of meals the user liked."""
        return await self._meal_ids("meal_likes", user_id)

    async def list_saved_meal_ids(self, user_id: UUID) -> set[UUID]:
        """Return ids of meals the user saved."""
        return await self._meal_ids("meal_saves", user_id)

    async def _meal_ids(self, table: str, user_id: UUID) -> set[UUID]:
        query = self.client.table(table).select("meal_id").eq("user_id", str(user_id))
        response = await asyncio.to_thread(query.execute)
        return {UUID(str(row["meal_id"])) for row in response.data or []}


def parse_meal(row: dict[str, object]) -> Meal:
    """Build a Meal from a meals row with embedded counts and author."""
    author_row = embedded_row(row.get("profiles"))
    return Meal(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        description=str(row.get("recipe_text") or ""),
        image_url=row.get("meal_image_url"),
        macros=MacroValues(
            calories=to_number(row.get("calories")),
            protein=to_number(row.get("protein")),
            carbs=to_number(row.get("carbs")),
            fat=to_number(row.get("fat")),
        ),
        attributes=MealAttributes(
            cuisine=row.get("cuisine"),
            meal_time=row.get("meal_time"),
            diet_type=row.get("diet_type"),
            spice_level=row.get("spice_level"),
            location=row.get("location"),
            course_type=row.get("course_type"),
            serving_size=row.get("serving_size"),
            prep_time_mins=_optional_number(row.get("prep_time_mins")),
            price=_optional_number(row.get("price")),
        ),
        created_at=parse_timestamp(row.get("created_at")),
        engagement=Engagement(
            likes=embedded_count(row.get("meal_likes")),
            comments=embedded_count(row.get("meal_comments")),
            saves=embedded_count(row.get("meal_saves")),
        ),
        author=(
            Author(
                username=author_row.get("username"),
                avatar_url=author_row.get("avatar_url"),
            )
            if author_row
            else None
        ),
    )


def _optional_number(value: object) -> float | None:
    if value is None or value == "":
        return None
    return float(value)
