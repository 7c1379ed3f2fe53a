"""Supabase repository for user profiles."""

import asyncio
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from supabase import Client

from meal_feed.adapters.postgrest import ilike_pattern
from meal_feed.domain.profiles import MacroValues, Profile, to_number
from meal_feed.domain.search import UserSearchResult
from meal_feed.services.signals import ProfileRepository

_PROFILE_COLUMNS = (
    "id, username, avatar_url, "
    "calories_goal, protein_goal, carbs_goal, fat_goal, "
    "daily_calories, daily_protein, daily_carbs, daily_fat, daily_updated_at"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile reads."""

    client: Client
    timezone_name: str = "Asia/Singapore"

    async def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""
        query = (
            self.client.table("profiles")
            .select(_PROFILE_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
        )
        response = await asyncio.to_thread(query.execute)
        if not response.data:
            return None
        return _parse_profile(response.data[0], ZoneInfo(self.timezone_name))

    async def search_users(self, query: str, limit: int) -> list[UserSearchResult]:
        """Return profiles whose username or display name contains the query."""
        pattern = ilike_pattern(query)
        request = (
            self.client.table("profiles")
            .select("id, username, display_name, avatar_url")
            .or_(f"username.ilike.{pattern},display_name.ilike.{pattern}")
            .limit(limit)
        )
        response = await asyncio.to_thread(request.execute)
        return [
            UserSearchResult(
                id=UUID(str(row["id"])),
                username=row.get("username"),
                display_name=row.get("display_name"),
                avatar_url=row.get("avatar_url"),
            )
            for row in response.data or []
        ]


def _parse_profile(row: dict[str, object], tz: ZoneInfo) -> Profile:
    return Profile(
        id=UUID(str(row["id"])),
        username=row.get("username"),
        avatar_url=row.get("avatar_url"),
        goals=MacroValues(
            calories=to_number(row.get("calories_goal")),
            protein=to_number(row.get("protein_goal")),
            carbs=to_number(row.get("carbs_goal")),
            fat=to_number(row.get("fat_goal")),
        ),
        consumed=MacroValues(
            calories=to_number(row.get("daily_calories")),
            protein=to_number(row.get("daily_protein")),
            carbs=to_number(row.get("daily_carbs")),
            fat=to_number(row.get("daily_fat")),
        ),
        consumed_updated_on=_parse_local_date(row.get("daily_updated_at"), tz),
    )


def _parse_local_date(raw: object, tz: ZoneInfo) -> date | None:
    """Read a date or timestamp column as a date in the reference timezone."""
    if not isinstance(raw, str) or not raw:
        return None
    if len(raw) == len("YYYY-MM-DD"):
        return date.fromisoformat(raw)
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.date()
    return parsed.astimezone(tz).date()
