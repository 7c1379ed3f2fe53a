"""Supabase repository for the follow graph."""

import asyncio
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_feed.services.signals import FollowRepository


@dataclass
class SupabaseFollowRepository(FollowRepository):
    """Supabase implementation for follower edges."""

    client: Client

    async def list_followee_ids(self, user_id: UUID) -> set[UUID]:
        """Return ids of users the given user follows."""
        query = (
            self.client.table("followers")
            .select("following_id")
            .eq("follower_id", str(user_id))
        )
        response = await asyncio.to_thread(query.execute)
        return {UUID(str(row["following_id"])) for row in response.data or []}
