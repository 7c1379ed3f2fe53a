"""Supabase repository for search history."""

import asyncio
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_feed.domain.search import SearchHistoryRecord
from meal_feed.services.signals import SearchHistoryRepository


@dataclass
class SupabaseSearchHistoryRepository(SearchHistoryRepository):
    """Supabase-backed search history repository."""

    client: Client

    async def list_recent_filters(
        self, user_id: UUID, search_types: tuple[str, ...], limit: int
    ) -> list[dict[str, object]]:
        """Return filter maps from the most recent searches."""
        query = (
            self.client.table("search_history")
            .select("filters, search_type, created_at")
            .eq("user_id", str(user_id))
            .in_("search_type", list(search_types))
            .order("created_at", desc=True)
            .limit(limit)
        )
        response = await asyncio.to_thread(query.execute)
        return [
            row["filters"]
            for row in response.data or []
            if isinstance(row.get("filters"), dict)
        ]

    async def create_record(self, record: SearchHistoryRecord) -> None:
        """Insert a search history row."""
        query = self.client.table("search_history").insert(
            {
                "id": str(record.id),
                "user_id": str(record.user_id),
                "query": record.query,
                "search_type": record.search_type,
                "filters": record.filters,
                "created_at": record.created_at.isoformat(),
            }
        )
        await asyncio.to_thread(query.execute)
