"""Supabase repository for daily macro history."""

import asyncio
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from meal_feed.domain.profiles import MacroHistoryEntry, to_number
from meal_feed.services.macro_history import MacroHistoryRepository


@dataclass
class SupabaseMacroHistoryRepository(MacroHistoryRepository):
    """Supabase implementation for macro history reads."""

    client: Client

    async def list_history(self, user_id: UUID, start: date) -> list[MacroHistoryEntry]:
        """Return history rows from start onwards with nulls read as zero."""
        # Rows are keyed by the owning profile id.
        query = (
            self.client.table("daily_macro_history")
            .select("date, calories, protein, carbs, fat")
            .eq("id", str(user_id))
            .gte("date", start.isoformat())
            .order("date", desc=False)
        )
        response = await asyncio.to_thread(query.execute)
        return [
            MacroHistoryEntry(
                day=date.fromisoformat(str(row["date"])[:10]),
                calories=to_number(row.get("calories")),
                protein=to_number(row.get("protein")),
                carbs=to_number(row.get("carbs")),
                fat=to_number(row.get("fat")),
            )
            for row in response.data or []
        ]
