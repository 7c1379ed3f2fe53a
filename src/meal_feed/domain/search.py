"""Domain models for search history."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SearchHistoryRecord:
    """Append-only record of a search a user ran."""

    id: UUID
    user_id: UUID
    query: str
    search_type: str
    filters: dict[str, object] | None
    created_at: datetime


@dataclass(frozen=True)
class UserSearchResult:
    """Public profile fields returned by user search."""

    id: UUID
    username: str | None
    display_name: str | None
    avatar_url: str | None
