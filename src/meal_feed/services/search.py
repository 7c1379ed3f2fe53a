"""Keyword search over meals and users."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from meal_feed.domain.meals import SEARCH_FIELDS, Meal
from meal_feed.domain.search import SearchHistoryRecord, UserSearchResult
from meal_feed.services.signals import (
    MealRepository,
    ProfileRepository,
    SearchHistoryRepository,
)

USER_RESULT_LIMIT = 20

# Punctuation that splits terms; it also has meaning inside store filters.
_TERM_SEPARATORS = str.maketrans({char: " " for char in ",()%*\\"})

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MealSearchResult:
    """A meal matched by keyword search and its match count."""

    meal: Meal
    score: int


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def search_terms(query: str) -> list[str]:
    """Split a query into lowercase terms on whitespace and filter punctuation."""
    return query.translate(_TERM_SEPARATORS).lower().split()


def keyword_score(meal: Meal, terms: list[str]) -> int:
    """Count (term, field) pairs where the field contains the term."""
    values = (get(meal) for get in SEARCH_FIELDS.values())
    haystacks = [str(value).lower() for value in values if value]
    return sum(1 for term in terms for text in haystacks if term in text)


@dataclass
class SearchService:
    """Service for meal and user search with search history auditing."""

    profiles: ProfileRepository
    meals: MealRepository
    history: SearchHistoryRepository
    clock: Callable[[], datetime] = _utc_now

    async def search_meals(self, query: str) -> list[MealSearchResult]:
        """Return every meal matching a query term, ranked by keyword matches."""
        terms = search_terms(query)
        if not terms:
            return []
        candidates = await self.meals.search_meals(terms)
        results = [
            MealSearchResult(meal=meal, score=keyword_score(meal, terms))
            for meal in candidates
        ]
        return sorted(
            (result for result in results if result.score > 0),
            key=lambda result: result.score,
            reverse=True,
        )

    async def search_users(self, query: str) -> list[UserSearchResult]:
        """Return up to 20 profiles matching the query."""
        return await self.profiles.search_users(query.strip(), USER_RESULT_LIMIT)

    async def record_search(
        self,
        user_id: UUID,
        query: str,
        search_type: str,
        filters: dict[str, object] | None = None,
    ) -> None:
        """Append a search history record; failures are logged, not raised."""
        record = SearchHistoryRecord(
            id=uuid4(),
            user_id=user_id,
            query=query,
            search_type=search_type,
            filters=filters,
            created_at=self.clock(),
        )
        try:
            await self.history.create_record(record)
        except Exception as exc:
            _logger.warning("Failed to record search history: %s", exc)
