"""Gather the per-user inputs that drive recommendations."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial
from typing import Protocol, TypeVar
from uuid import UUID

from meal_feed.domain.meals import Meal
from meal_feed.domain.profiles import Profile
from meal_feed.domain.recommendations import UserSignals
from meal_feed.domain.search import SearchHistoryRecord, UserSearchResult
from meal_feed.services.macro_history import MacroHistoryService

T = TypeVar("T")

MEAL_SEARCH_TYPES = ("meal", "meals")

_logger = logging.getLogger(__name__)


class SignalFetchError(RuntimeError):
    """A required recommendation input could not be loaded."""

    def __init__(self, signal: str, cause: Exception | None = None) -> None:
        super().__init__(f"Failed to fetch {signal}")
        self.signal = signal
        self.cause = cause


class ProfileRepository(Protocol):
    """Read access to user profiles."""

    async def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""

    async def search_users(self, query: str, limit: int) -> list[UserSearchResult]:
        """Return profiles whose username or display name matches."""


class MealRepository(Protocol):
    """Read access to meals and engagement."""

    async def list_recent_meals(self, user_id: UUID, limit: int) -> list[Meal]:
        """Return a user's most recently authored meals."""

    async def list_all_meals(self) -> list[Meal]:
        """Return every meal with engagement counts and author."""

    async def search_meals(self, terms: list[str]) -> list[Meal]:
        """Return every meal where a searched field contains any of the terms."""

    async def list_liked_meal_ids(self, user_id: UUID) -> set[UUID]:
        """Return ids of meals the user liked."""

    async def list_saved_meal_ids(self, user_id: UUID) -> set[UUID]:
        """Return ids of meals the user saved."""


class SearchHistoryRepository(Protocol):
    """Persistence interface for search history."""

    async def list_recent_filters(
        self, user_id: UUID, search_types: tuple[str, ...], limit: int
    ) -> list[dict[str, object]]:
        """Return filter maps of recent searches, newest first."""

    async def create_record(self, record: SearchHistoryRecord) -> None:
        """Append a search history record."""


class FollowRepository(Protocol):
    """Read access to the follow graph."""

    async def list_followee_ids(self, user_id: UUID) -> set[UUID]:
        """Return ids of users the given user follows."""


@dataclass
class SignalCollector:
    """Fetch recommendation inputs concurrently, degrading optional ones."""

    profiles: ProfileRepository
    meals: MealRepository
    search_history: SearchHistoryRepository
    follows: FollowRepository
    macro_history: MacroHistoryService
    recent_meals_limit: int = 20
    search_history_limit: int = 10

    async def collect(self, user_id: UUID) -> UserSignals:
        """Return all signals for a user; raise SignalFetchError on fatal gaps."""
        # A fatal failure cancels the sibling fetches still in flight.
        try:
            async with asyncio.TaskGroup() as group:
                profile = group.create_task(
                    self._required(
                        "profile", partial(self.profiles.get_profile, user_id)
                    )
                )
                corpus = group.create_task(
                    self._required("meal corpus", self.meals.list_all_meals)
                )
                history = group.create_task(
                    self._optional(
                        "macro history",
                        partial(self.macro_history.get_history, user_id),
                        [],
                    )
                )
                recent_meals = group.create_task(
                    self._optional(
                        "recent meals",
                        partial(
                            self.meals.list_recent_meals,
                            user_id,
                            self.recent_meals_limit,
                        ),
                        [],
                    )
                )
                filters = group.create_task(
                    self._optional(
                        "search history",
                        partial(
                            self.search_history.list_recent_filters,
                            user_id,
                            MEAL_SEARCH_TYPES,
                            self.search_history_limit,
                        ),
                        [],
                    )
                )
                followees = group.create_task(
                    self._optional(
                        "followees",
                        partial(self.follows.list_followee_ids, user_id),
                        set(),
                    )
                )
                liked = group.create_task(
                    self._optional(
                        "liked meals",
                        partial(self.meals.list_liked_meal_ids, user_id),
                        set(),
                    )
                )
                saved = group.create_task(
                    self._optional(
                        "saved meals",
                        partial(self.meals.list_saved_meal_ids, user_id),
                        set(),
                    )
                )
        except ExceptionGroup as errors:
            fatal = next(
                (exc for exc in errors.exceptions if isinstance(exc, SignalFetchError)),
                None,
            )
            if fatal is None:
                raise
            raise fatal from fatal.cause

        if profile.result() is None:
            raise SignalFetchError("profile")

        return UserSignals(
            profile=profile.result(),
            macro_history=history.result(),
            recent_meals=recent_meals.result(),
            search_filters=filters.result(),
            followee_ids=frozenset(followees.result()),
            corpus=corpus.result() or [],
            liked_meal_ids=frozenset(liked.result()),
            saved_meal_ids=frozenset(saved.result()),
        )

    @staticmethod
    async def _required(signal: str, fetch: Callable[[], Awaitable[T]]) -> T:
        try:
            return await fetch()
        except Exception as exc:
            raise SignalFetchError(signal, exc) from exc

    @staticmethod
    async def _optional(
        signal: str, fetch: Callable[[], Awaitable[T]], default: T
    ) -> T:
        try:
            return await fetch()
        except Exception as exc:
            _logger.warning("Using default for %s after fetch failure: %s", signal, exc)
            return default
