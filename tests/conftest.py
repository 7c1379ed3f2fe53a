"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from meal_feed.adapters.supabase_token_verifier import TokenVerifier
from meal_feed.config import Settings
from meal_feed.containers import AppContainer
from meal_feed.domain.meals import (
    SEARCH_FIELDS,
    Author,
    Engagement,
    Meal,
    MealAttributes,
)
from meal_feed.domain.profiles import MacroHistoryEntry, MacroValues, Profile
from meal_feed.domain.search import SearchHistoryRecord, UserSearchResult
from meal_feed.services.cache import InMemoryCache
from meal_feed.services.macro_history import (
    MacroHistoryRepository,
    MacroHistoryService,
)
from meal_feed.services.recommendations import RecommendationService
from meal_feed.services.search import SearchService
from meal_feed.services.signals import (
    FollowRepository,
    MealRepository,
    ProfileRepository,
    SearchHistoryRepository,
    SignalCollector,
)

FIXED_NOW = datetime(2025, 7, 6, 4, 0, tzinfo=UTC)


def make_profile(  # noqa: PLR0913
    user_id: UUID | None = None,
    goals: MacroValues | None = None,
    consumed: MacroValues | None = None,
    consumed_updated_on: date | None = None,
    username: str = "tester",
) -> Profile:
    return Profile(
        id=user_id or uuid4(),
        username=username,
        avatar_url=None,
        goals=goals or MacroValues(calories=2000, protein=100, carbs=250, fat=70),
        consumed=consumed or MacroValues(),
        consumed_updated_on=consumed_updated_on,
    )


def make_meal(  # noqa: PLR0913
    description: str = "Meal",
    user_id: UUID | None = None,
    macros: MacroValues | None = None,
    created_at: datetime | None = None,
    engagement: Engagement | None = None,
    **attributes: object,
) -> Meal:
    return Meal(
        id=uuid4(),
        user_id=user_id or uuid4(),
        description=description,
        image_url=None,
        macros=macros or MacroValues(),
        attributes=MealAttributes(**attributes),
        created_at=created_at,
        engagement=engagement or Engagement(),
        author=Author(username="author", avatar_url=None),
    )


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, Profile] = field(default_factory=dict)
    users: list[UserSearchResult] = field(default_factory=list)
    fail: bool = False

    async def get_profile(self, user_id: UUID) -> Profile | None:
        if self.fail:
            raise RuntimeError("profile store down")
        return self.profiles.get(user_id)

    async def search_users(self, query: str, limit: int) -> list[UserSearchResult]:
        query_lower = query.lower()
        return [
            user
            for user in self.users
            if query_lower in (user.username or "").lower()
            or query_lower in (user.display_name or "").lower()
        ][:limit]


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: list[Meal] = field(default_factory=list)
    liked: dict[UUID, set[UUID]] = field(default_factory=dict)
    saved: dict[UUID, set[UUID]] = field(default_factory=dict)
    fail_corpus: bool = False
    fail_recent: bool = False
    fail_search: bool = False
    searched_terms: list[list[str]] = field(default_factory=list)

    async def list_recent_meals(self, user_id: UUID, limit: int) -> list[Meal]:
        if self.fail_recent:
            raise RuntimeError("recent meals unavailable")
        own = [meal for meal in self.meals if meal.user_id == user_id]
        own.sort(
            key=lambda meal: meal.created_at or datetime.min.replace(tzinfo=UTC),
            reverse=True,
        )
        return own[:limit]

    async def list_all_meals(self) -> list[Meal]:
        if self.fail_corpus:
            raise RuntimeError("meal store down")
        return list(self.meals)

    async def search_meals(self, terms: list[str]) -> list[Meal]:
        if self.fail_search:
            raise RuntimeError("meal search failed")
        self.searched_terms.append(list(terms))
        return [
            meal
            for meal in self.meals
            if any(
                term in (get(meal) or "").lower()
                for term in terms
                for get in SEARCH_FIELDS.values()
            )
        ]

    async def list_liked_meal_ids(self, user_id: UUID) -> set[UUID]:
        return self.liked.get(user_id, set())

    async def list_saved_meal_ids(self, user_id: UUID) -> set[UUID]:
        return self.saved.get(user_id, set())


@dataclass
class InMemorySearchHistoryRepository(SearchHistoryRepository):
    """In-memory search history repository for tests."""

    records: list[SearchHistoryRecord] = field(default_factory=list)
    filters: list[dict[str, object]] = field(default_factory=list)
    fail_reads: bool = False
    fail_writes: bool = False

    async def list_recent_filters(
        self, user_id: UUID, search_types: tuple[str, ...], limit: int
    ) -> list[dict[str, object]]:
        if self.fail_reads:
            raise RuntimeError("search history unavailable")
        return self.filters[:limit]

    async def create_record(self, record: SearchHistoryRecord) -> None:
        if self.fail_writes:
            raise RuntimeError("insert failed")
        self.records.append(record)


@dataclass
class InMemoryFollowRepository(FollowRepository):
    """In-memory follow graph for tests."""

    edges: set[tuple[UUID, UUID]] = field(default_factory=set)
    fail: bool = False

    async def list_followee_ids(self, user_id: UUID) -> set[UUID]:
        if self.fail:
            raise RuntimeError("follow graph unavailable")
        return {followee for follower, followee in self.edges if follower == user_id}


@dataclass
class InMemoryMacroHistoryRepository(MacroHistoryRepository):
    """In-memory macro history repository that counts reads."""

    entries: dict[UUID, list[MacroHistoryEntry]] = field(default_factory=dict)
    calls: int = 0
    fail: bool = False

    async def list_history(self, user_id: UUID, start: date) -> list[MacroHistoryEntry]:
        self.calls += 1
        if self.fail:
            raise RuntimeError("history store down")
        return [entry for entry in self.entries.get(user_id, []) if entry.day >= start]


@dataclass
class FailingCache:
    """Cache whose every operation raises."""

    async def get(self, key: str) -> str | None:
        raise ConnectionError("cache down")

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        raise ConnectionError("cache down")

    async def delete(self, key: str) -> None:
        raise ConnectionError("cache down")


class RecordingCache(InMemoryCache):
    """In-memory cache that remembers the TTLs it was given."""

    ttls: dict[str, int]

    def __init__(self) -> None:
        super().__init__()
        self.ttls = {}

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.ttls[key] = ttl_seconds
        await super().set(key, value, ttl_seconds)


@dataclass
class FakeTokenVerifier(TokenVerifier):
    """Token verifier backed by a static token map."""

    tokens: dict[str, UUID] = field(default_factory=dict)

    async def verify(self, token: str) -> UUID | None:
        return self.tokens.get(token)


@dataclass
class Store:
    """Bundle of in-memory repositories shared by a test."""

    profiles: InMemoryProfileRepository = field(
        default_factory=InMemoryProfileRepository
    )
    meals: InMemoryMealRepository = field(default_factory=InMemoryMealRepository)
    search_history: InMemorySearchHistoryRepository = field(
        default_factory=InMemorySearchHistoryRepository
    )
    follows: InMemoryFollowRepository = field(default_factory=InMemoryFollowRepository)
    macro_history: InMemoryMacroHistoryRepository = field(
        default_factory=InMemoryMacroHistoryRepository
    )


def build_services(
    store: Store, settings: Settings, cache: InMemoryCache | None = None
) -> tuple[MacroHistoryService, RecommendationService, SearchService]:
    macro_history_service = MacroHistoryService(
        repository=store.macro_history,
        cache=cache or InMemoryCache(),
        timezone_name=settings.reference_timezone,
        clock=lambda: FIXED_NOW,
    )
    collector = SignalCollector(
        profiles=store.profiles,
        meals=store.meals,
        search_history=store.search_history,
        follows=store.follows,
        macro_history=macro_history_service,
    )
    recommendation_service = RecommendationService(
        collector=collector,
        weights=settings.scoring,
        timezone_name=settings.reference_timezone,
        limit=settings.recommendation_limit,
        clock=lambda: FIXED_NOW,
    )
    search_service = SearchService(
        profiles=store.profiles,
        meals=store.meals,
        history=store.search_history,
        clock=lambda: FIXED_NOW,
    )
    return macro_history_service, recommendation_service, search_service


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
    )


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def token_verifier(user_id: UUID) -> FakeTokenVerifier:
    return FakeTokenVerifier(tokens={"good-token": user_id})


@pytest.fixture
def container(
    settings: Settings, store: Store, token_verifier: FakeTokenVerifier
) -> AppContainer:
    macro_history_service, recommendation_service, search_service = build_services(
        store, settings
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        token_verifier=token_verifier,
        macro_history_service=macro_history_service,
        recommendation_service=recommendation_service,
        search_service=search_service,
        close_resources=close_resources,
    )
