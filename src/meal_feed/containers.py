"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_feed.adapters.redis_cache import RedisCache
from meal_feed.adapters.supabase_follow_repository import SupabaseFollowRepository
from meal_feed.adapters.supabase_macro_history_repository import (
    SupabaseMacroHistoryRepository,
)
from meal_feed.adapters.supabase_meal_repository import SupabaseMealRepository
from meal_feed.adapters.supabase_profile_repository import SupabaseProfileRepository
from meal_feed.adapters.supabase_search_history_repository import (
    SupabaseSearchHistoryRepository,
)
from meal_feed.adapters.supabase_token_verifier import (
    SupabaseTokenVerifier,
    TokenVerifier,
)
from meal_feed.config import Settings
from meal_feed.services.cache import InMemoryCache
from meal_feed.services.macro_history import MacroHistoryService
from meal_feed.services.recommendations import RecommendationService
from meal_feed.services.search import SearchService
from meal_feed.services.signals import SignalCollector


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_verifier: TokenVerifier
    macro_history_service: MacroHistoryService
    recommendation_service: RecommendationService
    search_service: SearchService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    cache = (
        RedisCache.create(resolved_settings.redis_url)
        if resolved_settings.redis_url
        else InMemoryCache()
    )
    profile_repository = SupabaseProfileRepository(
        supabase_client, timezone_name=resolved_settings.reference_timezone
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    search_history_repository = SupabaseSearchHistoryRepository(supabase_client)
    macro_history_service = MacroHistoryService(
        repository=SupabaseMacroHistoryRepository(supabase_client),
        cache=cache,
        timezone_name=resolved_settings.reference_timezone,
    )
    collector = SignalCollector(
        profiles=profile_repository,
        meals=meal_repository,
        search_history=search_history_repository,
        follows=SupabaseFollowRepository(supabase_client),
        macro_history=macro_history_service,
        recent_meals_limit=resolved_settings.recent_meals_limit,
        search_history_limit=resolved_settings.search_history_limit,
    )
    recommendation_service = RecommendationService(
        collector=collector,
        weights=resolved_settings.scoring,
        timezone_name=resolved_settings.reference_timezone,
        limit=resolved_settings.recommendation_limit,
        exclude_own_meals=resolved_settings.exclude_own_meals,
    )
    search_service = SearchService(
        profiles=profile_repository,
        meals=meal_repository,
        history=search_history_repository,
    )

    async def close_resources() -> None:
        await cache.close()

    return AppContainer(
        settings=resolved_settings,
        token_verifier=SupabaseTokenVerifier(supabase_client),
        macro_history_service=macro_history_service,
        recommendation_service=recommendation_service,
        search_service=search_service,
        close_resources=close_resources,
    )
