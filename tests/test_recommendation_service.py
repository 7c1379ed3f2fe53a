"""Tests for the recommendation pipeline."""

import asyncio
from dataclasses import dataclass, replace
from datetime import date, timedelta
from uuid import UUID

import pytest

from meal_feed.domain.meals import Engagement
from meal_feed.domain.profiles import MacroHistoryEntry, MacroValues
from meal_feed.services.signals import SignalFetchError
from tests.conftest import (
    FIXED_NOW,
    InMemoryFollowRepository,
    build_services,
    make_meal,
    make_profile,
)


def _recommend(store, settings, user_id):  # type: ignore[no-untyped-def]
    _, service, _ = build_services(store, settings)
    return asyncio.run(service.recommend(user_id))


def test_empty_corpus_returns_no_recommendations(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)

    assert _recommend(store, settings, user_id) == []


def test_result_size_is_capped(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)
    store.meals.meals = [make_meal(f"Meal {index}") for index in range(25)]

    assert len(_recommend(store, settings, user_id)) == 20

    store.meals.meals = store.meals.meals[:3]

    assert len(_recommend(store, settings, user_id)) == 3


def test_ranking_prefers_engagement_and_fit(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)
    popular = make_meal(
        "Popular bowl",
        macros=MacroValues(calories=2000, protein=100, carbs=250, fat=70),
        engagement=Engagement(likes=10, saves=4),
        created_at=FIXED_NOW,
    )
    plain = make_meal("Plain toast", created_at=FIXED_NOW - timedelta(days=30))
    store.meals.meals = [plain, popular]

    results = _recommend(store, settings, user_id)

    assert [result.meal.id for result in results] == [popular.id, plain.id]
    assert results[0].score > results[1].score


def test_ties_break_on_recency_then_id(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)
    old_time = FIXED_NOW - timedelta(days=30)
    oldest = make_meal("Oldest", created_at=FIXED_NOW - timedelta(days=40))
    first = replace(
        make_meal("Same age", created_at=old_time),
        id=UUID("00000000-0000-4000-8000-000000000001"),
    )
    second = replace(
        make_meal("Same age", created_at=old_time),
        id=UUID("00000000-0000-4000-8000-000000000002"),
    )
    store.meals.meals = [second, oldest, first]

    results = _recommend(store, settings, user_id)

    # Both ages are past the recency horizon so every score is identical.
    assert len({result.score for result in results}) == 1
    assert [result.meal.id for result in results] == [first.id, second.id, oldest.id]


def test_liked_and_saved_flags(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)
    liked = make_meal("Liked")
    saved = make_meal("Saved")
    store.meals.meals = [liked, saved]
    store.meals.liked[user_id] = {liked.id}
    store.meals.saved[user_id] = {saved.id}

    results = {
        result.meal.id: result for result in _recommend(store, settings, user_id)
    }

    assert results[liked.id].is_liked is True
    assert results[liked.id].is_saved is False
    assert results[saved.id].is_saved is True
    assert results[saved.id].is_liked is False


def test_followed_author_gets_social_boost(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)
    followed = make_meal("Followed")
    stranger = make_meal("Stranger")
    store.meals.meals = [stranger, followed]
    store.follows.edges.add((user_id, followed.user_id))

    results = _recommend(store, settings, user_id)

    assert results[0].meal.id == followed.id
    assert results[0].score - results[1].score == settings.scoring.social


def test_optional_fetch_failures_degrade(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)
    store.meals.meals = [make_meal("Only meal")]
    store.meals.fail_recent = True
    store.search_history.fail_reads = True
    store.follows.fail = True
    store.macro_history.fail = True

    results = _recommend(store, settings, user_id)

    assert len(results) == 1


def test_history_feeds_consistency(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)
    meal = make_meal("Any")
    store.meals.meals = [meal]
    baseline = _recommend(store, settings, user_id)[0].score

    store.macro_history.entries[user_id] = [
        MacroHistoryEntry(
            day=date(2025, 7, 6), calories=2000, protein=100, carbs=250, fat=70
        )
    ]

    assert _recommend(store, settings, user_id)[0].score == baseline + 10


def test_own_meals_are_kept_by_default(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)
    own = make_meal("Mine", user_id=user_id)
    store.meals.meals = [own, make_meal("Theirs")]
    _, service, _ = build_services(store, settings)

    kept = asyncio.run(service.recommend(user_id))
    excluded = asyncio.run(replace(service, exclude_own_meals=True).recommend(user_id))

    assert own.id in {result.meal.id for result in kept}
    assert own.id not in {result.meal.id for result in excluded}
    assert len(excluded) == 1


def test_missing_profile_is_fatal(store, settings, user_id) -> None:
    store.meals.meals = [make_meal()]

    with pytest.raises(SignalFetchError) as excinfo:
        _recommend(store, settings, user_id)

    assert excinfo.value.signal == "profile"


def test_profile_store_failure_is_fatal(store, settings, user_id) -> None:
    store.profiles.fail = True

    with pytest.raises(SignalFetchError) as excinfo:
        _recommend(store, settings, user_id)

    assert excinfo.value.signal == "profile"
    assert isinstance(excinfo.value.cause, RuntimeError)


def test_corpus_failure_is_fatal(store, settings, user_id) -> None:
    store.profiles.profiles[user_id] = make_profile(user_id)
    store.meals.fail_corpus = True

    with pytest.raises(SignalFetchError) as excinfo:
        _recommend(store, settings, user_id)

    assert excinfo.value.signal == "meal corpus"


@dataclass
class StalledFollowRepository(InMemoryFollowRepository):
    """Follow repository whose reads never finish on their own."""

    cancelled: bool = False

    async def list_followee_ids(self, user_id: UUID) -> set[UUID]:
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return set()


def test_fatal_failure_cancels_pending_fetches(store, settings, user_id) -> None:
    store.profiles.fail = True
    store.follows = StalledFollowRepository()

    with pytest.raises(SignalFetchError) as excinfo:
        _recommend(store, settings, user_id)

    assert excinfo.value.signal == "profile"
    assert store.follows.cancelled is True


def test_multiple_fatal_failures_raise_one_error(store, settings, user_id) -> None:
    store.profiles.fail = True
    store.meals.fail_corpus = True

    with pytest.raises(SignalFetchError) as excinfo:
        _recommend(store, settings, user_id)

    assert excinfo.value.signal in {"profile", "meal corpus"}
