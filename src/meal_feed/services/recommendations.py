"""Personalized meal recommendation service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from meal_feed.domain.recommendations import (
    Recommendation,
    ScoredMeal,
    ScoringWeights,
)
from meal_feed.services.features import extract_features
from meal_feed.services.scoring import score_meal
from meal_feed.services.signals import SignalCollector

_logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=UTC)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def rank(scored: list[ScoredMeal], limit: int) -> list[ScoredMeal]:
    """Order by score, then newest first, then id; keep the top limit."""
    by_id = sorted(scored, key=lambda item: str(item.meal.id))
    ordered = sorted(
        by_id,
        key=lambda item: (item.score, item.meal.created_at or _OLDEST),
        reverse=True,
    )
    return ordered[:limit]


@dataclass
class RecommendationService:
    """Collect signals, score every candidate and return the top meals."""

    collector: SignalCollector
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    timezone_name: str = "Asia/Singapore"
    limit: int = 20
    exclude_own_meals: bool = False
    clock: Callable[[], datetime] = _utc_now

    async def recommend(self, user_id: UUID) -> list[Recommendation]:
        """Return ranked recommendations for a user."""
        signals = await self.collector.collect(user_id)
        candidates = signals.corpus
        if self.exclude_own_meals:
            candidates = [meal for meal in candidates if meal.user_id != user_id]
        if not candidates:
            return []

        now = self.clock()
        today = now.astimezone(ZoneInfo(self.timezone_name)).date()
        features = extract_features(
            signals, today, consistency_threshold=self.weights.consistency_threshold
        )
        scored = [
            score_meal(meal, features, self.weights, now) for meal in candidates
        ]
        ranked = rank(scored, self.limit)
        _logger.info(
            "Ranked %s candidates for user %s, returning %s",
            len(candidates),
            user_id,
            len(ranked),
        )
        return [
            Recommendation(
                meal=item.meal,
                score=item.score,
                is_liked=item.meal.id in signals.liked_meal_ids,
                is_saved=item.meal.id in signals.saved_meal_ids,
            )
            for item in ranked
        ]
