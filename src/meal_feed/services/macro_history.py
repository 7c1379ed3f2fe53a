"""Macro history reads with a read-through daily cache."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from meal_feed.domain.profiles import MacroHistoryEntry
from meal_feed.services.cache import Cache, SingleFlight, seconds_until_next_midnight

HISTORY_DAYS = 7

_logger = logging.getLogger(__name__)


class MacroHistoryRepository(Protocol):
    """Persistence interface for daily macro history."""

    async def list_history(self, user_id: UUID, start: date) -> list[MacroHistoryEntry]:
        """Return entries on or after start, ascending by date."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MacroHistoryService:
    """Serve the trailing week of macro history, cached until local midnight."""

    repository: MacroHistoryRepository
    cache: Cache
    timezone_name: str = "Asia/Singapore"
    clock: Callable[[], datetime] = _utc_now
    single_flight: SingleFlight = field(default_factory=SingleFlight)

    async def get_history(
        self, user_id: UUID, *, owner: bool = True
    ) -> list[MacroHistoryEntry]:
        """Return the last 7 days of history, read through the cache for owners."""
        if not owner:
            return await self._load(user_id)

        key = cache_key(user_id)
        cached = await self._read_cache(key)
        if cached is not None:
            return cached
        return await self.single_flight.do(key, lambda: self._load_and_store(user_id))

    async def invalidate(self, user_id: UUID) -> None:
        """Drop the cached history for a user."""
        try:
            await self.cache.delete(cache_key(user_id))
        except Exception as exc:
            _logger.warning("Macro history cache delete failed: %s", exc)

    def start_date(self) -> date:
        """First day of the trailing window, in the reference timezone."""
        today = self.clock().astimezone(ZoneInfo(self.timezone_name)).date()
        return today - timedelta(days=HISTORY_DAYS - 1)

    async def _load(self, user_id: UUID) -> list[MacroHistoryEntry]:
        return await self.repository.list_history(user_id, self.start_date())

    async def _load_and_store(self, user_id: UUID) -> list[MacroHistoryEntry]:
        entries = await self._load(user_id)
        ttl = seconds_until_next_midnight(self.clock(), ZoneInfo(self.timezone_name))
        payload = json.dumps([entry.to_json() for entry in entries])
        try:
            await self.cache.set(cache_key(user_id), payload, ttl_seconds=ttl)
        except Exception as exc:
            _logger.warning("Macro history cache write failed: %s", exc)
        return entries

    async def _read_cache(self, key: str) -> list[MacroHistoryEntry] | None:
        try:
            raw = await self.cache.get(key)
        except Exception as exc:
            _logger.warning("Macro history cache read failed: %s", exc)
            return None
        if raw is None:
            return None
        try:
            return [MacroHistoryEntry.from_json(item) for item in json.loads(raw)]
        except (ValueError, TypeError, KeyError) as exc:
            _logger.warning("Discarding unreadable macro history cache entry: %s", exc)
            return None


def cache_key(user_id: UUID) -> str:
    return f"macro_history:{user_id}"
