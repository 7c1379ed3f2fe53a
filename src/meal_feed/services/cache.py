"""Cache abstractions and expiry helpers."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo
from typing import Protocol, TypeVar

T = TypeVar("T")


class Cache(Protocol):
    """Cache interface for serialized string values."""

    async def get(self, key: str) -> str | None:
        """Return a cached value if present and not expired."""

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    async def delete(self, key: str) -> None:
        """Remove a cached value."""


@dataclass
class _CacheEntry:
    value: str
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """Process-local cache used when no cache server is configured."""

    _entries: dict[str, _CacheEntry]

    def __init__(self) -> None:
        self._entries = {}

    async def get(self, key: str) -> str | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    async def delete(self, key: str) -> None:
        """Remove a cached value."""
        self._entries.pop(key, None)

    async def close(self) -> None:
        """Release resources; nothing to do for a process-local cache."""
        return None


def seconds_until_next_midnight(now: datetime, tz: tzinfo) -> int:
    """Return whole seconds from now until the next midnight in tz, at least 1."""
    local_now = now.astimezone(tz)
    next_midnight = (local_now + timedelta(days=1)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    remaining = next_midnight - local_now
    return max(1, int(remaining.total_seconds()))


@dataclass
class SingleFlight:
    """Share one in-flight computation per key between concurrent callers."""

    _inflight: dict[str, asyncio.Future]

    def __init__(self) -> None:
        self._inflight = {}

    async def do(self, key: str, func: Callable[[], Awaitable[T]]) -> T:
        """Run func for key unless a call for key is already running."""
        existing = self._inflight.get(key)
        if existing is not None:
            return await asyncio.shield(existing)

        task = asyncio.ensure_future(func())
        self._inflight[key] = task
        try:
            return await asyncio.shield(task)
        finally:
            if self._inflight.get(key) is task:
                del self._inflight[key]
