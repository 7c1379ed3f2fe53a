"""Redis-backed cache."""

from dataclasses import dataclass

import redis.asyncio as redis

from meal_feed.services.cache import Cache


@dataclass
class RedisCache(Cache):
    """Cache storing string values in Redis with per-key expiry."""

    client: redis.Redis

    @classmethod
    def create(cls, url: str) -> "RedisCache":
        """Create a cache with a pooled Redis connection."""
        return cls(client=redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | None:
        """Return the stored value, if any."""
        return await self.client.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value that expires after ttl_seconds."""
        await self.client.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        """Remove a stored value."""
        await self.client.delete(key)

    async def close(self) -> None:
        """Close the connection pool."""
        await self.client.aclose()
