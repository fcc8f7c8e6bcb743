from __future__ import annotations

import redis.asyncio as aioredis


class RedisConfigStore:
    """Implements application.ports.config_store.ConfigStore over a Redis hash.

    The admin settings screen owns the hash; this side only reads it.
    """

    def __init__(self, redis: aioredis.Redis, key: str) -> None:
        self._redis = redis
        self._key = key

    async def get(self, key: str) -> str | None:
        value = await self._redis.hget(self._key, key)
        if isinstance(value, bytes):
            return value.decode()
        return value
