"""RedisAccountCache — concrete implementation of AccountCacheProtocol.

Values are JSON strings produced by the application layer; this adapter
does no serialization of its own. Redis errors are not caught: a cache
outage fails the request.
"""

import redis.asyncio as aioredis


class RedisAccountCache:
    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        value = await self._client.get(key)
        # decode_responses=True yields str; "" is treated as a miss
        return value or None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)
