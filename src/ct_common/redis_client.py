"""Redis client lifecycle — backs the account read cache.

The client is opened in the application lifespan and parked on `app.state`,
so request handlers reach it through `get_redis` instead of a module global.
"""

import redis.asyncio as aioredis
from fastapi import Request

from config.settings import settings


def create_redis() -> aioredis.Redis:
    """Create a Redis client backed by its own connection pool."""
    return aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )


async def close_redis(client: aioredis.Redis) -> None:
    """Close the client and release its pool."""
    await client.aclose()


async def get_redis(request: Request) -> aioredis.Redis:
    """FastAPI dependency: the Redis client opened during startup."""
    return request.app.state.redis
