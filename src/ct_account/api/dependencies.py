"""FastAPI dependencies for ct_account."""

from typing import Annotated

import redis.asyncio as aioredis
from fastapi import Depends

from src.ct_account.application.service import AccountApplicationService
from src.ct_account.infrastructure.cache import RedisAccountCache
from src.ct_account.infrastructure.persistence import AccountRepository
from src.ct_common.redis_client import get_redis


async def get_account_service(
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
) -> AccountApplicationService:
    """Build the service per request from the app-scoped Redis client."""
    return AccountApplicationService(
        cache=RedisAccountCache(redis),
        repo=AccountRepository(),
    )
