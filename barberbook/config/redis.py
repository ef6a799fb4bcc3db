# barberbook/config/redis.py
"""Async Redis access for the API process (broker reachability only)"""
from typing import Optional

import redis.asyncio as redis

from barberbook.config.settings import get_settings

settings = get_settings()

# Health checks must answer quickly even when the broker is gone
HEALTH_CHECK_TIMEOUT_SECONDS = 2

_redis_pool: Optional[redis.ConnectionPool] = None


def get_redis_pool() -> redis.ConnectionPool:
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.ConnectionPool.from_url(
            settings.CELERY_BROKER_URL or settings.REDIS_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_connect_timeout=HEALTH_CHECK_TIMEOUT_SECONDS,
            socket_timeout=HEALTH_CHECK_TIMEOUT_SECONDS,
        )
    return _redis_pool


async def get_redis() -> redis.Redis:
    """Client on the shared pool; close it with aclose() when done"""
    return redis.Redis(connection_pool=get_redis_pool())
