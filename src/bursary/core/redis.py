"""
Redis Connection

Shared async Redis client, opened in the application lifespan. Used by the
rate limiter; every caller must cope with it being unavailable.
"""

from redis.asyncio import Redis, from_url

from bursary.core.config import settings

redis_client: Redis | None = None


async def init_redis() -> Redis:
    """Open the connection and verify it with a PING."""
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    redis_client = client
    return redis_client


def get_redis() -> Redis | None:
    """Return the shared client, or None when Redis is not connected."""
    return redis_client


async def close_redis() -> None:
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
