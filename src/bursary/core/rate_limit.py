"""
Rate Limiting

Sliding-window limits for the unauthenticated endpoints (login and
registration) keyed by client address. Redis sorted sets hold the window;
when Redis is not connected a per-process dictionary is used instead.
"""

import logging
import time

from fastapi import HTTPException, Request, status

from bursary.core.redis import get_redis

logger = logging.getLogger(__name__)

# Fallback store: {key: [timestamps]}, with the time each key's window lapses
_memory_store: dict[str, list[float]] = {}
_memory_expiry: dict[str, float] = {}
_last_sweep = 0.0

SWEEP_INTERVAL_SECONDS = 60


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _hit_redis(client, key: str, limit: int, window_seconds: int) -> bool:
    now = time.time()
    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, now - window_seconds)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)
    results = await pipe.execute()
    return results[1] < limit


def _sweep_memory(now: float) -> None:
    """Drop keys whose window has lapsed, like the EXPIRE set on Redis keys."""
    global _last_sweep
    if now - _last_sweep < SWEEP_INTERVAL_SECONDS:
        return
    _last_sweep = now
    for key in [key for key, expires_at in _memory_expiry.items() if expires_at <= now]:
        del _memory_expiry[key]
        _memory_store.pop(key, None)


def _hit_memory(key: str, limit: int, window_seconds: int) -> bool:
    now = time.time()
    _sweep_memory(now)
    window = [ts for ts in _memory_store.get(key, []) if ts > now - window_seconds]
    _memory_expiry[key] = now + window_seconds
    if len(window) >= limit:
        _memory_store[key] = window
        return False
    window.append(now)
    _memory_store[key] = window
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Record a hit and report whether it is within the limit.

    Returns:
        True if the request is allowed, False if the limit is exceeded
    """
    client = get_redis()
    if client is not None:
        try:
            return await _hit_redis(client, f"ratelimit:{key}", limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")
    return _hit_memory(key, limit, window_seconds)


def rate_limit(scope: str, limit: int, window_seconds: int):
    """
    Dependency factory limiting an endpoint per client address.

    Usage:
        @router.post("/login", dependencies=[Depends(rate_limit("login", 10, 60))])
    """

    async def _dependency(request: Request) -> None:
        client_host = request.client.host if request.client else "unknown"
        if not await check_rate_limit(f"{scope}:{client_host}", limit, window_seconds):
            logger.warning(f"Rate limit exceeded for {scope} from {client_host}")
            raise RateLimitExceeded(limit, window_seconds)

    return _dependency


def reset_memory_store() -> None:
    global _last_sweep
    _memory_store.clear()
    _memory_expiry.clear()
    _last_sweep = 0.0
