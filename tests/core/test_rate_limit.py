"""
Unit tests for the sliding-window rate limiter.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from bursary.core import rate_limit
from bursary.core.rate_limit import RateLimitExceeded, check_rate_limit


class TestMemoryFallback:
    """Without Redis, hits are counted in process memory."""

    @pytest.mark.asyncio
    async def test_allows_up_to_limit(self):
        with patch("bursary.core.rate_limit.get_redis", return_value=None):
            results = [await check_rate_limit("login:1.2.3.4", 2, 60) for _ in range(3)]
        assert results == [True, True, False]

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        with patch("bursary.core.rate_limit.get_redis", return_value=None):
            assert await check_rate_limit("login:a", 1, 60)
            assert await check_rate_limit("login:b", 1, 60)
            assert not await check_rate_limit("login:a", 1, 60)

    @pytest.mark.asyncio
    async def test_lapsed_keys_are_dropped(self):
        """Keys whose window has passed are removed on the next sweep."""
        with (
            patch("bursary.core.rate_limit.get_redis", return_value=None),
            patch("bursary.core.rate_limit.time.time") as mock_time,
        ):
            mock_time.return_value = 1_000.0
            await check_rate_limit("login:old", 5, 60)
            await check_rate_limit("register:busy", 5, 3600)
            assert set(rate_limit._memory_store) == {"login:old", "register:busy"}

            mock_time.return_value = 1_000.0 + 120
            await check_rate_limit("login:new", 5, 60)

        assert set(rate_limit._memory_store) == {"register:busy", "login:new"}
        assert set(rate_limit._memory_expiry) == {"register:busy", "login:new"}


class TestRedisWindow:
    @pytest.mark.asyncio
    async def test_uses_window_count(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[0, 5, 1, True])
        client = MagicMock()
        client.pipeline.return_value = pipe

        with patch("bursary.core.rate_limit.get_redis", return_value=client):
            assert await check_rate_limit("register:1.2.3.4", 5, 3600) is False

        pipe.zcard.assert_called_once_with("ratelimit:register:1.2.3.4")

    @pytest.mark.asyncio
    async def test_redis_failure_falls_back_to_memory(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(side_effect=ConnectionError("redis down"))
        client = MagicMock()
        client.pipeline.return_value = pipe

        with patch("bursary.core.rate_limit.get_redis", return_value=client):
            assert await check_rate_limit("register:5.6.7.8", 1, 3600) is True


def test_rate_limit_exceeded_detail():
    exc = RateLimitExceeded(10, 60)
    assert exc.status_code == 429
    assert exc.detail["error"] == "RATE_LIMIT_EXCEEDED"
    assert exc.headers["Retry-After"] == "60"
