"""
Unit tests for the transaction and timeout helpers.
"""

import asyncio

import pytest

from bursary.core.database import bounded, transaction
from bursary.core.exceptions import NotFoundError, StoreTimeoutError


class TestTransaction:
    """Tests for the transaction context manager."""

    @pytest.mark.asyncio
    async def test_commits_on_clean_exit(self, mock_db):
        async with transaction(mock_db, "noop"):
            pass

        mock_db.commit.assert_awaited_once()
        mock_db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rolls_back_and_reraises(self, mock_db):
        """The original error propagates after the rollback."""
        with pytest.raises(NotFoundError):
            async with transaction(mock_db, "failing"):
                raise NotFoundError()

        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeout_rolls_back(self, mock_db):
        with pytest.raises(StoreTimeoutError) as exc_info:
            async with transaction(mock_db, "slow_write", timeout=0.01):
                await asyncio.sleep(1)

        assert exc_info.value.error_code == "STORE_TIMEOUT"
        assert exc_info.value.status_code == 500
        assert "slow_write" in exc_info.value.message
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()


class TestBounded:
    """Tests for bounded reads."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        async def read():
            return 42

        assert await bounded(read(), "read") == 42

    @pytest.mark.asyncio
    async def test_timeout(self):
        with pytest.raises(StoreTimeoutError):
            await bounded(asyncio.sleep(1), "slow_read", timeout=0.01)
