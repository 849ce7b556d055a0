"""
Unit tests for the level-based authorization gate.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from bursary.core.exceptions import ForbiddenError, RoleNotFoundError
from bursary.modules.roles.authorization import (
    check_authorization,
    is_authorized,
    resolve_level,
)
from bursary.modules.roles.repository import RoleRepository

LEVELS = {"student": 1, "ward": 2, "county": 3, "finance": 2}


class TestIsAuthorized:
    """Tests for the pure level comparison."""

    def test_higher_level_is_authorized(self):
        assert is_authorized(3, "finance", LEVELS) is True

    def test_equal_level_is_authorized(self):
        assert is_authorized(2, "finance", LEVELS) is True

    def test_lower_level_is_refused(self):
        assert is_authorized(1, "finance", LEVELS) is False

    def test_role_names_ignore_case(self):
        assert is_authorized(3, "FINANCE", LEVELS) is True
        assert resolve_level(LEVELS, " County ") == 3

    def test_unknown_role_raises(self):
        with pytest.raises(RoleNotFoundError) as exc_info:
            is_authorized(99, "dean", LEVELS)
        assert exc_info.value.status_code == 404


class TestCheckAuthorization:
    """Tests for the store-backed gate."""

    @pytest.mark.asyncio
    async def test_owner_skips_role_lookup(self, mock_db):
        owner = uuid4()
        with patch("bursary.modules.roles.authorization.RoleRepository") as mock_repo:
            mock_repo.get_by_name = AsyncMock()
            await check_authorization(mock_db, 1, "admin", caller_id=owner, owner_id=owner)
        mock_repo.get_by_name.assert_not_called()

    @pytest.mark.asyncio
    async def test_owner_bypasses_unknown_role(self, mock_db):
        """Ownership is granted before the role name is resolved."""
        owner = uuid4()
        with patch("bursary.modules.roles.authorization.RoleRepository") as mock_repo:
            mock_repo.get_by_name = AsyncMock(side_effect=RoleNotFoundError("dean"))
            await check_authorization(mock_db, 1, "dean", caller_id=owner, owner_id=owner)

    @pytest.mark.asyncio
    async def test_non_owner_falls_through_to_level(self, mock_db):
        with patch("bursary.modules.roles.authorization.RoleRepository") as mock_repo:
            mock_repo.get_by_name = AsyncMock(
                return_value=SimpleNamespace(name="county", level=3)
            )
            with pytest.raises(ForbiddenError):
                await check_authorization(
                    mock_db, 1, "county", caller_id=uuid4(), owner_id=uuid4()
                )
        mock_repo.get_by_name.assert_awaited_once_with(mock_db, "county")

    @pytest.mark.asyncio
    async def test_insufficient_level_forbidden(self, mock_db):
        with patch("bursary.modules.roles.authorization.RoleRepository") as mock_repo:
            mock_repo.get_by_name = AsyncMock(
                return_value=SimpleNamespace(name="county", level=3)
            )
            with pytest.raises(ForbiddenError) as exc_info:
                await check_authorization(mock_db, 2, "county")
        assert exc_info.value.error_code == "INSUFFICIENT_ROLE"

    @pytest.mark.asyncio
    async def test_sufficient_level_passes(self, mock_db):
        with patch("bursary.modules.roles.authorization.RoleRepository") as mock_repo:
            mock_repo.get_by_name = AsyncMock(
                return_value=SimpleNamespace(name="county", level=3)
            )
            await check_authorization(mock_db, 6, "county")


class TestSeededRoles:
    """Against the seeded roles table."""

    @pytest.mark.asyncio
    async def test_get_by_name_is_case_insensitive(self, db):
        role = await RoleRepository.get_by_name(db, "Finance-Assistant")
        assert role.level == 4

    @pytest.mark.asyncio
    async def test_get_by_name_unknown(self, db):
        with pytest.raises(RoleNotFoundError):
            await RoleRepository.get_by_name(db, "dean")

    @pytest.mark.asyncio
    async def test_check_authorization_against_store(self, db):
        await check_authorization(db, 3, "ward")
        with pytest.raises(ForbiddenError):
            await check_authorization(db, 3, "finance")

    @pytest.mark.asyncio
    async def test_list_up_to_level(self, db):
        roles = await RoleRepository.list_up_to_level(db, 3)
        assert [role.name for role in roles] == ["student", "ward", "county"]
