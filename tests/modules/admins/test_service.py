"""
Tests for admin creation and reads.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from bursary.core.exceptions import ForbiddenError, NotFoundError, RoleNotFoundError
from bursary.modules.admins import service
from bursary.modules.admins.schemas import AdminCreateRequest

SERVICE = "bursary.modules.admins.service"


def _request(role: str, password: str | None = "pw123456") -> AdminCreateRequest:
    return AdminCreateRequest(
        first_name="Wanjiku",
        last_name="Otieno",
        email=f"{role}.new@bursary.org",
        password=password,
        role=role,
    )


class TestCreateAdmin:
    """Creators may only grant roles at or below their own level."""

    @pytest.mark.asyncio
    async def test_county_creates_ward(self, db, make_admin):
        county = await make_admin("county")
        with patch(f"{SERVICE}.send_admin_invitation", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = True
            admin = await service.create_admin(db, county, _request("ward"))

        assert admin.role.name == "ward"
        assert admin.activated is False
        assert mock_send.await_args.kwargs["temporary_password"] is None

    @pytest.mark.asyncio
    async def test_cannot_grant_higher_role(self, db, make_admin):
        ward = await make_admin("ward")
        with patch(f"{SERVICE}.send_admin_invitation", new_callable=AsyncMock) as mock_send:
            with pytest.raises(ForbiddenError):
                await service.create_admin(db, ward, _request("finance"))
        mock_send.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_role(self, db, make_admin):
        admin = await make_admin("admin")
        with pytest.raises(RoleNotFoundError):
            await service.create_admin(db, admin, _request("dean"))

    @pytest.mark.asyncio
    async def test_generated_password_is_emailed(self, db, make_admin):
        admin = await make_admin("admin")
        with patch(f"{SERVICE}.send_admin_invitation", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = True
            await service.create_admin(db, admin, _request("finance", password=None))

        assert mock_send.await_args.kwargs["temporary_password"]


class TestGetAdmin:
    @pytest.mark.asyncio
    async def test_own_account_always_visible(self, db, make_admin):
        ward = await make_admin("ward")
        found = await service.get_admin(db, ward, ward.id)
        assert found.id == ward.id

    @pytest.mark.asyncio
    async def test_higher_account_hidden(self, db, make_admin):
        ward = await make_admin("ward")
        finance = await make_admin("finance")
        with pytest.raises(ForbiddenError):
            await service.get_admin(db, ward, finance.id)

    @pytest.mark.asyncio
    async def test_missing(self, db, make_admin):
        admin = await make_admin("admin")
        with pytest.raises(NotFoundError):
            await service.get_admin(db, admin, uuid4())

    @pytest.mark.asyncio
    async def test_list_hides_higher_levels(self, db, make_admin):
        county = await make_admin("county")
        await make_admin("ward")
        await make_admin("finance")
        visible = await service.list_admins(db, county)
        assert {admin.role.name for admin in visible} == {"county", "ward"}
