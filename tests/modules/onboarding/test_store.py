"""
Store-level tests for registration and activation on SQLite.

These tests cover:
- Pending-activation rows after registration
- Single-use activation
- Expired invitations
- Compensation after a failed delivery
- Purging expired invitations
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from bursary.core.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidTokenError,
    NotificationDeliveryError,
)
from bursary.modules.admins.models import Admin, AdminInvitation
from bursary.modules.onboarding import service as onboarding
from bursary.modules.onboarding.kinds import ADMIN, ALL_KINDS, STUDENT, USER
from bursary.modules.roles.repository import RoleRepository
from bursary.modules.students.models import Student, StudentInvitation
from bursary.modules.users.models import UserInvitation


async def _count(db, model) -> int:
    return await db.scalar(select(func.count()).select_from(model))


async def _activated(db, student_id) -> bool:
    return await db.scalar(select(Student.activated).where(Student.id == student_id))


async def _register_student(db, deliver=None, **kwargs):
    deliver = deliver or AsyncMock(return_value=True)
    student = await onboarding.register_and_invite(
        db,
        STUDENT,
        email=kwargs.pop("email", "amina@bursary.org"),
        password="pw123456",
        deliver=deliver,
        first_name="Amina",
        last_name="Wanjiru",
        **kwargs,
    )
    return student, deliver


class TestRegistration:
    @pytest.mark.asyncio
    async def test_creates_pending_principal_and_invitation(self, db):
        student, deliver = await _register_student(db)

        assert student.activated is False
        assert student.blocked is False
        assert student.first_time_login is True
        assert await _count(db, Student) == 1
        assert await _count(db, StudentInvitation) == 1
        deliver.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_email_case_insensitive(self, db):
        await _register_student(db)
        with pytest.raises(EmailAlreadyRegisteredError):
            await _register_student(db, email="AMINA@bursary.org")
        assert await _count(db, Student) == 1

    @pytest.mark.asyncio
    async def test_delivery_failure_leaves_nothing(self, db):
        with pytest.raises(NotificationDeliveryError):
            await _register_student(db, deliver=AsyncMock(return_value=False))

        assert await _count(db, Student) == 0
        assert await _count(db, StudentInvitation) == 0

    @pytest.mark.asyncio
    async def test_email_reusable_after_failed_delivery(self, db):
        with pytest.raises(NotificationDeliveryError):
            await _register_student(db, deliver=AsyncMock(return_value=False))

        student, _ = await _register_student(db)
        assert student.email == "amina@bursary.org"

    @pytest.mark.asyncio
    async def test_admin_kind_uses_admin_tables(self, db):
        role = await RoleRepository.get_by_name(db, "ward")
        deliver = AsyncMock(return_value=True)
        admin = await onboarding.register_and_invite(
            db,
            ADMIN,
            email="ward@bursary.org",
            password="pw123456",
            deliver=deliver,
            first_name="Wanjiku",
            last_name="Otieno",
            role=role,
        )

        assert admin.role.name == "ward"
        assert await _count(db, Admin) == 1
        assert await _count(db, AdminInvitation) == 1
        assert await _count(db, StudentInvitation) == 0

    @pytest.mark.asyncio
    async def test_user_kind_uses_user_tables(self, db):
        deliver = AsyncMock(return_value=True)
        user = await onboarding.register_and_invite(
            db,
            USER,
            email="brian@bursary.org",
            password="pw123456",
            deliver=deliver,
            username="otieno",
            first_name="Brian",
            last_name="Otieno",
        )
        user_id = user.id
        token = deliver.await_args.args[1]

        assert await _count(db, UserInvitation) == 1
        assert await _count(db, StudentInvitation) == 0
        with pytest.raises(InvalidTokenError):
            await onboarding.activate(db, STUDENT, token)
        assert await onboarding.activate(db, USER, token) == user_id


class TestActivation:
    """An invitation activates its principal exactly once."""

    @pytest.mark.asyncio
    async def test_activate_once(self, db):
        student, deliver = await _register_student(db)
        token = deliver.await_args.args[1]

        assert await onboarding.activate(db, STUDENT, token) == student.id

        assert await _activated(db, student.id) is True
        assert await _count(db, StudentInvitation) == 0

        with pytest.raises(InvalidTokenError):
            await onboarding.activate(db, STUDENT, token)

    @pytest.mark.asyncio
    async def test_token_is_kind_specific(self, db):
        _, deliver = await _register_student(db)
        token = deliver.await_args.args[1]

        with pytest.raises(InvalidTokenError):
            await onboarding.activate(db, ADMIN, token)

    @pytest.mark.asyncio
    async def test_expired_token(self, db):
        """An expired token is refused like an unknown one and activates nothing."""
        student, deliver = await _register_student(db, token_expiry=timedelta(seconds=-1))
        student_id = student.id
        token = deliver.await_args.args[1]

        with pytest.raises(InvalidTokenError) as exc_info:
            await onboarding.activate(db, STUDENT, token)

        assert exc_info.value.message == "Token has expired or is invalid."
        assert await _activated(db, student_id) is False
        assert await _count(db, StudentInvitation) == 1

    @pytest.mark.asyncio
    async def test_unknown_token(self, db):
        with pytest.raises(InvalidTokenError):
            await onboarding.activate(db, STUDENT, "never-issued")


class TestPurge:
    @pytest.mark.asyncio
    async def test_purges_only_expired(self, db):
        await _register_student(db, email="old@bursary.org", token_expiry=timedelta(seconds=-1))
        await _register_student(db, email="new@bursary.org")

        assert await onboarding.purge_expired_invitations(db, ALL_KINDS) == 1
        assert await _count(db, StudentInvitation) == 1
        # Principals are untouched
        assert await _count(db, Student) == 2
