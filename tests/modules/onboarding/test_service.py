"""
Unit tests for the onboarding protocol with a mocked repository.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from bursary.core.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidTokenError,
    NotFoundError,
    NotificationDeliveryError,
)
from bursary.core.security import hash_token
from bursary.modules.onboarding.kinds import STUDENT
from bursary.modules.onboarding.service import activate, register_and_invite

SERVICE = "bursary.modules.onboarding.service"


def _student(**fields):
    return SimpleNamespace(id=uuid4(), email="amina@bursary.org", **fields)


class TestRegisterAndInvite:
    """Tests for register_and_invite."""

    @pytest.mark.asyncio
    async def test_existing_email_rejected_before_insert(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.email_exists = AsyncMock(return_value=True)
            mock_repo.insert_principal = AsyncMock()
            deliver = AsyncMock()

            with pytest.raises(EmailAlreadyRegisteredError):
                await register_and_invite(
                    mock_db, STUDENT, email="amina@bursary.org", password="pw123456", deliver=deliver
                )

        mock_repo.insert_principal.assert_not_called()
        deliver.assert_not_called()

    @pytest.mark.asyncio
    async def test_delivers_plaintext_and_stores_hash(self, mock_db):
        principal = _student()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.email_exists = AsyncMock(return_value=False)
            mock_repo.insert_principal = AsyncMock(return_value=principal)
            mock_repo.insert_invitation = AsyncMock()
            deliver = AsyncMock(return_value=True)

            result = await register_and_invite(
                mock_db,
                STUDENT,
                email="Amina@Bursary.org",
                password="pw123456",
                deliver=deliver,
                first_name="Amina",
            )

        assert result is principal
        sent_to, token = deliver.await_args.args
        assert sent_to is principal
        _, _, principal_id, stored_hash, _ = mock_repo.insert_invitation.await_args.args
        assert principal_id == principal.id
        assert stored_hash == hash_token(token)
        assert stored_hash != token

        insert_kwargs = mock_repo.insert_principal.await_args.kwargs
        assert insert_kwargs["email"] == "amina@bursary.org"
        assert insert_kwargs["password_hash"] != "pw123456"
        assert insert_kwargs["first_name"] == "Amina"

    @pytest.mark.asyncio
    async def test_delivery_failure_rolls_back(self, mock_db):
        """Undelivered invitations leave nothing behind."""
        principal = _student()
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.roll_back_new_principal", new_callable=AsyncMock) as mock_rollback,
        ):
            mock_repo.email_exists = AsyncMock(return_value=False)
            mock_repo.insert_principal = AsyncMock(return_value=principal)
            mock_repo.insert_invitation = AsyncMock()

            with pytest.raises(NotificationDeliveryError) as exc_info:
                await register_and_invite(
                    mock_db,
                    STUDENT,
                    email="amina@bursary.org",
                    password="pw123456",
                    deliver=AsyncMock(return_value=False),
                )

        assert exc_info.value.status_code == 500
        mock_rollback.assert_awaited_once()
        args = mock_rollback.await_args.args
        assert args[1] is STUDENT
        assert args[2] == principal.id


class TestActivate:
    @pytest.mark.asyncio
    async def test_unknown_token(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_live_invitation = AsyncMock(return_value=None)
            mock_repo.mark_activated = AsyncMock()

            with pytest.raises(InvalidTokenError):
                await activate(mock_db, STUDENT, "nope")

        mock_repo.mark_activated.assert_not_called()

    @pytest.mark.asyncio
    async def test_marks_and_consumes(self, mock_db):
        principal_id = uuid4()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_live_invitation = AsyncMock(
                return_value=SimpleNamespace(principal_id=principal_id)
            )
            mock_repo.mark_activated = AsyncMock(return_value=1)
            mock_repo.delete_invitation = AsyncMock(return_value=1)

            assert await activate(mock_db, STUDENT, "tok") == principal_id

        mock_repo.delete_invitation.assert_awaited_once_with(mock_db, STUDENT, hash_token("tok"))
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_orphaned_invitation(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_live_invitation = AsyncMock(
                return_value=SimpleNamespace(principal_id=uuid4())
            )
            mock_repo.mark_activated = AsyncMock(return_value=0)
            mock_repo.delete_invitation = AsyncMock()

            with pytest.raises(NotFoundError) as exc_info:
                await activate(mock_db, STUDENT, "tok")

        assert exc_info.value.error_code == "PRINCIPAL_NOT_FOUND"
        mock_repo.delete_invitation.assert_not_called()
        mock_db.rollback.assert_awaited_once()
