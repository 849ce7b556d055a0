"""
Onboarding Service

The registration and activation protocol shared by every principal kind.

Lifecycle per principal:
    unregistered -> pending-activation -> activated
                            |
                            +-> rolled back (invitation could not be delivered)

1. Registration (``register_and_invite``):
   - Principal row and invitation row are inserted in one transaction
   - The plaintext token is delivered outside the transaction
   - Delivery failure deletes both rows again in a second transaction
     (registered with a ``Saga``) and the delivery error is raised

2. Activation (``activate``):
   - Look up the invitation by token hash, ignoring expired rows
   - Flag the principal activated and delete the invitation
   - All in one transaction, so a token is consumed exactly once

Security considerations:
- Tokens use ``secrets.token_urlsafe`` and only their SHA-256 hash is stored
- Passwords are bcrypt-hashed before the insert
- Unknown, consumed and expired tokens produce the same error
- Tokens are never logged
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from functools import partial
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.config import settings
from bursary.core.database import transaction
from bursary.core.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidTokenError,
    NotFoundError,
    NotificationDeliveryError,
)
from bursary.core.security import generate_invitation_token, hash_password, hash_token
from bursary.modules.onboarding import repository
from bursary.modules.onboarding.kinds import PrincipalKind
from bursary.modules.onboarding.saga import Saga

logger = logging.getLogger(__name__)

# Called with the new principal and the plaintext token; True when delivered.
Deliver = Callable[[Any, str], Awaitable[bool]]


def _calculate_token_expiry(now: datetime, token_expiry: timedelta | None) -> datetime:
    if token_expiry is None:
        token_expiry = timedelta(hours=settings.invitation_expiry_hours)
    return now + token_expiry


async def register_and_invite(
    db: AsyncSession,
    kind: PrincipalKind,
    *,
    email: str,
    password: str,
    deliver: Deliver,
    token_expiry: timedelta | None = None,
    **fields: Any,
):
    """
    Create a pending-activation principal and send its invitation.

    Args:
        db: Database session
        kind: Which principal table to write
        email: Login email, unique per principal table
        password: Plaintext password, hashed before storage
        deliver: Notification callback receiving the principal and the
            plaintext token
        token_expiry: Invitation lifetime (``INVITATION_EXPIRY_HOURS`` by default)
        **fields: Remaining principal columns (names, role)

    Returns:
        The created principal

    Raises:
        EmailAlreadyRegisteredError: Email already used by this principal kind
        NotificationDeliveryError: Invitation could not be delivered; nothing
            is left behind in either table
    """
    if await repository.email_exists(db, kind, email):
        raise EmailAlreadyRegisteredError()

    plain_token = generate_invitation_token()
    token_hash = hash_token(plain_token)
    expiry = _calculate_token_expiry(datetime.now(UTC), token_expiry)

    async with Saga(f"register_{kind.name}") as saga:
        try:
            async with transaction(db, f"register_{kind.name}"):
                principal = await repository.insert_principal(
                    db,
                    kind,
                    email=email.lower(),
                    password_hash=hash_password(password),
                    **fields,
                )
                await repository.insert_invitation(db, kind, principal.id, token_hash, expiry)
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            raise EmailAlreadyRegisteredError() from e

        saga.on_rollback(
            f"delete {kind.name} {principal.id}",
            partial(roll_back_new_principal, db, kind, principal.id, token_hash),
        )
        logger.info(f"Registered {kind.name} {principal.id}, sending invitation")

        if not await deliver(principal, plain_token):
            logger.error(f"Invitation delivery failed for {kind.name} {principal.id}")
            raise NotificationDeliveryError(principal.email)

    return principal


async def roll_back_new_principal(
    db: AsyncSession,
    kind: PrincipalKind,
    principal_id: UUID,
    token_hash: str,
) -> None:
    """
    Delete a just-registered principal and its invitation in one transaction.

    Raises:
        NotFoundError: The principal no longer exists
    """
    async with transaction(db, f"roll_back_{kind.name}"):
        await repository.delete_invitation(db, kind, token_hash)
        deleted = await repository.delete_principal(db, kind, principal_id)
        if deleted == 0:
            raise NotFoundError(f"{kind.name.capitalize()} not found.", "PRINCIPAL_NOT_FOUND")
    logger.info(f"Rolled back {kind.name} {principal_id}")


async def activate(db: AsyncSession, kind: PrincipalKind, token: str) -> UUID:
    """
    Consume an invitation token and activate its principal.

    Returns:
        The activated principal's ID

    Raises:
        InvalidTokenError: Token unknown, already used, or expired
        NotFoundError: The invitation outlived its principal
    """
    token_hash = hash_token(token)
    now = datetime.now(UTC)

    async with transaction(db, f"activate_{kind.name}"):
        invitation = await repository.get_live_invitation(db, kind, token_hash, now)
        if invitation is None:
            raise InvalidTokenError()

        principal_id = invitation.principal_id
        if await repository.mark_activated(db, kind, principal_id) == 0:
            raise NotFoundError(f"{kind.name.capitalize()} not found.", "PRINCIPAL_NOT_FOUND")

        await repository.delete_invitation(db, kind, token_hash)

    logger.info(f"Activated {kind.name} {principal_id}")
    return principal_id


async def purge_expired_invitations(db: AsyncSession, kinds: tuple[PrincipalKind, ...]) -> int:
    """Delete every expired invitation row. Returns the number removed."""
    now = datetime.now(UTC)
    purged = 0
    async with transaction(db, "purge_expired_invitations"):
        for kind in kinds:
            purged += await repository.purge_expired_invitations(db, kind, now)
    return purged
