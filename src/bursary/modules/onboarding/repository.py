"""
Onboarding Repository

Principal and invitation statements shared by every principal kind.
Functions only flush; the caller owns the transaction.
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.modules.onboarding.kinds import PrincipalKind

logger = logging.getLogger(__name__)


async def email_exists(db: AsyncSession, kind: PrincipalKind, email: str) -> bool:
    model = kind.model
    result = await db.execute(
        select(model.id).where(func.lower(model.email) == email.lower()).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def insert_principal(db: AsyncSession, kind: PrincipalKind, **fields: Any):
    """Insert a pending-activation principal and return it refreshed."""
    principal = kind.model(
        blocked=False,
        activated=False,
        first_time_login=True,
        **fields,
    )
    db.add(principal)
    await db.flush()
    await db.refresh(principal)
    logger.debug(f"Inserted {kind.name} {principal.id}")
    return principal


async def insert_invitation(
    db: AsyncSession,
    kind: PrincipalKind,
    principal_id: UUID,
    token_hash: str,
    expiry: datetime,
) -> None:
    db.add(kind.invitation_model(token=token_hash, principal_id=principal_id, expiry=expiry))
    await db.flush()


async def get_live_invitation(
    db: AsyncSession,
    kind: PrincipalKind,
    token_hash: str,
    now: datetime,
):
    """
    Fetch an invitation by token hash, locking the row.

    Expired rows are filtered out here so they are indistinguishable from
    absent ones.
    """
    invitation = kind.invitation_model
    result = await db.execute(
        select(invitation)
        .where(invitation.token == token_hash, invitation.expiry > now)
        .with_for_update()
    )
    return result.scalar_one_or_none()


async def mark_activated(db: AsyncSession, kind: PrincipalKind, principal_id: UUID) -> int:
    """Returns the number of principals updated (0 or 1)."""
    result = await db.execute(
        update(kind.model)
        .where(kind.model.id == principal_id)
        .values(activated=True, first_time_login=True)
    )
    return result.rowcount


async def delete_invitation(db: AsyncSession, kind: PrincipalKind, token_hash: str) -> int:
    result = await db.execute(
        delete(kind.invitation_model).where(kind.invitation_model.token == token_hash)
    )
    return result.rowcount


async def delete_principal(db: AsyncSession, kind: PrincipalKind, principal_id: UUID) -> int:
    result = await db.execute(delete(kind.model).where(kind.model.id == principal_id))
    return result.rowcount


async def purge_expired_invitations(db: AsyncSession, kind: PrincipalKind, now: datetime) -> int:
    result = await db.execute(
        delete(kind.invitation_model)
        .where(kind.invitation_model.expiry <= now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
