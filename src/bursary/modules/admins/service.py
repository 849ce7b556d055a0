"""
Admin Service

Admin account creation, activation and reads.

Admins are only ever created by another admin. The creator must hold at
least the level of the role being granted, so nobody can mint an account
more powerful than their own. The very first admin comes from
``scripts/seed_admin.py``.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import AdminPrincipal
from bursary.core.email import send_admin_invitation
from bursary.core.exceptions import NotFoundError
from bursary.core.security import generate_temporary_password
from bursary.modules.admins.models import Admin
from bursary.modules.admins.repository import AdminRepository
from bursary.modules.admins.schemas import AdminCreateRequest
from bursary.modules.onboarding import service as onboarding
from bursary.modules.onboarding.kinds import ADMIN
from bursary.modules.roles.authorization import check_authorization
from bursary.modules.roles.repository import RoleRepository

logger = logging.getLogger(__name__)


async def create_admin(
    db: AsyncSession,
    actor: AdminPrincipal,
    payload: AdminCreateRequest,
) -> Admin:
    """
    Create an admin account and email its activation link.

    Raises:
        RoleNotFoundError: ``payload.role`` is not a seeded role
        ForbiddenError: The requested role outranks the actor
        EmailAlreadyRegisteredError: Email already belongs to an admin
        NotificationDeliveryError: Invitation email failed; nothing persisted
    """
    role = await RoleRepository.get_by_name(db, payload.role)
    await check_authorization(db, actor.role_level, role.name)

    temporary_password = None if payload.password else generate_temporary_password()
    password = payload.password or temporary_password

    async def deliver(admin: Admin, token: str) -> bool:
        return await send_admin_invitation(
            to_email=admin.email,
            admin_name=admin.full_name,
            role_name=role.name,
            token=token,
            temporary_password=temporary_password,
        )

    admin = await onboarding.register_and_invite(
        db,
        ADMIN,
        email=payload.email,
        password=password,
        deliver=deliver,
        first_name=payload.first_name,
        middle_name=payload.middle_name,
        last_name=payload.last_name,
        role=role,
        role_code=payload.role_code,
    )
    logger.info(f"Admin {actor.id} created admin {admin.id} with role '{role.name}'")
    return admin


async def activate_admin(db: AsyncSession, token: str) -> UUID:
    return await onboarding.activate(db, ADMIN, token)


async def list_admins(db: AsyncSession, actor: AdminPrincipal) -> list[Admin]:
    return await AdminRepository.list_visible(db, actor.role_level)


async def get_admin(db: AsyncSession, actor: AdminPrincipal, admin_id: UUID) -> Admin:
    """
    Read one admin account.

    An admin may always read their own account. Any other account requires
    the actor to be authorised for that account's role.

    Raises:
        NotFoundError: No such admin
        ForbiddenError: The account outranks the actor
    """
    admin = await AdminRepository.get_by_id(db, admin_id)
    if admin is None:
        raise NotFoundError(f"Admin {admin_id} not found.", "ADMIN_NOT_FOUND")

    await check_authorization(
        db,
        actor.role_level,
        admin.role.name,
        caller_id=actor.id,
        owner_id=admin.id,
    )
    return admin
