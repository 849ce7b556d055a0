"""
User Service

Self-registration and activation of portal users. Users hold no role and
never enter the review pipeline.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.email import send_user_invitation
from bursary.core.exceptions import UsernameTakenError
from bursary.modules.onboarding import service as onboarding
from bursary.modules.onboarding.kinds import USER
from bursary.modules.users.models import User
from bursary.modules.users.repository import UserRepository
from bursary.modules.users.schemas import UserRegisterRequest

logger = logging.getLogger(__name__)


async def _deliver_invitation(user: User, token: str) -> bool:
    return await send_user_invitation(
        to_email=user.email,
        username=user.username,
        user_name=user.full_name,
        token=token,
    )


async def register_user(db: AsyncSession, payload: UserRegisterRequest) -> User:
    """
    Register a user and email the activation link.

    Raises:
        UsernameTakenError: Username already in use, compared case-insensitively
        EmailAlreadyRegisteredError: Email already belongs to a user
        NotificationDeliveryError: Invitation email failed; nothing persisted
    """
    if await UserRepository.username_exists(db, payload.username):
        raise UsernameTakenError(payload.username)

    user = await onboarding.register_and_invite(
        db,
        USER,
        email=payload.email,
        password=payload.password,
        deliver=_deliver_invitation,
        username=payload.username,
        first_name=payload.first_name,
        middle_name=payload.middle_name,
        last_name=payload.last_name,
    )
    logger.info(f"User {user.id} registered as {user.username}")
    return user


async def activate_user(db: AsyncSession, token: str) -> UUID:
    return await onboarding.activate(db, USER, token)
