"""
Authentication Service

Password login for every principal kind, issuing a JWT access token whose
``principal`` claim records which kind logged in.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.exceptions import AuthenticationError, ForbiddenError
from bursary.core.security import create_access_token, verify_password
from bursary.modules.admins.repository import AdminRepository
from bursary.modules.auth.schemas import LoginResponse
from bursary.modules.students.repository import StudentRepository
from bursary.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


def _check_can_login(principal, password: str) -> None:
    """
    Raises:
        AuthenticationError: Unknown email or wrong password
        ForbiddenError: Account blocked or never activated
    """
    if principal is None or not verify_password(password, principal.password_hash):
        raise AuthenticationError()

    if principal.blocked:
        raise ForbiddenError("Your account has been blocked.", "ACCOUNT_BLOCKED")

    if not principal.activated:
        raise ForbiddenError(
            "Activate your account from the invitation email before logging in.",
            "ACCOUNT_NOT_ACTIVATED",
        )


def _login_response(principal, principal_kind: str) -> LoginResponse:
    token = create_access_token(
        subject=str(principal.id),
        principal=principal_kind,
        additional_claims={"email": principal.email},
    )
    return LoginResponse(
        token=token,
        uid=principal.id,
        first_name=principal.first_name,
        email=principal.email,
        blocked=principal.blocked,
        first_time_login=principal.first_time_login,
        created_at=principal.created_at,
    )


async def login_admin(db: AsyncSession, email: str, password: str) -> LoginResponse:
    admin = await AdminRepository.get_by_email(db, email)
    try:
        _check_can_login(admin, password)
    except (AuthenticationError, ForbiddenError) as e:
        logger.warning(f"Admin login refused for {email}: {e.error_code}")
        raise

    logger.info(f"Admin logged in: {admin.email} (role: {admin.role.name})")
    return _login_response(admin, "admin")


async def login_student(db: AsyncSession, email: str, password: str) -> LoginResponse:
    student = await StudentRepository.get_by_email(db, email)
    try:
        _check_can_login(student, password)
    except (AuthenticationError, ForbiddenError) as e:
        logger.warning(f"Student login refused for {email}: {e.error_code}")
        raise

    logger.info(f"Student logged in: {student.email}")
    return _login_response(student, "student")


async def login_user(db: AsyncSession, email: str, password: str) -> LoginResponse:
    user = await UserRepository.get_by_email(db, email)
    try:
        _check_can_login(user, password)
    except (AuthenticationError, ForbiddenError) as e:
        logger.warning(f"User login refused for {email}: {e.error_code}")
        raise

    logger.info(f"User logged in: {user.username}")
    return _login_response(user, "user")
