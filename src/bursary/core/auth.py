"""
Authentication Dependencies

Resolves the calling principal (admin, student or user) from a Bearer JWT and
hands it to the endpoint as an explicit value. Services receive the
principal as an argument; nothing here stores it on the request.

SECURITY NOTE:
- Tokens carry a ``principal`` claim; a token issued to one principal kind
  is never accepted on another kind's endpoints
- The principal's role and blocked flag are re-read from the database on
  every request, so a demotion or block takes effect immediately
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.database import get_db
from bursary.core.exceptions import ServiceError, to_http_exception
from bursary.core.security import decode_token
from bursary.modules.admins.repository import AdminRepository
from bursary.modules.roles.authorization import check_authorization
from bursary.modules.students.repository import StudentRepository
from bursary.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)


@dataclass(frozen=True)
class AdminPrincipal:
    """
    An authenticated admin.

    Attributes:
        id: Admin's unique identifier
        email: Admin's email address
        role_name: Lower-cased role name, used for stage transitions
        role_level: Numeric authority level, used by the authorization gate
        name: Display name
    """

    id: UUID
    email: str
    role_name: str
    role_level: int
    name: str | None = None

    def __str__(self) -> str:
        return f"AdminPrincipal(id={self.id}, role={self.role_name}, level={self.role_level})"


@dataclass(frozen=True)
class StudentPrincipal:
    """An authenticated student."""

    id: UUID
    email: str
    name: str | None = None


@dataclass(frozen=True)
class UserPrincipal:
    """An authenticated portal user."""

    id: UUID
    email: str
    username: str


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _subject_from_token(token: str, expected_principal: str) -> UUID:
    """
    Validate a JWT and return its subject.

    Raises:
        HTTPException 401: Invalid, expired or wrong-kind token
    """
    payload = decode_token(token)
    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type", "access") != "access":
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    if payload.get("principal") != expected_principal:
        logger.warning(
            f"Token for principal '{payload.get('principal')}' used on {expected_principal} endpoint"
        )
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    try:
        return UUID(payload["sub"])
    except (KeyError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


def _blocked() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={"error": "ACCOUNT_BLOCKED", "message": "This account has been blocked."},
    )


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> AdminPrincipal:
    """
    FastAPI dependency returning the authenticated admin.

    Raises:
        HTTPException 401: Missing, invalid or expired token, or unknown admin
        HTTPException 403: Admin is blocked
    """
    admin_id = _subject_from_token(credentials.credentials, "admin")

    admin = await AdminRepository.get_by_id(db, admin_id)
    if admin is None:
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")
    if admin.blocked:
        logger.warning(f"Blocked admin {admin.id} attempted access")
        raise _blocked()

    return AdminPrincipal(
        id=admin.id,
        email=admin.email,
        role_name=admin.role.name,
        role_level=admin.role.level,
        name=admin.full_name,
    )


async def get_current_student(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> StudentPrincipal:
    """FastAPI dependency returning the authenticated student."""
    student_id = _subject_from_token(credentials.credentials, "student")

    student = await StudentRepository.get_by_id(db, student_id)
    if student is None:
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")
    if student.blocked:
        logger.warning(f"Blocked student {student.id} attempted access")
        raise _blocked()

    return StudentPrincipal(id=student.id, email=student.email, name=student.full_name)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> UserPrincipal:
    """FastAPI dependency returning the authenticated portal user."""
    user_id = _subject_from_token(credentials.credentials, "user")

    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")
    if user.blocked:
        logger.warning(f"Blocked user {user.id} attempted access")
        raise _blocked()

    return UserPrincipal(id=user.id, email=user.email, username=user.username)


def require_role(role_name: str):
    """
    Dependency factory gating an endpoint on a minimum role.

    Usage:
        @router.post("", dependencies=[Depends(require_role("county"))])
    """

    async def _dependency(
        admin: AdminPrincipal = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db),
    ) -> AdminPrincipal:
        try:
            await check_authorization(db, admin.role_level, role_name)
        except ServiceError as e:
            logger.warning(f"Admin {admin.id} denied: requires '{role_name}'")
            raise to_http_exception(e) from e
        return admin

    return _dependency


__all__ = [
    "AdminPrincipal",
    "StudentPrincipal",
    "UserPrincipal",
    "get_current_admin",
    "get_current_student",
    "get_current_user",
    "require_role",
]
