"""Authentication router."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.database import get_db
from bursary.core.exceptions import ServiceError, internal_error, to_http_exception
from bursary.core.rate_limit import rate_limit
from bursary.modules.auth import service
from bursary.modules.auth.schemas import LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_LOGIN = (10, 60)  # 10 attempts per minute per address


@router.post(
    "/admins/login",
    response_model=LoginResponse,
    dependencies=[Depends(rate_limit("admin_login", *RATE_LIMIT_LOGIN))],
)
async def login_admin(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate an admin and return an access token.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account blocked or not activated
    """
    try:
        return await service.login_admin(db, credentials.email, credentials.password)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error during admin login: {e}")
        raise internal_error() from e


@router.post(
    "/students/login",
    response_model=LoginResponse,
    dependencies=[Depends(rate_limit("student_login", *RATE_LIMIT_LOGIN))],
)
async def login_student(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Authenticate a student and return an access token."""
    try:
        return await service.login_student(db, credentials.email, credentials.password)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error during student login: {e}")
        raise internal_error() from e


@router.post(
    "/users/login",
    response_model=LoginResponse,
    dependencies=[Depends(rate_limit("user_login", *RATE_LIMIT_LOGIN))],
)
async def login_user(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Authenticate a portal user and return an access token."""
    try:
        return await service.login_user(db, credentials.email, credentials.password)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error during user login: {e}")
        raise internal_error() from e
