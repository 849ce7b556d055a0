"""
Users Router

Endpoints:
- POST /users/register - Public self-registration
- GET /users/activate/{token} - Activate from the invitation link
- GET /users/me - The caller's account
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import UserPrincipal, get_current_user
from bursary.core.database import get_db
from bursary.core.exceptions import ServiceError, internal_error, to_http_exception
from bursary.core.rate_limit import rate_limit
from bursary.modules.users import service
from bursary.modules.users.repository import UserRepository
from bursary.modules.users.schemas import ActivationResponse, UserRegisterRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_REGISTER = (5, 60 * 60)  # 5 registrations per hour per address


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("user_register", *RATE_LIMIT_REGISTER))],
    summary="Register User",
    responses={
        201: {"description": "Account created, activation email sent"},
        409: {"description": "Email or username already registered"},
        429: {"description": "Too many registrations from this address"},
        500: {"description": "Activation email could not be delivered"},
    },
)
async def register_user(
    payload: UserRegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    try:
        user = await service.register_user(db, payload)
        return UserResponse.model_validate(user)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error registering user: {e}")
        raise internal_error() from e


@router.get(
    "/activate/{token}",
    response_model=ActivationResponse,
    summary="Activate User Account",
    description="Single use. Unknown, used and expired tokens all return 404 `INVALID_TOKEN`.",
)
async def activate_user(
    token: str,
    db: AsyncSession = Depends(get_db),
) -> ActivationResponse:
    try:
        user_id = await service.activate_user(db, token)
        return ActivationResponse(message="Account activated", id=user_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error activating user: {e}")
        raise internal_error() from e


@router.get("/me", response_model=UserResponse, summary="Current User")
async def get_me(
    user: UserPrincipal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    try:
        return UserResponse.model_validate(await UserRepository.get_by_id(db, user.id))
    except Exception as e:
        logger.exception(f"Error loading user {user.id}: {e}")
        raise internal_error() from e
