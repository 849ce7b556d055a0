"""
Admin Accounts Router

Endpoints:
- POST /admins - Create an admin (caller must outrank or equal the role)
- GET /admins - List admins at or below the caller's level
- GET /admins/me - The caller's own account
- GET /admins/activate/{token} - Activate an account from its invitation
- GET /admins/{id} - One admin (own account always visible)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import AdminPrincipal, get_current_admin
from bursary.core.database import get_db
from bursary.core.exceptions import ServiceError, internal_error, to_http_exception
from bursary.modules.admins import service
from bursary.modules.admins.schemas import (
    ActivationResponse,
    AdminCreateRequest,
    AdminListResponse,
    AdminResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=AdminResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Admin",
    description="""
Create an admin account and email an activation link.

When `password` is omitted a temporary password is generated and included
in the invitation email. If the email cannot be delivered the account is
removed again and a 500 `EMAIL_DELIVERY_FAILED` is returned.

**Access:** admins whose level is at least the requested role's level
""",
    responses={
        201: {"description": "Admin created, invitation sent"},
        403: {"description": "Requested role outranks the caller"},
        404: {"description": "Unknown role"},
        409: {"description": "Email already registered"},
        500: {"description": "Invitation email could not be delivered"},
    },
)
async def create_admin(
    payload: AdminCreateRequest,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> AdminResponse:
    try:
        created = await service.create_admin(db, admin, payload)
        return AdminResponse.model_validate(created)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error creating admin: {e}")
        raise internal_error() from e


@router.get("", response_model=AdminListResponse, summary="List Admins")
async def list_admins(
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> AdminListResponse:
    """Admins whose role level does not exceed the caller's."""
    try:
        admins = await service.list_admins(db, admin)
    except Exception as e:
        logger.exception(f"Error listing admins for {admin.id}: {e}")
        raise internal_error() from e
    return AdminListResponse(
        admins=[AdminResponse.model_validate(a) for a in admins],
        total=len(admins),
    )


@router.get("/me", response_model=AdminResponse, summary="Current Admin")
async def get_me(
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> AdminResponse:
    try:
        return AdminResponse.model_validate(await service.get_admin(db, admin, admin.id))
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error loading current account: {e}")
        raise internal_error() from e


@router.get(
    "/activate/{token}",
    response_model=ActivationResponse,
    summary="Activate Admin Account",
    description="""
Consume an invitation token. A token works once; a second call, an unknown
token and an expired token all return 404 `INVALID_TOKEN`.
""",
)
async def activate_admin(
    token: str,
    db: AsyncSession = Depends(get_db),
) -> ActivationResponse:
    try:
        admin_id = await service.activate_admin(db, token)
        return ActivationResponse(message="Account activated", id=admin_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error activating admin: {e}")
        raise internal_error() from e


@router.get("/{admin_id}", response_model=AdminResponse, summary="Get Admin")
async def get_admin(
    admin_id: UUID,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> AdminResponse:
    try:
        return AdminResponse.model_validate(await service.get_admin(db, admin, admin_id))
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error loading admin {admin_id}: {e}")
        raise internal_error() from e
