"""Role listing endpoint."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import AdminPrincipal, get_current_admin
from bursary.core.database import get_db
from bursary.core.exceptions import internal_error
from bursary.modules.roles.repository import RoleRepository
from bursary.modules.roles.schemas import RoleListResponse, RoleResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=RoleListResponse,
    summary="List Roles",
    description="Roles at or below the caller's level. Higher roles are never shown.",
)
async def list_roles(
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> RoleListResponse:
    try:
        roles = await RoleRepository.list_up_to_level(db, admin.role_level)
    except Exception as e:
        logger.exception(f"Error listing roles for admin {admin.id}: {e}")
        raise internal_error() from e
    return RoleListResponse(roles=[RoleResponse.model_validate(role) for role in roles])
