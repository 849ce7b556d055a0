"""
Bursaries Admin Router

Endpoints:
- GET /bursaries - Paginated, filtered listing
- GET /bursaries/{id} - One bursary
- POST /bursaries - Create (county level and up)
- PUT /bursaries/{id} - Partial update (county level and up)
"""

import logging
from datetime import datetime
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import AdminPrincipal, get_current_admin, require_role
from bursary.core.database import get_db
from bursary.core.exceptions import (
    ServiceError,
    ValidationError,
    internal_error,
    to_http_exception,
)
from bursary.modules.bursaries import service
from bursary.modules.bursaries.models import AllocationType
from bursary.modules.bursaries.schemas import (
    MAX_PAGE_SIZE,
    BursaryCreate,
    BursaryListResponse,
    BursaryQuery,
    BursaryResponse,
    BursaryUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MANAGE_ROLE = "county"


def bursary_query(
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    offset: int = Query(0, ge=0, description="Records to skip"),
    sort: Literal["asc", "desc"] = Query("desc", description="Order by creation time"),
    search: str | None = Query(None, min_length=1, max_length=100),
    allocation_type: AllocationType | None = Query(None),
    since: datetime | None = Query(None, description="Created at or after"),
    until: datetime | None = Query(None, description="Created at or before"),
) -> BursaryQuery:
    """Collect listing query parameters. Shared with the student router."""
    try:
        return BursaryQuery(
            limit=limit,
            offset=offset,
            sort=sort,
            search=search,
            allocation_type=allocation_type,
            since=since,
            until=until,
        )
    except PydanticValidationError as e:
        raise to_http_exception(ValidationError(str(e))) from e


def to_list_response(result: dict, query: BursaryQuery) -> BursaryListResponse:
    return BursaryListResponse(
        bursaries=[BursaryResponse.model_validate(b) for b in result["bursaries"]],
        total_items=result["total_items"],
        limit=query.limit,
        offset=query.offset,
    )


@router.get(
    "",
    response_model=BursaryListResponse,
    summary="List Bursaries",
    description="""
**Filters:**
- `search`: case-insensitive match on name or description
- `allocation_type`: `fixed` or `variable`
- `since` / `until`: creation time bounds

**Pagination:** `limit` (1-170, default 20), `offset`, `sort` (asc/desc, default desc)
""",
)
async def list_bursaries(
    query: BursaryQuery = Depends(bursary_query),
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> BursaryListResponse:
    try:
        return to_list_response(await service.list_bursaries(db, query), query)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing bursaries: {e}")
        raise internal_error() from e


@router.get("/{bursary_id}", response_model=BursaryResponse, summary="Get Bursary")
async def get_bursary(
    bursary_id: UUID,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> BursaryResponse:
    try:
        return BursaryResponse.model_validate(await service.get_bursary(db, bursary_id))
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error loading bursary {bursary_id}: {e}")
        raise internal_error() from e


@router.post(
    "",
    response_model=BursaryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Bursary",
)
async def create_bursary(
    payload: BursaryCreate,
    admin: AdminPrincipal = Depends(require_role(MANAGE_ROLE)),
    db: AsyncSession = Depends(get_db),
) -> BursaryResponse:
    try:
        return BursaryResponse.model_validate(await service.create_bursary(db, admin, payload))
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error creating bursary: {e}")
        raise internal_error() from e


@router.put("/{bursary_id}", response_model=BursaryResponse, summary="Update Bursary")
async def update_bursary(
    bursary_id: UUID,
    payload: BursaryUpdate,
    admin: AdminPrincipal = Depends(require_role(MANAGE_ROLE)),
    db: AsyncSession = Depends(get_db),
) -> BursaryResponse:
    try:
        bursary = await service.update_bursary(db, admin, bursary_id, payload)
        return BursaryResponse.model_validate(bursary)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error updating bursary {bursary_id}: {e}")
        raise internal_error() from e
