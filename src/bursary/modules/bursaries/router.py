"""
Student Bursaries Router

Endpoints:
- GET /students/bursaries - Browse bursaries
- GET /students/bursaries/{id} - A bursary with the caller's applications to it
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import StudentPrincipal, get_current_student
from bursary.core.database import get_db
from bursary.core.exceptions import ServiceError, internal_error, to_http_exception
from bursary.modules.bursaries import service
from bursary.modules.bursaries.admin_router import bursary_query, to_list_response
from bursary.modules.bursaries.schemas import (
    BursaryListResponse,
    BursaryQuery,
    BursaryResponse,
    StudentBursaryApplication,
    StudentBursaryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=BursaryListResponse, summary="Browse Bursaries")
async def list_bursaries(
    query: BursaryQuery = Depends(bursary_query),
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> BursaryListResponse:
    try:
        return to_list_response(await service.list_bursaries(db, query), query)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing bursaries: {e}")
        raise internal_error() from e


@router.get("/{bursary_id}", response_model=StudentBursaryResponse, summary="Bursary Detail")
async def get_bursary(
    bursary_id: UUID,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> StudentBursaryResponse:
    try:
        bursary, rows = await service.get_bursary_for_student(db, student, bursary_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error loading bursary {bursary_id}: {e}")
        raise internal_error() from e
    return StudentBursaryResponse(
        bursary=BursaryResponse.model_validate(bursary),
        applications=[StudentBursaryApplication.model_validate(application) for application, _ in rows],
    )
