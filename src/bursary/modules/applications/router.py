"""
Student Applications Router

Endpoints:
- POST /students/applications - Apply to a bursary
- PUT /students/applications - Withdraw from a bursary
- GET /students/applications - Own active applications
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import StudentPrincipal, get_current_student
from bursary.core.database import get_db
from bursary.core.exceptions import ServiceError, internal_error, to_http_exception
from bursary.modules.applications import service
from bursary.modules.applications.schemas import (
    ApplicationCreateRequest,
    ApplicationResponse,
    StudentApplicationItem,
    StudentApplicationListResponse,
    WithdrawRequest,
    WithdrawResponse,
)
from bursary.modules.bursaries.schemas import BursaryResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply",
    responses={
        201: {"description": "Application submitted"},
        404: {"description": "Bursary not found"},
        409: {"description": "Active application to this bursary already exists"},
    },
)
async def create_application(
    payload: ApplicationCreateRequest,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        application = await service.create_application(db, student, payload.bursary_id)
        return ApplicationResponse.model_validate(application)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error creating application: {e}")
        raise internal_error() from e


@router.put(
    "",
    response_model=WithdrawResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Withdraw",
    description="Withdraw every active application the caller has made to the bursary.",
)
async def withdraw_application(
    payload: WithdrawRequest,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> WithdrawResponse:
    try:
        withdrawn = await service.withdraw_application(db, student, payload.bursary_id)
        return WithdrawResponse(message="Application withdrawn", withdrawn=withdrawn)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error withdrawing applications to bursary {payload.bursary_id}: {e}")
        raise internal_error() from e


@router.get("", response_model=StudentApplicationListResponse, summary="My Applications")
async def list_my_applications(
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> StudentApplicationListResponse:
    try:
        rows = await service.list_student_applications(db, student)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing applications for student {student.id}: {e}")
        raise internal_error() from e
    return StudentApplicationListResponse(
        applications=[
            StudentApplicationItem(
                application=ApplicationResponse.model_validate(application),
                bursary=BursaryResponse.model_validate(bursary),
            )
            for application, bursary in rows
        ],
        total=len(rows),
    )
