"""
Applications Review Router

API endpoints for reviewers moving applications through the pipeline.
The acting role always comes from the authenticated admin, never from the
request body.

Endpoints:
- GET /applications - The caller's review queue
- GET /applications/all - Every active application (finance level and up)
- GET /applications/{id} - Application with bursary, student and profile
- POST /applications/approve - Advance one application
- POST /applications/approve/bulk - Advance several applications
- POST /applications/reject - Record rejection remarks

Security:
- All endpoints require a valid admin JWT
- Approve/reject require a role mapped in the stage machine (403 otherwise)
- Rate limiting on action endpoints
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import Row
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import AdminPrincipal, get_current_admin, require_role
from bursary.core.database import get_db
from bursary.core.exceptions import ServiceError, internal_error, to_http_exception
from bursary.core.rate_limit import RateLimitExceeded, check_rate_limit
from bursary.modules.applications import service
from bursary.modules.applications.schemas import (
    ApplicationActionResponse,
    ApplicationDetailResponse,
    ApplicationListItem,
    ApplicationListResponse,
    ApplicationResponse,
    ApproveRequest,
    BulkApproveRequest,
    BulkApproveResponse,
    BursarySummary,
    RejectRequest,
    StudentSummary,
)
from bursary.modules.bursaries.schemas import BursaryResponse
from bursary.modules.students.schemas import (
    InstitutionSectionResponse,
    PersonalSectionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Rate Limiting Configuration
# ============================================

RATE_LIMIT_APPROVE = (60, 60)  # 60 approvals per minute
RATE_LIMIT_BULK_APPROVE = (10, 60)
RATE_LIMIT_REJECT = (30, 60)


async def _check_admin_rate_limit(
    admin: AdminPrincipal,
    action: str,
    limit: int,
    window_seconds: int,
) -> None:
    if not await check_rate_limit(f"admin:{action}:{admin.id}", limit, window_seconds):
        logger.warning(f"Rate limit exceeded for admin {admin.id} on action '{action}'")
        raise RateLimitExceeded(limit, window_seconds)


# ============================================
# Helper Functions
# ============================================


def _to_list_item(row: Row) -> ApplicationListItem:
    application, bursary, student = row
    return ApplicationListItem(
        application=ApplicationResponse.model_validate(application),
        bursary=BursarySummary.model_validate(bursary),
        student=StudentSummary.model_validate(student),
    )


def _to_detail(row: Row) -> ApplicationDetailResponse:
    application, bursary, student, personal, institution = row
    return ApplicationDetailResponse(
        application=ApplicationResponse.model_validate(application),
        bursary=BursaryResponse.model_validate(bursary),
        student=StudentSummary.model_validate(student),
        personal=PersonalSectionResponse.model_validate(personal) if personal else None,
        institution=InstitutionSectionResponse.model_validate(institution)
        if institution
        else None,
    )


# ============================================
# Read Endpoints
# ============================================


@router.get(
    "",
    response_model=ApplicationListResponse,
    summary="Review Queue",
    description="""
Active applications waiting for the caller's role:

| role | stage listed |
|---|---|
| ward | submitted |
| county | county |
| finance-assistant | ministry |
| finance | finance |

Other roles get an empty list. Withdrawn applications never appear.
""",
)
async def list_review_queue(
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> ApplicationListResponse:
    try:
        rows = await service.list_review_queue(db, admin)
        return ApplicationListResponse(
            applications=[_to_list_item(row) for row in rows],
            total=len(rows),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing review queue: {e}")
        raise internal_error() from e


@router.get(
    "/all",
    response_model=ApplicationListResponse,
    summary="All Applications",
    description="Every active application at any stage. **Access:** finance level or higher.",
)
async def list_all_applications(
    admin: AdminPrincipal = Depends(require_role("finance")),
    db: AsyncSession = Depends(get_db),
) -> ApplicationListResponse:
    try:
        rows = await service.list_all_applications(db)
        return ApplicationListResponse(
            applications=[_to_list_item(row) for row in rows],
            total=len(rows),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing all applications: {e}")
        raise internal_error() from e


# ============================================
# Action Endpoints
# ============================================


@router.post(
    "/approve",
    response_model=ApplicationActionResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Approve Application",
    description="""
Move an application to the stage mapped from the caller's role:
ward → county, county → ministry, finance-assistant → finance,
finance → disbursed.

**Errors:**
- 403 `ROLE_CANNOT_APPROVE`: the caller's role is not a pipeline reviewer
- 404 `APPLICATION_NOT_FOUND`: unknown or withdrawn application
- 409 `STAGE_CONFLICT`: another reviewer changed the stage concurrently
- 409 `STAGE_MISMATCH`: strict ordering enabled and the application is not
  in the caller's queue
""",
)
async def approve_application(
    payload: ApproveRequest,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> ApplicationActionResponse:
    await _check_admin_rate_limit(admin, "approve", *RATE_LIMIT_APPROVE)
    try:
        application = await service.approve_application(db, admin, payload.id)
        return ApplicationActionResponse(
            message="Application approved",
            application=ApplicationResponse.model_validate(application),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error approving application {payload.id}: {e}")
        raise internal_error() from e


@router.post(
    "/approve/bulk",
    response_model=BulkApproveResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Approve Applications",
    description="Approve each listed application independently; failures are reported per ID.",
)
async def approve_applications(
    payload: BulkApproveRequest,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> BulkApproveResponse:
    await _check_admin_rate_limit(admin, "bulk_approve", *RATE_LIMIT_BULK_APPROVE)
    try:
        result = await service.approve_applications(db, admin, payload.ids)
        return BulkApproveResponse.model_validate(result)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error bulk approving applications: {e}")
        raise internal_error() from e


@router.post(
    "/reject",
    response_model=ApplicationActionResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Reject Application",
    description="Record rejection remarks. The application's stage is not changed.",
)
async def reject_application(
    payload: RejectRequest,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> ApplicationActionResponse:
    await _check_admin_rate_limit(admin, "reject", *RATE_LIMIT_REJECT)
    try:
        application = await service.reject_application(db, admin, payload.id, payload.remarks)
        return ApplicationActionResponse(
            message="Application rejected",
            application=ApplicationResponse.model_validate(application),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error rejecting application {payload.id}: {e}")
        raise internal_error() from e


@router.get(
    "/{application_id}",
    response_model=ApplicationDetailResponse,
    summary="Application Detail",
)
async def get_application(
    application_id: UUID,
    admin: AdminPrincipal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> ApplicationDetailResponse:
    try:
        return _to_detail(await service.get_application_detail(db, application_id))
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error loading application {application_id}: {e}")
        raise internal_error() from e
