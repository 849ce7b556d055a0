"""
Students Router

Endpoints:
- POST /students/register - Public self-registration
- GET /students/activate/{token} - Activate from the invitation link
- GET /students/me - The caller's account
- GET|PUT /students/me/personal - Personal details section
- GET|PUT /students/me/institution - Institution details section
- GET|PUT /students/me/sponsor - Sponsor section
- GET|PUT /students/me/emergency - Emergency contact section
- GET|POST /students/me/guardians - List or add guardians
- PUT|DELETE /students/me/guardians/{guardian_id} - Update or remove a guardian
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import StudentPrincipal, get_current_student
from bursary.core.database import get_db
from bursary.core.exceptions import ServiceError, internal_error, to_http_exception
from bursary.core.rate_limit import rate_limit
from bursary.modules.students import service
from bursary.modules.students.repository import StudentRepository
from bursary.modules.students.schemas import (
    ActivationResponse,
    EmergencySection,
    EmergencySectionResponse,
    GuardianListResponse,
    GuardianSection,
    GuardianSectionResponse,
    InstitutionSection,
    InstitutionSectionResponse,
    PersonalSection,
    PersonalSectionResponse,
    SponsorSection,
    SponsorSectionResponse,
    StudentRegisterRequest,
    StudentResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_REGISTER = (5, 60 * 60)  # 5 registrations per hour per address


@router.post(
    "/register",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("student_register", *RATE_LIMIT_REGISTER))],
    summary="Register Student",
    description="""
Create a student account and email an activation link (valid 72 hours).

If the email cannot be delivered the account is removed again and a 500
`EMAIL_DELIVERY_FAILED` is returned, so the same email can register again.
""",
    responses={
        201: {"description": "Account created, activation email sent"},
        409: {"description": "Email already registered"},
        429: {"description": "Too many registrations from this address"},
        500: {"description": "Activation email could not be delivered"},
    },
)
async def register_student(
    payload: StudentRegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        student = await service.register_student(db, payload)
        return StudentResponse.model_validate(student)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error registering student: {e}")
        raise internal_error() from e


@router.get(
    "/activate/{token}",
    response_model=ActivationResponse,
    summary="Activate Student Account",
    description="Single use. Unknown, used and expired tokens all return 404 `INVALID_TOKEN`.",
)
async def activate_student(
    token: str,
    db: AsyncSession = Depends(get_db),
) -> ActivationResponse:
    try:
        student_id = await service.activate_student(db, token)
        return ActivationResponse(message="Account activated", id=student_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error activating student: {e}")
        raise internal_error() from e


@router.get("/me", response_model=StudentResponse, summary="Current Student")
async def get_me(
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        return StudentResponse.model_validate(await StudentRepository.get_by_id(db, student.id))
    except Exception as e:
        logger.exception(f"Error loading student {student.id}: {e}")
        raise internal_error() from e


# ============================================
# Profile sections
# ============================================


@router.get("/me/personal", response_model=PersonalSectionResponse, summary="Personal Details")
async def get_personal(
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> PersonalSectionResponse:
    try:
        return PersonalSectionResponse.model_validate(await service.get_personal(db, student))
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error loading personal details for student {student.id}: {e}")
        raise internal_error() from e


@router.put(
    "/me/personal",
    response_model=PersonalSectionResponse,
    summary="Save Personal Details",
)
async def save_personal(
    payload: PersonalSection,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> PersonalSectionResponse:
    try:
        record = await service.save_personal(db, student, payload)
        return PersonalSectionResponse.model_validate(record)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error saving personal details for student {student.id}: {e}")
        raise internal_error() from e


@router.get(
    "/me/institution",
    response_model=InstitutionSectionResponse,
    summary="Institution Details",
)
async def get_institution(
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> InstitutionSectionResponse:
    try:
        return InstitutionSectionResponse.model_validate(
            await service.get_institution(db, student)
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error loading institution details for student {student.id}: {e}")
        raise internal_error() from e


@router.put(
    "/me/institution",
    response_model=InstitutionSectionResponse,
    summary="Save Institution Details",
)
async def save_institution(
    payload: InstitutionSection,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> InstitutionSectionResponse:
    try:
        record = await service.save_institution(db, student, payload)
        return InstitutionSectionResponse.model_validate(record)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error saving institution details for student {student.id}: {e}")
        raise internal_error() from e


@router.get("/me/sponsor", response_model=SponsorSectionResponse, summary="Sponsor Details")
async def get_sponsor(
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> SponsorSectionResponse:
    try:
        return SponsorSectionResponse.model_validate(await service.get_sponsor(db, student))
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error loading sponsor details for student {student.id}: {e}")
        raise internal_error() from e


@router.put("/me/sponsor", response_model=SponsorSectionResponse, summary="Save Sponsor Details")
async def save_sponsor(
    payload: SponsorSection,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> SponsorSectionResponse:
    try:
        record = await service.save_sponsor(db, student, payload)
        return SponsorSectionResponse.model_validate(record)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error saving sponsor details for student {student.id}: {e}")
        raise internal_error() from e


@router.get(
    "/me/emergency",
    response_model=EmergencySectionResponse,
    summary="Emergency Contact",
)
async def get_emergency(
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> EmergencySectionResponse:
    try:
        return EmergencySectionResponse.model_validate(await service.get_emergency(db, student))
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error loading emergency contact for student {student.id}: {e}")
        raise internal_error() from e


@router.put(
    "/me/emergency",
    response_model=EmergencySectionResponse,
    summary="Save Emergency Contact",
)
async def save_emergency(
    payload: EmergencySection,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> EmergencySectionResponse:
    try:
        record = await service.save_emergency(db, student, payload)
        return EmergencySectionResponse.model_validate(record)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error saving emergency contact for student {student.id}: {e}")
        raise internal_error() from e


# ============================================
# Guardians
# ============================================


@router.get("/me/guardians", response_model=GuardianListResponse, summary="Guardians")
async def list_guardians(
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> GuardianListResponse:
    try:
        guardians = await service.list_guardians(db, student)
        return GuardianListResponse(
            guardians=[GuardianSectionResponse.model_validate(g) for g in guardians],
            total=len(guardians),
        )
    except Exception as e:
        logger.exception(f"Error listing guardians for student {student.id}: {e}")
        raise internal_error() from e


@router.post(
    "/me/guardians",
    response_model=GuardianSectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Guardian",
)
async def add_guardian(
    payload: GuardianSection,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> GuardianSectionResponse:
    try:
        guardian = await service.add_guardian(db, student, payload)
        return GuardianSectionResponse.model_validate(guardian)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error adding guardian for student {student.id}: {e}")
        raise internal_error() from e


@router.put(
    "/me/guardians/{guardian_id}",
    response_model=GuardianSectionResponse,
    summary="Update Guardian",
    responses={404: {"description": "No such guardian on the caller's profile"}},
)
async def update_guardian(
    guardian_id: UUID,
    payload: GuardianSection,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> GuardianSectionResponse:
    try:
        guardian = await service.update_guardian(db, student, guardian_id, payload)
        return GuardianSectionResponse.model_validate(guardian)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error updating guardian {guardian_id}: {e}")
        raise internal_error() from e


@router.delete(
    "/me/guardians/{guardian_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Guardian",
    responses={404: {"description": "No such guardian on the caller's profile"}},
)
async def delete_guardian(
    guardian_id: UUID,
    student: StudentPrincipal = Depends(get_current_student),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_guardian(db, student, guardian_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error deleting guardian {guardian_id}: {e}")
        raise internal_error() from e
