"""
Student Service

Student self-registration, activation and profile sections. Sections
other than guardians are one row per student and saved as upserts.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import StudentPrincipal
from bursary.core.database import transaction
from bursary.core.email import send_student_invitation
from bursary.core.exceptions import NotFoundError
from bursary.modules.onboarding import service as onboarding
from bursary.modules.onboarding.kinds import STUDENT
from bursary.modules.roles.repository import RoleRepository
from bursary.modules.students.models import (
    Student,
    StudentEmergency,
    StudentGuardian,
    StudentInstitution,
    StudentPersonal,
    StudentSponsor,
)
from bursary.modules.students.repository import StudentRepository
from bursary.modules.students.schemas import (
    EmergencySection,
    GuardianSection,
    InstitutionSection,
    PersonalSection,
    SponsorSection,
    StudentRegisterRequest,
)

logger = logging.getLogger(__name__)

STUDENT_ROLE = "student"


async def _deliver_invitation(student: Student, token: str) -> bool:
    return await send_student_invitation(
        to_email=student.email,
        student_name=student.full_name,
        token=token,
    )


async def register_student(db: AsyncSession, payload: StudentRegisterRequest) -> Student:
    """
    Register a student and email the activation link.

    Raises:
        EmailAlreadyRegisteredError: Email already belongs to a student
        NotificationDeliveryError: Invitation email failed; nothing persisted
    """
    role = await RoleRepository.get_by_name(db, STUDENT_ROLE)
    student = await onboarding.register_and_invite(
        db,
        STUDENT,
        email=payload.email,
        password=payload.password,
        deliver=_deliver_invitation,
        first_name=payload.first_name,
        middle_name=payload.middle_name,
        last_name=payload.last_name,
        role_id=role.id,
    )
    logger.info(f"Student {student.id} registered")
    return student


async def activate_student(db: AsyncSession, token: str) -> UUID:
    return await onboarding.activate(db, STUDENT, token)


async def get_personal(db: AsyncSession, student: StudentPrincipal) -> StudentPersonal:
    record = await StudentRepository.get_section(db, StudentPersonal, student.id)
    if record is None:
        raise NotFoundError("Personal details have not been filled in.", "SECTION_NOT_FOUND")
    return record


async def save_personal(
    db: AsyncSession,
    student: StudentPrincipal,
    payload: PersonalSection,
) -> StudentPersonal:
    async with transaction(db, "save_personal"):
        record = await StudentRepository.upsert_section(
            db, StudentPersonal, student.id, payload.model_dump()
        )
    logger.info(f"Student {student.id} saved personal details")
    return record


async def get_institution(db: AsyncSession, student: StudentPrincipal) -> StudentInstitution:
    record = await StudentRepository.get_section(db, StudentInstitution, student.id)
    if record is None:
        raise NotFoundError("Institution details have not been filled in.", "SECTION_NOT_FOUND")
    return record


async def save_institution(
    db: AsyncSession,
    student: StudentPrincipal,
    payload: InstitutionSection,
) -> StudentInstitution:
    async with transaction(db, "save_institution"):
        record = await StudentRepository.upsert_section(
            db, StudentInstitution, student.id, payload.model_dump()
        )
    logger.info(f"Student {student.id} saved institution details")
    return record


async def get_sponsor(db: AsyncSession, student: StudentPrincipal) -> StudentSponsor:
    record = await StudentRepository.get_section(db, StudentSponsor, student.id)
    if record is None:
        raise NotFoundError("Sponsor details have not been filled in.", "SECTION_NOT_FOUND")
    return record


async def save_sponsor(
    db: AsyncSession,
    student: StudentPrincipal,
    payload: SponsorSection,
) -> StudentSponsor:
    async with transaction(db, "save_sponsor"):
        record = await StudentRepository.upsert_section(
            db, StudentSponsor, student.id, payload.model_dump()
        )
    logger.info(f"Student {student.id} saved sponsor details")
    return record


async def get_emergency(db: AsyncSession, student: StudentPrincipal) -> StudentEmergency:
    record = await StudentRepository.get_section(db, StudentEmergency, student.id)
    if record is None:
        raise NotFoundError("Emergency contact has not been filled in.", "SECTION_NOT_FOUND")
    return record


async def save_emergency(
    db: AsyncSession,
    student: StudentPrincipal,
    payload: EmergencySection,
) -> StudentEmergency:
    async with transaction(db, "save_emergency"):
        record = await StudentRepository.upsert_section(
            db, StudentEmergency, student.id, payload.model_dump()
        )
    logger.info(f"Student {student.id} saved emergency contact")
    return record


# ============================================
# Guardians
# ============================================


def _guardian_not_found() -> NotFoundError:
    return NotFoundError("Guardian not found.", "GUARDIAN_NOT_FOUND")


async def list_guardians(db: AsyncSession, student: StudentPrincipal) -> list[StudentGuardian]:
    return await StudentRepository.list_guardians(db, student.id)


async def add_guardian(
    db: AsyncSession,
    student: StudentPrincipal,
    payload: GuardianSection,
) -> StudentGuardian:
    async with transaction(db, "add_guardian"):
        guardian = await StudentRepository.add_guardian(db, student.id, payload.model_dump())
    logger.info(f"Student {student.id} added guardian {guardian.id}")
    return guardian


async def update_guardian(
    db: AsyncSession,
    student: StudentPrincipal,
    guardian_id: UUID,
    payload: GuardianSection,
) -> StudentGuardian:
    """
    Overwrite one of the caller's guardians.

    Raises:
        NotFoundError: No guardian with that id belongs to the caller
    """
    async with transaction(db, "update_guardian"):
        guardian = await StudentRepository.get_guardian(db, student.id, guardian_id)
        if guardian is None:
            raise _guardian_not_found()
        guardian = await StudentRepository.update_guardian(db, guardian, payload.model_dump())
    logger.info(f"Student {student.id} updated guardian {guardian_id}")
    return guardian


async def delete_guardian(db: AsyncSession, student: StudentPrincipal, guardian_id: UUID) -> None:
    """
    Raises:
        NotFoundError: No guardian with that id belongs to the caller
    """
    async with transaction(db, "delete_guardian"):
        if await StudentRepository.delete_guardian(db, student.id, guardian_id) == 0:
            raise _guardian_not_found()
    logger.info(f"Student {student.id} deleted guardian {guardian_id}")
