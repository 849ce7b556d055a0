"""
Student Repository

Student account reads, the one-per-student section upserts and the
guardian list. Guardian statements are always scoped to the owning student.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.modules.students.models import (
    Student,
    StudentEmergency,
    StudentGuardian,
    StudentInstitution,
    StudentPersonal,
    StudentSponsor,
)

logger = logging.getLogger(__name__)

ProfileSection = (
    type[StudentPersonal]
    | type[StudentInstitution]
    | type[StudentSponsor]
    | type[StudentEmergency]
)


class StudentRepository:
    """Repository for student database operations."""

    @staticmethod
    async def get_by_id(db: AsyncSession, student_id: UUID) -> Student | None:
        result = await db.execute(
            select(Student)
            .where(Student.id == student_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Student | None:
        result = await db.execute(
            select(Student).where(func.lower(Student.email) == email.lower())
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_section(db: AsyncSession, section: ProfileSection, student_id: UUID):
        result = await db.execute(select(section).where(section.student_id == student_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def upsert_section(
        db: AsyncSession,
        section: ProfileSection,
        student_id: UUID,
        values: dict[str, Any],
    ):
        """
        Create the student's row for ``section`` or overwrite its fields.

        Flushes and refreshes; the caller commits.
        """
        record = await StudentRepository.get_section(db, section, student_id)
        if record is None:
            record = section(student_id=student_id, **values)
            db.add(record)
        else:
            for field, value in values.items():
                setattr(record, field, value)
        await db.flush()
        await db.refresh(record)
        return record

    # ============================================
    # Guardians
    # ============================================

    @staticmethod
    async def list_guardians(db: AsyncSession, student_id: UUID) -> list[StudentGuardian]:
        result = await db.execute(
            select(StudentGuardian)
            .where(StudentGuardian.student_id == student_id)
            .order_by(StudentGuardian.created_at, StudentGuardian.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_guardian(
        db: AsyncSession, student_id: UUID, guardian_id: UUID
    ) -> StudentGuardian | None:
        result = await db.execute(
            select(StudentGuardian).where(
                StudentGuardian.id == guardian_id,
                StudentGuardian.student_id == student_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def add_guardian(
        db: AsyncSession, student_id: UUID, values: dict[str, Any]
    ) -> StudentGuardian:
        guardian = StudentGuardian(student_id=student_id, **values)
        db.add(guardian)
        await db.flush()
        await db.refresh(guardian)
        return guardian

    @staticmethod
    async def update_guardian(
        db: AsyncSession, guardian: StudentGuardian, values: dict[str, Any]
    ) -> StudentGuardian:
        for field, value in values.items():
            setattr(guardian, field, value)
        await db.flush()
        await db.refresh(guardian)
        return guardian

    @staticmethod
    async def delete_guardian(db: AsyncSession, student_id: UUID, guardian_id: UUID) -> int:
        """Returns the number of guardians deleted (0 when not owned or absent)."""
        result = await db.execute(
            delete(StudentGuardian).where(
                StudentGuardian.id == guardian_id,
                StudentGuardian.student_id == student_id,
            )
        )
        return result.rowcount
