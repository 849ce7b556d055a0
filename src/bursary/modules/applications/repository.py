"""
Applications Repository

Database operations for bursary applications.

Every read and every stage write excludes withdrawn rows
(``soft_delete = true``). Functions flush or execute only; the service
owns the transaction.
"""

import logging
from uuid import UUID

from sqlalchemy import Row, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.modules.applications.models import Application, ApplicationStage
from bursary.modules.bursaries.models import Bursary
from bursary.modules.students.models import Student, StudentInstitution, StudentPersonal

logger = logging.getLogger(__name__)

_ACTIVE = Application.soft_delete.is_(False)


async def create(db: AsyncSession, bursary_id: UUID, student_id: UUID) -> Application:
    application = Application(
        bursary_id=bursary_id,
        student_id=student_id,
        stage=ApplicationStage.SUBMITTED,
        soft_delete=False,
    )
    db.add(application)
    await db.flush()
    await db.refresh(application)
    return application


async def has_active(db: AsyncSession, student_id: UUID, bursary_id: UUID) -> bool:
    result = await db.execute(
        select(Application.id)
        .where(
            Application.student_id == student_id,
            Application.bursary_id == bursary_id,
            _ACTIVE,
        )
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def withdraw(db: AsyncSession, student_id: UUID, bursary_id: UUID) -> int:
    """
    Soft-delete every active application of ``student_id`` to ``bursary_id``.

    Returns:
        Number of applications withdrawn
    """
    result = await db.execute(
        update(Application)
        .where(
            Application.student_id == student_id,
            Application.bursary_id == bursary_id,
            _ACTIVE,
        )
        .values(soft_delete=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def get_active(db: AsyncSession, application_id: UUID) -> Application | None:
    result = await db.execute(
        select(Application)
        .where(Application.id == application_id, _ACTIVE)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def set_stage(
    db: AsyncSession,
    application_id: UUID,
    current: ApplicationStage,
    target: ApplicationStage,
) -> int:
    """
    Move an application from ``current`` to ``target``.

    The ``stage = current`` precondition makes concurrent approvals of the
    same application detectable: whoever writes second updates nothing.

    Returns:
        1 if the stage was written, 0 if the row changed or was withdrawn
    """
    result = await db.execute(
        update(Application)
        .where(
            Application.id == application_id,
            Application.stage == current,
            _ACTIVE,
        )
        .values(stage=target)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def set_remarks(db: AsyncSession, application_id: UUID, remarks: str | None) -> int:
    result = await db.execute(
        update(Application)
        .where(Application.id == application_id, _ACTIVE)
        .values(remarks=remarks)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


# ============================================
# Query layer
# ============================================


def _with_bursary_and_student():
    return (
        select(Application, Bursary, Student)
        .join(Bursary, Application.bursary_id == Bursary.id)
        .join(Student, Application.student_id == Student.id)
        .where(_ACTIVE)
    )


async def list_by_stage(db: AsyncSession, stage: ApplicationStage) -> list[Row]:
    """Active applications at ``stage``, oldest first, with bursary and student."""
    result = await db.execute(
        _with_bursary_and_student()
        .where(Application.stage == stage)
        .order_by(Application.created_at, Application.id)
    )
    return list(result.all())


async def list_all(db: AsyncSession) -> list[Row]:
    result = await db.execute(
        _with_bursary_and_student().order_by(Application.created_at, Application.id)
    )
    return list(result.all())


async def list_for_student(
    db: AsyncSession,
    student_id: UUID,
    bursary_id: UUID | None = None,
) -> list[Row]:
    """A student's active applications with their bursaries, newest first."""
    stmt = (
        select(Application, Bursary)
        .join(Bursary, Application.bursary_id == Bursary.id)
        .where(Application.student_id == student_id, _ACTIVE)
    )
    if bursary_id is not None:
        stmt = stmt.where(Application.bursary_id == bursary_id)
    result = await db.execute(stmt.order_by(Application.created_at.desc(), Application.id))
    return list(result.all())


async def get_detail(db: AsyncSession, application_id: UUID) -> Row | None:
    """
    One active application joined with its bursary, student and the
    student's personal and institution sections (either may be missing).
    """
    result = await db.execute(
        select(Application, Bursary, Student, StudentPersonal, StudentInstitution)
        .join(Bursary, Application.bursary_id == Bursary.id)
        .join(Student, Application.student_id == Student.id)
        .outerjoin(StudentPersonal, StudentPersonal.student_id == Student.id)
        .outerjoin(StudentInstitution, StudentInstitution.student_id == Student.id)
        .where(Application.id == application_id, _ACTIVE)
        .execution_options(populate_existing=True)
    )
    return result.one_or_none()
