"""
Applications Service Layer

Business logic for bursary applications.

This module implements:
1. Student side:
   - Apply to a bursary (stage ``submitted``), optionally refusing a second
     active application to the same bursary
   - Withdraw: soft-delete every active application to a bursary
   - List own applications

2. Review side:
   - Review queue: active applications at the stage the caller's role works on
   - Approve: stage computed by the ``StageMachine`` from the caller's role,
     written with a ``stage = current`` precondition
   - Bulk approve: each application approved in its own transaction
   - Reject: remarks recorded, stage left unchanged

Every operation takes the acting principal as an argument.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import Row
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import AdminPrincipal, StudentPrincipal
from bursary.core.config import settings
from bursary.core.database import bounded, transaction
from bursary.core.exceptions import (
    DuplicateApplicationError,
    NotFoundError,
    ServiceError,
    StageConflictError,
)
from bursary.modules.applications import repository
from bursary.modules.applications.models import Application
from bursary.modules.applications.workflow import StageMachine, default_stage_machine
from bursary.modules.bursaries import repository as bursary_repository

logger = logging.getLogger(__name__)


class ApplicationNotFoundError(NotFoundError):
    def __init__(self, application_id: UUID | None = None):
        message = (
            f"Application {application_id} not found." if application_id else "Application not found."
        )
        super().__init__(message, "APPLICATION_NOT_FOUND")


class BursaryNotFoundError(NotFoundError):
    def __init__(self, bursary_id: UUID):
        super().__init__(f"Bursary {bursary_id} not found.", "BURSARY_NOT_FOUND")


# ============================================
# Student operations
# ============================================


async def create_application(
    db: AsyncSession,
    student: StudentPrincipal,
    bursary_id: UUID,
    reject_duplicates: bool | None = None,
) -> Application:
    """
    Apply to a bursary.

    Args:
        db: Database session
        student: The applying student
        bursary_id: Bursary applied to
        reject_duplicates: Refuse when an active application to the same
            bursary exists (``REJECT_DUPLICATE_APPLICATIONS`` by default)

    Raises:
        BursaryNotFoundError: No such bursary
        DuplicateApplicationError: Active application already exists
    """
    if reject_duplicates is None:
        reject_duplicates = settings.reject_duplicate_applications

    if await bounded(bursary_repository.get_by_id(db, bursary_id), "get_bursary") is None:
        raise BursaryNotFoundError(bursary_id)

    async with transaction(db, "create_application"):
        if reject_duplicates and await repository.has_active(db, student.id, bursary_id):
            logger.info(f"Student {student.id} already applied to bursary {bursary_id}")
            raise DuplicateApplicationError()
        application = await repository.create(db, bursary_id, student.id)

    logger.info(f"Student {student.id} applied to bursary {bursary_id}: {application.id}")
    return application


async def withdraw_application(
    db: AsyncSession,
    student: StudentPrincipal,
    bursary_id: UUID,
) -> int:
    """
    Withdraw the student's active application(s) to a bursary.

    Not keyed by application ID: every active match is withdrawn.

    Returns:
        Number of applications withdrawn

    Raises:
        ApplicationNotFoundError: Nothing active to withdraw
    """
    async with transaction(db, "withdraw_application"):
        withdrawn = await repository.withdraw(db, student.id, bursary_id)
        if withdrawn == 0:
            raise ApplicationNotFoundError()

    logger.info(f"Student {student.id} withdrew {withdrawn} application(s) to bursary {bursary_id}")
    return withdrawn


async def list_student_applications(db: AsyncSession, student: StudentPrincipal) -> list[Row]:
    return await bounded(
        repository.list_for_student(db, student.id),
        "list_student_applications",
    )


# ============================================
# Review operations
# ============================================


async def list_review_queue(
    db: AsyncSession,
    actor: AdminPrincipal,
    machine: StageMachine | None = None,
) -> list[Row]:
    """Active applications waiting for the actor's role. Empty for non-reviewers."""
    machine = machine or default_stage_machine()
    stage = machine.queue_for(actor.role_name)
    if stage is None:
        logger.info(f"Admin {actor.id} ({actor.role_name}) has no review queue")
        return []
    return await bounded(repository.list_by_stage(db, stage), "list_review_queue")


async def list_all_applications(db: AsyncSession) -> list[Row]:
    return await bounded(repository.list_all(db), "list_all_applications")


async def get_application_detail(db: AsyncSession, application_id: UUID) -> Row:
    row = await bounded(repository.get_detail(db, application_id), "get_application_detail")
    if row is None:
        raise ApplicationNotFoundError(application_id)
    return row


async def approve_application(
    db: AsyncSession,
    actor: AdminPrincipal,
    application_id: UUID,
    machine: StageMachine | None = None,
) -> Application:
    """
    Advance an application to the stage mapped from the actor's role.

    Raises:
        RoleCannotApproveError: Actor's role has no mapped target
        ApplicationNotFoundError: No active application with that ID
        StageMismatchError: Strict ordering and wrong current stage
        StageConflictError: Stage changed between read and write
    """
    machine = machine or default_stage_machine()
    machine.target_for(actor.role_name)

    async with transaction(db, "approve_application"):
        application = await repository.get_active(db, application_id)
        if application is None:
            raise ApplicationNotFoundError(application_id)

        current = application.stage
        target = machine.transition(current, actor.role_name)

        if await repository.set_stage(db, application_id, current, target) == 0:
            logger.warning(f"Concurrent stage change on application {application_id}")
            raise StageConflictError()

        # Read back under the row lock taken by the UPDATE
        application = await repository.get_active(db, application_id)

    logger.info(
        f"Admin {actor.id} ({actor.role_name}) approved application {application_id}: "
        f"{current.value} -> {target.value}"
    )
    return application


async def approve_applications(
    db: AsyncSession,
    actor: AdminPrincipal,
    application_ids: list[UUID],
    machine: StageMachine | None = None,
) -> dict[str, Any]:
    """
    Approve several applications, each in its own transaction.

    Returns:
        Dict with ``approved`` (IDs) and ``failed`` (ID, error code, message)

    Raises:
        RoleCannotApproveError: Actor's role has no mapped target (nothing
            is attempted)
    """
    machine = machine or default_stage_machine()
    machine.target_for(actor.role_name)

    approved: list[UUID] = []
    failed: list[dict[str, Any]] = []
    for application_id in dict.fromkeys(application_ids):
        try:
            await approve_application(db, actor, application_id, machine)
            approved.append(application_id)
        except ServiceError as e:
            failed.append({"id": application_id, "error": e.error_code, "message": e.message})

    logger.info(
        f"Admin {actor.id} bulk approved {len(approved)} application(s), {len(failed)} failed"
    )
    return {"approved": approved, "failed": failed}


async def reject_application(
    db: AsyncSession,
    actor: AdminPrincipal,
    application_id: UUID,
    remarks: str | None,
    machine: StageMachine | None = None,
) -> Application:
    """
    Record a reviewer's rejection remarks. The stage is not changed.

    Only roles that can approve may reject.

    Raises:
        RoleCannotApproveError: Actor's role is not a pipeline reviewer
        ApplicationNotFoundError: No active application with that ID
    """
    machine = machine or default_stage_machine()
    machine.target_for(actor.role_name)

    async with transaction(db, "reject_application"):
        if await repository.set_remarks(db, application_id, remarks) == 0:
            raise ApplicationNotFoundError(application_id)
        application = await repository.get_active(db, application_id)

    logger.info(f"Admin {actor.id} ({actor.role_name}) rejected application {application_id}")
    return application
