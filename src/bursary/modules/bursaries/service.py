"""
Bursary Service

Bursary management for county officers and above, and the read views
students browse before applying.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import Row
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.auth import AdminPrincipal, StudentPrincipal
from bursary.core.database import bounded, transaction
from bursary.core.exceptions import NotFoundError, ValidationError
from bursary.modules.applications import repository as application_repository
from bursary.modules.bursaries import repository
from bursary.modules.bursaries.models import AllocationType, Bursary
from bursary.modules.bursaries.schemas import BursaryCreate, BursaryQuery, BursaryUpdate

logger = logging.getLogger(__name__)


def _bursary_not_found(bursary_id: UUID) -> NotFoundError:
    return NotFoundError(f"Bursary {bursary_id} not found.", "BURSARY_NOT_FOUND")


async def create_bursary(
    db: AsyncSession,
    actor: AdminPrincipal,
    payload: BursaryCreate,
) -> Bursary:
    async with transaction(db, "create_bursary"):
        bursary = await repository.create(db, **payload.model_dump())
    logger.info(f"Admin {actor.id} created bursary {bursary.id} ({bursary.name})")
    return bursary


async def update_bursary(
    db: AsyncSession,
    actor: AdminPrincipal,
    bursary_id: UUID,
    payload: BursaryUpdate,
) -> Bursary:
    """
    Apply a partial update.

    Raises:
        NotFoundError: No such bursary
        ValidationError: The result would be a fixed bursary without a
            per-student amount
    """
    changes: dict[str, Any] = payload.model_dump(exclude_unset=True)

    async with transaction(db, "update_bursary"):
        bursary = await repository.get_by_id(db, bursary_id)
        if bursary is None:
            raise _bursary_not_found(bursary_id)

        allocation_type = changes.get("allocation_type", bursary.allocation_type)
        amount_per_student = changes.get("amount_per_student", bursary.amount_per_student)
        if allocation_type == AllocationType.FIXED and amount_per_student is None:
            raise ValidationError(
                "amount_per_student is required for fixed allocation",
                "INVALID_ALLOCATION",
            )

        bursary = await repository.update(db, bursary, changes)

    logger.info(f"Admin {actor.id} updated bursary {bursary_id}: {sorted(changes)}")
    return bursary


async def list_bursaries(db: AsyncSession, query: BursaryQuery) -> dict[str, Any]:
    return await bounded(repository.list_bursaries(db, query), "list_bursaries")


async def get_bursary(db: AsyncSession, bursary_id: UUID) -> Bursary:
    bursary = await bounded(repository.get_by_id(db, bursary_id), "get_bursary")
    if bursary is None:
        raise _bursary_not_found(bursary_id)
    return bursary


async def get_bursary_for_student(
    db: AsyncSession,
    student: StudentPrincipal,
    bursary_id: UUID,
) -> tuple[Bursary, list[Row]]:
    """The bursary plus the student's own active applications to it."""
    bursary = await get_bursary(db, bursary_id)
    rows = await bounded(
        application_repository.list_for_student(db, student.id, bursary_id),
        "list_student_bursary_applications",
    )
    return bursary, rows
