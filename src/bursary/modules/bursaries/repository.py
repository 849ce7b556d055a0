"""
Bursary Repository

Database operations for bursaries, including the filtered, paginated
listing used by both admins and students.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.modules.bursaries.models import Bursary
from bursary.modules.bursaries.schemas import BursaryQuery

logger = logging.getLogger(__name__)


async def create(db: AsyncSession, **fields: Any) -> Bursary:
    bursary = Bursary(**fields)
    db.add(bursary)
    await db.flush()
    await db.refresh(bursary)
    return bursary


async def get_by_id(db: AsyncSession, bursary_id: UUID) -> Bursary | None:
    return await db.get(Bursary, bursary_id)


async def update(db: AsyncSession, bursary: Bursary, fields: dict[str, Any]) -> Bursary:
    for field, value in fields.items():
        setattr(bursary, field, value)
    await db.flush()
    await db.refresh(bursary)
    return bursary


async def list_bursaries(db: AsyncSession, query: BursaryQuery) -> dict[str, Any]:
    """
    Filtered, paginated bursary listing.

    Filters:
    - search: case-insensitive match on name or description
    - allocation_type: exact match
    - since / until: bounds on created_at (inclusive)

    Returns:
        Dict with ``bursaries`` (the page) and ``total_items`` (all matches)
    """
    stmt = select(Bursary)

    if query.search:
        pattern = f"%{query.search}%"
        stmt = stmt.where(or_(Bursary.name.ilike(pattern), Bursary.description.ilike(pattern)))
    if query.allocation_type:
        stmt = stmt.where(Bursary.allocation_type == query.allocation_type)
    if query.since:
        stmt = stmt.where(Bursary.created_at >= query.since)
    if query.until:
        stmt = stmt.where(Bursary.created_at <= query.until)

    count_result = await db.execute(select(func.count()).select_from(stmt.subquery()))
    total = count_result.scalar() or 0

    order = Bursary.created_at.asc() if query.sort == "asc" else Bursary.created_at.desc()
    result = await db.execute(stmt.order_by(order, Bursary.id).offset(query.offset).limit(query.limit))

    return {
        "bursaries": list(result.scalars().all()),
        "total_items": total,
    }
