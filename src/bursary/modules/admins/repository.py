"""
Admin Repository

Read queries for admin accounts. Inserts and deletes go through the
onboarding repository so admins and students share one protocol.
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.modules.admins.models import Admin
from bursary.modules.roles.models import Role

logger = logging.getLogger(__name__)


class AdminRepository:
    """Repository for admin database operations."""

    @staticmethod
    async def get_by_id(db: AsyncSession, admin_id: UUID) -> Admin | None:
        result = await db.execute(
            select(Admin)
            .where(Admin.id == admin_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Admin | None:
        result = await db.execute(select(Admin).where(func.lower(Admin.email) == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_visible(db: AsyncSession, max_level: int) -> list[Admin]:
        """
        Admins whose role level is at most ``max_level``.

        A caller never sees accounts with more authority than their own.
        """
        result = await db.execute(
            select(Admin)
            .join(Role, Admin.role_id == Role.id)
            .where(Role.level <= max_level)
            .order_by(Role.level.desc(), Admin.created_at)
        )
        return list(result.scalars().unique().all())
