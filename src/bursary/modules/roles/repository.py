"""
Role Repository

Read-only access to the seeded roles table.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.exceptions import RoleNotFoundError
from bursary.modules.roles.models import Role


class RoleRepository:
    """Repository for role lookups."""

    @staticmethod
    async def get_by_name(db: AsyncSession, name: str) -> Role:
        """
        Look up a role by name, case-insensitively.

        Raises:
            RoleNotFoundError: No role has that name
        """
        normalized = name.strip().lower()
        result = await db.execute(select(Role).where(Role.name == normalized))
        role = result.scalar_one_or_none()
        if role is None:
            raise RoleNotFoundError(normalized)
        return role

    @staticmethod
    async def get_by_id(db: AsyncSession, role_id: int) -> Role | None:
        return await db.get(Role, role_id)

    @staticmethod
    async def list_up_to_level(db: AsyncSession, level: int) -> list[Role]:
        """Roles a caller at ``level`` may see, lowest first."""
        result = await db.execute(select(Role).where(Role.level <= level).order_by(Role.level))
        return list(result.scalars().all())

