"""
Authorization Gate

Coarse, level-based capability checks. A required role name is resolved
to its numeric level and compared with the caller's level:

    permitted  <=>  caller_level >= level(required_role)

This is deliberately separate from the approval pipeline, which matches
the acting role by exact name (see ``applications.workflow``). A caller at
a high level is not thereby allowed to act as a ward reviewer.

Ownership bypass: when the caller owns the resource being acted on, access
is granted before any level comparison or role lookup takes place.
"""

import logging
from collections.abc import Mapping
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.exceptions import ForbiddenError, RoleNotFoundError
from bursary.modules.roles.repository import RoleRepository

logger = logging.getLogger(__name__)


def resolve_level(levels: Mapping[str, int], role_name: str) -> int:
    """
    Resolve a role name to its level, ignoring case.

    Raises:
        RoleNotFoundError: The name is not in ``levels``
    """
    normalized = role_name.strip().lower()
    try:
        return levels[normalized]
    except KeyError:
        raise RoleNotFoundError(normalized) from None


def is_authorized(caller_level: int, required_role: str, levels: Mapping[str, int]) -> bool:
    """
    Pure level check.

    Args:
        caller_level: The acting principal's role level
        required_role: Role name whose level must be reached
        levels: Role name (lower-case) to level

    Returns:
        True when ``caller_level`` is at least the required role's level

    Raises:
        RoleNotFoundError: ``required_role`` is unknown
    """
    return caller_level >= resolve_level(levels, required_role)


def is_owner(caller_id: UUID | None, owner_id: UUID | None) -> bool:
    return caller_id is not None and owner_id is not None and caller_id == owner_id


async def check_authorization(
    db: AsyncSession,
    caller_level: int,
    required_role: str,
    *,
    caller_id: UUID | None = None,
    owner_id: UUID | None = None,
) -> None:
    """
    Enforce the gate against the roles table.

    Raises:
        ForbiddenError: The caller's level is below the required role's
        RoleNotFoundError: ``required_role`` is unknown
    """
    if is_owner(caller_id, owner_id):
        return

    role = await RoleRepository.get_by_name(db, required_role)
    if not is_authorized(caller_level, role.name, {role.name: role.level}):
        logger.info(f"Level {caller_level} below '{role.name}' (level {role.level})")
        raise ForbiddenError(
            f"This action requires the '{role.name}' role or higher.",
            "INSUFFICIENT_ROLE",
        )


__all__ = [
    "RoleNotFoundError",
    "check_authorization",
    "is_authorized",
    "is_owner",
    "resolve_level",
]
