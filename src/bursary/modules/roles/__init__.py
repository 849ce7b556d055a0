"""
Roles module - seeded role levels and the authorization gate.
"""

from bursary.modules.roles.authorization import check_authorization, is_authorized
from bursary.modules.roles.models import SEED_ROLES, Role
from bursary.modules.roles.repository import RoleRepository

__all__ = [
    "Role",
    "SEED_ROLES",
    "RoleRepository",
    "check_authorization",
    "is_authorized",
]
